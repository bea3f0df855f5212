"""Integration tests for the console entry points."""

import json
import logging
from pathlib import Path

import pytest
import responses

from anonvote_ops import cli
from anonvote_ops.constants import NETWORK_CONFIG
from anonvote_ops.exceptions import ChainError
from anonvote_ops.records import load_deployment_record, save_deployment_record
from anonvote_ops.types import DeploymentRecord

API_URL = NETWORK_CONFIG["sepolia"]["explorer_api_url"]


@pytest.fixture
def record(project_root: Path) -> DeploymentRecord:
    """Persist a sepolia deployment record in the sample project."""
    record = DeploymentRecord(
        contract_name="AnonymousSportsVoting",
        contract_address="0x5FbDB2315678afecb367f032d93F642f64180aa3",
        deployer="0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        network="sepolia",
        chain_id=11155111,
        deployment_time="2024-05-01T12:00:00+00:00",
        block_number=5812345,
        constructor_args=[],
    )
    save_deployment_record(record, project_root / "deployment-info.json")
    return record


@pytest.fixture
def no_network(monkeypatch):
    """Fail the test if an entry point tries to connect to a node."""

    def create_client(settings):
        pytest.fail(f"unexpected connection to {settings.rpc_url}")

    monkeypatch.setattr(cli, "create_client", create_client)


@pytest.fixture
def use_client(monkeypatch):
    """Route entry points to the given fake client."""

    def install(client):
        monkeypatch.setattr(cli, "create_client", lambda settings: client)
        return client

    return install


class TestDeployMain:
    """Test the anonvote-deploy entry point."""

    def test_local_deployment(self, project_root, fake_client, use_client, capsys):
        use_client(fake_client)

        assert cli.deploy_main(["--network", "hardhat", "--root", str(project_root)]) == 0

        saved = load_deployment_record(project_root / "deployment-info.json")
        assert saved.network == "hardhat"
        assert saved.contract_address == "0x5FbDB2315678afecb367f032d93F642f64180aa3"
        assert "0x5FbDB2315678afecb367f032d93F642f64180aa3" in capsys.readouterr().out

    def test_initialization_failure_still_succeeds(
        self, project_root, make_client, use_client, capsys
    ):
        client = use_client(make_client(fail_on_transaction=0))

        assert cli.deploy_main(["--root", str(project_root)]) == 0

        assert (project_root / "deployment-info.json").exists()
        assert client.transactions == ["addCandidate"]
        assert capsys.readouterr().out == ""

    def test_deploy_failure(self, project_root, make_client, use_client):
        use_client(make_client(fail_deploy=True))

        assert cli.deploy_main(["--root", str(project_root)]) == 1
        assert not (project_root / "deployment-info.json").exists()

    def test_missing_artifact(self, tmp_path, no_network):
        assert cli.deploy_main(["--root", str(tmp_path)]) == 1

    def test_unknown_network(self, project_root, no_network):
        assert cli.deploy_main(["--network", "mainnet", "--root", str(project_root)]) == 1

    def test_network_from_environment(self, project_root, fake_client, use_client, monkeypatch):
        monkeypatch.setenv("HARDHAT_NETWORK", "localhost")
        use_client(fake_client)

        assert cli.deploy_main(["--root", str(project_root)]) == 0

        saved = load_deployment_record(project_root / "deployment-info.json")
        assert saved.network == "localhost"


class TestInteractMain:
    """Test the anonvote-interact entry point."""

    def test_missing_record_makes_no_network_call(self, project_root, no_network, caplog):
        with caplog.at_level(logging.ERROR):
            assert cli.interact_main(["--root", str(project_root)]) == 1

        assert "deployment-info.json" in caplog.text

    def test_malformed_record_makes_no_network_call(self, project_root, no_network, caplog):
        (project_root / "deployment-info.json").write_text(json.dumps({"contractAddress": "0xabc"}))

        with caplog.at_level(logging.ERROR):
            assert cli.interact_main(["--root", str(project_root)]) == 1

        assert "contractName" in caplog.text

    def test_reports_state(self, project_root, fake_client, use_client, capsys):
        use_client(fake_client)
        cli.deploy_main(["--root", str(project_root)])
        capsys.readouterr()

        assert cli.interact_main(["--root", str(project_root)]) == 0

        out = capsys.readouterr().out
        assert "Network: hardhat" in out
        assert "Event Name: Annual Awards 2024" in out
        assert "=== Interaction Complete ===" in out

    def test_query_failure(self, project_root, record, fake_client, use_client):
        """Test that a failing query aborts the report."""
        use_client(fake_client)

        def broken_call(address, abi, function, *args):
            raise ChainError(f"Call {function} failed: could not decode output")

        fake_client.call = broken_call

        assert cli.interact_main(["--root", str(project_root)]) == 1


class TestVerifyMain:
    """Test the anonvote-verify entry point."""

    def test_missing_record(self, project_root, no_network, monkeypatch):
        monkeypatch.setenv("ETHERSCAN_API_KEY", "KEY")

        with responses.RequestsMock():
            assert cli.verify_main(["--network", "sepolia", "--root", str(project_root)]) == 1

    def test_corrupt_record(self, project_root, no_network, monkeypatch):
        monkeypatch.setenv("ETHERSCAN_API_KEY", "KEY")
        (project_root / "deployment-info.json").write_text("not json")

        with responses.RequestsMock():
            assert cli.verify_main(["--network", "sepolia", "--root", str(project_root)]) == 1

    @responses.activate
    def test_already_verified(self, project_root, record, no_network, monkeypatch):
        monkeypatch.setenv("ETHERSCAN_API_KEY", "KEY")
        responses.add(
            responses.POST,
            API_URL,
            json={"status": "0", "message": "NOTOK", "result": "Contract source code already verified"},
        )

        assert cli.verify_main(["--network", "sepolia", "--root", str(project_root)]) == 0

    @responses.activate
    def test_rejected(self, project_root, record, no_network, monkeypatch):
        monkeypatch.setenv("ETHERSCAN_API_KEY", "KEY")
        responses.add(
            responses.POST,
            API_URL,
            json={"status": "0", "message": "NOTOK", "result": "Invalid API Key"},
        )

        assert cli.verify_main(["--network", "sepolia", "--root", str(project_root)]) == 1

    def test_missing_api_key(self, project_root, record, no_network):
        with responses.RequestsMock():
            assert cli.verify_main(["--network", "sepolia", "--root", str(project_root)]) == 1


class TestSimulateMain:
    """Test the anonvote-simulate entry point."""

    def test_simulation(self, project_root, fake_client, use_client, capsys):
        use_client(fake_client)

        assert cli.simulate_main(["--root", str(project_root)]) == 0
        assert "=== Simulation Complete ===" in capsys.readouterr().out

    def test_too_few_signers(self, project_root, make_client, use_client):
        use_client(make_client(signers=["0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"]))

        assert cli.simulate_main(["--root", str(project_root)]) == 1


class TestSecurityCheckMain:
    """Test the anonvote-security-check entry point."""

    def _write_contract(self, root: Path) -> None:
        (root / "contracts").mkdir()
        (root / "contracts" / "Voting.sol").write_text(
            "pragma solidity ^0.8.24;\ncontract Voting { address public admin; }\n"
        )

    def test_clean_project(self, project_root, capsys):
        self._write_contract(project_root)

        assert cli.security_check_main(["--root", str(project_root)]) == 0
        assert "Security Audit Summary" in capsys.readouterr().out

    def test_hardcoded_key_fails(self, project_root):
        self._write_contract(project_root)
        fake_key = "0x" + "ab" * 32
        (project_root / "scripts").mkdir()
        (project_root / "scripts" / "deploy.js").write_text(f'const privateKey = "{fake_key}";\n')

        assert cli.security_check_main(["--root", str(project_root)]) == 1

    def test_warnings_do_not_fail(self, project_root):
        self._write_contract(project_root)
        (project_root / ".env").write_text("PRIVATE_KEY=\n")

        assert cli.security_check_main(["--root", str(project_root)]) == 0
