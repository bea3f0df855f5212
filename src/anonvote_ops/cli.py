"""Console entry points for anonvote-ops.

Every entry point takes the network selection (and an optional project
root) and returns 0 on success or 1 on a fatal error.
"""

import argparse
import logging
import os
from typing import List, Optional

from .artifacts import load_contract_artifact
from .audit import render_summary, run_audit
from .chain import ChainClient, Web3ChainClient
from .config import Settings, load_settings
from .constants import CONTRACT_NAME, DEFAULT_NETWORK
from .contract import VotingContract
from .deploy import deploy_and_initialize, render_deployment_summary
from .exceptions import (
    DeploymentRecordNotFoundError,
    InvalidDeploymentRecordError,
    OpsError,
    SetupError,
)
from .inspector import collect_state, render_state
from .paths import get_project_root, get_record_path
from .records import load_deployment_record
from .simulate import render_simulation, run_simulation
from .verify import make_verifier, verify_deployment

LOGGER = logging.getLogger(__name__)


def configure_logging() -> None:
    """Plain console logging; $ANONVOTE_LOG_LEVEL overrides INFO."""
    level = os.environ.get("ANONVOTE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(message)s")


def create_client(settings: Settings) -> ChainClient:
    """Connect to the configured RPC endpoint."""
    return Web3ChainClient.from_rpc_url(settings.rpc_url, private_key=settings.private_key)


def _parse_args(
    description: str, argv: Optional[List[str]], network: bool = True
) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=description)
    if network:
        parser.add_argument(
            "--network",
            default=os.environ.get("HARDHAT_NETWORK", DEFAULT_NETWORK),
            help="Target network (default: $HARDHAT_NETWORK or hardhat)",
        )
    parser.add_argument(
        "--root",
        default=None,
        help="Project root holding artifacts and deployment-info.json (default: cwd)",
    )
    return parser.parse_args(argv)


def _first_signer(client: ChainClient) -> str:
    signers = client.signers()
    if not signers:
        raise SetupError("No signer available")
    return signers[0]


def deploy_main(argv: Optional[List[str]] = None) -> int:
    """Deploy, record, verify and seed the contract."""
    args = _parse_args("Deploy the voting contract", argv)
    configure_logging()
    LOGGER.info("=== Starting Deployment ===")

    try:
        settings = load_settings(args.network, args.root)
        artifact = load_contract_artifact(CONTRACT_NAME, settings.project_root)
        client = create_client(settings)
        verifier = make_verifier(artifact, settings.network, settings.etherscan_api_key)
        outcome = deploy_and_initialize(
            client,
            settings.network,
            artifact,
            get_record_path(settings.project_root),
            verifier=verifier,
        )
    except OpsError as e:
        LOGGER.error("Deployment failed: %s", e)
        return 1

    # Initialization failures were already reported; deployment itself succeeded
    if outcome.initialization.succeeded:
        print(render_deployment_summary(outcome, settings.network))
    return 0


def interact_main(argv: Optional[List[str]] = None) -> int:
    """Print the state of the recorded deployment."""
    args = _parse_args("Inspect the deployed voting contract", argv)
    configure_logging()
    LOGGER.info("Starting contract interaction...")

    root = get_project_root(args.root)
    try:
        record = load_deployment_record(get_record_path(root))
    except (DeploymentRecordNotFoundError, InvalidDeploymentRecordError) as e:
        LOGGER.error("Error: %s", e)
        return 1

    try:
        settings = load_settings(args.network, root)
        artifact = load_contract_artifact(record.contract_name, root)
        client = create_client(settings)
        signer = _first_signer(client)
        contract = VotingContract(client, record.contract_address, artifact.abi, sender=signer)
        state = collect_state(contract, signer, client.get_balance(signer))
    except OpsError as e:
        LOGGER.error("Error during interaction: %s", e)
        return 1

    print(render_state(state, settings.network.name))
    return 0


def verify_main(argv: Optional[List[str]] = None) -> int:
    """Verify the recorded deployment on the block explorer."""
    args = _parse_args("Verify the deployed contract on the block explorer", argv)
    configure_logging()
    LOGGER.info("Starting contract verification process...")

    root = get_project_root(args.root)
    try:
        settings = load_settings(args.network, root, require_rpc=False)
        verify_deployment(
            get_record_path(root),
            settings.network,
            settings.etherscan_api_key,
            project_root=root,
        )
    except (DeploymentRecordNotFoundError, InvalidDeploymentRecordError) as e:
        LOGGER.error("Error: %s", e)
        return 1
    except OpsError as e:
        LOGGER.error("✗ Verification failed: %s", e)
        return 1
    return 0


def simulate_main(argv: Optional[List[str]] = None) -> int:
    """Run a full deploy-and-vote round on a local network."""
    args = _parse_args("Simulate deployment and a voting round", argv)
    configure_logging()
    LOGGER.info("=== Starting Contract Simulation ===")

    try:
        settings = load_settings(args.network, args.root)
        artifact = load_contract_artifact(CONTRACT_NAME, settings.project_root)
        client = create_client(settings)
        report = run_simulation(client, artifact)
    except OpsError as e:
        LOGGER.error("Error during simulation: %s", e)
        return 1

    print(render_simulation(report))
    return 0


def security_check_main(argv: Optional[List[str]] = None) -> int:
    """Run the heuristic security audit; exit 1 on critical findings."""
    args = _parse_args("Heuristic security audit", argv, network=False)
    configure_logging()

    result = run_audit(get_project_root(args.root))
    print(render_summary(result))
    return result.exit_code()
