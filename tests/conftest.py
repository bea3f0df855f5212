"""Shared pytest fixtures for anonvote-ops tests."""

import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

from anonvote_ops.artifacts import ContractArtifact, load_contract_artifact
from anonvote_ops.chain import TransactionResult
from anonvote_ops.config import resolve_network
from anonvote_ops.exceptions import ChainError
from anonvote_ops.types import NetworkContext

SIGNERS = [
    "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
    "0x90F79bf6EB2c4f870365E785982E1f101E93b906",
]
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class FakeChainClient:
    """
    In-memory ChainClient with a minimal voting contract behind it.

    Candidate ids start at `first_candidate_id` and event ids at 1.
    Set `fail_on_transaction` to the 0-based index of a transact() call
    that should raise ChainError.
    """

    def __init__(
        self,
        signers: Optional[List[str]] = None,
        balance: int = 10**18,
        first_candidate_id: int = 1,
        fail_on_transaction: Optional[int] = None,
        fail_deploy: bool = False,
    ):
        self._signers = list(SIGNERS if signers is None else signers)
        self.balance = balance
        self.fail_on_transaction = fail_on_transaction
        self.fail_deploy = fail_deploy
        self.block = 100
        self.log: List[tuple] = []
        self.transactions: List[str] = []
        self.confirmations_waited: List[tuple] = []

        self.admin: Optional[str] = None
        self.next_candidate_id = first_candidate_id
        self.candidates: Dict[int, tuple] = {}
        self.current_event_id = 0
        self.events: Dict[int, Dict[str, Any]] = {}
        self.authorized: set = set()
        self.votes: Dict[tuple, int] = {}

    def signers(self) -> List[str]:
        self.log.append(("signers",))
        return list(self._signers)

    def get_balance(self, address: str) -> int:
        self.log.append(("get_balance", address))
        return self.balance

    def block_number(self) -> int:
        return self.block

    def chain_id(self) -> int:
        return 31337

    def deploy(self, abi, bytecode, args: Sequence[Any] = (), sender=None) -> TransactionResult:
        self.log.append(("deploy", sender))
        if self.fail_deploy:
            raise ChainError("Contract deployment failed: insufficient funds")
        self.block += 1
        self.admin = sender
        return TransactionResult(
            transaction_hash="0x" + "aa" * 32,
            block_number=self.block,
            contract_address=CONTRACT_ADDRESS,
        )

    def wait_for_confirmations(self, transaction_hash: str, confirmations: int) -> None:
        self.confirmations_waited.append((transaction_hash, confirmations))

    def transact(self, address, abi, function, *args, sender=None) -> TransactionResult:
        index = len(self.transactions)
        self.transactions.append(function)
        if index == self.fail_on_transaction:
            raise ChainError(f"Transaction {function} failed: execution reverted")

        if function == "addCandidate":
            self.candidates[self.next_candidate_id] = (args[0], args[1], True)
            self.next_candidate_id += 1
        elif function == "createVotingEvent":
            self.current_event_id += 1
            self.events[self.current_event_id] = {
                "name": args[0],
                "description": args[1],
                "candidate_ids": list(args[2]),
            }
        elif function == "authorizeVoter":
            self.authorized.add(args[0])
        elif function == "castVote":
            if sender not in self.authorized:
                raise ChainError("Transaction castVote failed: not authorized")
            self.votes[(args[0], sender)] = args[1]
        else:
            raise ChainError(f"Unknown function {function}")

        self.block += 1
        return TransactionResult(transaction_hash=f"0x{index:064x}", block_number=self.block)

    def call(self, address, abi, function, *args) -> Any:
        self.log.append(("call", function))
        if function == "admin":
            return self.admin
        if function == "currentEventId":
            return self.current_event_id
        if function == "nextCandidateId":
            return self.next_candidate_id
        if function == "authorizedVoters":
            return args[0] in self.authorized
        if function == "getCandidateInfo":
            return self.candidates[args[0]]
        if function == "getEventInfo":
            event = self.events[args[0]]
            total = sum(1 for (event_id, _) in self.votes if event_id == args[0])
            return (
                event["name"],
                event["description"],
                1700000000,
                1700086400,
                1700172800,
                self.admin,
                True,
                False,
                event["candidate_ids"],
                total,
                0,
            )
        if function == "isVotingActive":
            return True
        if function == "isRevealPeriodActive":
            return False
        if function == "getVoterStatus":
            key = (args[0], args[1])
            return (key in self.votes, 1700000500 if key in self.votes else 0)
        raise ChainError(f"Unknown function {function}")


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def project_root(tmp_path: Path, fixtures_dir: Path) -> Path:
    """Copy the sample hardhat project (artifacts + build-info) into tmp_path."""
    root = tmp_path / "project"
    shutil.copytree(fixtures_dir / "project", root)
    return root


@pytest.fixture
def artifact(project_root: Path) -> ContractArtifact:
    """Load the sample contract artifact."""
    return load_contract_artifact("AnonymousSportsVoting", project_root)


@pytest.fixture
def fake_client() -> FakeChainClient:
    """Fresh in-memory chain client."""
    return FakeChainClient()


@pytest.fixture
def make_client():
    """Factory for FakeChainClient with custom signers or failure injection."""
    return FakeChainClient


@pytest.fixture
def local_network() -> NetworkContext:
    return resolve_network("hardhat")


@pytest.fixture
def public_network() -> NetworkContext:
    return resolve_network("sepolia")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep developer credentials out of tests, including ones loaded from .env."""
    for name in (
        "PRIVATE_KEY",
        "ETHERSCAN_API_KEY",
        "SEPOLIA_RPC_URL",
        "HARDHAT_RPC_URL",
        "LOCALHOST_RPC_URL",
        "HARDHAT_NETWORK",
    ):
        # setenv first so teardown also removes values a test loads via dotenv
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
