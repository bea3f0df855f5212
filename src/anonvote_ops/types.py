"""Data types and dataclasses for anonvote-ops."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class DeploymentRecord:
    """Metadata describing a completed contract deployment."""

    contract_name: str  # e.g., "AnonymousSportsVoting"
    contract_address: str  # Checksummed address
    deployer: str  # Checksummed address
    network: str  # e.g., "sepolia"
    chain_id: Optional[int]
    deployment_time: str  # ISO-8601, UTC
    block_number: int
    constructor_args: List[Any] = field(default_factory=list)

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize using the on-disk camelCase field names."""
        return {
            "contractName": self.contract_name,
            "contractAddress": self.contract_address,
            "deployer": self.deployer,
            "network": self.network,
            "chainId": self.chain_id,
            "deploymentTime": self.deployment_time,
            "blockNumber": self.block_number,
            "constructorArgs": list(self.constructor_args),
        }

    @classmethod
    def from_json_dict(cls, data: Dict[str, Any]) -> "DeploymentRecord":
        """
        Build a record from its on-disk representation.

        Raises:
            KeyError: If a required field is missing
        """
        return cls(
            contract_name=data["contractName"],
            contract_address=data["contractAddress"],
            deployer=data["deployer"],
            network=data["network"],
            chain_id=data.get("chainId"),
            deployment_time=data["deploymentTime"],
            block_number=data["blockNumber"],
            constructor_args=list(data.get("constructorArgs", [])),
        )


@dataclass(frozen=True)
class NetworkContext:
    """Resolved target network."""

    name: str
    chain_id: Optional[int]
    is_local: bool
    block_explorer_url: Optional[str] = None
    explorer_api_url: Optional[str] = None

    def address_url(self, address: str) -> Optional[str]:
        """Block explorer page for an address, if the network has an explorer."""
        if self.block_explorer_url is None:
            return None
        return f"{self.block_explorer_url}/address/{address}"


@dataclass(frozen=True)
class CandidateInfo:
    """Candidate as returned by getCandidateInfo."""

    candidate_id: int
    name: str
    category: str
    is_active: bool

    @classmethod
    def from_tuple(cls, candidate_id: int, values: Sequence[Any]) -> "CandidateInfo":
        return cls(
            candidate_id=candidate_id,
            name=values[0],
            category=values[1],
            is_active=bool(values[2]),
        )


@dataclass(frozen=True)
class EventInfo:
    """Voting event as returned by getEventInfo."""

    event_id: int
    name: str
    description: str
    start_time: int  # Unix timestamp
    end_time: int  # Unix timestamp
    is_active: bool
    results_revealed: bool
    candidate_ids: Tuple[int, ...]
    total_votes: int
    winner_id: int

    @classmethod
    def from_tuple(cls, event_id: int, values: Sequence[Any]) -> "EventInfo":
        # Positions 4 and 5 are contract-internal and not displayed
        return cls(
            event_id=event_id,
            name=values[0],
            description=values[1],
            start_time=int(values[2]),
            end_time=int(values[3]),
            is_active=bool(values[6]),
            results_revealed=bool(values[7]),
            candidate_ids=tuple(int(c) for c in values[8]),
            total_votes=int(values[9]),
            winner_id=int(values[10]),
        )


@dataclass(frozen=True)
class VoterStatus:
    """Voter status for one event as returned by getVoterStatus."""

    has_voted: bool
    vote_timestamp: int  # Unix timestamp, 0 when not voted

    @classmethod
    def from_tuple(cls, values: Sequence[Any]) -> "VoterStatus":
        return cls(has_voted=bool(values[0]), vote_timestamp=int(values[1]))


@dataclass
class InitializationResult:
    """Outcome of the post-deployment seeding sequence."""

    candidate_ids: List[int] = field(default_factory=list)
    event_id: Optional[int] = None
    completed_steps: int = 0
    failed_step: Optional[int] = None  # 0-based index of the failing step
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.failed_step is None


def format_local_time(timestamp: int) -> str:
    """Render a Unix timestamp in local system time."""
    return datetime.fromtimestamp(int(timestamp)).strftime("%Y-%m-%d %H:%M:%S")
