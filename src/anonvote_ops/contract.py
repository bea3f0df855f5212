"""Typed access to the AnonymousSportsVoting contract surface."""

from typing import Any, Dict, List, Optional, Sequence

from .chain import ChainClient, TransactionResult
from .types import CandidateInfo, EventInfo, VoterStatus


class VotingContract:
    """A deployed voting contract bound to a chain client and a sender."""

    def __init__(
        self,
        client: ChainClient,
        address: str,
        abi: List[Dict[str, Any]],
        sender: Optional[str] = None,
    ):
        self.client = client
        self.address = address
        self.abi = abi
        self.sender = sender

    def connect(self, sender: str) -> "VotingContract":
        """Return the same contract with a different sending account."""
        return VotingContract(self.client, self.address, self.abi, sender=sender)

    def _call(self, function: str, *args: Any) -> Any:
        return self.client.call(self.address, self.abi, function, *args)

    def _transact(self, function: str, *args: Any) -> TransactionResult:
        return self.client.transact(self.address, self.abi, function, *args, sender=self.sender)

    # Writes

    def add_candidate(self, name: str, category: str) -> int:
        """
        Add a candidate and return the id the contract allocated to it.

        The transaction is confirmed before the counter is read back.
        """
        self._transact("addCandidate", name, category)
        return self.next_candidate_id() - 1

    def create_voting_event(
        self, name: str, description: str, candidate_ids: Sequence[int]
    ) -> int:
        """Create a voting event and return its id."""
        self._transact("createVotingEvent", name, description, list(candidate_ids))
        return self.current_event_id()

    def authorize_voter(self, voter: str) -> TransactionResult:
        return self._transact("authorizeVoter", voter)

    def cast_vote(self, event_id: int, candidate_id: int) -> TransactionResult:
        return self._transact("castVote", event_id, candidate_id)

    # Reads

    def admin(self) -> str:
        return self._call("admin")

    def current_event_id(self) -> int:
        return int(self._call("currentEventId"))

    def next_candidate_id(self) -> int:
        return int(self._call("nextCandidateId"))

    def is_authorized(self, voter: str) -> bool:
        return bool(self._call("authorizedVoters", voter))

    def event_info(self, event_id: int) -> EventInfo:
        return EventInfo.from_tuple(event_id, self._call("getEventInfo", event_id))

    def candidate_info(self, candidate_id: int) -> CandidateInfo:
        return CandidateInfo.from_tuple(
            candidate_id, self._call("getCandidateInfo", candidate_id)
        )

    def is_voting_active(self, event_id: int) -> bool:
        return bool(self._call("isVotingActive", event_id))

    def is_reveal_period_active(self, event_id: int) -> bool:
        return bool(self._call("isRevealPeriodActive", event_id))

    def voter_status(self, event_id: int, voter: str) -> VoterStatus:
        return VoterStatus.from_tuple(self._call("getVoterStatus", event_id, voter))
