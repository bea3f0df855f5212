"""Read-only state inspection of a deployed voting contract."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .chain import format_ether
from .contract import VotingContract
from .types import CandidateInfo, EventInfo, VoterStatus, format_local_time

LOGGER = logging.getLogger(__name__)


@dataclass
class ContractState:
    """Snapshot of contract configuration and per-entity status."""

    address: str
    signer: str
    signer_balance: int
    admin: str
    current_event_id: int
    next_candidate_id: int
    signer_authorized: bool
    event: Optional[EventInfo] = None
    candidates: List[CandidateInfo] = field(default_factory=list)
    voting_active: Optional[bool] = None
    reveal_active: Optional[bool] = None
    voter_status: Optional[VoterStatus] = None


def collect_state(contract: VotingContract, signer: str, signer_balance: int) -> ContractState:
    """
    Run the query battery against a contract.

    The inspected event is the contract's current event id; event and
    candidate sections are left empty when the counters show none exist.
    Any failing query aborts the whole collection.

    Args:
        contract: Deployed contract
        signer: Account whose authorization and vote status are reported
        signer_balance: Balance of the signer in wei

    Returns:
        ContractState
    """
    state = ContractState(
        address=contract.address,
        signer=signer,
        signer_balance=signer_balance,
        admin=contract.admin(),
        current_event_id=contract.current_event_id(),
        next_candidate_id=contract.next_candidate_id(),
        signer_authorized=contract.is_authorized(signer),
    )

    event_id = state.current_event_id
    if event_id > 0:
        state.event = contract.event_info(event_id)

    for candidate_id in range(1, state.next_candidate_id):
        state.candidates.append(contract.candidate_info(candidate_id))

    if event_id > 0:
        state.voting_active = contract.is_voting_active(event_id)
        state.reveal_active = contract.is_reveal_period_active(event_id)
        state.voter_status = contract.voter_status(event_id, signer)

    LOGGER.debug(
        "Collected state for %s: event=%d candidates=%d",
        contract.address,
        event_id,
        len(state.candidates),
    )
    return state


def render_event(event: EventInfo, with_times: bool = True) -> List[str]:
    lines = [
        f"Event Name: {event.name}",
        f"Description: {event.description}",
    ]
    if with_times:
        lines += [
            f"Start Time: {format_local_time(event.start_time)}",
            f"End Time: {format_local_time(event.end_time)}",
        ]
    lines += [
        f"Is Active: {event.is_active}",
        f"Results Revealed: {event.results_revealed}",
    ]
    if with_times:
        lines.append(f"Candidate IDs: [{', '.join(str(c) for c in event.candidate_ids)}]")
    lines += [
        f"Total Votes: {event.total_votes}",
        f"Winner ID: {event.winner_id}",
    ]
    return lines


def render_candidates(candidates: List[CandidateInfo]) -> List[str]:
    lines = []
    for candidate in candidates:
        lines += [
            f"Candidate {candidate.candidate_id}:",
            f"  Name: {candidate.name}",
            f"  Category: {candidate.category}",
            f"  Is Active: {candidate.is_active}",
        ]
    return lines


def render_state(state: ContractState, network: str) -> str:
    """Render a ContractState as the interaction report."""
    lines = [
        f"Network: {network}",
        f"Contract Address: {state.address}",
        f"Interacting with account: {state.signer}",
        f"Account balance: {format_ether(state.signer_balance)} ETH",
        "",
        "=== Contract Information ===",
        f"Admin: {state.admin}",
        f"Current Event ID: {state.current_event_id}",
        f"Next Candidate ID: {state.next_candidate_id}",
        "",
        "=== Voter Authorization ===",
        f"Is {state.signer} authorized: {state.signer_authorized}",
    ]

    if state.event is not None:
        lines += ["", "=== Event Information ==="]
        lines += render_event(state.event)

    if state.candidates:
        lines += ["", "=== Candidate Information ==="]
        lines += render_candidates(state.candidates)

    if state.voter_status is not None:
        event_id = state.current_event_id
        lines += [
            "",
            "=== Voting Status ===",
            f"Is voting active for Event {event_id}: {state.voting_active}",
            f"Is reveal period active for Event {event_id}: {state.reveal_active}",
            f"Has {state.signer} voted: {state.voter_status.has_voted}",
        ]
        if state.voter_status.has_voted:
            lines.append(
                f"Vote timestamp: {format_local_time(state.voter_status.vote_timestamp)}"
            )

    lines += ["", "=== Interaction Complete ==="]
    return "\n".join(lines)
