"""End-to-end simulation on a local network."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .artifacts import ContractArtifact
from .chain import ChainClient
from .contract import VotingContract
from .deploy import initialize_contract
from .exceptions import SetupError
from .inspector import render_candidates, render_event
from .types import CandidateInfo, EventInfo

LOGGER = logging.getLogger(__name__)

VOTER_COUNT = 3


@dataclass
class SimulationReport:
    """What the simulation did and what it read back."""

    contract_address: str
    deployer: str
    voters: List[str]
    candidate_ids: List[int]
    event_id: int
    votes: Dict[str, int] = field(default_factory=dict)  # voter -> candidate id
    has_voted: Dict[str, bool] = field(default_factory=dict)
    event: Optional[EventInfo] = None
    candidates: List[CandidateInfo] = field(default_factory=list)


def run_simulation(client: ChainClient, artifact: ContractArtifact) -> SimulationReport:
    """
    Deploy a fresh contract and drive a full voting round.

    Seeds candidates and an event, authorizes three voters, casts votes
    (voter 1 and 3 for the first candidate, voter 2 for the second), then
    reads back voter status, the event and all candidates.

    Raises:
        SetupError: If fewer than four signers are available
        ChainError: If any transaction or query fails
    """
    signers = client.signers()
    if len(signers) < VOTER_COUNT + 1:
        raise SetupError(
            f"Simulation needs {VOTER_COUNT + 1} signers, found {len(signers)}"
        )
    deployer, voters = signers[0], signers[1 : VOTER_COUNT + 1]

    LOGGER.info("Accounts:")
    LOGGER.info("  Deployer: %s", deployer)
    for i, voter in enumerate(voters, start=1):
        LOGGER.info("  Voter %d: %s", i, voter)

    LOGGER.info("=== Deploying Contract ===")
    deployment = client.deploy(artifact.abi, artifact.bytecode, (), sender=deployer)
    contract = VotingContract(client, deployment.contract_address, artifact.abi, sender=deployer)
    LOGGER.info("Contract deployed to: %s", contract.address)

    initialization = initialize_contract(contract)
    if not initialization.succeeded:
        raise initialization.error

    report = SimulationReport(
        contract_address=contract.address,
        deployer=deployer,
        voters=list(voters),
        candidate_ids=initialization.candidate_ids,
        event_id=initialization.event_id,
    )

    LOGGER.info("=== Authorizing Voters ===")
    for i, voter in enumerate(voters, start=1):
        contract.authorize_voter(voter)
        LOGGER.info("✓ Authorized Voter %d", i)

    LOGGER.info("=== Casting Votes ===")
    first, second = report.candidate_ids[0], report.candidate_ids[1]
    for i, (voter, candidate_id) in enumerate(zip(voters, [first, second, first]), start=1):
        contract.connect(voter).cast_vote(report.event_id, candidate_id)
        report.votes[voter] = candidate_id
        LOGGER.info("✓ Voter %d voted for Candidate %d", i, candidate_id)

    for voter in voters:
        report.has_voted[voter] = contract.voter_status(report.event_id, voter).has_voted

    report.event = contract.event_info(report.event_id)
    report.candidates = [contract.candidate_info(c) for c in report.candidate_ids]
    return report


def render_simulation(report: SimulationReport) -> str:
    """Render a SimulationReport."""
    lines = ["=== Verifying Voting Status ==="]
    for i, voter in enumerate(report.voters, start=1):
        lines.append(f"Voter {i} has voted: {report.has_voted.get(voter)}")

    lines += ["", "=== Event Information ==="]
    lines += render_event(report.event, with_times=False)
    lines += ["", "=== All Candidates ==="]
    lines += render_candidates(report.candidates)

    lines += [
        "",
        "=== Simulation Complete ===",
        "Summary:",
        "  - Contract deployed successfully",
        f"  - {len(report.candidate_ids)} candidates added",
        "  - 1 voting event created",
        f"  - {len(report.voters)} voters authorized",
        f"  - {len(report.votes)} votes cast (encrypted)",
    ]
    return "\n".join(lines)
