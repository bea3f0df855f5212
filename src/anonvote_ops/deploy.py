"""Deployment orchestrator for anonvote-ops."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Tuple

from .artifacts import ContractArtifact
from .chain import ChainClient, format_ether
from .constants import (
    AVAILABLE_FUNCTIONS,
    SEED_CANDIDATES,
    SEED_EVENT_DESCRIPTION,
    SEED_EVENT_NAME,
    VERIFICATION_CONFIRMATIONS,
)
from .contract import VotingContract
from .exceptions import AlreadyVerifiedError, SetupError, VerificationError
from .records import save_deployment_record
from .types import DeploymentRecord, InitializationResult, NetworkContext

LOGGER = logging.getLogger(__name__)

# (contract address, constructor args) -> None, raising VerificationError on failure
Verifier = Callable[[str, Sequence[Any]], None]


class VerificationStatus(Enum):
    """Outcome of the post-deployment explorer verification."""

    SKIPPED = "skipped"
    VERIFIED = "verified"
    ALREADY_VERIFIED = "already-verified"
    FAILED = "failed"


@dataclass
class DeploymentOutcome:
    """Result of a deployment run."""

    record: DeploymentRecord
    balance: int
    verification: VerificationStatus
    initialization: InitializationResult


def initialize_contract(
    contract: VotingContract,
    candidates: Sequence[Tuple[str, str]] = tuple(SEED_CANDIDATES),
    event_name: str = SEED_EVENT_NAME,
    event_description: str = SEED_EVENT_DESCRIPTION,
) -> InitializationResult:
    """
    Seed a freshly deployed contract with candidates and one voting event.

    Steps run strictly in order and each transaction is confirmed before the
    next one is sent. The event references the candidate ids returned by the
    contract, not assumed ones. The first failing step stops the sequence.

    Args:
        contract: Contract bound to the admin account
        candidates: (name, category) pairs to add
        event_name: Voting event name
        event_description: Voting event description

    Returns:
        InitializationResult; failed_step/error are set when a step failed
    """
    result = InitializationResult()
    LOGGER.info("Adding candidates...")

    try:
        for name, category in candidates:
            candidate_id = contract.add_candidate(name, category)
            result.candidate_ids.append(candidate_id)
            result.completed_steps += 1
            LOGGER.info("✓ Added candidate %d: %s", candidate_id, name)

        LOGGER.info("Creating voting event...")
        result.event_id = contract.create_voting_event(
            event_name, event_description, result.candidate_ids
        )
        result.completed_steps += 1
        LOGGER.info("✓ Created voting event %d: %s", result.event_id, event_name)
    except Exception as e:
        result.failed_step = result.completed_steps
        result.error = e
        LOGGER.warning("✗ Initialization failed: %s", e)
        LOGGER.warning("Contract deployed but not initialized. You can initialize manually.")

    return result


def _verify(verifier: Optional[Verifier], address: str, args: Sequence[Any]) -> VerificationStatus:
    if verifier is None:
        LOGGER.info("No explorer verifier configured, skipping verification")
        return VerificationStatus.SKIPPED

    LOGGER.info("Verifying contract on block explorer...")
    try:
        verifier(address, args)
    except AlreadyVerifiedError:
        LOGGER.info("✓ Contract already verified")
        return VerificationStatus.ALREADY_VERIFIED
    except VerificationError as e:
        LOGGER.warning("✗ Verification failed: %s", e)
        return VerificationStatus.FAILED

    LOGGER.info("✓ Contract verified successfully")
    return VerificationStatus.VERIFIED


def deploy_and_initialize(
    client: ChainClient,
    network: NetworkContext,
    artifact: ContractArtifact,
    record_path: Path,
    verifier: Optional[Verifier] = None,
    constructor_args: Sequence[Any] = (),
    confirmations: int = VERIFICATION_CONFIRMATIONS,
    initialize: bool = True,
) -> DeploymentOutcome:
    """
    Deploy the contract, persist the record, verify, and seed it.

    Args:
        client: Chain client
        network: Target network
        artifact: Compiled contract artifact
        record_path: Where to write the deployment record
        verifier: Explorer verifier (used on non-local networks only)
        constructor_args: Constructor arguments
        confirmations: Blocks to wait before verification
        initialize: Whether to run the seeding sequence

    Returns:
        DeploymentOutcome

    Raises:
        SetupError: If no signer is available
        ChainError: If deployment or confirmation waiting fails
    """
    signers = client.signers()
    if not signers:
        raise SetupError(
            "No signer available: configure $PRIVATE_KEY or a node with unlocked accounts"
        )
    deployer = signers[0]
    balance = client.get_balance(deployer)

    LOGGER.info("Deploying contracts with account: %s", deployer)
    LOGGER.info("Account balance: %s ETH", format_ether(balance))
    LOGGER.info("Network: %s", network.name)

    LOGGER.info("Deploying contract...")
    deployment = client.deploy(
        artifact.abi, artifact.bytecode, constructor_args, sender=deployer
    )
    address = deployment.contract_address
    LOGGER.info("Contract deployed to: %s", address)

    chain_id = network.chain_id if network.chain_id is not None else client.chain_id()
    record = DeploymentRecord(
        contract_name=artifact.contract_name,
        contract_address=address,
        deployer=deployer,
        network=network.name,
        chain_id=chain_id,
        deployment_time=datetime.now(timezone.utc).isoformat(),
        block_number=deployment.block_number,
        constructor_args=list(constructor_args),
    )
    save_deployment_record(record, record_path)
    LOGGER.info("✓ Deployment info saved to %s", record_path)

    verification = VerificationStatus.SKIPPED
    if not network.is_local:
        LOGGER.info("Waiting for %d block confirmations...", confirmations)
        client.wait_for_confirmations(deployment.transaction_hash, confirmations)
        verification = _verify(verifier, address, constructor_args)

    if initialize:
        LOGGER.info("=== Initializing Contract ===")
        contract = VotingContract(client, address, artifact.abi, sender=deployer)
        initialization = initialize_contract(contract)
    else:
        initialization = InitializationResult()

    return DeploymentOutcome(
        record=record,
        balance=balance,
        verification=verification,
        initialization=initialization,
    )


def render_deployment_summary(outcome: DeploymentOutcome, network: NetworkContext) -> str:
    """Human-readable summary printed after a successful initialization."""
    record = outcome.record
    lines = [
        "=== Deployment Complete ===",
        "",
        "Contract Information:",
        f"  Address: {record.contract_address}",
        f"  Network: {record.network}",
        f"  Admin: {record.deployer}",
    ]

    if network.block_explorer_url is not None:
        lines += [
            "",
            "Block explorer:",
            f"  Contract: {network.address_url(record.contract_address)}",
            f"  Deployer: {network.address_url(record.deployer)}",
        ]

    lines += ["", "Available Functions:"]
    lines += [f"  - {signature}: {purpose}" for signature, purpose in AVAILABLE_FUNCTIONS]
    lines += [
        "",
        "Next Steps:",
        "  1. Run 'anonvote-verify' to verify on the block explorer (if not already done)",
        "  2. Run 'anonvote-interact' to interact with the contract",
    ]
    return "\n".join(lines)
