"""Explorer verification of a recorded deployment."""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from .artifacts import ContractArtifact, load_build_info, load_contract_artifact
from .deploy import Verifier, VerificationStatus
from .exceptions import AlreadyVerifiedError, SetupError, VerificationError
from .explorer import verify_source
from .records import load_deployment_record
from .types import NetworkContext

LOGGER = logging.getLogger(__name__)


def make_verifier(
    artifact: ContractArtifact,
    network: NetworkContext,
    api_key: Optional[str],
    **kwargs: Any,
) -> Verifier:
    """
    Build a Verifier bound to an artifact and a network's explorer.

    Missing or malformed build-info is reported as a VerificationError so that callers
    treating verification as non-fatal keep going.
    """

    def verifier(address: str, constructor_args: Sequence[Any]) -> None:
        try:
            build_info = load_build_info(artifact)
        except SetupError as e:
            raise VerificationError(str(e)) from e
        verify_source(
            address,
            artifact,
            build_info,
            network.explorer_api_url,
            api_key,
            constructor_args=constructor_args,
            **kwargs,
        )

    return verifier


def verify_deployment(
    record_path: Path,
    network: NetworkContext,
    api_key: Optional[str],
    project_root: Optional[Path] = None,
    **kwargs: Any,
) -> VerificationStatus:
    """
    Verify the contract named in the deployment record.

    The record is read before anything else, so a missing record fails
    without any network traffic.

    Args:
        record_path: Path to deployment-info.json
        network: Network whose explorer is used
        api_key: Explorer API key
        project_root: Project root holding the artifacts
        **kwargs: Passed to verify_source (poll_interval, max_polls, timeout)

    Returns:
        VERIFIED or ALREADY_VERIFIED

    Raises:
        DeploymentRecordNotFoundError: If no deployment record exists
        ArtifactNotFoundError: If the artifact is missing
        VerificationError: If verification fails for any other reason
    """
    record = load_deployment_record(record_path)

    LOGGER.info("Network: %s", network.name)
    LOGGER.info("Contract: %s", record.contract_name)
    LOGGER.info("Address: %s", record.contract_address)

    artifact = load_contract_artifact(record.contract_name, project_root)
    verifier = make_verifier(artifact, network, api_key, **kwargs)

    LOGGER.info("Verifying contract on block explorer...")
    try:
        verifier(record.contract_address, record.constructor_args)
    except AlreadyVerifiedError:
        LOGGER.info("✓ Contract is already verified!")
        status = VerificationStatus.ALREADY_VERIFIED
    else:
        LOGGER.info("✓ Contract verified successfully!")
        status = VerificationStatus.VERIFIED

    code_url = network.address_url(record.contract_address)
    if code_url is not None:
        LOGGER.info("View on block explorer: %s#code", code_url)
    return status
