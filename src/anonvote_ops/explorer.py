"""Block explorer source verification for anonvote-ops."""

import json
import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import requests
from eth_abi import encode
from eth_abi.exceptions import EncodingError

from .artifacts import BuildInfo, ContractArtifact
from .exceptions import AlreadyVerifiedError, VerificationError

LOGGER = logging.getLogger(__name__)

PENDING_RESULTS = ("pending in queue", "in progress")


def encode_constructor_args(abi: List[Dict[str, Any]], args: Sequence[Any]) -> str:
    """
    ABI-encode constructor arguments as unprefixed hex.

    Args:
        abi: Contract ABI
        args: Constructor arguments

    Returns:
        Hex string without 0x prefix (empty when there are no arguments)

    Raises:
        VerificationError: If the arguments do not match the constructor
    """
    if not args:
        return ""

    constructor = next((item for item in abi if item.get("type") == "constructor"), None)
    if constructor is None:
        raise VerificationError("Constructor arguments given but ABI has no constructor")

    types = [param["type"] for param in constructor.get("inputs", [])]
    try:
        return encode(types, list(args)).hex()
    except (EncodingError, ValueError, TypeError) as e:
        raise VerificationError(f"Cannot encode constructor arguments {list(args)}: {e}") from e


def _is_already_verified(text: str) -> bool:
    return "already verified" in text.lower()


def _request(
    method: str, api_url: str, params: Dict[str, Any], timeout: int
) -> Dict[str, Any]:
    """Make one explorer API request and return the decoded body."""
    try:
        if method == "POST":
            response = requests.post(api_url, data=params, timeout=timeout)
        else:
            response = requests.get(api_url, params=params, timeout=timeout)
    except requests.RequestException as e:
        raise VerificationError(f"Network error during explorer request: {e}") from e

    if response.status_code != 200:
        raise VerificationError(
            f"Explorer request failed with status {response.status_code}"
        )

    try:
        return response.json()
    except ValueError as e:
        raise VerificationError(f"Explorer returned invalid JSON: {e}") from e


def verify_source(
    address: str,
    artifact: ContractArtifact,
    build_info: BuildInfo,
    api_url: Optional[str],
    api_key: Optional[str],
    constructor_args: Sequence[Any] = (),
    poll_interval: float = 5.0,
    max_polls: int = 20,
    timeout: int = 30,
) -> str:
    """
    Submit contract source for verification and wait for the verdict.

    Args:
        address: Deployed contract address
        artifact: Compiled contract artifact
        build_info: Compiler input and version
        api_url: Explorer API endpoint (Etherscan-compatible)
        api_key: Explorer API key
        constructor_args: Constructor arguments used at deployment
        poll_interval: Seconds between status checks
        max_polls: Maximum number of status checks
        timeout: HTTP timeout in seconds

    Returns:
        Verification GUID issued by the explorer

    Raises:
        AlreadyVerifiedError: If the explorer already has the source
        VerificationError: For any other failure
    """
    if api_url is None:
        raise VerificationError("Network has no block explorer API")
    if not api_key:
        raise VerificationError("Explorer API key required: set $ETHERSCAN_API_KEY")

    submission = _request(
        "POST",
        api_url,
        {
            "apikey": api_key,
            "module": "contract",
            "action": "verifysourcecode",
            "contractaddress": address,
            "sourceCode": json.dumps(build_info.input),
            "codeformat": "solidity-standard-json-input",
            "contractname": artifact.fully_qualified_name,
            "compilerversion": build_info.compiler_version,
            # Misspelling is part of the Etherscan API
            "constructorArguements": encode_constructor_args(artifact.abi, constructor_args),
        },
        timeout,
    )

    result = str(submission.get("result", ""))
    if submission.get("status") != "1":
        if _is_already_verified(result):
            raise AlreadyVerifiedError(result)
        raise VerificationError(f"Verification submission rejected: {result}")

    guid = result
    LOGGER.debug("Verification submitted with guid %s", guid)

    for _ in range(max_polls):
        time.sleep(poll_interval)
        status = _request(
            "GET",
            api_url,
            {
                "apikey": api_key,
                "module": "contract",
                "action": "checkverifystatus",
                "guid": guid,
            },
            timeout,
        )
        verdict = str(status.get("result", ""))

        if status.get("status") == "1":
            return guid
        if _is_already_verified(verdict):
            raise AlreadyVerifiedError(verdict)
        if verdict.lower().startswith(PENDING_RESULTS):
            continue
        raise VerificationError(f"Verification failed: {verdict}")

    raise VerificationError(f"Verification still pending after {max_polls} checks (guid {guid})")
