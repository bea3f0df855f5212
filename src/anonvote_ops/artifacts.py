"""Hardhat artifact parsers for anonvote-ops."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import ArtifactNotFoundError, InvalidArtifactError
from .paths import get_artifact_paths


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract as produced by `npx hardhat compile`."""

    contract_name: str
    source_name: str  # e.g., "contracts/AnonymousSportsVoting.sol"
    abi: List[Dict[str, Any]]
    bytecode: str
    build_info_path: Optional[Path] = None

    @property
    def fully_qualified_name(self) -> str:
        """Explorer contract identifier, e.g. contracts/X.sol:X."""
        return f"{self.source_name}:{self.contract_name}"


@dataclass(frozen=True)
class BuildInfo:
    """Compiler input and version from a hardhat build-info file."""

    solc_long_version: str  # e.g., "0.8.24+commit.e11b9ed9"
    input: Dict[str, Any]  # solc standard JSON input

    @property
    def compiler_version(self) -> str:
        """Version string in the form explorers expect (v-prefixed)."""
        return f"v{self.solc_long_version}"


def load_contract_artifact(
    contract_name: str, project_root: Optional[Union[Path, str]] = None
) -> ContractArtifact:
    """
    Load a compiled contract artifact.

    Args:
        contract_name: Contract name
        project_root: Project root (defaults to the current directory)

    Returns:
        ContractArtifact with ABI, bytecode and build-info location

    Raises:
        ArtifactNotFoundError: If the artifact is missing or has no bytecode
    """
    artifact_path, debug_path = get_artifact_paths(contract_name, project_root)
    if not artifact_path.exists():
        raise ArtifactNotFoundError(
            f"Artifact not found at {artifact_path}. Run `npx hardhat compile` first."
        )

    with open(artifact_path) as f:
        data = json.load(f)

    bytecode = data.get("bytecode")
    if not data.get("abi") or not bytecode or bytecode == "0x":
        raise ArtifactNotFoundError(f"Artifact missing abi/bytecode: {artifact_path}")

    # The .dbg.json sibling points at the build-info used for verification
    build_info_path = None
    if debug_path.exists():
        with open(debug_path) as f:
            debug_data = json.load(f)
        if "buildInfo" in debug_data:
            build_info_path = (debug_path.parent / debug_data["buildInfo"]).resolve()

    return ContractArtifact(
        contract_name=data.get("contractName", contract_name),
        source_name=data.get("sourceName", f"contracts/{contract_name}.sol"),
        abi=data["abi"],
        bytecode=bytecode,
        build_info_path=build_info_path,
    )


def load_build_info(artifact: ContractArtifact) -> BuildInfo:
    """
    Load the build-info referenced by an artifact.

    Args:
        artifact: Contract artifact

    Returns:
        BuildInfo

    Raises:
        ArtifactNotFoundError: If the build-info file is missing
        InvalidArtifactError: If the build-info file is malformed
    """
    if artifact.build_info_path is None or not artifact.build_info_path.exists():
        raise ArtifactNotFoundError(
            f"Build info not found for {artifact.contract_name}. "
            "Run `npx hardhat compile` first."
        )

    try:
        with open(artifact.build_info_path) as f:
            data = json.load(f)
        return BuildInfo(solc_long_version=data["solcLongVersion"], input=data["input"])
    except json.JSONDecodeError as e:
        raise InvalidArtifactError(
            f"Build info {artifact.build_info_path} is not valid JSON: {e}"
        ) from e
    except (KeyError, TypeError) as e:
        raise InvalidArtifactError(
            f"Build info {artifact.build_info_path} is malformed: {e}"
        ) from e
