"""Path management utilities for anonvote-ops."""

from pathlib import Path
from typing import Optional, Union

from .constants import DEPLOYMENT_RECORD_FILENAME


def get_default_project_root() -> Path:
    """
    Get default project root (current working directory).

    Returns:
        Absolute path of the current directory
    """
    return Path.cwd()


def get_project_root(project_root: Optional[Union[Path, str]] = None) -> Path:
    """
    Resolve a project root, defaulting to the current directory.

    Args:
        project_root: Custom project root

    Returns:
        Absolute project root path
    """
    if project_root is None:
        return get_default_project_root()
    return Path(project_root).absolute()


def get_record_path(project_root: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the deployment record path.

    Args:
        project_root: Custom project root (defaults to the current directory)

    Returns:
        Path to <root>/deployment-info.json
    """
    return get_project_root(project_root) / DEPLOYMENT_RECORD_FILENAME


def get_artifact_paths(
    contract_name: str, project_root: Optional[Union[Path, str]] = None
) -> tuple[Path, Path]:
    """
    Get hardhat artifact file paths for a contract.

    Args:
        contract_name: Contract (and source file) name
        project_root: Custom project root (defaults to the current directory)

    Returns:
        Tuple of (artifact_path, debug_path)
    """
    artifact_dir = (
        get_project_root(project_root) / "artifacts" / "contracts" / f"{contract_name}.sol"
    )
    return (
        artifact_dir / f"{contract_name}.json",
        artifact_dir / f"{contract_name}.dbg.json",
    )
