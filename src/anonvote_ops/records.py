"""Deployment record persistence for anonvote-ops."""

import json
import os
import tempfile
from pathlib import Path

from .exceptions import DeploymentRecordNotFoundError, InvalidDeploymentRecordError
from .types import DeploymentRecord


def save_deployment_record(record: DeploymentRecord, record_path: Path) -> None:
    """
    Write a deployment record, replacing any previous one.

    The record is written to a temporary file in the same directory and
    renamed into place, so readers see either the old or the new record.

    Args:
        record: Deployment record
        record_path: Destination path

    Creates parent directories if they don't exist.
    """
    record_path = Path(record_path)
    record_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        dir=record_path.parent, prefix=f".{record_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(record.to_json_dict(), f, indent=2)
        os.replace(tmp_name, record_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def load_deployment_record(record_path: Path) -> DeploymentRecord:
    """
    Read a deployment record.

    Args:
        record_path: Path to deployment-info.json

    Returns:
        DeploymentRecord

    Raises:
        DeploymentRecordNotFoundError: If the file doesn't exist
        InvalidDeploymentRecordError: If the file is not valid JSON or a
                                      required field is missing
    """
    record_path = Path(record_path)
    if not record_path.exists():
        raise DeploymentRecordNotFoundError(
            f"Deployment record not found at {record_path}. "
            "Deploy the contract first with anonvote-deploy."
        )

    try:
        with open(record_path) as f:
            return DeploymentRecord.from_json_dict(json.load(f))
    except json.JSONDecodeError as e:
        raise InvalidDeploymentRecordError(
            f"Deployment record {record_path} is not valid JSON: {e}"
        ) from e
    except (KeyError, TypeError) as e:
        raise InvalidDeploymentRecordError(
            f"Deployment record {record_path} is malformed: {e}"
        ) from e
