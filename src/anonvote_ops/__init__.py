"""
anonvote-ops: deployment and operations tooling for the AnonymousSportsVoting contract
"""

from importlib.metadata import PackageNotFoundError, version

from .audit import IssueReport, run_audit
from .chain import ChainClient, Web3ChainClient
from .contract import VotingContract
from .deploy import (
    DeploymentOutcome,
    VerificationStatus,
    deploy_and_initialize,
    initialize_contract,
)
from .exceptions import (
    AlreadyVerifiedError,
    ArtifactNotFoundError,
    AuditCheckError,
    ChainError,
    ConfigurationError,
    DeploymentRecordNotFoundError,
    ErrorKind,
    InvalidArtifactError,
    InvalidDeploymentRecordError,
    OpsError,
    SetupError,
    VerificationError,
)
from .inspector import collect_state
from .records import load_deployment_record, save_deployment_record
from .types import DeploymentRecord, NetworkContext

try:
    __version__ = version("anonvote-ops")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "deploy_and_initialize",
    "initialize_contract",
    "collect_state",
    "run_audit",
    "load_deployment_record",
    "save_deployment_record",
    "ChainClient",
    "Web3ChainClient",
    "VotingContract",
    "DeploymentOutcome",
    "DeploymentRecord",
    "NetworkContext",
    "IssueReport",
    "VerificationStatus",
    "ErrorKind",
    "OpsError",
    "SetupError",
    "ConfigurationError",
    "DeploymentRecordNotFoundError",
    "InvalidDeploymentRecordError",
    "ArtifactNotFoundError",
    "InvalidArtifactError",
    "ChainError",
    "VerificationError",
    "AlreadyVerifiedError",
    "AuditCheckError",
]
