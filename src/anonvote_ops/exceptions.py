"""Custom exception classes for anonvote-ops."""

from enum import Enum


class ErrorKind(Enum):
    """
    Classification of operational failures.

    - SETUP: missing signer, record, artifact or configuration
    - CHAIN: RPC or transaction failure
    - VERIFICATION: explorer verification failure
    - AUDIT_FINDING: a heuristic audit check could not run
    """

    SETUP = "setup"
    CHAIN = "chain"
    VERIFICATION = "verification"
    AUDIT_FINDING = "audit-finding"


class OpsError(Exception):
    """Base exception for anonvote-ops errors."""

    kind: ErrorKind = ErrorKind.SETUP


class SetupError(OpsError):
    """Raised when a flow cannot start (no signer, no record, bad config)."""

    kind = ErrorKind.SETUP


class DeploymentRecordNotFoundError(SetupError, FileNotFoundError):
    """Raised when the deployment record file is not found."""

    pass


class InvalidDeploymentRecordError(SetupError, ValueError):
    """Raised when the deployment record is unreadable or incomplete."""

    pass


class ArtifactNotFoundError(SetupError, FileNotFoundError):
    """Raised when a compiled contract artifact is not found."""

    pass


class InvalidArtifactError(SetupError, ValueError):
    """Raised when an artifact or build-info file is malformed."""

    pass


class ConfigurationError(SetupError, ValueError):
    """Raised when the network or environment configuration is invalid."""

    pass


class ChainError(OpsError):
    """Raised when an RPC call or transaction fails."""

    kind = ErrorKind.CHAIN


class VerificationError(OpsError):
    """Raised when explorer verification fails."""

    kind = ErrorKind.VERIFICATION


class AlreadyVerifiedError(VerificationError):
    """Raised when the explorer reports the contract source is already verified."""

    pass


class AuditCheckError(OpsError):
    """Raised when a heuristic audit check cannot be executed."""

    kind = ErrorKind.AUDIT_FINDING
