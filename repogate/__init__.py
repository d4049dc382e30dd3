"""repogate - signed command gate for repository management APIs."""

from repogate.canonicalize import Canonicalizer, canonical_forms, canonicalize, form_encode
from repogate.client import RepoGateClient
from repogate.config import ApiConfig
from repogate.credentials import ApiCredential, CredentialStore, InMemoryCredentialStore
from repogate.dispatcher import CommandDispatcher
from repogate.envelope import Command, HashAlgorithm, SignedCommand
from repogate.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    DisabledError,
    MissingParameterError,
    NotFoundError,
    RepoGateError,
    ServerError,
    ValidationError,
)
from repogate.logging import LoggingAuditSink, configure_logging, get_logger
from repogate.signing import compute_signature, sign_params, verify_signature
from repogate.transport import HTTPTransport, RetryConfig
from repogate.types import (
    CommandResult,
    FileTree,
    ProjectStats,
    RepoDescriptor,
    RepoKind,
    ValidationOutcome,
)
from repogate.validators import RepoDescriptorValidator

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Dispatcher
    "CommandDispatcher",
    "ApiConfig",
    # Client
    "RepoGateClient",
    "HTTPTransport",
    "RetryConfig",
    # Credentials
    "ApiCredential",
    "CredentialStore",
    "InMemoryCredentialStore",
    # Envelope
    "Command",
    "HashAlgorithm",
    "SignedCommand",
    # Canonicalization and signing
    "Canonicalizer",
    "canonicalize",
    "canonical_forms",
    "form_encode",
    "compute_signature",
    "verify_signature",
    "sign_params",
    # Types
    "CommandResult",
    "ValidationOutcome",
    "RepoDescriptor",
    "RepoKind",
    "ProjectStats",
    "FileTree",
    "RepoDescriptorValidator",
    # Exceptions
    "RepoGateError",
    "ConfigurationError",
    "DisabledError",
    "MissingParameterError",
    "AuthenticationError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "ServerError",
    # Logging
    "LoggingAuditSink",
    "configure_logging",
    "get_logger",
]
