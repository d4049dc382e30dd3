"""repogate type definitions.

This module exports all data model types used by the package.
"""

from repogate.types.repos import (
    DEFAULT_BRANCH,
    FileTree,
    ProjectStats,
    RepoDescriptor,
    RepoKind,
)
from repogate.types.results import CommandResult, ValidationOutcome

__all__ = [
    # Repository types
    "DEFAULT_BRANCH",
    "RepoKind",
    "RepoDescriptor",
    "ProjectStats",
    "FileTree",
    # Result types
    "CommandResult",
    "ValidationOutcome",
]
