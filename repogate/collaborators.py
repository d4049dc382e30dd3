"""
Interfaces of the services the dispatcher drives.

Implementations are injected into CommandDispatcher; each must be safe to
call from concurrent commands.
"""

from typing import Protocol, runtime_checkable

from repogate.types.repos import FileTree, ProjectStats, RepoDescriptor
from repogate.types.results import ValidationOutcome


@runtime_checkable
class RepositoryStore(Protocol):
    """Persistent store of repository descriptors."""

    def get_by_name(self, name: str) -> RepoDescriptor | None: ...

    def get_by_url(self, url: str) -> RepoDescriptor | None: ...

    def get_all(self) -> list[RepoDescriptor]: ...

    def save(self, descriptor: RepoDescriptor) -> None:
        """Persist a descriptor; id -1 asks the store to assign one."""
        ...

    def queue_delete(self, name: str) -> None:
        """Queue a repository for deletion by a background worker."""
        ...


@runtime_checkable
class JobQueue(Protocol):
    """Crawler job scheduler."""

    def force_enqueue(self, descriptor: RepoDescriptor) -> None: ...


@runtime_checkable
class IndexService(Protocol):
    """Code search index."""

    def reindex_all(self) -> None: ...

    def get_project_stats(self, name: str) -> ProjectStats: ...

    def get_file_tree(self, name: str) -> FileTree | None: ...


@runtime_checkable
class DescriptorValidator(Protocol):
    """Business rules a new descriptor must pass before it is saved."""

    def validate(self, descriptor: RepoDescriptor) -> ValidationOutcome: ...


@runtime_checkable
class AuditSink(Protocol):
    """Receives one line per privileged command outcome."""

    def log(self, message: str) -> None: ...
