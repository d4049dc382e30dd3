"""
In-memory collaborators for testing.

Thread-safe stand-ins for the repository store, job queue, index service
and audit sink. Each records its calls and can be configured to raise, so
tests can assert on side effects and collaborator faults.
"""

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from repogate.exceptions import ConflictError
from repogate.types.repos import FileTree, ProjectStats, RepoDescriptor
from repogate.types.results import ValidationOutcome


@dataclass
class RecordedCall:
    """Record of a method call."""

    method: str
    args: tuple[Any, ...]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class CallRecorder:
    """Base class that records calls and raises configured errors."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: list[RecordedCall] = []
        self._errors: dict[str, Exception] = {}

    def configure_error(self, method: str, error: Exception) -> None:
        """Make every later call to method raise error."""
        self._errors[method] = error

    def _record_call(self, method: str, *args: Any) -> None:
        """Record a method call, raising the configured error if any."""
        with self._lock:
            self._calls.append(RecordedCall(method=method, args=args))
        if method in self._errors:
            raise self._errors[method]

    def was_called(self, method: str) -> bool:
        return any(call.method == method for call in self._calls)

    def call_count(self, method: str) -> int:
        return sum(1 for call in self._calls if call.method == method)

    def get_calls(self, method: str | None = None) -> list[RecordedCall]:
        """
        Get recorded calls, optionally filtered by method.

        Args:
            method: Optional method name to filter by
        """
        if method is None:
            return list(self._calls)
        return [call for call in self._calls if call.method == method]

    def reset(self) -> None:
        """Reset recorded calls and configured errors."""
        with self._lock:
            self._calls.clear()
        self._errors.clear()


class InMemoryRepositoryStore(CallRecorder):
    """
    Repository store backed by a dict keyed by name.

    Enforces name uniqueness on save and assigns ids to new descriptors.
    Queued deletes are applied by process_deletes(), standing in for the
    background worker.
    """

    def __init__(self, descriptors: list[RepoDescriptor] | None = None) -> None:
        super().__init__()
        self._repos: dict[str, RepoDescriptor] = {}
        self._next_id = 1
        self.delete_queue: list[str] = []
        for descriptor in descriptors or []:
            self._insert(descriptor)

    def _insert(self, descriptor: RepoDescriptor) -> RepoDescriptor:
        with self._lock:
            if descriptor.name in self._repos:
                raise ConflictError()
            if descriptor.id == -1:
                descriptor = replace(descriptor, id=self._next_id)
            self._next_id = max(self._next_id, descriptor.id) + 1
            self._repos[descriptor.name] = descriptor
            return descriptor

    def get_by_name(self, name: str) -> RepoDescriptor | None:
        self._record_call("get_by_name", name)
        return self._repos.get(name)

    def get_by_url(self, url: str) -> RepoDescriptor | None:
        self._record_call("get_by_url", url)
        return next((r for r in self._repos.values() if r.url == url), None)

    def get_all(self) -> list[RepoDescriptor]:
        self._record_call("get_all")
        return list(self._repos.values())

    def save(self, descriptor: RepoDescriptor) -> None:
        self._record_call("save", descriptor)
        self._insert(descriptor)

    def queue_delete(self, name: str) -> None:
        self._record_call("queue_delete", name)
        with self._lock:
            self.delete_queue.append(name)

    def process_deletes(self) -> list[str]:
        """Remove every queued repository. Returns the removed names."""
        with self._lock:
            removed = [name for name in self.delete_queue if self._repos.pop(name, None)]
            self.delete_queue.clear()
        return removed


class RecordingJobQueue(CallRecorder):
    """Job queue that keeps enqueued descriptors in order."""

    def __init__(self) -> None:
        super().__init__()
        self.jobs: list[RepoDescriptor] = []

    def force_enqueue(self, descriptor: RepoDescriptor) -> None:
        self._record_call("force_enqueue", descriptor)
        with self._lock:
            self.jobs.append(descriptor)


class RecordingIndexService(CallRecorder):
    """Index service with configurable per-repository file lists."""

    def __init__(self, files: dict[str, list[str]] | None = None) -> None:
        super().__init__()
        self.files = dict(files or {})

    def reindex_all(self) -> None:
        self._record_call("reindex_all")

    def get_project_stats(self, name: str) -> ProjectStats:
        self._record_call("get_project_stats", name)
        return ProjectStats(name=name, total_files=len(self.files.get(name, [])))

    def get_file_tree(self, name: str) -> FileTree | None:
        self._record_call("get_file_tree", name)
        if name not in self.files:
            return None
        return FileTree(name=name, paths=tuple(sorted(self.files[name])))


class StaticValidator(CallRecorder):
    """Descriptor validator returning a fixed outcome."""

    def __init__(self, outcome: ValidationOutcome | None = None) -> None:
        super().__init__()
        self.outcome = outcome or ValidationOutcome.ok()

    def validate(self, descriptor: RepoDescriptor) -> ValidationOutcome:
        self._record_call("validate", descriptor)
        return self.outcome


class MemoryAuditSink:
    """Audit sink that keeps every line."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def log(self, message: str) -> None:
        self.lines.append(message)


__all__ = [
    "RecordedCall",
    "CallRecorder",
    "InMemoryRepositoryStore",
    "RecordingJobQueue",
    "RecordingIndexService",
    "StaticValidator",
    "MemoryAuditSink",
]
