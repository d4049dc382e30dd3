"""repogate testing utilities.

Provides in-memory collaborators and fixtures for testing code built on the
command dispatcher.
"""

from repogate.testing.fixtures import create_descriptor, signed_query
from repogate.testing.memory import (
    CallRecorder,
    InMemoryRepositoryStore,
    MemoryAuditSink,
    RecordedCall,
    RecordingIndexService,
    RecordingJobQueue,
    StaticValidator,
)

__all__ = [
    # In-memory collaborators
    "CallRecorder",
    "RecordedCall",
    "InMemoryRepositoryStore",
    "RecordingJobQueue",
    "RecordingIndexService",
    "StaticValidator",
    "MemoryAuditSink",
    # Helper functions
    "create_descriptor",
    "signed_query",
]
