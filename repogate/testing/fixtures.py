"""
Pytest fixtures for repogate testing.

Provides a fully wired CommandDispatcher over in-memory collaborators, plus
helpers for building descriptors and signed parameters.
"""

from typing import Any, Generator

import pytest

from repogate.config import ApiConfig
from repogate.credentials import ApiCredential, InMemoryCredentialStore
from repogate.dispatcher import CommandDispatcher
from repogate.envelope import Command, HashAlgorithm
from repogate.signing import sign_params
from repogate.testing.memory import (
    InMemoryRepositoryStore,
    MemoryAuditSink,
    RecordingIndexService,
    RecordingJobQueue,
)
from repogate.types.repos import RepoDescriptor, RepoKind


# ============================================================================
# Helper Functions
# ============================================================================


def create_descriptor(
    name: str = "sample-repo",
    url: str | None = None,
    kind: RepoKind = RepoKind.GIT,
    username: str = "",
    password: str = "",
    source: str = "",
    branch: str = "master",
    id: int = -1,
) -> RepoDescriptor:
    """Create a RepoDescriptor with sensible defaults."""
    return RepoDescriptor(
        id=id,
        name=name,
        url=url or f"https://example.com/{name}.git",
        kind=kind,
        username=username,
        password=password,
        source=source,
        branch=branch,
    )


def signed_query(
    command: Command,
    params: dict[str, Any],
    credential: ApiCredential,
    algorithm: HashAlgorithm = HashAlgorithm.SHA1,
) -> dict[str, Any]:
    """
    Return params with pub, sig and hmac added, signed as a client would.

    Example:
        ```python
        query = signed_query(Command.DELETE, {"reponame": "linux"}, credential)
        result = dispatcher.handle(Command.DELETE, query)
        ```
    """
    query = {"pub": credential.public_key, **params}
    query["sig"] = sign_params(command, query, credential.secret, algorithm)
    query["hmac"] = algorithm.value
    return query


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def api_credential() -> ApiCredential:
    """Provide a freshly generated API credential."""
    return ApiCredential.generate()


@pytest.fixture
def credential_store(api_credential: ApiCredential) -> InMemoryCredentialStore:
    """Provide a credential store holding api_credential."""
    return InMemoryCredentialStore([api_credential])


@pytest.fixture
def repository_store() -> Generator[InMemoryRepositoryStore, None, None]:
    """Provide an empty in-memory repository store."""
    store = InMemoryRepositoryStore()
    yield store
    store.reset()


@pytest.fixture
def job_queue() -> RecordingJobQueue:
    return RecordingJobQueue()


@pytest.fixture
def index_service() -> RecordingIndexService:
    return RecordingIndexService()


@pytest.fixture
def audit_sink() -> MemoryAuditSink:
    return MemoryAuditSink()


@pytest.fixture
def sample_descriptor() -> RepoDescriptor:
    """Provide a sample RepoDescriptor with credentials set."""
    return create_descriptor(
        name="sample-repo",
        url="https://example.com/sample-repo.git",
        username="alice",
        password="hunter2",
        source="example",
    )


# ============================================================================
# Dispatcher Fixtures
# ============================================================================


@pytest.fixture
def dispatcher(
    credential_store: InMemoryCredentialStore,
    repository_store: InMemoryRepositoryStore,
    job_queue: RecordingJobQueue,
    index_service: RecordingIndexService,
    audit_sink: MemoryAuditSink,
) -> CommandDispatcher:
    """Provide a dispatcher with the API and authentication enabled."""
    return CommandDispatcher(
        config=ApiConfig(api_enabled=True, api_auth=True),
        credentials=credential_store,
        repositories=repository_store,
        jobs=job_queue,
        index=index_service,
        audit=audit_sink,
    )


@pytest.fixture
def open_dispatcher(
    credential_store: InMemoryCredentialStore,
    repository_store: InMemoryRepositoryStore,
    job_queue: RecordingJobQueue,
    index_service: RecordingIndexService,
    audit_sink: MemoryAuditSink,
) -> CommandDispatcher:
    """Provide a dispatcher with the API enabled and authentication disabled."""
    return CommandDispatcher(
        config=ApiConfig(api_enabled=True, api_auth=False),
        credentials=credential_store,
        repositories=repository_store,
        jobs=job_queue,
        index=index_service,
        audit=audit_sink,
    )
