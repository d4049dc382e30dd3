"""
Pytest plugin for repogate testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
discovered by pytest. To use them, add this to your conftest.py:

    pytest_plugins = ["repogate.testing.conftest"]
"""

from repogate.testing.fixtures import (
    api_credential,
    audit_sink,
    credential_store,
    dispatcher,
    index_service,
    job_queue,
    open_dispatcher,
    repository_store,
    sample_descriptor,
)

__all__ = [
    "api_credential",
    "credential_store",
    "repository_store",
    "job_queue",
    "index_service",
    "audit_sink",
    "sample_descriptor",
    "dispatcher",
    "open_dispatcher",
]
