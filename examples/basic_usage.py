#!/usr/bin/env python3
"""
Basic repogate usage example.

Wires a dispatcher over the in-memory collaborators and walks through the
signed command flow end to end.
Run with: python examples/basic_usage.py
"""

from repogate import (
    ApiConfig,
    Command,
    CommandDispatcher,
    HashAlgorithm,
    InMemoryCredentialStore,
    RepoGateError,
    ConfigurationError,
    canonical_forms,
)
from repogate.envelope import signed_pairs
from repogate.testing import (
    InMemoryRepositoryStore,
    MemoryAuditSink,
    RecordingIndexService,
    RecordingJobQueue,
    signed_query,
)

print("=== repogate Basic Usage Example ===\n")

# 1. Exception hierarchy
print("1. Testing exception classes...")
try:
    raise ConfigurationError("Invalid REPOGATE_API_ENABLED: maybe")
except RepoGateError as e:
    print(f"   Caught RepoGateError: {e}")
    print(f"   Code: {e.code}, Message: {e.message}")

print("\n   OK: Exception classes working\n")

# 2. Canonical query strings
print("2. Building canonical query strings...")
params = {"pub": "APIK-demo", "reponame": "my repo", "repourl": "https://x/a.git"}
primary, alternate = canonical_forms(signed_pairs(Command.ADD, params))
print(f"   Primary:   {primary}")
print(f"   Alternate: {alternate}")
assert "my+repo" in primary and "my%20repo" in alternate
print("\n   OK: Canonicalization working\n")

# 3. Dispatcher
print("3. Dispatching signed commands...")
credentials = InMemoryCredentialStore()
credential = credentials.issue()
repositories = InMemoryRepositoryStore()
audit = MemoryAuditSink()

dispatcher = CommandDispatcher(
    config=ApiConfig(api_enabled=True, api_auth=True),
    credentials=credentials,
    repositories=repositories,
    jobs=RecordingJobQueue(),
    index=RecordingIndexService(),
    audit=audit,
)

query = signed_query(
    Command.ADD,
    {"reponame": "linux", "repourl": "https://github.com/torvalds/linux.git", "repotype": "git"},
    credential,
    HashAlgorithm.SHA512,
)
result = dispatcher.handle(Command.ADD, query)
print(f"   add: success={result.success} message={result.message!r}")

result = dispatcher.handle(Command.LIST, signed_query(Command.LIST, {}, credential))
print(f"   list: {[repo.name for repo in result.payload]}")

tampered = dict(query, reponame="other")
result = dispatcher.handle(Command.ADD, tampered)
print(f"   tampered add: success={result.success} message={result.message!r}")

print("\n   Audit log:")
for line in audit.lines:
    print(f"   {line}")

print("\n=== Example complete ===")
