"""
repogate signing client.

Signs management commands with an API credential and sends them to a
running search server.
"""

import os
from typing import Any

import httpx

from repogate.envelope import (
    ALGORITHM_PARAM,
    PUBLIC_KEY_PARAM,
    SIGNATURE_PARAM,
    Command,
    HashAlgorithm,
)
from repogate.exceptions import ConfigurationError
from repogate.signing import sign_params
from repogate.transport import HTTPTransport, RetryConfig
from repogate.types.repos import DEFAULT_BRANCH, RepoDescriptor
from repogate.types.results import CommandResult

COMMAND_PATHS: dict[Command, str] = {
    Command.REINDEX: "/api/repo/reindex/",
    Command.INDEX: "/api/repo/index/",
    Command.LIST: "/api/repo/list/",
    Command.DELETE: "/api/repo/delete/",
    Command.ADD: "/api/repo/add/",
}

# Commands that change nothing on the server and may be resent freely
IDEMPOTENT_COMMANDS = frozenset({Command.LIST})


class RepoGateClient:
    """
    Client for the repository management API.

    Example:
        ```python
        from repogate import RepoGateClient

        with RepoGateClient(public_key="APIK-...", secret=b"...") as client:
            result = client.add("linux", "https://github.com/torvalds/linux.git")
            if not result.success:
                print(result.message)
        ```
    """

    DEFAULT_BASE_URL = "http://localhost:8080"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        public_key: str,
        secret: bytes | str,
        base_url: str = DEFAULT_BASE_URL,
        algorithm: HashAlgorithm = HashAlgorithm.SHA1,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            public_key: Public key of the API credential
            secret: Shared secret of the API credential
            base_url: Base URL of the server (default: http://localhost:8080)
            algorithm: HMAC hash to sign with (default: SHA1)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            http_transport: Optional httpx transport, mainly for tests
        """
        self.public_key = public_key
        self.secret = secret.encode("utf-8") if isinstance(secret, str) else secret
        self.algorithm = algorithm

        self._transport = HTTPTransport(
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            http_transport=http_transport,
        )

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "RepoGateClient":
        """
        Create a client from environment variables.

        Environment variables:
            REPOGATE_PUBLIC_KEY: Public key of the credential (required)
            REPOGATE_SECRET: Shared secret of the credential (required)
            REPOGATE_BASE_URL: Server URL (optional, default: http://localhost:8080)
            REPOGATE_HMAC: "sha1" or "sha512" (optional, default: sha1)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        public_key = os.environ.get("REPOGATE_PUBLIC_KEY")
        secret = os.environ.get("REPOGATE_SECRET")
        base_url = os.environ.get("REPOGATE_BASE_URL", cls.DEFAULT_BASE_URL)
        hmac_name = os.environ.get("REPOGATE_HMAC", "sha1").strip().lower()

        if not public_key:
            raise ConfigurationError("REPOGATE_PUBLIC_KEY environment variable not set")

        if not secret:
            raise ConfigurationError("REPOGATE_SECRET environment variable not set")

        try:
            algorithm = HashAlgorithm(hmac_name)
        except ValueError:
            raise ConfigurationError(
                f"Invalid REPOGATE_HMAC: {hmac_name}. Must be 'sha1' or 'sha512'"
            ) from None

        return cls(
            public_key=public_key,
            secret=secret,
            base_url=base_url,
            algorithm=algorithm,
            timeout=timeout,
            retry_config=retry_config,
        )

    def reindex_all(self) -> CommandResult:
        return self._send(Command.REINDEX, {})

    def enqueue(self, repo_url: str) -> CommandResult:
        return self._send(Command.INDEX, {"repoUrl": repo_url})

    def list_all(self) -> CommandResult:
        """
        List every repository.

        Returns:
            CommandResult whose payload is a list of RepoDescriptor
        """
        result = self._send(Command.LIST, {})
        if result.success and result.payload is not None:
            repos = [RepoDescriptor.from_dict(item) for item in result.payload]
            return CommandResult.ok(result.message, repos)
        return result

    def delete(self, reponame: str) -> CommandResult:
        return self._send(Command.DELETE, {"reponame": reponame})

    def add(
        self,
        reponame: str,
        repourl: str,
        repotype: str = "git",
        repousername: str = "",
        repopassword: str = "",
        reposource: str = "",
        repobranch: str = DEFAULT_BRANCH,
    ) -> CommandResult:
        """
        Register a repository.

        Args:
            reponame: Unique repository name
            repourl: Clone URL, or a path for file repositories
            repotype: "git", "svn" or "file"
            repousername: Username for private remotes
            repopassword: Password for private remotes
            reposource: Free-text source label
            repobranch: Branch to index (default: master)
        """
        return self._send(
            Command.ADD,
            {
                "reponame": reponame,
                "repourl": repourl,
                "repotype": repotype,
                "repousername": repousername,
                "repopassword": repopassword,
                "reposource": reposource,
                "repobranch": repobranch,
            },
        )

    def _send(self, command: Command, params: dict[str, str]) -> CommandResult:
        query = {PUBLIC_KEY_PARAM: self.public_key, **params}
        query[SIGNATURE_PARAM] = sign_params(command, query, self.secret, self.algorithm)
        query[ALGORITHM_PARAM] = self.algorithm.value

        data = self._transport.get(
            COMMAND_PATHS[command], query, idempotent=command in IDEMPOTENT_COMMANDS
        )
        return CommandResult.from_dict(data)

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "RepoGateClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
