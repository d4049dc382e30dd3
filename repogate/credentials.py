"""API credentials and the lookup capability used by the auth gate."""

import secrets
import threading
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

PUBLIC_KEY_PREFIX = "APIK-"


@dataclass(frozen=True)
class ApiCredential:
    """A public key and its shared secret. Immutable once issued."""

    public_key: str
    secret: bytes

    @classmethod
    def generate(cls) -> "ApiCredential":
        """
        Issue a new credential.

        Returns:
            ApiCredential with a random public key and secret
        """
        return cls(
            public_key=PUBLIC_KEY_PREFIX + secrets.token_urlsafe(24),
            secret=secrets.token_urlsafe(32).encode("ascii"),
        )


@runtime_checkable
class CredentialStore(Protocol):
    """Resolves a public key to its shared secret."""

    def resolve_secret(self, public_key: str) -> bytes | None:
        """Return the secret for public_key, or None if it is unknown."""
        ...


class InMemoryCredentialStore:
    """Thread-safe in-process credential store."""

    def __init__(self, credentials: list[ApiCredential] | None = None) -> None:
        self._lock = threading.Lock()
        self._secrets: dict[str, bytes] = {}
        for credential in credentials or []:
            self.add(credential)

    def add(self, credential: ApiCredential) -> None:
        with self._lock:
            self._secrets[credential.public_key] = credential.secret

    def issue(self) -> ApiCredential:
        """Generate, store and return a new credential."""
        credential = ApiCredential.generate()
        self.add(credential)
        return credential

    def revoke(self, public_key: str) -> bool:
        """Remove a credential. Returns False if it was not present."""
        with self._lock:
            return self._secrets.pop(public_key, None) is not None

    def resolve_secret(self, public_key: str) -> bytes | None:
        with self._lock:
            return self._secrets.get(public_key)
