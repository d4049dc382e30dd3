"""
Signed command envelope.

Extracts the authentication parameters and the ordered signed fields of an
inbound command from its raw query parameters.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from cryptography.hazmat.primitives import hashes

PUBLIC_KEY_PARAM = "pub"
SIGNATURE_PARAM = "sig"
ALGORITHM_PARAM = "hmac"


class Command(str, Enum):
    """Commands exposed by the management API."""

    REINDEX = "reindex"
    INDEX = "index"
    LIST = "list"
    DELETE = "delete"
    ADD = "add"


class HashAlgorithm(str, Enum):
    """HMAC hash primitives accepted in the ``hmac`` parameter."""

    SHA1 = "sha1"
    SHA512 = "sha512"

    @classmethod
    def from_token(cls, token: str | None) -> "HashAlgorithm":
        """
        Resolve a caller-supplied algorithm token.

        Matching is case-insensitive; a missing or unrecognized token
        selects SHA1.
        """
        if token and token.strip().lower() == cls.SHA512.value:
            return cls.SHA512
        return cls.SHA1

    def hash_primitive(self) -> hashes.HashAlgorithm:
        """Return the cryptography hash instance for this algorithm."""
        if self is HashAlgorithm.SHA512:
            return hashes.SHA512()
        return hashes.SHA1()


# Signing order is a protocol constant: clients sign these fields in exactly
# this order, whatever order they appear in on the URL.
SIGNING_ORDER: dict[Command, tuple[str, ...]] = {
    Command.REINDEX: (PUBLIC_KEY_PARAM,),
    Command.INDEX: (PUBLIC_KEY_PARAM, "repoUrl"),
    Command.LIST: (PUBLIC_KEY_PARAM,),
    Command.DELETE: (PUBLIC_KEY_PARAM, "reponame"),
    Command.ADD: (
        PUBLIC_KEY_PARAM,
        "reponame",
        "repourl",
        "repotype",
        "repousername",
        "repopassword",
        "reposource",
        "repobranch",
    ),
}


def signed_pairs(
    command: Command, params: Mapping[str, str | None]
) -> tuple[tuple[str, str], ...]:
    """
    Pick the signed fields of a command out of its parameters.

    Args:
        command: The command being signed or verified
        params: Raw parameters; missing values count as empty strings

    Returns:
        (name, value) pairs in the command's signing order
    """
    return tuple(
        (name, params.get(name) or "") for name in SIGNING_ORDER[command]
    )


@dataclass(frozen=True)
class SignedCommand:
    """
    The authentication envelope of one inbound command.

    Exists for the duration of a single request only.
    """

    command: Command
    public_key: str
    signature: str
    algorithm: HashAlgorithm
    parameters: tuple[tuple[str, str], ...]

    @classmethod
    def from_params(
        cls, command: Command, params: Mapping[str, str | None]
    ) -> "SignedCommand":
        """
        Build the envelope from raw command parameters.

        Args:
            command: The command being invoked
            params: Raw query parameters of the request

        Returns:
            SignedCommand with the signed fields in protocol order
        """
        return cls(
            command=command,
            public_key=params.get(PUBLIC_KEY_PARAM) or "",
            signature=params.get(SIGNATURE_PARAM) or "",
            algorithm=HashAlgorithm.from_token(params.get(ALGORITHM_PARAM)),
            parameters=signed_pairs(command, params),
        )
