"""
HMAC signing and verification for signed commands.

Implements the signing flow: parameters -> canonicalize -> HMAC -> hex encode.
"""

import secrets
from collections.abc import Mapping

from cryptography.hazmat.primitives import hmac

from repogate.canonicalize import canonicalize
from repogate.envelope import Command, HashAlgorithm, signed_pairs


def compute_signature(
    canonical: str, secret: bytes, algorithm: HashAlgorithm = HashAlgorithm.SHA1
) -> str:
    """
    Compute the HMAC of a canonical string.

    Args:
        canonical: Canonical signing string
        secret: Shared secret of the caller's credential
        algorithm: Hash primitive to key the HMAC with

    Returns:
        Lowercase hex digest
    """
    mac = hmac.HMAC(secret, algorithm.hash_primitive())
    mac.update(canonical.encode("utf-8"))
    return mac.finalize().hex()


def verify_signature(
    canonical: str,
    signature: str,
    secret: bytes,
    algorithm: HashAlgorithm = HashAlgorithm.SHA1,
) -> bool:
    """
    Check a caller-supplied signature against a canonical string.

    The comparison is constant-time and exact: the signature must be the
    lowercase hex digest.

    Args:
        canonical: Canonical signing string recomputed by the server
        signature: Signature from the ``sig`` parameter
        secret: Shared secret of the caller's credential
        algorithm: Hash primitive selected by the ``hmac`` parameter

    Returns:
        True if the signature matches
    """
    expected = compute_signature(canonical, secret, algorithm)
    return secrets.compare_digest(
        expected.encode("utf-8"), signature.encode("utf-8")
    )


def sign_params(
    command: Command,
    params: Mapping[str, str | None],
    secret: bytes,
    algorithm: HashAlgorithm = HashAlgorithm.SHA1,
) -> str:
    """
    Sign the parameters of a command the way clients do.

    Args:
        command: Command being signed
        params: Command parameters, including ``pub``
        secret: Shared secret matching ``pub``
        algorithm: Hash primitive to use

    Returns:
        Hex signature for the ``sig`` parameter
    """
    return compute_signature(
        canonicalize(signed_pairs(command, params)), secret, algorithm
    )


def get_canonical_string(command: Command, params: Mapping[str, str | None]) -> str:
    """
    Get the canonical string a command's signature covers.

    Useful for debugging client signing mismatches.
    """
    return canonicalize(signed_pairs(command, params))
