"""
Canonical signing string for signed API commands.

This module provides the deterministic query-string serialization that
clients sign and the server recomputes during verification.
"""

from collections.abc import Iterable
from urllib.parse import quote_plus

# HTML form encoding leaves only these punctuation characters untouched.
_FORM_SAFE = ".-*_"


def form_encode(value: str) -> str:
    """
    Encode a value using HTML form encoding.

    ASCII letters, digits and ``.-*_`` pass through, a space becomes ``+``
    and every other byte of the UTF-8 encoding becomes ``%XX``.

    Args:
        value: Raw parameter value

    Returns:
        Form-encoded value
    """
    # quote_plus treats "~" as unreserved; form encoding does not
    return quote_plus(value, safe=_FORM_SAFE, encoding="utf-8").replace("~", "%7E")


class Canonicalizer:
    """
    Query-string canonicalizer for signed commands.

    Produces the exact string that gets signed by:
    1. Keeping the (name, value) pairs in the order given
    2. Form-encoding every value (space as ``+``)
    3. Joining ``name=value`` pairs with ``&``

    The order is part of the protocol; callers pass pairs in the command's
    fixed signing order.
    """

    def canonicalize(self, pairs: Iterable[tuple[str, str]]) -> str:
        """
        Canonicalize an ordered sequence of (name, value) pairs.

        Args:
            pairs: Parameter pairs in signing order

        Returns:
            Canonical signing string
        """
        return "&".join(f"{name}={form_encode(value)}" for name, value in pairs)

    def alternate(self, canonical: str) -> str:
        """
        Return the ``%20`` spelling of a canonical string.

        Some clients escape spaces as ``%20`` rather than ``+``. A literal
        plus in a value is always ``%2B`` in the canonical form, so every
        ``+`` left in the string stands for a space.
        """
        return canonical.replace("+", "%20")


# Module-level convenience functions
_canonicalizer = Canonicalizer()


def canonicalize(pairs: Iterable[tuple[str, str]]) -> str:
    """
    Canonicalize an ordered sequence of (name, value) pairs.

    This is a convenience function that uses a module-level Canonicalizer.
    """
    return _canonicalizer.canonicalize(pairs)


def canonical_forms(pairs: Iterable[tuple[str, str]]) -> tuple[str, str]:
    """
    Return both accepted canonical spellings: ``+`` and ``%20`` for spaces.

    Returns:
        Tuple of (primary, alternate) canonical strings
    """
    primary = _canonicalizer.canonicalize(pairs)
    return primary, _canonicalizer.alternate(primary)
