"""Wildcard byte pattern search.

Patterns are translated to a bytes regular expression (literal bytes
escaped, wildcards as ``.`` under DOTALL) so the search runs in the regex
engine instead of a Python-level byte loop. ``re.search`` reports the
leftmost match, which is the only occurrence the scanner ever returns.
"""

import re
from typing import Optional

from ..catalog.signature import CompiledSignature


def pattern_to_regex(signature: CompiledSignature) -> "re.Pattern[bytes]":
    """Build the regular expression equivalent of a compiled signature."""
    parts = []
    for value, is_wildcard in zip(signature.pattern, signature.wildcard):
        parts.append(b"." if is_wildcard else re.escape(bytes([value])))
    return re.compile(b"".join(parts), re.DOTALL)


def find_pattern(blob: bytes, signature: CompiledSignature, legacy_bound: bool = False) -> Optional[int]:
    """Find the lowest offset at which ``signature`` matches ``blob``.

    Every offset ``i`` with ``i + len(signature) <= len(blob)`` is a
    candidate. With ``legacy_bound`` the last candidate is skipped, which
    reproduces the exclusive loop bound of the legacy Go matcher.

    Returns:
        The match offset, or None when the signature is empty or absent.
    """
    size = len(signature)
    if size == 0 or size > len(blob):
        return None

    end = len(blob) - 1 if legacy_bound else len(blob)
    match = pattern_to_regex(signature).search(blob, 0, end)
    return match.start() if match else None


class PatternScanner:
    """Scans a single blob for compiled signatures."""

    def __init__(self, blob: bytes, legacy_bound: bool = False):
        self.blob = bytes(blob)
        self.legacy_bound = legacy_bound

    def find(self, signature: CompiledSignature) -> Optional[int]:
        return find_pattern(self.blob, signature, self.legacy_bound)
