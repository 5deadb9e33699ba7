"""Reconciliation of matches reported by several signature-set versions.

The same object module usually has an identical byte signature across a
run of SDK releases, while the label annotations differ in completeness
from one release's signature file to the next. For each module name the
match with the most symbols wins; on a tie the first one seen stays.
"""

import threading
from typing import Dict, Iterable, List

from ..core.logger import LoggerMixin
from ..scanner.version_scan import RawMatch


class MatchAggregator(LoggerMixin):
    """Thread-safe accumulator of resolved matches keyed by module name."""

    def __init__(self):
        self._lock = threading.Lock()
        self._resolved: Dict[str, RawMatch] = {}

    def add(self, matches: Iterable[RawMatch]) -> None:
        """Merge one version's matches into the resolved set."""
        with self._lock:
            for match in matches:
                existing = self._resolved.get(match.name)
                if existing is None:
                    self._resolved[match.name] = match
                elif len(match.symbols) > len(existing.symbols):
                    self.logger.debug(
                        f"{match.name}: version {match.version} has {len(match.symbols)} symbols, "
                        f"replacing version {existing.version} ({len(existing.symbols)})"
                    )
                    self._resolved[match.name] = match

    @property
    def resolved(self) -> Dict[str, RawMatch]:
        """Snapshot of the resolved match set."""
        with self._lock:
            return dict(self._resolved)

    def __len__(self) -> int:
        with self._lock:
            return len(self._resolved)


def merge_matches(streams: Iterable[List[RawMatch]]) -> Dict[str, RawMatch]:
    """Merge per-version match lists into one resolved match set."""
    aggregator = MatchAggregator()
    for stream in streams:
        aggregator.add(stream)
    return aggregator.resolved
