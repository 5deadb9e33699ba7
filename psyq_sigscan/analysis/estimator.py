"""SDK version estimation from resolved matches."""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List

from ..scanner.version_scan import RawMatch


@dataclass(frozen=True)
class VersionEstimate:
    version: str
    ratio: float


def estimate_versions(
    resolved: Dict[str, RawMatch],
    limit: int = 3,
    descending: bool = False
) -> List[VersionEstimate]:
    """Rank SDK versions by their share of the resolved matches.

    Each version's ratio is the number of resolved matches attributed to it
    divided by the total. The list is sorted by ratio and cut to ``limit``
    entries. The default ascending order keeps the output of the legacy Go
    tool, which lists the least represented versions first; pass
    ``descending=True`` to get the most likely versions instead.

    Ties are broken by version tag so the output is deterministic.
    """
    if not resolved:
        return []

    counts = Counter(match.version for match in resolved.values())
    total = len(resolved)
    estimates = [VersionEstimate(version, count / total) for version, count in counts.items()]

    if descending:
        estimates.sort(key=lambda e: (-e.ratio, e.version))
    else:
        estimates.sort(key=lambda e: (e.ratio, e.version))
    return estimates[:limit]
