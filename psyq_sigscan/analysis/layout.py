"""Code layout of the executable derived from resolved matches."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..scanner.version_scan import RawMatch

OBJECT_SUFFIX = ".obj"


@dataclass(frozen=True)
class Segment:
    """A code segment boundary; ``name`` is None for unattributed code."""
    offset: int
    name: Optional[str] = None

    @property
    def is_gap(self) -> bool:
        return self.name is None


def segment_name(module_name: str) -> str:
    """Turn a module name such as ``PRINTF.OBJ`` into ``printf``."""
    name = module_name.lower()
    if name.endswith(OBJECT_SUFFIX):
        name = name[:-len(OBJECT_SUFFIX)]
    return name


def sorted_matches(resolved: Dict[str, RawMatch]) -> List[RawMatch]:
    """Resolved matches ordered by start offset, then by name."""
    return sorted(resolved.values(), key=lambda m: (m.start, m.name))


def layout_segments(resolved: Dict[str, RawMatch]) -> List[Segment]:
    """Describe the executable as a sequence of segment boundaries.

    Every match opens a named segment at its start. When a match starts
    past the end of the previous one, an unnamed segment is opened at the
    previous end first. Overlapping or touching matches add no gap.
    """
    segments: List[Segment] = []
    previous: Optional[RawMatch] = None

    for match in sorted_matches(resolved):
        assert match.start <= match.end, f"{match.name}: start past end"
        if previous is not None and match.start > previous.end:
            segments.append(Segment(previous.end))
        segments.append(Segment(match.start, segment_name(match.name)))
        previous = match

    return segments
