"""Post-scan analysis: match reconciliation, version estimation and layout."""

from .aggregator import MatchAggregator, merge_matches
from .estimator import VersionEstimate, estimate_versions
from .layout import Segment, layout_segments, segment_name
from .symbols import Symbol, resolve_symbols

__all__ = [
    "MatchAggregator",
    "merge_matches",
    "VersionEstimate",
    "estimate_versions",
    "Segment",
    "layout_segments",
    "segment_name",
    "Symbol",
    "resolve_symbols",
]
