"""Text rendering of a scan result.

Output format, one record per line::

    PSY-Q 470: 0.82
     - [0x0, c, start]
     - [0x1A4, c]
     - [0x3F0, c, printf]
    printf = 0x800103F0
"""

from typing import List

from .pipeline import MatchReport


def render_estimates(report: MatchReport) -> List[str]:
    return [f"PSY-Q {e.version}: {e.ratio:.2f}" for e in report.estimates]


def render_segments(report: MatchReport) -> List[str]:
    lines = []
    for segment in report.segments:
        if segment.is_gap:
            lines.append(f" - [0x{segment.offset:X}, c]")
        else:
            lines.append(f" - [0x{segment.offset:X}, c, {segment.name}]")
    return lines


def render_symbols(report: MatchReport) -> List[str]:
    return [f"{symbol.name} = 0x{symbol.address:08X}" for symbol in report.symbols]


def render_report(report: MatchReport) -> List[str]:
    """Render the full report as a list of lines."""
    return render_estimates(report) + render_segments(report) + render_symbols(report)
