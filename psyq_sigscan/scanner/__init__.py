"""Pattern scanning over executable images."""

from .pattern_scanner import PatternScanner, find_pattern
from .version_scan import RawMatch, VersionScanner

__all__ = ["PatternScanner", "find_pattern", "RawMatch", "VersionScanner"]
