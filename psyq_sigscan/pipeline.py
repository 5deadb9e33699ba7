"""Scan orchestration.

``SignatureMatcher`` scans an executable with every configured SDK
version in parallel, reconciles the matches and derives the version
estimate, code layout and symbol table.

Version scans run as a group: the first scan to fail cancels the scans
that have not started yet and its exception reaches the caller.
"""

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .analysis.aggregator import MatchAggregator
from .analysis.estimator import VersionEstimate, estimate_versions
from .analysis.layout import Segment, layout_segments
from .analysis.symbols import Symbol, resolve_symbols
from .catalog.github_catalog import SignatureSource
from .core.config import Settings, settings as default_settings
from .core.exceptions import ConfigurationError, NoMatchesFoundError
from .core.logger import LoggerMixin, log_execution_time
from .scanner.version_scan import RawMatch, VersionScanner


@dataclass
class MatchReport:
    """Everything derived from one scan."""
    base_address: int
    resolved: Dict[str, RawMatch]
    estimates: List[VersionEstimate] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)
    symbols: List[Symbol] = field(default_factory=list)


class SignatureMatcher(LoggerMixin):
    """Matches PSY-Q signature sets against an executable image."""

    def __init__(self, source: SignatureSource, config: Optional[Settings] = None):
        self.source = source
        self.config = config or default_settings
        self.scanner = VersionScanner(
            source,
            strict=self.config.strict_signatures,
            legacy_bound=self.config.legacy_scan_bound,
        )

    def scan_versions(self, blob: bytes, base_address: int, versions: Sequence[str]) -> Dict[str, List[RawMatch]]:
        """Scan ``blob`` with each version's signature set concurrently.

        Returns:
            Matches per version tag.

        Raises:
            CatalogUnavailableError: If any version's signatures cannot be
                loaded; remaining scans are cancelled.
        """
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {
                executor.submit(self.scanner.scan, blob, base_address, version): version
                for version in versions
            }
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            if any(f.exception() is not None for f in done):
                for other in pending:
                    other.cancel()
                # Scans already running cannot be interrupted
                wait(futures)
                # Report the failure of the earliest configured version
                failed = [f for f in futures if not f.cancelled() and f.exception() is not None]
                error = failed[0].exception()
                self.logger.error(f"Version {futures[failed[0]]} failed: {error}")
                raise error

        return {version: future.result() for future, version in futures.items()}

    def resolve(self, per_version: Dict[str, List[RawMatch]], versions: Sequence[str]) -> Dict[str, RawMatch]:
        """Reconcile per-version matches into one match per module.

        Versions are merged in the configured order so that symbol-count
        ties always resolve to the same version.
        """
        aggregator = MatchAggregator()
        for version in versions:
            aggregator.add(per_version.get(version, []))
        return aggregator.resolved

    @log_execution_time
    def run(self, blob: bytes, base_address: Optional[int] = None, versions: Optional[Sequence[str]] = None) -> MatchReport:
        """Scan an executable image and build the report.

        Args:
            blob: Executable image without its header.
            base_address: Load address of the first blob byte; defaults to
                the configured base address.
            versions: SDK version tags to scan; defaults to the configured list.

        Raises:
            NoMatchesFoundError: If no signature of any version matched.
            CatalogUnavailableError: If any version's signatures are unavailable.
        """
        base_address = self.config.base_address if base_address is None else base_address
        versions = list(dict.fromkeys(versions or self.config.sdk_versions))
        if not versions:
            raise ConfigurationError("No SDK versions to scan", config_key="sdk_versions")

        self.logger.info(f"Scanning {len(blob)} bytes against {len(versions)} SDK versions")
        per_version = self.scan_versions(blob, base_address, versions)
        resolved = self.resolve(per_version, versions)

        if not resolved:
            raise NoMatchesFoundError(versions=versions)

        self.logger.info(f"Resolved {len(resolved)} object modules")
        return MatchReport(
            base_address=base_address,
            resolved=resolved,
            estimates=estimate_versions(
                resolved,
                limit=self.config.max_estimates,
                descending=self.config.version_ranking == "descending",
            ),
            segments=layout_segments(resolved),
            symbols=resolve_symbols(resolved),
        )
