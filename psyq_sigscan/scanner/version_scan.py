"""Per-version signature scan.

Each SDK version has its own signature set. ``VersionScanner.scan`` pulls
the set for one version from a signature source, runs every signature
over the executable and turns each hit into a RawMatch carrying that
version's tag and the symbol addresses derived from its labels.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from ..catalog.github_catalog import SignatureSource
from ..catalog.signature import CompiledSignature, compile_signature
from ..core.exceptions import MalformedSignatureError
from ..core.logger import LoggerMixin
from .pattern_scanner import PatternScanner

# Labels for internal branch targets and anonymous text, not real symbols
EXCLUDED_LABEL_PREFIXES = ("loc_", "text_")

ADDRESS_MASK = 0xFFFFFFFF


@dataclass
class RawMatch:
    """One signature found in the executable."""
    start: int
    end: int
    name: str
    version: str
    symbols: Dict[int, str] = field(default_factory=dict)

    def __post_init__(self):
        assert self.start <= self.end, f"{self.name}: match start {self.start:#x} past end {self.end:#x}"


def is_public_label(name: str) -> bool:
    """Return True unless the label names an internal location."""
    return not name.startswith(EXCLUDED_LABEL_PREFIXES)


def build_match(signature: CompiledSignature, offset: int, version: str, base_address: int) -> RawMatch:
    """Create a RawMatch for ``signature`` found at ``offset``."""
    symbols = {}
    for label in signature.labels:
        if not is_public_label(label.name):
            continue
        symbols[(base_address + offset + label.offset) & ADDRESS_MASK] = label.name

    return RawMatch(
        start=offset,
        end=offset + len(signature),
        name=signature.name,
        version=version,
        symbols=symbols,
    )


class VersionScanner(LoggerMixin):
    """Runs the signature set of one SDK version against an executable."""

    def __init__(self, source: SignatureSource, strict: bool = False, legacy_bound: bool = False):
        """Initialize the scanner.

        Args:
            source: Supplier of signature records per version.
            strict: Raise on a malformed signature instead of skipping it.
            legacy_bound: Reproduce the off-by-one scan bound of the
                legacy Go matcher.
        """
        self.source = source
        self.strict = strict
        self.legacy_bound = legacy_bound

    def compile_set(self, version: str) -> List[CompiledSignature]:
        """Fetch and compile the signatures of one version.

        Raises:
            CatalogUnavailableError: If the source cannot supply the set.
            MalformedSignatureError: In strict mode, on the first bad pattern.
        """
        compiled = []
        skipped = 0
        for record in self.source.load_signatures(version):
            try:
                compiled.append(compile_signature(record))
            except MalformedSignatureError as e:
                if self.strict:
                    raise
                skipped += 1
                self.logger.warning(f"Version {version}: skipping {e}")

        if skipped:
            self.logger.info(f"Version {version}: {skipped} malformed signatures skipped")
        return compiled

    def scan(self, blob: bytes, base_address: int, version: str) -> List[RawMatch]:
        """Scan ``blob`` with every signature of ``version``.

        Args:
            blob: Executable image without its header.
            base_address: Load address of the first blob byte.
            version: SDK version tag.

        Returns:
            One RawMatch per signature found, in signature-set order.
        """
        scanner = PatternScanner(blob, legacy_bound=self.legacy_bound)
        matches = []
        for signature in self.compile_set(version):
            offset = scanner.find(signature)
            if offset is None:
                continue
            matches.append(build_match(signature, offset, version, base_address))

        self.logger.debug(f"Version {version}: {len(matches)} signatures matched")
        return matches
