"""Custom exceptions for the PSY-Q signature scanner.

This module defines a hierarchy of exceptions specific to signature
scanning, providing clear error context and handling. Every fatal
condition the command line reports derives from SigScanError.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional


class SigScanError(Exception):
    """Base exception for all signature scanning related errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(SigScanError):
    """Configuration or setup related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.config_key = config_key


class ConfigValidationError(ConfigurationError):
    """A run profile file is unreadable or contains invalid entries."""

    def __init__(
        self,
        message: str,
        config_file: Optional[Path] = None,
        config_key: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message, config_key=config_key)
        self.config_file = config_file
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        parts = [super().__str__()]

        if self.config_file:
            parts.append(f"Config file: {self.config_file}")

        if self.suggestions:
            parts.append(f"Allowed: {', '.join(self.suggestions)}")

        return "\n".join(parts)

    @classmethod
    def unknown_key(cls, key: str, config_file: Path, allowed: List[str]) -> "ConfigValidationError":
        """Create exception for a key the run profile does not support."""
        return cls(
            f"Unknown configuration key: {key}",
            config_file=config_file,
            config_key=key,
            suggestions=sorted(allowed)
        )


class MalformedSignatureError(SigScanError):
    """A signature pattern contains a token that is neither a hex byte nor a wildcard."""

    def __init__(
        self,
        message: str,
        signature_name: Optional[str] = None,
        token: Optional[str] = None
    ):
        super().__init__(message)
        self.signature_name = signature_name
        self.token = token

    @classmethod
    def bad_token(cls, signature_name: str, token: str) -> "MalformedSignatureError":
        """Create exception for an unparseable pattern token."""
        return cls(
            f"Malformed signature '{signature_name}': invalid token '{token}'",
            signature_name=signature_name,
            token=token
        )


class CatalogUnavailableError(SigScanError):
    """The signature catalog could not be listed, fetched or decoded."""

    def __init__(
        self,
        message: str,
        version: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.version = version
        self.url = url
        self.status_code = status_code

    @classmethod
    def bad_status(
        cls,
        url: str,
        status_code: int,
        reason: str = "",
        version: Optional[str] = None
    ) -> "CatalogUnavailableError":
        """Create exception for a non-success HTTP response."""
        status = f"{status_code} {reason}".strip()
        return cls(
            f"Signature catalog returned HTTP {status}",
            version=version,
            url=url,
            status_code=status_code
        )


class InputTooSmallError(SigScanError):
    """The executable is not larger than its header, so there is nothing to scan."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        size: int = 0,
        required: int = 0
    ):
        super().__init__(message)
        self.path = path
        self.size = size
        self.required = required


class NoMatchesFoundError(SigScanError):
    """No signature matched anywhere in the executable."""

    def __init__(self, message: str = "no matches found, is it a valid PSX EXE?", versions: Optional[List[str]] = None):
        super().__init__(message)
        self.versions = versions or []
