"""Configuration management for the PSY-Q signature scanner.

This module provides centralized configuration management using Pydantic
for environment variable handling and validation. Every field can be set
through a ``PSYQ_``-prefixed environment variable or a ``.env`` file.
"""

import os
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Signature-set versions published in the lab313ru/psx_psyq_signatures catalog
DEFAULT_SDK_VERSIONS = [
    "260", "300", "330", "340", "350", "3610", "3611", "370",
    "400", "410", "420", "430", "440", "450", "460", "470",
]

RANKING_MODES = ("ascending", "descending")


class Settings(BaseSettings):
    """Application settings from environment variables and defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PSYQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Signature catalog
    catalog_api_url: str = "https://api.github.com/repos/lab313ru/psx_psyq_signatures/contents"
    sdk_versions: List[str] = Field(default_factory=lambda: list(DEFAULT_SDK_VERSIONS))
    github_token: Optional[str] = None

    # Executable layout
    base_address: int = 0x80010000
    header_size: int = 0x800

    # Scan policy
    strict_signatures: bool = False
    legacy_scan_bound: bool = False
    version_ranking: str = "ascending"
    max_estimates: int = 3
    max_workers: int = 8

    # Network settings
    http_timeout: int = 30
    max_retries: int = 3

    # Cache settings
    enable_cache: bool = False
    cache_dir: Path = Path.home() / ".cache" / "psyq-sigscan"
    cache_ttl_hours: int = 24

    # Logging configuration
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @field_validator('sdk_versions')
    @classmethod
    def validate_sdk_versions(cls, v: List[str]) -> List[str]:
        """Validate that at least one version tag is configured."""
        versions = [tag.strip() for tag in v if tag.strip()]
        if not versions:
            raise ValueError("At least one SDK version tag must be configured")
        return versions

    @field_validator('base_address')
    @classmethod
    def validate_base_address(cls, v: int) -> int:
        """Validate base address fits in 32 bits."""
        if not 0 <= v <= 0xFFFFFFFF:
            raise ValueError("Base address must be a 32-bit unsigned value")
        return v

    @field_validator('header_size')
    @classmethod
    def validate_header_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Header size must not be negative")
        return v

    @field_validator('version_ranking')
    @classmethod
    def validate_version_ranking(cls, v: str) -> str:
        """Validate ranking mode is one of the supported orders."""
        v = v.lower()
        if v not in RANKING_MODES:
            raise ValueError(f"Version ranking must be one of: {', '.join(RANKING_MODES)}")
        return v

    @field_validator('max_workers', 'max_estimates', 'http_timeout')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counters are positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @field_validator('max_workers')
    @classmethod
    def cap_max_workers(cls, v: int) -> int:
        return min(v, (os.cpu_count() or 4) * 4)

    def signature_cache_path(self, version: str) -> Path:
        """Get the cache file holding the signature set for a version."""
        return self.cache_dir / f"psyq_{version}.json"


# Global settings instance
settings = Settings()
