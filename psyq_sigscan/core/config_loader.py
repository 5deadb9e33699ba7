"""Run profile loader.

A run profile is a small YAML file that overrides scan settings for one
kind of input, for example a game known to be built against a narrow
range of SDK releases::

    versions: ["400", "410", "420"]
    base_address: 0x80010000
    ranking: descending
"""

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from .config import Settings
from .exceptions import ConfigValidationError
from .logger import LoggerMixin

# Profile key -> Settings field
PROFILE_KEYS = {
    "versions": "sdk_versions",
    "base_address": "base_address",
    "header_size": "header_size",
    "ranking": "version_ranking",
    "legacy_scan_bound": "legacy_scan_bound",
    "strict_signatures": "strict_signatures",
    "catalog_url": "catalog_api_url",
    "max_estimates": "max_estimates",
}


class ConfigLoader(LoggerMixin):
    """Loads and validates run profile files."""

    def __init__(self, config_path: Path):
        self.config_path = config_path
        self.config_data: Dict[str, Any] = {}

    def load_config(self) -> Dict[str, Any]:
        """Load and validate the profile file.

        Returns:
            Mapping of Settings field names to override values.

        Raises:
            ConfigValidationError: If the profile is unreadable or invalid.
        """
        self.logger.info(f"Loading run profile from {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self.config_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigValidationError(
                f"Configuration file not found: {self.config_path}",
                config_file=self.config_path
            )
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Invalid YAML syntax: {e}",
                config_file=self.config_path
            )

        if not isinstance(self.config_data, dict):
            raise ConfigValidationError(
                "Run profile must be a mapping of settings",
                config_file=self.config_path
            )

        overrides = {}
        for key, value in self.config_data.items():
            if key not in PROFILE_KEYS:
                raise ConfigValidationError.unknown_key(key, self.config_path, list(PROFILE_KEYS))
            if key in ("base_address", "header_size") and isinstance(value, str):
                value = self._parse_int(key, value)
            if key == "versions":
                value = [str(tag) for tag in value] if isinstance(value, list) else value
            overrides[PROFILE_KEYS[key]] = value

        self.logger.debug(f"Run profile overrides: {overrides}")
        return overrides

    def apply(self, base: Settings) -> Settings:
        """Return a new Settings object with the profile applied on top of ``base``."""
        overrides = self.load_config()
        try:
            return Settings(**{**base.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigValidationError(
                f"Invalid run profile values: {e}",
                config_file=self.config_path
            ) from e

    def _parse_int(self, key: str, value: str) -> int:
        try:
            return int(value, 0)
        except ValueError:
            raise ConfigValidationError(
                f"'{key}' must be an integer, got '{value}'",
                config_file=self.config_path,
                config_key=key
            )
