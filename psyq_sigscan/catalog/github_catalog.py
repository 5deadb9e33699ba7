"""Signature catalog access.

The PSY-Q signature corpus is published as a GitHub repository with one
directory per SDK release, each holding JSON files of signature records.
This module lists a version directory through the GitHub contents API,
downloads every file, and optionally caches the combined set on disk.
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import requests
from requests.adapters import HTTPAdapter

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import CatalogUnavailableError
from ..core.logger import LoggerMixin, log_execution_time
from .signature import SignatureRecord


class SignatureSource(Protocol):
    """Anything able to supply the signature records of one SDK version."""

    def load_signatures(self, version: str) -> List[SignatureRecord]:
        ...


def _decode_records(payload: Any, origin: str, version: Optional[str] = None) -> List[SignatureRecord]:
    if not isinstance(payload, list):
        raise CatalogUnavailableError(
            f"Signature file {origin} is not a JSON array", version=version, url=origin
        )
    try:
        return [SignatureRecord.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogUnavailableError(
            f"Signature file {origin} has an invalid record: {e}", version=version, url=origin
        ) from e


class GitHubSignatureCatalog(LoggerMixin):
    """Fetches signature sets from the GitHub-hosted catalog."""

    def __init__(self, config: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.config = config or default_settings
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # Version scans and their file fetches share this pool
        pool_size = self.config.max_workers * self.config.max_workers
        adapter = HTTPAdapter(
            pool_maxsize=pool_size,
            max_retries=self.config.max_retries,
        )
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers["Accept"] = "application/vnd.github+json"
        if self.config.github_token:
            session.headers["Authorization"] = f"Bearer {self.config.github_token}"
        return session

    def _get_json(self, url: str, version: Optional[str] = None) -> Any:
        try:
            response = self.session.get(url, timeout=self.config.http_timeout)
        except requests.exceptions.RequestException as e:
            raise CatalogUnavailableError(
                f"Failed to reach signature catalog: {e}", version=version, url=url
            ) from e

        if response.status_code != requests.codes.ok:
            raise CatalogUnavailableError.bad_status(url, response.status_code, response.reason or "", version)

        try:
            return response.json()
        except ValueError as e:
            raise CatalogUnavailableError(
                f"Signature catalog returned invalid JSON: {e}", version=version, url=url
            ) from e

    def list_signature_files(self, version: str) -> List[Dict[str, Any]]:
        """List the signature files of one SDK version.

        Args:
            version: Version tag, e.g. "470".

        Returns:
            Directory entries with ``name``, ``path``, ``size`` and
            ``download_url`` keys, limited to downloadable files.

        Raises:
            CatalogUnavailableError: On any transport or non-success response.
        """
        url = f"{self.config.catalog_api_url.rstrip('/')}/{version}"
        items = self._get_json(url, version)
        if not isinstance(items, list):
            raise CatalogUnavailableError(
                f"Unexpected directory listing for version {version}", version=version, url=url
            )

        files = [
            item for item in items
            if isinstance(item, dict) and item.get("type", "file") == "file" and item.get("download_url")
        ]
        self.logger.debug(f"Version {version}: {len(files)} signature files listed")
        return files

    def fetch_signature_file(self, download_url: str, version: Optional[str] = None) -> List[SignatureRecord]:
        """Download and decode one signature file.

        Raises:
            CatalogUnavailableError: On transport, status or decode failures.
        """
        payload = self._get_json(download_url, version)
        return _decode_records(payload, download_url, version)

    @log_execution_time
    def load_signatures(self, version: str) -> List[SignatureRecord]:
        """Load every signature record of one SDK version.

        Files are fetched concurrently; the first failure aborts the load.
        Records keep the order of the directory listing.
        """
        cached = self._read_cache(version)
        if cached is not None:
            return cached

        files = self.list_signature_files(version)
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            results = executor.map(
                lambda item: self.fetch_signature_file(item["download_url"], version), files
            )
            records = [record for batch in results for record in batch]

        self.logger.info(f"Version {version}: loaded {len(records)} signatures from {len(files)} files")
        self._write_cache(version, records)
        return records

    def _read_cache(self, version: str) -> Optional[List[SignatureRecord]]:
        if not self.config.enable_cache:
            return None

        path = self.config.signature_cache_path(version)
        if not path.exists():
            return None

        age_hours = (time.time() - path.stat().st_mtime) / 3600
        if age_hours > self.config.cache_ttl_hours:
            self.logger.debug(f"Cache for version {version} expired ({age_hours:.1f}h old)")
            return None

        try:
            payload = json.loads(path.read_text(encoding='utf-8'))
            records = _decode_records(payload, str(path), version)
        except (OSError, ValueError, CatalogUnavailableError) as e:
            self.logger.warning(f"Ignoring unreadable cache {path}: {e}")
            return None

        self.logger.debug(f"Version {version}: {len(records)} signatures from cache")
        return records

    def _write_cache(self, version: str, records: List[SignatureRecord]) -> None:
        if not self.config.enable_cache:
            return

        path = self.config.signature_cache_path(version)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps([r.to_dict() for r in records]), encoding='utf-8')
        except OSError as e:
            self.logger.warning(f"Could not write signature cache {path}: {e}")


class LocalSignatureCatalog(LoggerMixin):
    """Reads signature sets from a local mirror of the catalog.

    The directory layout matches the remote one: ``<root>/<version>/*.json``.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def list_signature_files(self, version: str) -> List[Dict[str, Any]]:
        directory = self.root / version
        if not directory.is_dir():
            raise CatalogUnavailableError(
                f"No signature directory for version {version} under {self.root}",
                version=version,
                url=str(directory)
            )
        return [
            {"name": path.name, "path": f"{version}/{path.name}", "size": path.stat().st_size,
             "download_url": str(path)}
            for path in sorted(directory.glob("*.json"))
        ]

    def fetch_signature_file(self, download_url: str, version: Optional[str] = None) -> List[SignatureRecord]:
        try:
            payload = json.loads(Path(download_url).read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise CatalogUnavailableError(
                f"Failed to read signature file {download_url}: {e}", version=version, url=download_url
            ) from e
        return _decode_records(payload, download_url, version)

    def load_signatures(self, version: str) -> List[SignatureRecord]:
        records: List[SignatureRecord] = []
        for item in self.list_signature_files(version):
            records.extend(self.fetch_signature_file(item["download_url"], version))
        self.logger.debug(f"Version {version}: {len(records)} signatures from {self.root}")
        return records
