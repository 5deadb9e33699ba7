"""Shared fixtures for psyq-sigscan tests."""
import logging

import pytest

from psyq_sigscan.catalog.signature import Label, SignatureRecord
from psyq_sigscan.core.config import Settings
from psyq_sigscan.core.exceptions import CatalogUnavailableError

BASE_ADDRESS = 0x80010000


def make_record(name, sig, labels=(), xbss=()):
    """Build a SignatureRecord from (name, offset) label pairs."""
    return SignatureRecord(
        name=name,
        sig=sig,
        labels=tuple(Label(n, o) for n, o in labels),
        xbss=tuple(Label(n, o) for n, o in xbss),
    )


class FakeCatalog:
    """In-memory signature source keyed by version tag."""

    def __init__(self, sets=None, failing=()):
        self.sets = sets or {}
        self.failing = set(failing)
        self.requested = []

    def load_signatures(self, version):
        self.requested.append(version)
        if version in self.failing:
            raise CatalogUnavailableError(f"version {version} unavailable", version=version)
        return list(self.sets.get(version, []))


@pytest.fixture
def config():
    """Settings independent of the caller's environment."""
    return Settings(
        _env_file=None,
        sdk_versions=["400", "410", "420"],
        base_address=BASE_ADDRESS,
        enable_cache=False,
        max_workers=4,
    )


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handlers installed by setup_logging during CLI tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
