"""Tests for psyq_sigscan/pipeline.py and psyq_sigscan/report.py — end to end."""
import threading

import pytest

from psyq_sigscan.analysis.layout import Segment
from psyq_sigscan.core.exceptions import CatalogUnavailableError, NoMatchesFoundError
from psyq_sigscan.pipeline import SignatureMatcher
from psyq_sigscan.report import render_report

from .conftest import BASE_ADDRESS, FakeCatalog, make_record


class TestEndToEnd:

    def test_single_signature_on_zero_blob(self, config):
        catalog = FakeCatalog({"400": [make_record("X.OBJ", "00 00 ?? 00", labels=[("FOO", 1)])]})
        report = SignatureMatcher(catalog, config).run(bytes(64), BASE_ADDRESS, ["400"])

        m = report.resolved["X.OBJ"]
        assert (m.start, m.end, m.name) == (0, 4, "X.OBJ")
        assert m.symbols == {BASE_ADDRESS + 1: "FOO"}
        assert render_report(report) == [
            "PSY-Q 400: 1.00",
            " - [0x0, c, x]",
            "FOO = 0x80010001",
        ]

    def test_report_with_gap_and_multiple_versions(self, config):
        blob = bytes([0xA0, 0xA1, 0xB0, 0xB1, 0, 0, 0, 0, 0xC0, 0xC1])
        catalog = FakeCatalog({
            "400": [make_record("A.OBJ", "a0 a1", labels=[("a_func", 0)]),
                    make_record("B.OBJ", "b0 b1")],
            "410": [make_record("B.OBJ", "b0 b1", labels=[("b_func", 0), ("loc_2", 1)]),
                    make_record("C.OBJ", "c0 c1", labels=[("c_func", 1)])],
            "420": [],
        })
        report = SignatureMatcher(catalog, config).run(blob, 0x1000)

        assert report.resolved["B.OBJ"].version == "410"
        assert report.segments == [
            Segment(0, "a"), Segment(2, "b"), Segment(4), Segment(8, "c"),
        ]
        assert render_report(report) == [
            "PSY-Q 400: 0.33",
            "PSY-Q 410: 0.67",
            " - [0x0, c, a]",
            " - [0x2, c, b]",
            " - [0x4, c]",
            " - [0x8, c, c]",
            "a_func = 0x00001000",
            "b_func = 0x00001002",
            "c_func = 0x00001009",
        ]

    def test_hex_offsets_are_upper_case(self, config):
        blob = bytes(0xAB) + bytes([0x5A])
        catalog = FakeCatalog({"400": [make_record("Z.OBJ", "5a", labels=[("zed", 0)])]})
        lines = render_report(SignatureMatcher(catalog, config).run(blob, 0x8001FF00, ["400"]))
        assert " - [0xAB, c, z]" in lines
        assert "zed = 0x8001FFAB" in lines

    def test_defaults_come_from_config(self, config):
        catalog = FakeCatalog({"420": [make_record("X.OBJ", "00", labels=[("x", 0)])]})
        report = SignatureMatcher(catalog, config).run(bytes(4))
        assert sorted(catalog.requested) == ["400", "410", "420"]
        assert report.base_address == BASE_ADDRESS
        assert report.symbols[0].address == BASE_ADDRESS

    def test_descending_ranking(self, config):
        config = config.model_copy(update={"version_ranking": "descending"})
        blob = bytes([1, 2, 3])
        catalog = FakeCatalog({
            "400": [make_record("A.OBJ", "01")],
            "410": [make_record("B.OBJ", "02"), make_record("C.OBJ", "03")],
        })
        report = SignatureMatcher(catalog, config).run(blob)
        assert [e.version for e in report.estimates] == ["410", "400"]


class TestFailures:

    def test_no_matches(self, config):
        catalog = FakeCatalog({"400": [make_record("X.OBJ", "ff")]})
        with pytest.raises(NoMatchesFoundError):
            SignatureMatcher(catalog, config).run(bytes(16))

    def test_one_failing_version_fails_the_run(self, config):
        catalog = FakeCatalog(
            {"400": [make_record("X.OBJ", "00")], "420": [make_record("Y.OBJ", "00")]},
            failing={"410"},
        )
        with pytest.raises(CatalogUnavailableError) as excinfo:
            SignatureMatcher(catalog, config).run(bytes(16))
        assert excinfo.value.version == "410"

    def test_failure_cancels_versions_not_yet_started(self, config):
        class SlowCatalog(FakeCatalog):
            def load_signatures(self, version):
                if version not in self.failing:
                    threading.Event().wait(0.2)
                return super().load_signatures(version)

        config = config.model_copy(update={"max_workers": 1, "sdk_versions": ["bad", "v1", "v2", "v3"]})
        catalog = SlowCatalog({"v1": [], "v2": [], "v3": []}, failing={"bad"})
        with pytest.raises(CatalogUnavailableError):
            SignatureMatcher(catalog, config).run(bytes(16))
        assert catalog.requested[0] == "bad"
        assert "v3" not in catalog.requested

    def test_several_failures_report_earliest_configured_version(self, config):
        class LateFirstFailure(FakeCatalog):
            """420 fails at once; 400 fails only after 420 has failed."""

            def __init__(self):
                super().__init__(failing={"400", "420"})
                self.later_failed = threading.Event()

            def load_signatures(self, version):
                if version == "400":
                    self.later_failed.wait(timeout=5)
                    threading.Event().wait(0.1)
                try:
                    return super().load_signatures(version)
                finally:
                    if version == "420":
                        self.later_failed.set()

        for _ in range(3):
            with pytest.raises(CatalogUnavailableError) as excinfo:
                SignatureMatcher(LateFirstFailure(), config).run(bytes(16))
            assert excinfo.value.version == "400"


class TestDeterminism:

    class SlowFirstCatalog(FakeCatalog):
        """Makes earlier versions finish last to shuffle completion order."""

        def __init__(self, sets, order):
            super().__init__(sets)
            self.events = {v: threading.Event() for v in order}
            self.order = order

        def load_signatures(self, version):
            index = self.order.index(version)
            if index + 1 < len(self.order):
                self.events[self.order[index + 1]].wait(timeout=5)
            self.events[version].set()
            return super().load_signatures(version)

    def test_tie_resolves_to_first_configured_version(self, config):
        order = ["400", "410", "420"]
        sets = {v: [make_record("M.OBJ", "00", labels=[(f"sym_{v}", 0)])] for v in order}
        catalog = self.SlowFirstCatalog(sets, order)
        report = SignatureMatcher(catalog, config).run(bytes(4), 0, order)
        assert report.resolved["M.OBJ"].version == "400"

    def test_repeated_runs_are_identical(self, config):
        sets = {
            "400": [make_record("A.OBJ", "01 ??", labels=[("a", 0)]), make_record("M.OBJ", "05", labels=[("m", 0)])],
            "410": [make_record("B.OBJ", "03", labels=[("b", 0)]), make_record("M.OBJ", "05", labels=[("m2", 0)])],
            "420": [make_record("A.OBJ", "01 02", labels=[("a", 0), ("a2", 1)])],
        }
        blob = bytes([1, 2, 3, 4, 5, 6])
        first = SignatureMatcher(FakeCatalog(sets), config).run(blob)
        for _ in range(5):
            again = SignatureMatcher(FakeCatalog(sets), config).run(blob)
            assert again.resolved == first.resolved
            assert again.estimates == first.estimates
            assert render_report(again) == render_report(first)
