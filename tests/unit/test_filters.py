"""
Tests for FilterEngine and period presets.
"""

from datetime import timedelta

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from referral_core.domain.enums import PerformanceBucket, PeriodPreset
from referral_core.domain.models import FilterCriteria
from referral_core.services.filters import FilterEngine, criteria_with_period, summary_text
from referral_core.services.graph_builder import build_graph


@pytest.fixture
def engine():
    return FilterEngine()


@pytest.fixture
def graph(sample_records):
    return build_graph(sample_records)


class TestPredicates:
    """Each predicate on its own."""

    def test_ltv_zero_matches_only_leaf(self, engine, chain_records):
        matched = engine.matches(build_graph(chain_records), FilterCriteria(ltv_range=(0, 0)))
        assert matched == {"C"}

    def test_name_case_insensitive(self, engine, graph):
        assert engine.matches(graph, FilterCriteria(name_substring="ANA")) == {"r1"}
        assert engine.matches(graph, FilterCriteria(name_substring="li")) == {"r2", "c3"}

    def test_ltv_range_inclusive(self, engine, graph):
        assert engine.matches(graph, FilterCriteria(ltv_range=(800, 1200))) == {"c1", "c2"}

    @pytest.mark.parametrize("bucket,expected", [
        (PerformanceBucket.HIGH, {"r1"}),
        (PerformanceBucket.MEDIUM, {"r2", "c1"}),
        (PerformanceBucket.LOW, {"c2", "c3", "c4", "g1"}),
    ])
    def test_performance_bucket(self, engine, graph, bucket, expected):
        assert engine.matches(graph, FilterCriteria(performance_bucket=bucket)) == expected

    def test_bucket_given_as_string(self, engine, graph):
        assert engine.matches(graph, FilterCriteria(performance_bucket="high")) == {"r1"}

    def test_date_window(self, engine, make_record, now):
        graph = build_graph([
            make_record("new", created_at=now - timedelta(days=2)),
            make_record("old", created_at=now - timedelta(days=200)),
        ])
        window = (now - timedelta(days=7), now)
        assert engine.matches(graph, FilterCriteria(date_window=window)) == {"new"}

    def test_date_window_inclusive_edges(self, engine, make_record, now):
        start = now - timedelta(days=7)
        graph = build_graph([make_record("edge", created_at=start)])
        assert engine.matches(graph, FilterCriteria(date_window=(start, now))) == {"edge"}


class TestCombination:
    """Predicates AND together."""

    def test_and(self, engine, graph):
        criteria = FilterCriteria(name_substring="a", ltv_range=(1, 10_000))
        # Names containing "a" with positive LTV
        assert engine.matches(graph, criteria) == {"r1", "c1", "c4"}

    def test_no_match_is_valid(self, engine, graph):
        assert engine.matches(graph, FilterCriteria(name_substring="zzz")) == set()

    def test_inverted_ltv_range_empty(self, engine, graph):
        assert engine.matches(graph, FilterCriteria(ltv_range=(100, 0))) == set()

    def test_inverted_date_window_empty(self, engine, graph, now):
        window = (now, now - timedelta(days=30))
        assert engine.matches(graph, FilterCriteria(date_window=window)) == set()

    def test_no_predicates_matches_all(self, engine, graph):
        assert engine.matches(graph, FilterCriteria()) == set(graph.nodes)

    def test_highlights_only_when_active(self, engine, graph):
        assert engine.highlights(graph, FilterCriteria()) == set()
        assert engine.highlights(graph, FilterCriteria(name_substring="ana")) == {"r1"}

    def test_blank_name_is_inactive(self):
        assert not FilterCriteria(name_substring="").is_active()
        assert FilterCriteria(ltv_range=(0, 0)).is_active()


class TestPeriods:
    """Period presets and summary text."""

    def test_preset_windows(self, now):
        assert PeriodPreset.ALL.window(now) is None
        assert PeriodPreset.LAST_7_DAYS.window(now) == (now - timedelta(days=7), now)
        assert PeriodPreset.LAST_YEAR.days == 365

    def test_criteria_with_period_keeps_other_fields(self, now):
        base = FilterCriteria(name_substring="ana", ltv_range=(0, 10))
        updated = criteria_with_period(base, PeriodPreset.LAST_30_DAYS, now)
        assert updated.name_substring == "ana"
        assert updated.ltv_range == (0, 10)
        assert updated.date_window == (now - timedelta(days=30), now)

    def test_all_clears_window(self, now):
        base = FilterCriteria(date_window=(now, now))
        assert criteria_with_period(base, PeriodPreset.ALL, now).date_window is None

    def test_summary_text(self):
        assert summary_text(2, 7) == "Showing 2 of 7 clients"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
