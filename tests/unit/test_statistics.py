"""
Unit tests for the aggregate statistics provider.

Includes property-based testing with hypothesis for the averages.
"""

import statistics
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from project_quality.core.models import DEFAULT_SERVICE_LINES, RawProjectRecord
from project_quality.core.statistics import compute_statistics


def _row(project_id, service_line_id, overrun=None, utilization=None):
    return RawProjectRecord(
        project_id=project_id,
        service_line_id=service_line_id,
        cost_overrun_pct=overrun,
        utilization_pct=utilization,
    )


@pytest.mark.unit
class TestComputeStatistics:
    """Tests for compute_statistics"""

    def test_absent_values_excluded_not_zero(self):
        """Test that an absent overrun does not pull the average down"""
        stats = compute_statistics([
            _row("A", 2, overrun=Decimal("6"), utilization=Decimal("70")),
            _row("B", 2, overrun=Decimal("10"), utilization=None),
            _row("C", 2, overrun=None, utilization=Decimal("80")),
        ])

        line = stats.for_service_line(2)
        assert line.avg_cost_overrun_pct == Decimal("8")
        assert line.avg_utilization_pct == Decimal("75")
        assert line.overrun_sample_size == 2
        assert line.utilization_sample_size == 2

    def test_service_lines_isolated(self):
        """Test that each service line averages only its own rows"""
        stats = compute_statistics([
            _row("A", 1, overrun=Decimal("20")),
            _row("B", 2, overrun=Decimal("5")),
        ])
        assert stats.for_service_line(1).avg_cost_overrun_pct == Decimal("20")
        assert stats.for_service_line(2).avg_cost_overrun_pct == Decimal("5")

    def test_line_without_values_is_none(self):
        """Test a service line with no recorded overrun has no average"""
        stats = compute_statistics([_row("A", 3)], DEFAULT_SERVICE_LINES)
        assert stats.for_service_line(3).avg_cost_overrun_pct is None
        # Reference lines without rows still get an entry
        assert set(stats.service_lines) == {1, 2, 3}

    def test_global_mean_and_population_stddev(self):
        """Test the global overrun mean and population standard deviation"""
        stats = compute_statistics([
            _row("A", 1, overrun=Decimal("2")),
            _row("B", 2, overrun=Decimal("4")),
            _row("C", 3, overrun=Decimal("6")),
        ])
        assert stats.overrun_mean == Decimal("4")
        assert stats.overrun_stddev == statistics.pstdev([Decimal("2"), Decimal("4"), Decimal("6")])
        assert stats.record_count == 3

    def test_empty_dataset(self):
        stats = compute_statistics([])
        assert stats.overrun_mean is None
        assert stats.overrun_stddev is None
        assert stats.record_count == 0

    def test_duplicates_counted_as_received(self, reference_records):
        """Test statistics are taken over the raw snapshot including PRJ_008 twice"""
        stats = compute_statistics(reference_records)
        assert stats.record_count == 26
        # Technology Consulting: PRJ_008 counted twice
        assert stats.for_service_line(1).overrun_sample_size == 9

    def test_reference_analytics_averages(self, reference_records):
        """Test the Analytics averages that feed PRJ_003 imputation"""
        stats = compute_statistics(reference_records)
        analytics = stats.for_service_line(2)
        assert analytics.avg_cost_overrun_pct == Decimal("8.5")
        assert analytics.avg_utilization_pct == Decimal("78.525")

    @given(st.lists(st.decimals(min_value=-50, max_value=200, places=2), min_size=1, max_size=20))
    def test_mean_within_bounds(self, overruns):
        """Property: the service-line average lies between the sample min and max"""
        rows = [_row(f"P{i}", 1, overrun=value) for i, value in enumerate(overruns)]
        average = compute_statistics(rows).for_service_line(1).avg_cost_overrun_pct
        assert min(overruns) <= average <= max(overruns)
