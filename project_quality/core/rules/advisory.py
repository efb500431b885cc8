"""
Advisory checks.

These findings are reported (audit output, run warnings) but never corrected:
the recorded values are plausible and need a human decision.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from project_quality.core.models import AuditIssue, DatasetStatistics, ProjectStatus, RawProjectRecord

CANONICAL_STATUSES = {status.value for status in ProjectStatus}


class AdvisoryCheck(ABC):
    """Abstract base for checks that only report."""

    name: str

    def __init__(self, parameters: dict[str, Any] | None = None):
        self.parameters = parameters or {}

    @abstractmethod
    def inspect(self, record: RawProjectRecord, stats: DatasetStatistics) -> str | None:
        """Return a description of the finding, or None when the record is fine."""
        pass

    def check(self, record: RawProjectRecord, stats: DatasetStatistics) -> AuditIssue | None:
        description = self.inspect(record, stats)
        if description is None:
            return None
        return AuditIssue(
            issue_type=self.name,
            project_id=record.project_id,
            description=description,
            severity="warning",
        )


class OverrunOutlierCheck(AdvisoryCheck):
    """
    Flags a recorded cost_overrun_pct above mean + k standard deviations.

    Parameters:
    - sigma: k, the number of standard deviations (default 3)
    """

    name = "OVERRUN_OUTLIER"

    def __init__(self, parameters=None):
        super().__init__(parameters)
        self.sigma = Decimal(str(self.parameters.get("sigma", 3)))

    def inspect(self, record, stats):
        if record.cost_overrun_pct is None:
            return None
        if stats.overrun_mean is None or stats.overrun_stddev is None:
            return None

        threshold = stats.overrun_mean + self.sigma * stats.overrun_stddev
        if record.cost_overrun_pct > threshold:
            return (
                f"cost_overrun_pct {record.cost_overrun_pct}% exceeds mean + {self.sigma} SD "
                f"({threshold.quantize(Decimal('0.1'))}%)"
            )
        return None


class DelayDateMismatchCheck(AdvisoryCheck):
    """
    Flags a recorded delay_days that disagrees with actual_end - planned_end.

    Parameters:
    - tolerance_days: Allowed gap in days (default 1)

    Rows whose actual_end_date precedes start_date are left to DATE_CORRECTION.
    """

    name = "DELAY_DATE_MISMATCH"

    def __init__(self, parameters=None):
        super().__init__(parameters)
        self.tolerance_days = int(self.parameters.get("tolerance_days", 1))

    def inspect(self, record, stats):
        if record.delay_days is None or record.actual_end_date is None or record.planned_end_date is None:
            return None
        if record.start_date is not None and record.actual_end_date <= record.start_date:
            return None

        calculated = (record.actual_end_date - record.planned_end_date).days
        if abs(record.delay_days - calculated) > self.tolerance_days:
            return f"delay_days {record.delay_days} but end dates differ by {calculated} days"
        return None


class NonStandardStatusCheck(AdvisoryCheck):
    """Flags a status that is present but not spelled as one of the canonical values."""

    name = "NON_STANDARD_STATUS"

    def inspect(self, record, stats):
        if record.status is None or record.status in CANONICAL_STATUSES:
            return None
        return f"status '{record.status}' is not one of: {', '.join(sorted(CANONICAL_STATUSES))}"
