"""
Date rule: repairs an actual end date that is missing or precedes the start date.
"""

from datetime import timedelta

from project_quality.core.models import DatasetStatistics, RawProjectRecord

from .base_rule import BaseRule, Correction, RuleId


class DateCorrectionRule(BaseRule):
    """
    Recomputes actual_end_date as planned_end_date + delay_days.

    Fires when actual_end_date is absent or earlier than start_date (a keying
    error such as a wrong year).
    """

    rule_id = RuleId.DATE_CORRECTION
    issue = "Wrong Date Logic"
    field_names = ("actual_end_date",)

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        if record.actual_end_date is None:
            return True
        if record.start_date is None:
            return False
        return record.actual_end_date < record.start_date

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        if record.planned_end_date is None:
            raise self._missing(
                record, "planned_end_date",
                "actual_end_date cannot be recomputed: planned_end_date is absent",
            )
        if record.delay_days is None or record.delay_days < 0:
            raise self._missing(
                record, "delay_days",
                "actual_end_date cannot be recomputed: delay_days is absent",
            )

        corrected = record.planned_end_date + timedelta(days=record.delay_days)
        if record.start_date is not None and corrected < record.start_date:
            raise self._missing(
                record, "actual_end_date",
                f"actual_end_date cannot be recomputed: planned_end_date + {record.delay_days} delay days "
                f"({corrected.isoformat()}) is still before start_date {record.start_date.isoformat()}",
            )

        if record.actual_end_date is None:
            justification = (
                f"actual_end_date missing; set to {corrected.isoformat()} "
                f"(planned_end_date + {record.delay_days} delay days)"
            )
        else:
            justification = (
                f"actual_end_date corrected from {record.actual_end_date.isoformat()} to "
                f"{corrected.isoformat()} (original date was before start_date "
                f"{record.start_date.isoformat()}; planned_end_date + {record.delay_days} delay days)"
            )
        return self._correction({"actual_end_date": corrected}, justification)
