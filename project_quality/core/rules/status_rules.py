"""
Status rules: status/delay consistency and derivation of a missing delay.
"""

import re

from project_quality.core.models import DatasetStatistics, ProjectStatus, RawProjectRecord

from .base_rule import BaseRule, Correction, RuleId

DEFAULT_MINOR_DELAY_MAX_DAYS = 7

_STATUS_ALIASES = {
    "on time": ProjectStatus.ON_TIME,
    "ontime": ProjectStatus.ON_TIME,
    "minor delay": ProjectStatus.MINOR_DELAY,
    "delayed": ProjectStatus.DELAYED,
}


def status_for_delay(delay_days: int, minor_delay_max_days: int = DEFAULT_MINOR_DELAY_MAX_DAYS) -> ProjectStatus:
    """
    Map a delay in days to the canonical status.

    0 → On-Time, 1..minor_delay_max_days → Minor Delay, above → Delayed.

    Raises:
        ValueError: If delay_days is negative
    """
    if delay_days < 0:
        raise ValueError(f"delay_days must be non-negative, got {delay_days}")
    if delay_days == 0:
        return ProjectStatus.ON_TIME
    if delay_days <= minor_delay_max_days:
        return ProjectStatus.MINOR_DELAY
    return ProjectStatus.DELAYED


def normalize_status(value: str | None) -> ProjectStatus | None:
    """
    Interpret free-text status ignoring case, hyphens, underscores and extra spaces.

    Returns None when the text is absent or not a recognised status.

    Examples:
        >>> normalize_status("on time")
        <ProjectStatus.ON_TIME: 'On-Time'>
        >>> normalize_status("MINOR_DELAY")
        <ProjectStatus.MINOR_DELAY: 'Minor Delay'>
    """
    if value is None:
        return None
    key = re.sub(r"[\s_\-]+", " ", value.strip().casefold())
    return _STATUS_ALIASES.get(key)


class StatusCorrectionRule(BaseRule):
    """
    Aligns status with the recorded delay_days.

    Parameters:
    - minor_delay_max_days: Upper bound of the Minor Delay band (default 7)

    Fires when delay_days is present and the recorded status is absent, maps
    to a different status, or is not spelled exactly as the canonical value.
    """

    rule_id = RuleId.STATUS_CORRECTION
    issue = "Status Mismatch"
    field_names = ("status",)

    def __init__(self, parameters=None):
        super().__init__(parameters)
        self.minor_delay_max_days = int(
            self.parameters.get("minor_delay_max_days", DEFAULT_MINOR_DELAY_MAX_DAYS)
        )

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        if record.delay_days is None or record.delay_days < 0:
            return False
        expected = status_for_delay(record.delay_days, self.minor_delay_max_days)
        return record.status != expected.value

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        expected = status_for_delay(record.delay_days, self.minor_delay_max_days)
        recorded = normalize_status(record.status)

        if record.status is None:
            justification = f"status missing; set to {expected.value} from delay_days={record.delay_days}"
        elif recorded is expected:
            justification = (
                f"status normalised from '{record.status}' to {expected.value} "
                "(non-standard case or formatting)"
            )
        else:
            justification = (
                f"status corrected from '{record.status}' to {expected.value} "
                f"(delay_days={record.delay_days})"
            )
        return self._correction({"status": expected.value}, justification)


class MissingDelayAndStatusRule(BaseRule):
    """
    Derives delay_days from the end dates when it is missing, then sets status.

    delay_days = max(0, actual_end_date - planned_end_date) in days. The status
    is derived from that value inside this rule, since StatusCorrectionRule
    only reads a recorded delay.

    Parameters:
    - minor_delay_max_days: Upper bound of the Minor Delay band (default 7)
    """

    rule_id = RuleId.MISSING_DELAY_AND_STATUS
    issue = "NULL Status and Delay"
    field_names = ("delay_days", "status")

    def __init__(self, parameters=None):
        super().__init__(parameters)
        self.minor_delay_max_days = int(
            self.parameters.get("minor_delay_max_days", DEFAULT_MINOR_DELAY_MAX_DAYS)
        )

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        return record.delay_days is None or record.delay_days < 0

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        if record.actual_end_date is None or record.planned_end_date is None:
            raise self._missing(
                record, "actual_end_date",
                "delay_days cannot be derived: actual_end_date or planned_end_date is absent",
            )
        if record.start_date is not None and record.actual_end_date < record.start_date:
            raise self._missing(
                record, "actual_end_date",
                "delay_days cannot be derived: actual_end_date precedes start_date",
            )

        delay = max(0, (record.actual_end_date - record.planned_end_date).days)
        status = status_for_delay(delay, self.minor_delay_max_days)

        if record.delay_days is None:
            source = "delay_days and status both missing" if record.status is None else "delay_days missing"
        else:
            source = f"delay_days was negative ({record.delay_days})"

        changes = {"delay_days": delay}
        justification = (
            f"{source}; delay_days={delay} derived from actual_end_date - planned_end_date"
        )
        if record.status != status.value:
            changes["status"] = status.value
            justification += f"; status set to {status.value}"
        return self._correction(changes, justification)
