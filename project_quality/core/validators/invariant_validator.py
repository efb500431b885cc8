"""
Invariant validator for clean project datasets.

Re-scans the remediation output and reports every record that breaks a
post-condition. It never changes data.
"""

from collections import Counter
from collections.abc import Iterable
from decimal import Decimal

from project_quality.core.models import CleanProjectRecord, InvariantViolation
from project_quality.core.rules.status_rules import DEFAULT_MINOR_DELAY_MAX_DAYS
from project_quality.observability import metrics
from project_quality.observability.logger import get_logger

from .base_validator import BaseValidator, ValidationError
from .date_order_validator import DateOrderValidator
from .range_validator import RangeValidator
from .required_field_validator import RequiredFieldValidator
from .status_validator import StatusConsistencyValidator

logger = get_logger(__name__)

UNIQUE_PROJECT_ID = "unique_project_id"


class InvariantValidator:
    """
    Checks every clean record against the fixed list of invariants.

    An empty result means the dataset is analysis-ready.
    """

    def __init__(self, minor_delay_max_days: int = DEFAULT_MINOR_DELAY_MAX_DAYS):
        """
        Initialize the validator.

        Args:
            minor_delay_max_days: Upper bound of the Minor Delay band, must
                                  match the engine setting
        """
        self.invariants: list[tuple[str, BaseValidator]] = [
            ("planned_cost_positive", RangeValidator("planned_cost_eur", {"min_exclusive": Decimal(0)})),
            ("actual_cost_positive", RangeValidator("actual_cost_eur", {"min_exclusive": Decimal(0)})),
            ("utilization_range", RangeValidator("utilization_pct", {"min": Decimal(0), "max": Decimal(100)})),
            ("delay_non_negative", RangeValidator("delay_days", {"min": 0})),
            ("status_consistency", StatusConsistencyValidator(
                "status", {"minor_delay_max_days": minor_delay_max_days}
            )),
            ("date_order", DateOrderValidator("actual_end_date", {"not_before": "start_date"})),
            ("project_name_required", RequiredFieldValidator("project_name")),
            ("client_name_required", RequiredFieldValidator("client_name")),
        ]

    def validate_record(self, record: CleanProjectRecord) -> list[InvariantViolation]:
        """
        Check one record against every per-record invariant.

        Args:
            record: Clean record

        Returns:
            One InvariantViolation per failing invariant
        """
        violations = []
        for kind, validator in self.invariants:
            value = getattr(record, validator.field_name)
            try:
                validator.validate(value, record)
            except ValidationError as e:
                violations.append(InvariantViolation(
                    kind=kind,
                    project_id=record.project_id,
                    field_name=e.field_name,
                    detail=e.message,
                ))
        return violations

    def validate(self, clean_records: Iterable[CleanProjectRecord]) -> list[InvariantViolation]:
        """
        Check a clean dataset.

        Args:
            clean_records: Output of the remediation engine

        Returns:
            List of violations; empty when every invariant holds
        """
        clean_records = list(clean_records)
        violations: list[InvariantViolation] = []

        counts = Counter(record.project_id for record in clean_records)
        for project_id, count in counts.items():
            if count > 1:
                violations.append(InvariantViolation(
                    kind=UNIQUE_PROJECT_ID,
                    project_id=project_id,
                    field_name="project_id",
                    detail=f"project_id appears {count} times in the clean dataset",
                ))

        for record in clean_records:
            violations.extend(self.validate_record(record))

        for violation in violations:
            metrics.increment_counter(metrics.invariant_violations_total, kind=violation.kind)

        if violations:
            logger.error(
                f"{len(violations)} invariant violation(s) in clean dataset",
                extra={"violation_count": len(violations), "kinds": sorted({v.kind for v in violations})},
            )
        else:
            logger.info(f"All invariants hold for {len(clean_records)} clean records")

        return violations

    def get_invariant_summary(self) -> dict[str, str]:
        """Map of invariant kind to the field it checks."""
        summary = {UNIQUE_PROJECT_ID: "project_id"}
        summary.update({kind: validator.field_name for kind, validator in self.invariants})
        return summary
