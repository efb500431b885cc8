"""
StatusConsistencyValidator - validates status is canonical and matches delay_days.
"""

from typing import Any

from project_quality.core.models import CleanProjectRecord, ProjectStatus
from project_quality.core.rules.status_rules import DEFAULT_MINOR_DELAY_MAX_DAYS, status_for_delay

from .base_validator import BaseValidator, ValidationError


class StatusConsistencyValidator(BaseValidator):
    """
    Validates that status is one of the canonical values and agrees with delay_days.

    Parameters:
    - minor_delay_max_days: Upper bound of the Minor Delay band (default 7)
    """

    CANONICAL = {status.value for status in ProjectStatus}

    def __init__(self, field_name: str = "status", parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.minor_delay_max_days = int(
            self.parameters.get("minor_delay_max_days", DEFAULT_MINOR_DELAY_MAX_DAYS)
        )

    def validate(self, value: Any, record: CleanProjectRecord) -> None:
        """
        Validate status against the canonical set and the delay mapping.

        Raises:
            ValidationError: If status is non-canonical or inconsistent with delay_days
        """
        if value not in self.CANONICAL:
            raise ValidationError(
                rule_name="status_consistency",
                field_name=self.field_name,
                message=f"Value '{value}' is not one of: {', '.join(sorted(self.CANONICAL))}"
            )

        # Negative delays are reported by the delay range check
        if record.delay_days is None or record.delay_days < 0:
            return

        expected = status_for_delay(record.delay_days, self.minor_delay_max_days)
        if value != expected.value:
            raise ValidationError(
                rule_name="status_consistency",
                field_name=self.field_name,
                message=f"Status '{value}' does not match delay_days={record.delay_days} (expected '{expected.value}')"
            )

    @property
    def rule_type(self) -> str:
        return "status_consistency"
