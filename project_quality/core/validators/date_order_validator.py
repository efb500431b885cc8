"""
DateOrderValidator - validates a date is not earlier than another date of the record.
"""

from typing import Any

from project_quality.core.models import CleanProjectRecord

from .base_validator import BaseValidator, ValidationError


class DateOrderValidator(BaseValidator):
    """
    Validates that a date field does not precede a reference date field.

    Parameters:
    - not_before: Name of the reference date field (required)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.not_before = self.parameters.get("not_before")
        if not self.not_before:
            raise ValueError("DateOrderValidator requires 'not_before' parameter")

    def validate(self, value: Any, record: CleanProjectRecord) -> None:
        """
        Validate that value >= record.<not_before>.

        Raises:
            ValidationError: If the date precedes the reference date
        """
        reference = getattr(record, self.not_before)
        if value is None or reference is None:
            raise ValidationError(
                rule_name="date_order",
                field_name=self.field_name,
                message=f"Cannot compare {self.field_name} with {self.not_before}: value is null"
            )

        if value < reference:
            raise ValidationError(
                rule_name="date_order",
                field_name=self.field_name,
                message=f"{self.field_name} {value.isoformat()} is before {self.not_before} {reference.isoformat()}"
            )

    @property
    def rule_type(self) -> str:
        return "date_order"
