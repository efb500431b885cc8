"""
RequiredFieldValidator - ensures a field is present and not empty.
"""

from typing import Any

from project_quality.core.models import CleanProjectRecord

from .base_validator import BaseValidator, ValidationError


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a field is present and not empty.

    Fails if:
    - Field value is None
    - Field value is an empty or whitespace-only string
    """

    def validate(self, value: Any, record: CleanProjectRecord) -> None:
        """
        Validate that the field is present and not empty.

        Raises:
            ValidationError: If field is None or an empty string
        """
        if value is None:
            raise ValidationError(
                rule_name="required_field",
                field_name=self.field_name,
                message="Field value is null"
            )

        if isinstance(value, str) and value.strip() == "":
            raise ValidationError(
                rule_name="required_field",
                field_name=self.field_name,
                message="Field value is empty string"
            )

    @property
    def rule_type(self) -> str:
        return "required_field"
