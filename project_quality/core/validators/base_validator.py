"""
Base validator interface for clean-record invariants.

All validators inherit from BaseValidator and implement validate().
"""

from abc import ABC, abstractmethod
from typing import Any

from project_quality.core.models import CleanProjectRecord, InvariantViolation


class ValidationError(Exception):
    """Raised when a clean record breaks an invariant."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class InvariantViolationError(Exception):
    """Raised when a dataset with invariant violations is requested as analysis-ready."""

    def __init__(self, violations: list[InvariantViolation]):
        self.violations = violations
        kinds = sorted({violation.kind for violation in violations})
        super().__init__(
            f"{len(violations)} invariant violation(s) ({', '.join(kinds)}); dataset is not analysis-ready"
        )


class BaseValidator(ABC):
    """
    Abstract base class for all invariant validators.

    Each validator checks one field of a clean record against one invariant
    kind (required, range, status_consistency, date_order).
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Validator-specific parameters (e.g., min/max for range)
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: Any, record: CleanProjectRecord) -> None:
        """
        Validate a value against this invariant.

        Args:
            value: The field value to validate
            record: The entire clean record (for cross-field invariants)

        Raises:
            ValidationError: If the invariant does not hold
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the invariant type identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
