"""
Invariant validators for clean project records.

Provides validators for required fields, numeric ranges, status consistency
and date ordering, and the InvariantValidator that runs them over a dataset.
"""

from .base_validator import BaseValidator, InvariantViolationError, ValidationError
from .date_order_validator import DateOrderValidator
from .invariant_validator import InvariantValidator
from .range_validator import RangeValidator
from .required_field_validator import RequiredFieldValidator
from .status_validator import StatusConsistencyValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "InvariantViolationError",
    "RequiredFieldValidator",
    "RangeValidator",
    "StatusConsistencyValidator",
    "DateOrderValidator",
    "InvariantValidator",
]
