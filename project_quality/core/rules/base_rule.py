"""
Base rule interface for the remediation rule catalog.

Every rule pairs a detector (does this record need fixing?) with a corrector
(what is the repaired value and why?). Rules never mutate the record they are
given; correctors return a Correction describing the new field values.
"""

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from project_quality.core.models import DatasetStatistics, RawProjectRecord


class RuleId(str, Enum):
    """Closed set of remediation rules, in catalog order."""

    DUPLICATE_SUPPRESSION = "DUPLICATE_SUPPRESSION"
    OVERRUN_RECOMPUTATION = "OVERRUN_RECOMPUTATION"
    STATUS_CORRECTION = "STATUS_CORRECTION"
    DATE_CORRECTION = "DATE_CORRECTION"
    COST_IMPUTATION = "COST_IMPUTATION"
    UTILIZATION_IMPUTATION = "UTILIZATION_IMPUTATION"
    UTILIZATION_CAPPING = "UTILIZATION_CAPPING"
    NEGATIVE_COST = "NEGATIVE_COST"
    MISSING_CLIENT_NAME = "MISSING_CLIENT_NAME"
    BLANK_PROJECT_NAME = "BLANK_PROJECT_NAME"
    MISSING_DELAY_AND_STATUS = "MISSING_DELAY_AND_STATUS"


class RemediationError(Exception):
    """Raised when a record cannot be turned into a clean record."""

    def __init__(self, project_id: str, message: str, rule_id: str | None = None):
        self.project_id = project_id
        self.message = message
        self.rule_id = rule_id
        prefix = f"[{rule_id}] " if rule_id else ""
        super().__init__(f"{prefix}{project_id}: {message}")

    @property
    def error_type(self) -> str:
        return type(self).__name__


class MissingImputationBasis(RemediationError):
    """A corrector's statistic or source field is itself absent."""

    def __init__(self, rule_id: str, project_id: str, field_name: str, message: str):
        self.field_name = field_name
        super().__init__(project_id, message, rule_id=rule_id)


class AmbiguousDuplicate(RemediationError):
    """Raw rows share a project_id but disagree on other fields."""

    def __init__(self, project_id: str, differing_fields: list[str], occurrences: int):
        self.differing_fields = differing_fields
        self.occurrences = occurrences
        super().__init__(
            project_id,
            f"{occurrences} rows share this project_id but disagree on: {', '.join(differing_fields)}",
            rule_id=RuleId.DUPLICATE_SUPPRESSION.value,
        )


class UnknownServiceLine(RemediationError):
    """A record references a service line missing from the reference table."""

    def __init__(self, project_id: str, service_line_id: int):
        self.service_line_id = service_line_id
        super().__init__(project_id, f"service_line_id {service_line_id} is not in the reference table")


class ConflictingCorrections(RemediationError):
    """Two rules tried to change the same field of one record."""

    def __init__(self, project_id: str, field_name: str, rule_ids: list[str]):
        self.field_name = field_name
        self.rule_ids = rule_ids
        super().__init__(project_id, f"{field_name} changed by more than one rule: {', '.join(rule_ids)}")


class RecordRejected(RemediationError):
    """Aggregate of every error raised while remediating a single record."""

    def __init__(self, project_id: str, errors: list[RemediationError]):
        self.errors = errors
        super().__init__(project_id, "; ".join(error.message for error in errors))


class Correction(BaseModel):
    """
    Output of a corrector.

    Attributes:
        rule_id: Rule that produced the correction
        changes: New values keyed by field name
        justification: Human-readable reason, stored in the quality note
    """

    rule_id: RuleId
    changes: dict[str, Any] = Field(..., min_length=1)
    justification: str = Field(..., min_length=1)

    class Config:
        frozen = True


CENT = Decimal("0.01")
ONE_DECIMAL = Decimal("0.1")


def quantize(value: Decimal, step: Decimal) -> Decimal:
    """Round half-up to the given step, as a DECIMAL column would store it."""
    return value.quantize(step, rounding=ROUND_HALF_UP)


class BaseRule(ABC):
    """
    Abstract base class for all remediation rules.

    Subclasses set ``rule_id``, ``issue`` (audit label) and ``field_names``
    (the fields the corrector may change).
    """

    rule_id: RuleId
    issue: str
    field_names: tuple[str, ...] = ()

    def __init__(self, parameters: dict[str, Any] | None = None):
        """
        Initialize rule.

        Args:
            parameters: Rule-specific parameters (e.g., tolerance_pct)
        """
        self.parameters = parameters or {}

    @abstractmethod
    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        """
        Decide whether this rule applies to a record.

        Args:
            record: Raw record (read only)
            stats: Statistics computed from the raw snapshot

        Returns:
            True if the record needs this correction
        """
        pass

    @abstractmethod
    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        """
        Compute the repaired value(s) for a record the detector flagged.

        Args:
            record: Raw record (read only)
            stats: Statistics computed from the raw snapshot

        Returns:
            Correction with the new field values and a justification

        Raises:
            MissingImputationBasis: If a required statistic or source field is absent
        """
        pass

    def _correction(self, changes: dict[str, Any], justification: str) -> Correction:
        return Correction(rule_id=self.rule_id, changes=changes, justification=justification)

    def _missing(self, record: RawProjectRecord, field_name: str, message: str) -> MissingImputationBasis:
        return MissingImputationBasis(self.rule_id.value, record.project_id, field_name, message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rule_id={self.rule_id.value}, params={self.parameters})"
