"""
Core data models for the project data-quality pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .audit_issue import AuditIssue
from .clean_project import CLEAN_NOTE, CLEAN_RULE_ID, CleanProjectRecord, QualityNote
from .cleaning_result import CleaningResult
from .invariant_violation import InvariantViolation
from .quarantine_record import QuarantineRecord
from .raw_project import ProjectStatus, RawProjectRecord
from .service_line import DEFAULT_SERVICE_LINES, ServiceLine
from .statistics import DatasetStatistics, ServiceLineStats

__all__ = [
    "RawProjectRecord",
    "ProjectStatus",
    "CleanProjectRecord",
    "QualityNote",
    "CLEAN_NOTE",
    "CLEAN_RULE_ID",
    "ServiceLine",
    "DEFAULT_SERVICE_LINES",
    "ServiceLineStats",
    "DatasetStatistics",
    "QuarantineRecord",
    "InvariantViolation",
    "AuditIssue",
    "CleaningResult",
]
