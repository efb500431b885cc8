"""
CleaningResult model representing the outcome of one remediation run (ephemeral).
"""

from collections import Counter

from pydantic import BaseModel, Field

from .audit_issue import AuditIssue
from .clean_project import CleanProjectRecord
from .quarantine_record import QuarantineRecord


class CleaningResult(BaseModel):
    """
    Output of RemediationEngine.clean().

    Attributes:
        total_records: Raw rows received
        clean_records: One record per logical project that could be repaired
        quarantined: Per-record faults; rows here are absent from clean_records
        duplicates_removed: Raw rows dropped by duplicate suppression
        warnings: Advisory findings that were reported but not corrected
    """

    total_records: int = Field(0, ge=0)
    clean_records: list[CleanProjectRecord] = Field(default_factory=list)
    quarantined: list[QuarantineRecord] = Field(default_factory=list)
    duplicates_removed: int = Field(0, ge=0)
    warnings: list[AuditIssue] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True when every logical project produced a clean record."""
        return not self.quarantined

    @property
    def corrected_count(self) -> int:
        return sum(1 for record in self.clean_records if record.corrected)

    def corrections_by_rule(self) -> dict[str, int]:
        """Count of applied corrections per rule id."""
        counts = Counter(
            rule_id
            for record in self.clean_records
            for rule_id in record.applied_rules
        )
        return dict(sorted(counts.items()))

    def get(self, project_id: str) -> CleanProjectRecord | None:
        for record in self.clean_records:
            if record.project_id == project_id:
                return record
        return None
