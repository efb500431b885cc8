"""
CleanProjectRecord model representing a validated, analysis-ready project row.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from .raw_project import RawProjectRecord

CLEAN_RULE_ID = "CLEAN"
CLEAN_JUSTIFICATION = "Clean record"


class QualityNote(BaseModel):
    """
    One entry of a record's data-quality trail.

    Attributes:
        rule_id: Rule that produced the correction (or the CLEAN sentinel)
        justification: Human-readable reason for the change
    """

    rule_id: str = Field(..., min_length=1)
    justification: str

    class Config:
        frozen = True


CLEAN_NOTE = QualityNote(rule_id=CLEAN_RULE_ID, justification=CLEAN_JUSTIFICATION)


class CleanProjectRecord(BaseModel):
    """
    One row per logical project after remediation.

    Every field is present. Range and consistency invariants are checked by
    the InvariantValidator rather than by the model, so a defective rule
    surfaces as a reported violation instead of a construction error.

    Attributes:
        data_quality_note: Ordered (rule_id, justification) entries, or the
                           single CLEAN sentinel when no rule fired
    """

    project_id: str = Field(..., min_length=1)
    project_name: str
    service_line_id: int
    client_name: str
    start_date: date
    planned_end_date: date
    actual_end_date: date
    planned_duration_months: int
    team_size: int
    planned_cost_eur: Decimal
    actual_cost_eur: Decimal
    cost_overrun_pct: Decimal
    utilization_pct: Decimal
    delay_days: int
    status: str
    data_quality_note: list[QualityNote] = Field(default_factory=lambda: [CLEAN_NOTE])

    @property
    def corrected(self) -> bool:
        """Whether any rule changed this record."""
        return any(note.rule_id != CLEAN_RULE_ID for note in self.data_quality_note)

    @property
    def applied_rules(self) -> list[str]:
        return [note.rule_id for note in self.data_quality_note if note.rule_id != CLEAN_RULE_ID]

    def note_text(self) -> str:
        """Render the quality trail as a single line, as stored in flat tables."""
        return ". ".join(
            note.justification if note.rule_id == CLEAN_RULE_ID else f"{note.rule_id}: {note.justification}"
            for note in self.data_quality_note
        )

    def to_raw(self) -> RawProjectRecord:
        """Convert back to a raw record so a clean dataset can be re-run through the engine."""
        return RawProjectRecord(**self.model_dump(exclude={"data_quality_note"}))

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "project_id": "PRJ_011",
                "project_name": "API Development & Integration",
                "service_line_id": 1,
                "client_name": "Client_Iota",
                "start_date": "2024-04-10",
                "planned_end_date": "2024-09-10",
                "actual_end_date": "2024-09-10",
                "planned_duration_months": 5,
                "team_size": 4,
                "planned_cost_eur": "240000.00",
                "actual_cost_eur": "264000.00",
                "cost_overrun_pct": "10.0",
                "utilization_pct": "100",
                "delay_days": 0,
                "status": "On-Time",
                "data_quality_note": [
                    {
                        "rule_id": "UTILIZATION_CAPPING",
                        "justification": "utilization_pct capped from 112 to 100"
                    }
                ]
            }
        }
