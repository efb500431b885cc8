"""
QuarantineRecord model representing raw project rows the engine could not repair.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator


class QuarantineRecord(BaseModel):
    """
    A raw project row rejected by the remediation engine, with error context.

    Attributes:
        project_id: Project key of the rejected row
        raw_payload: Raw field values as received
        failed_rules: Rule ids (or error kinds) that could not be satisfied
        error_messages: Corresponding error messages
        error_type: Exception class that rejected the row
        quarantined_at: When the row was rejected
    """

    project_id: str
    raw_payload: dict[str, Any]
    failed_rules: list[str] = Field(..., min_length=1)
    error_messages: list[str] = Field(..., min_length=1)
    error_type: str | None = None
    quarantined_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('error_messages')
    @classmethod
    def check_arrays_same_length(cls, v, info):
        """Validate that failed_rules and error_messages have the same length."""
        failed_rules = info.data.get('failed_rules', [])
        if len(v) != len(failed_rules):
            raise ValueError(
                f"error_messages length ({len(v)}) must match failed_rules length ({len(failed_rules)})"
            )
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "project_id": "PRJ_030",
                "raw_payload": {
                    "project_id": "PRJ_030",
                    "planned_cost_eur": None,
                    "actual_cost_eur": None
                },
                "failed_rules": ["COST_IMPUTATION"],
                "error_messages": [
                    "actual_cost_eur cannot be imputed: planned_cost_eur is absent"
                ],
                "error_type": "MissingImputationBasis"
            }
        }
