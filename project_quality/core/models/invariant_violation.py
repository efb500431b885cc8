"""
InvariantViolation model representing a post-condition failed by a clean record.
"""

from pydantic import BaseModel


class InvariantViolation(BaseModel):
    """
    One failing (record, invariant) pair reported by the InvariantValidator.

    Attributes:
        kind: Invariant identifier ("utilization_range", "unique_project_id", ...)
        project_id: Offending record
        field_name: Field that broke the invariant
        detail: Human-readable description
    """

    kind: str
    project_id: str
    field_name: str | None = None
    detail: str

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "kind": "utilization_range",
                "project_id": "PRJ_011",
                "field_name": "utilization_pct",
                "detail": "Value 112.00 exceeds maximum 100"
            }
        }
