"""
ServiceLine model representing a row of the fixed service-line reference table.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ServiceLine(BaseModel):
    """
    Reference row for a consulting service line.

    Service lines partition the dataset for imputation statistics.

    Attributes:
        service_line_id: Primary key referenced by project records
        service_line_name: Display name ("Analytics")
        complexity_level: Delivery complexity band
        typical_duration_months: Usual engagement length
        typical_team_size: Usual number of consultants
    """

    service_line_id: int = Field(..., gt=0)
    service_line_name: str = Field(..., min_length=1)
    complexity_level: Literal["Low", "Medium", "High"] = "Medium"
    typical_duration_months: int | None = None
    typical_team_size: int | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "service_line_id": 2,
                "service_line_name": "Analytics",
                "complexity_level": "Medium",
                "typical_duration_months": 4,
                "typical_team_size": 4
            }
        }


DEFAULT_SERVICE_LINES: dict[int, ServiceLine] = {
    line.service_line_id: line
    for line in (
        ServiceLine(
            service_line_id=1,
            service_line_name="Technology Consulting",
            complexity_level="Medium",
            typical_duration_months=6,
            typical_team_size=6,
        ),
        ServiceLine(
            service_line_id=2,
            service_line_name="Analytics",
            complexity_level="Medium",
            typical_duration_months=4,
            typical_team_size=4,
        ),
        ServiceLine(
            service_line_id=3,
            service_line_name="Process Transformation",
            complexity_level="High",
            typical_duration_months=8,
            typical_team_size=9,
        ),
    )
}
