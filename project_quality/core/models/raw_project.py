"""
RawProjectRecord model representing a project row as received from source systems.
"""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class ProjectStatus(str, Enum):
    """Canonical delivery status values."""

    ON_TIME = "On-Time"
    MINOR_DELAY = "Minor Delay"
    DELAYED = "Delayed"


class RawProjectRecord(BaseModel):
    """
    A project row exactly as received (read once, never mutated).

    Every field except ``project_id`` may be absent. ``None`` means the value
    was not captured and is distinct from zero or an empty string.

    Attributes:
        project_id: Business key; not unique in raw data (duplicates are a defect)
        project_name: Project title; may be empty
        service_line_id: FK into the service-line reference table
        client_name: Client the project was delivered for
        start_date: Project start
        planned_end_date: Contractual end
        actual_end_date: Real end; may precede start_date when mis-keyed
        planned_duration_months: Planned length in months
        team_size: Number of consultants
        planned_cost_eur: Budget; sign not guaranteed
        actual_cost_eur: Spend; sign not guaranteed
        cost_overrun_pct: Overrun as recorded by the PM, not derived
        utilization_pct: Billable utilisation; may lie outside [0, 100]
        delay_days: Days late against planned_end_date
        status: Free-text status, any case or spelling
    """

    project_id: str = Field(..., min_length=1)
    project_name: str | None = None
    service_line_id: int | None = None
    client_name: str | None = None
    start_date: date | None = None
    planned_end_date: date | None = None
    actual_end_date: date | None = None
    planned_duration_months: int | None = None
    team_size: int | None = None
    planned_cost_eur: Decimal | None = None
    actual_cost_eur: Decimal | None = None
    cost_overrun_pct: Decimal | None = None
    utilization_pct: Decimal | None = None
    delay_days: int | None = None
    status: str | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "project_id": "PRJ_003",
                "project_name": "Data Warehouse Modernisation",
                "service_line_id": 2,
                "client_name": "Client_Gamma",
                "start_date": "2024-03-10",
                "planned_end_date": "2024-08-10",
                "actual_end_date": "2024-08-17",
                "planned_duration_months": 5,
                "team_size": 5,
                "planned_cost_eur": "300000.00",
                "actual_cost_eur": None,
                "cost_overrun_pct": None,
                "utilization_pct": None,
                "delay_days": 7,
                "status": "Minor Delay"
            }
        }
