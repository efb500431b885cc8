"""
Statistics models holding dataset-wide reference values used for imputation.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class ServiceLineStats(BaseModel):
    """
    Imputation inputs for one service line, computed from raw data only.

    Attributes:
        service_line_id: Service line these averages describe
        avg_cost_overrun_pct: Mean of present cost_overrun_pct values (None if none present)
        avg_utilization_pct: Mean of present utilization_pct values (None if none present)
        overrun_sample_size: Number of values behind avg_cost_overrun_pct
        utilization_sample_size: Number of values behind avg_utilization_pct
    """

    service_line_id: int
    avg_cost_overrun_pct: Decimal | None = None
    avg_utilization_pct: Decimal | None = None
    overrun_sample_size: int = Field(0, ge=0)
    utilization_sample_size: int = Field(0, ge=0)

    class Config:
        frozen = True


class DatasetStatistics(BaseModel):
    """
    Reference values for a whole raw snapshot.

    Never persisted with the clean records.

    Attributes:
        service_lines: Per service line statistics keyed by service_line_id
        overrun_mean: Global mean of present cost_overrun_pct values
        overrun_stddev: Global population standard deviation of cost_overrun_pct
        record_count: Raw rows the statistics were computed from
    """

    service_lines: dict[int, ServiceLineStats] = Field(default_factory=dict)
    overrun_mean: Decimal | None = None
    overrun_stddev: Decimal | None = None
    record_count: int = Field(0, ge=0)

    def for_service_line(self, service_line_id: int | None) -> ServiceLineStats:
        """Statistics for a service line; an empty entry when no raw row belongs to it."""
        if service_line_id is not None and service_line_id in self.service_lines:
            return self.service_lines[service_line_id]
        return ServiceLineStats(service_line_id=service_line_id or 0)

    class Config:
        frozen = True
