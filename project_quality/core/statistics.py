"""
Aggregate statistics provider.

Computes the reference values some correctors depend on (service-line average
overrun and utilisation, global overrun mean and standard deviation). The
statistics are always taken from the untouched raw snapshot so that imputed
values never feed back into other imputations.
"""

import statistics
from collections import defaultdict
from collections.abc import Iterable, Mapping
from decimal import Decimal

from project_quality.core.models import (
    DatasetStatistics,
    RawProjectRecord,
    ServiceLine,
    ServiceLineStats,
)
from project_quality.observability.logger import get_logger

logger = get_logger(__name__)


def _mean(values: list[Decimal]) -> Decimal | None:
    """Arithmetic mean, or None for an empty sample."""
    if not values:
        return None
    return sum(values, Decimal(0)) / Decimal(len(values))


def compute_statistics(
    raw_records: Iterable[RawProjectRecord],
    service_lines: Mapping[int, ServiceLine] | None = None,
) -> DatasetStatistics:
    """
    Compute imputation statistics from a raw snapshot.

    Absent values are excluded from every average rather than counted as zero.
    Rows are taken as received, duplicates included.

    Args:
        raw_records: Raw project rows (not modified)
        service_lines: Optional reference table; every listed service line gets
                       an entry even when no row belongs to it

    Returns:
        DatasetStatistics with per service line averages and the global
        overrun mean / population standard deviation
    """
    overruns: dict[int, list[Decimal]] = defaultdict(list)
    utilizations: dict[int, list[Decimal]] = defaultdict(list)
    all_overruns: list[Decimal] = []
    seen_lines: set[int] = set(service_lines or {})
    record_count = 0

    for record in raw_records:
        record_count += 1
        line_id = record.service_line_id

        if record.cost_overrun_pct is not None:
            all_overruns.append(record.cost_overrun_pct)

        if line_id is None:
            continue

        seen_lines.add(line_id)
        if record.cost_overrun_pct is not None:
            overruns[line_id].append(record.cost_overrun_pct)
        if record.utilization_pct is not None:
            utilizations[line_id].append(record.utilization_pct)

    per_line = {
        line_id: ServiceLineStats(
            service_line_id=line_id,
            avg_cost_overrun_pct=_mean(overruns[line_id]),
            avg_utilization_pct=_mean(utilizations[line_id]),
            overrun_sample_size=len(overruns[line_id]),
            utilization_sample_size=len(utilizations[line_id]),
        )
        for line_id in sorted(seen_lines)
    }

    overrun_stddev = statistics.pstdev(all_overruns) if all_overruns else None

    result = DatasetStatistics(
        service_lines=per_line,
        overrun_mean=_mean(all_overruns),
        overrun_stddev=overrun_stddev,
        record_count=record_count,
    )

    logger.debug(
        "Computed raw snapshot statistics",
        extra={
            "record_count": record_count,
            "service_lines": len(per_line),
            "overrun_sample_size": len(all_overruns),
        },
    )
    return result
