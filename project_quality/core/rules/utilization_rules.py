"""
Utilisation rules: imputation of missing values and clamping into [0, 100].
"""

from decimal import Decimal

from project_quality.core.models import DatasetStatistics, RawProjectRecord

from .base_rule import CENT, BaseRule, Correction, RuleId, quantize

MIN_UTILIZATION = Decimal(0)
MAX_UTILIZATION = Decimal(100)


class UtilizationImputationRule(BaseRule):
    """
    Imputes an absent utilization_pct as the service line's average utilisation.
    """

    rule_id = RuleId.UTILIZATION_IMPUTATION
    issue = "NULL Utilisation"
    field_names = ("utilization_pct",)

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        return record.utilization_pct is None

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        average = stats.for_service_line(record.service_line_id).avg_utilization_pct
        if average is None:
            raise self._missing(
                record, "utilization_pct",
                f"utilization_pct cannot be imputed: service line {record.service_line_id} "
                "has no recorded utilization_pct to average",
            )

        imputed = quantize(average, CENT)
        return self._correction(
            {"utilization_pct": imputed},
            f"utilization_pct missing; imputed as service line {record.service_line_id} average {imputed}%",
        )


class UtilizationCappingRule(BaseRule):
    """
    Clamps utilization_pct into [0, 100].

    Values above 100 usually come from multi-project allocation recording errors.
    """

    rule_id = RuleId.UTILIZATION_CAPPING
    issue = "Impossible Utilisation"
    field_names = ("utilization_pct",)

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        value = record.utilization_pct
        return value is not None and (value > MAX_UTILIZATION or value < MIN_UTILIZATION)

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        value = record.utilization_pct
        if value > MAX_UTILIZATION:
            return self._correction(
                {"utilization_pct": MAX_UTILIZATION},
                f"utilization_pct capped from {value}% to 100% "
                "(exceeds maximum possible, likely multi-project allocation error)",
            )
        return self._correction(
            {"utilization_pct": MIN_UTILIZATION},
            f"utilization_pct raised from {value}% to 0% (negative utilisation is impossible)",
        )
