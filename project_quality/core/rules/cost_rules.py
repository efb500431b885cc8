"""
Cost rules: overrun recomputation, actual-cost imputation and negative-cost correction.
"""

from decimal import Decimal

from project_quality.core.models import DatasetStatistics, RawProjectRecord

from .base_rule import CENT, ONE_DECIMAL, BaseRule, Correction, RuleId, quantize


def calculate_overrun_pct(planned_cost: Decimal, actual_cost: Decimal) -> Decimal:
    """
    Overrun of actual against planned cost, in percent.

    The planned cost is taken by magnitude so a sign-flipped budget does not
    distort the percentage. Actual cost is taken by magnitude too.
    """
    planned = abs(planned_cost)
    return (abs(actual_cost) - planned) / planned * Decimal(100)


class OverrunRecomputationRule(BaseRule):
    """
    Replaces a recorded cost_overrun_pct that disagrees with the costs.

    Parameters:
    - tolerance_pct: Allowed gap in percentage points before correcting (default 1.0)

    Fires when both costs are present, the planned cost is non-zero, and the
    recorded overrun is absent or deviates from the calculated value by more
    than the tolerance.
    """

    rule_id = RuleId.OVERRUN_RECOMPUTATION
    issue = "Cost Overrun Pct Mismatch"
    field_names = ("cost_overrun_pct",)

    def __init__(self, parameters=None):
        super().__init__(parameters)
        self.tolerance = Decimal(str(self.parameters.get("tolerance_pct", "1.0")))
        if self.tolerance < 0:
            raise ValueError("tolerance_pct must be non-negative")

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        if record.planned_cost_eur is None or record.actual_cost_eur is None:
            return False
        if record.planned_cost_eur == 0:
            return False
        if record.cost_overrun_pct is None:
            return True
        calculated = calculate_overrun_pct(record.planned_cost_eur, record.actual_cost_eur)
        return abs(record.cost_overrun_pct - calculated) > self.tolerance

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        calculated = quantize(
            calculate_overrun_pct(record.planned_cost_eur, record.actual_cost_eur),
            ONE_DECIMAL,
        )
        if record.cost_overrun_pct is None:
            justification = (
                f"cost_overrun_pct missing; calculated as {calculated}% from actual vs planned costs"
            )
        else:
            justification = (
                f"cost_overrun_pct corrected from {record.cost_overrun_pct}% to {calculated}%, "
                "recalculated from actual vs planned costs"
            )
        return self._correction({"cost_overrun_pct": calculated}, justification)


class CostImputationRule(BaseRule):
    """
    Imputes an absent actual_cost_eur from the service line's average overrun.

    actual = |planned| * (1 + avg_overrun / 100), rounded to cents; the
    overrun is set to the same average so the record stays self-consistent.
    """

    rule_id = RuleId.COST_IMPUTATION
    issue = "NULL Actual Cost"
    field_names = ("actual_cost_eur", "cost_overrun_pct")

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        return record.actual_cost_eur is None

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        if record.planned_cost_eur is None:
            raise self._missing(
                record, "planned_cost_eur",
                "actual_cost_eur cannot be imputed: planned_cost_eur is absent",
            )
        if record.planned_cost_eur == 0:
            raise self._missing(
                record, "planned_cost_eur",
                "actual_cost_eur cannot be imputed: planned_cost_eur is zero",
            )

        line_stats = stats.for_service_line(record.service_line_id)
        average = line_stats.avg_cost_overrun_pct
        if average is None:
            raise self._missing(
                record, "cost_overrun_pct",
                f"actual_cost_eur cannot be imputed: service line {record.service_line_id} "
                "has no recorded cost_overrun_pct to average",
            )

        planned = abs(record.planned_cost_eur)
        imputed = quantize(planned * (Decimal(1) + average / Decimal(100)), CENT)
        overrun = quantize(average, ONE_DECIMAL)
        return self._correction(
            {"actual_cost_eur": imputed, "cost_overrun_pct": overrun},
            f"actual_cost_eur missing; imputed as {imputed} using service line "
            f"{record.service_line_id} average overrun {overrun}%",
        )


class NegativeCostRule(BaseRule):
    """
    Negates cost values entered with the wrong sign.

    Covers planned_cost_eur and actual_cost_eur; costs can never be negative.
    """

    rule_id = RuleId.NEGATIVE_COST
    issue = "Negative Cost"
    field_names = ("planned_cost_eur", "actual_cost_eur")

    def _negative_fields(self, record: RawProjectRecord) -> list[str]:
        return [
            field_name
            for field_name in self.field_names
            if getattr(record, field_name) is not None and getattr(record, field_name) < 0
        ]

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        return bool(self._negative_fields(record))

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        changes = {}
        parts = []
        for field_name in self._negative_fields(record):
            value = getattr(record, field_name)
            changes[field_name] = abs(value)
            parts.append(f"{field_name} corrected from {value} to {abs(value)}")
        return self._correction(
            changes,
            "; ".join(parts) + " (negative cost is impossible, sign error on data entry)",
        )
