"""
Unit tests for invariant validators.

Includes property-based testing with hypothesis for validators.
"""

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from project_quality.core.models import CleanProjectRecord
from project_quality.core.validators import (
    DateOrderValidator,
    InvariantValidator,
    InvariantViolationError,
    RangeValidator,
    RequiredFieldValidator,
    StatusConsistencyValidator,
    ValidationError,
)


def _clean(**overrides) -> CleanProjectRecord:
    values = {
        "project_id": "PRJ_001",
        "project_name": "Customer Analytics Dashboard",
        "service_line_id": 2,
        "client_name": "Client_Alpha",
        "start_date": date(2024, 1, 15),
        "planned_end_date": date(2024, 5, 14),
        "actual_end_date": date(2024, 5, 14),
        "planned_duration_months": 4,
        "team_size": 4,
        "planned_cost_eur": Decimal("192000.00"),
        "actual_cost_eur": Decimal("201600.00"),
        "cost_overrun_pct": Decimal("5.00"),
        "utilization_pct": Decimal("82.50"),
        "delay_days": 0,
        "status": "On-Time",
    }
    values.update(overrides)
    return CleanProjectRecord(**values)


@pytest.mark.unit
class TestRequiredFieldValidator:
    """Tests for RequiredFieldValidator"""

    def test_valid_required_field(self):
        """Test validation passes for present field"""
        record = _clean()
        RequiredFieldValidator("client_name").validate(record.client_name, record)  # Should not raise

    def test_null_field_raises_error(self):
        """Test validation fails for null field"""
        with pytest.raises(ValidationError) as exc_info:
            RequiredFieldValidator("client_name").validate(None, _clean())

        assert "null" in str(exc_info.value).lower()
        assert exc_info.value.field_name == "client_name"

    def test_empty_string_raises_error(self):
        """Test validation fails for whitespace-only string"""
        record = _clean(project_name="   ")
        with pytest.raises(ValidationError) as exc_info:
            RequiredFieldValidator("project_name").validate(record.project_name, record)

        assert "empty" in str(exc_info.value).lower()

    @given(st.text(min_size=1).filter(lambda s: s.strip() != ""))
    def test_non_empty_strings_pass(self, value):
        """Property: any non-blank string passes"""
        RequiredFieldValidator("project_name").validate(value, None)


@pytest.mark.unit
class TestRangeValidator:
    """Tests for RangeValidator"""

    def test_within_range(self):
        RangeValidator("utilization_pct", {"min": 0, "max": 100}).validate(Decimal("82.50"), None)

    def test_above_maximum(self):
        with pytest.raises(ValidationError) as exc_info:
            RangeValidator("utilization_pct", {"min": 0, "max": 100}).validate(Decimal("112"), None)
        assert "exceeds maximum" in str(exc_info.value)

    def test_exclusive_minimum(self):
        """Test zero cost fails a strictly positive constraint"""
        validator = RangeValidator("planned_cost_eur", {"min_exclusive": 0})
        with pytest.raises(ValidationError):
            validator.validate(Decimal("0"), None)
        validator.validate(Decimal("0.01"), None)

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            RangeValidator("delay_days", {"min": 0}).validate("7", None)
        assert "numeric" in str(exc_info.value)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            RangeValidator("delay_days", {"min": 0}).validate(True, None)

    def test_requires_a_bound(self):
        with pytest.raises(ValueError):
            RangeValidator("delay_days", {})

    @given(st.decimals(min_value=0, max_value=100, places=2))
    def test_utilization_range_passes(self, value):
        """Property: every value in [0, 100] passes"""
        RangeValidator("utilization_pct", {"min": Decimal(0), "max": Decimal(100)}).validate(value, None)

    @given(st.integers(max_value=-1))
    def test_negative_delay_fails(self, value):
        """Property: every negative delay fails"""
        with pytest.raises(ValidationError):
            RangeValidator("delay_days", {"min": 0}).validate(value, None)


@pytest.mark.unit
class TestStatusConsistencyValidator:
    """Tests for StatusConsistencyValidator"""

    def test_consistent_status(self):
        record = _clean(delay_days=14, status="Delayed")
        StatusConsistencyValidator().validate(record.status, record)

    def test_non_canonical_status(self):
        record = _clean(status="on time")
        with pytest.raises(ValidationError) as exc_info:
            StatusConsistencyValidator().validate(record.status, record)
        assert "not one of" in str(exc_info.value)

    def test_inconsistent_status(self):
        record = _clean(delay_days=14, status="On-Time")
        with pytest.raises(ValidationError) as exc_info:
            StatusConsistencyValidator().validate(record.status, record)
        assert "expected 'Delayed'" in str(exc_info.value)

    def test_custom_threshold(self):
        record = _clean(delay_days=10, status="Minor Delay")
        StatusConsistencyValidator(parameters={"minor_delay_max_days": 10}).validate(record.status, record)


@pytest.mark.unit
class TestDateOrderValidator:
    """Tests for DateOrderValidator"""

    def test_end_after_start(self):
        record = _clean()
        DateOrderValidator("actual_end_date", {"not_before": "start_date"}).validate(record.actual_end_date, record)

    def test_end_before_start(self):
        record = _clean(actual_end_date=date(2023, 1, 8))
        with pytest.raises(ValidationError) as exc_info:
            DateOrderValidator("actual_end_date", {"not_before": "start_date"}).validate(record.actual_end_date, record)
        assert "before start_date" in str(exc_info.value)

    def test_requires_reference_field(self):
        with pytest.raises(ValueError):
            DateOrderValidator("actual_end_date", {})


@pytest.mark.unit
class TestInvariantValidator:
    """Tests for InvariantValidator"""

    def test_clean_dataset_has_no_violations(self):
        assert InvariantValidator().validate([_clean(), _clean(project_id="PRJ_002")]) == []

    def test_one_violation_per_failing_invariant(self):
        record = _clean(
            utilization_pct=Decimal("112"),
            planned_cost_eur=Decimal("-672000"),
            actual_end_date=date(2023, 1, 8),
            client_name="",
        )
        kinds = {violation.kind for violation in InvariantValidator().validate([record])}
        assert kinds == {"utilization_range", "planned_cost_positive", "date_order", "client_name_required"}

    def test_duplicate_project_ids(self):
        violations = InvariantValidator().validate([_clean(), _clean()])
        assert [v.kind for v in violations] == ["unique_project_id"]
        assert violations[0].project_id == "PRJ_001"

    def test_negative_delay_reported_once(self):
        """Test a negative delay is a range violation, not also a status one"""
        violations = InvariantValidator().validate([_clean(delay_days=-3)])
        assert [v.kind for v in violations] == ["delay_non_negative"]

    def test_validator_does_not_mutate(self):
        record = _clean(utilization_pct=Decimal("112"))
        InvariantValidator().validate([record])
        assert record.utilization_pct == Decimal("112")

    def test_invariant_summary(self):
        summary = InvariantValidator().get_invariant_summary()
        assert summary["unique_project_id"] == "project_id"
        assert summary["status_consistency"] == "status"
        assert len(summary) == 9

    def test_invariant_violation_error(self):
        violations = InvariantValidator().validate([_clean(delay_days=-3)])
        error = InvariantViolationError(violations)
        assert error.violations == violations
        assert "delay_non_negative" in str(error)
