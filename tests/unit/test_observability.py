"""
Unit tests for structured logging and Prometheus metrics helpers.
"""

import io
import json
import logging

import pytest

from project_quality.observability import metrics
from project_quality.observability.logger import get_logger, log_operation, setup_logger


@pytest.mark.unit
class TestLogger:
    """Tests for JSON logging"""

    def test_json_log_record(self, capsys):
        logger = setup_logger("project-quality.test.json", level="INFO", format_type="json")
        logger.info("Loaded 26 project rows", extra={"rows": 26})

        entry = json.loads(capsys.readouterr().err.strip())
        assert entry["message"] == "Loaded 26 project rows"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "project-quality.test.json"
        assert entry["rows"] == 26

    def test_level_filtering(self, capsys):
        logger = setup_logger("project-quality.test.level", level="WARNING", format_type="json")
        logger.info("hidden")
        logger.warning("shown")

        lines = capsys.readouterr().err.strip().splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["shown"]

    def test_get_logger_reuses_handlers(self):
        first = get_logger("project-quality.test.reuse")
        second = get_logger("project-quality.test.reuse")
        assert first is second
        assert len(second.handlers) == 1

    def test_log_operation_success(self, capsys):
        logger = setup_logger("project-quality.test.op", level="INFO", format_type="json")
        with log_operation("Remediating records", logger=logger, record_count=3):
            pass

        entries = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        assert entries[0]["message"] == "Starting: Remediating records"
        assert entries[1]["status"] == "success"
        assert entries[1]["record_count"] == 3
        assert "duration_seconds" in entries[1]

    def test_log_operation_failure_propagates(self, capsys):
        logger = setup_logger("project-quality.test.fail", level="INFO", format_type="json")
        with pytest.raises(KeyError):
            with log_operation("Loading", logger=logger):
                raise KeyError("project_id")

        failed = json.loads(capsys.readouterr().err.strip().splitlines()[1])
        assert failed["status"] == "error"
        assert failed["error_type"] == "KeyError"

    def test_log_operation_keeps_duration(self):
        logger = setup_logger("project-quality.test.duration", level="ERROR", format_type="json")
        with log_operation("Validating", logger=logger) as operation:
            pass
        assert operation.duration_seconds is not None
        assert operation.duration_seconds >= 0

    def test_json_record_location_and_timestamp(self):
        stream = io.StringIO()
        logger = setup_logger("project-quality.test.stream", level="INFO", format_type="json", stream=stream)
        logger.warning("Record rejected", extra={"project_id": "PRJ_030"})

        entry = json.loads(stream.getvalue())
        assert entry["project_id"] == "PRJ_030"
        assert entry["location"].startswith("test_observability:test_json_record_location_and_timestamp:")
        assert entry["timestamp"].endswith("+00:00")

    def test_text_format_and_unknown_level(self):
        stream = io.StringIO()
        logger = setup_logger("project-quality.test.text", level="verbose", format_type="text", stream=stream)
        logger.info("Loaded 3 service lines")

        assert logger.level == logging.INFO
        assert "INFO" in stream.getvalue()
        assert "project-quality.test.text" in stream.getvalue()


@pytest.mark.unit
class TestMetrics:
    """Tests for metrics helpers"""

    def test_increment_counter_with_labels(self):
        before = metrics.REGISTRY.get_sample_value(
            "remediation_corrections_applied_total", {"rule_id": "NEGATIVE_COST"}
        ) or 0
        metrics.increment_counter(metrics.corrections_applied_total, 2, rule_id="NEGATIVE_COST")

        assert metrics.REGISTRY.get_sample_value(
            "remediation_corrections_applied_total", {"rule_id": "NEGATIVE_COST"}
        ) == before + 2

    def test_record_remediation_failure(self):
        labels = {"rule_id": "COST_IMPUTATION", "error_type": "MissingImputationBasis"}
        before = metrics.REGISTRY.get_sample_value("remediation_failures_total", labels) or 0
        metrics.record_remediation_failure("COST_IMPUTATION", "MissingImputationBasis")

        assert metrics.REGISTRY.get_sample_value("remediation_failures_total", labels) == before + 1

    def test_record_cleaning_run_failure(self):
        before = metrics.REGISTRY.get_sample_value("remediation_pipeline_runs_total", {"status": "failure"}) or 0
        metrics.record_cleaning_run(clean_records=24, violations=0, rejected=1)

        assert metrics.REGISTRY.get_sample_value("remediation_clean_dataset_size") == 24
        assert metrics.REGISTRY.get_sample_value("remediation_pipeline_runs_total", {"status": "failure"}) == before + 1

    def test_track_duration(self):
        labels = {"phase": "statistics"}
        before = metrics.REGISTRY.get_sample_value("remediation_pipeline_duration_seconds_count", labels) or 0
        with metrics.track_duration(metrics.pipeline_duration_seconds, phase="statistics"):
            pass

        assert metrics.REGISTRY.get_sample_value("remediation_pipeline_duration_seconds_count", labels) == before + 1

    def test_observe_histogram(self):
        labels = {"phase": "validation"}
        before = metrics.REGISTRY.get_sample_value("remediation_pipeline_duration_seconds_sum", labels) or 0
        metrics.observe_histogram(metrics.pipeline_duration_seconds, 0.25, phase="validation")

        assert metrics.REGISTRY.get_sample_value(
            "remediation_pipeline_duration_seconds_sum", labels
        ) == pytest.approx(before + 0.25)

    def test_write_metrics(self, tmp_path):
        path = tmp_path / "project_quality.prom"
        metrics.write_metrics(str(path))

        content = path.read_text()
        assert "remediation_records_processed_total" in content
