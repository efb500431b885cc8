"""
Batch data-quality pipeline orchestration.

Coordinates the flow: read → statistics → remediate → validate → write
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field
from pyspark.sql import SparkSession

from project_quality.batch.readers import ProjectRecordLoader
from project_quality.batch.writers import CleanRecordWriter, QuarantineWriter
from project_quality.core.models import (
    AuditIssue,
    CleaningResult,
    CleanProjectRecord,
    DatasetStatistics,
    InvariantViolation,
    RawProjectRecord,
    ServiceLine,
)
from project_quality.core.rules import RemediationConfigLoader, RemediationEngine, RemediationSettings
from project_quality.core.statistics import compute_statistics
from project_quality.core.validators import InvariantValidator, InvariantViolationError
from project_quality.observability import metrics
from project_quality.observability.logger import get_logger, log_operation

logger = get_logger(__name__)


class PipelineResult(BaseModel):
    """
    Outcome of one pipeline run.

    Attributes:
        statistics: Reference values computed from the raw snapshot
        cleaning: Clean records, quarantined records and warnings
        violations: Invariant violations found in the clean records
    """

    statistics: DatasetStatistics
    cleaning: CleaningResult
    violations: list[InvariantViolation] = Field(default_factory=list)

    @property
    def analysis_ready(self) -> bool:
        """True when the clean records satisfy every invariant."""
        return not self.violations

    @property
    def succeeded(self) -> bool:
        """True when every project was cleaned and every invariant holds."""
        return self.analysis_ready and self.cleaning.succeeded

    def analysis_ready_records(self) -> list[CleanProjectRecord]:
        """
        Clean records for downstream analytics.

        Raises:
            InvariantViolationError: If the clean dataset carries violations
        """
        if self.violations:
            raise InvariantViolationError(self.violations)
        return list(self.cleaning.clean_records)

    def summary(self) -> dict[str, Any]:
        return {
            "total_records": self.cleaning.total_records,
            "clean_records": len(self.cleaning.clean_records),
            "corrected_records": self.cleaning.corrected_count,
            "quarantined_records": len(self.cleaning.quarantined),
            "duplicate_records": self.cleaning.duplicates_removed,
            "warnings": len(self.cleaning.warnings),
            "violations": len(self.violations),
            "corrections_by_rule": self.cleaning.corrections_by_rule(),
            "analysis_ready": self.analysis_ready,
        }


class DataQualityPipeline:
    """
    Orchestrates the data-quality remediation pipeline.

    Flow:
    1. Compute statistics from the raw snapshot
    2. Deduplicate and remediate every project
    3. Quarantine records that cannot be repaired
    4. Check the clean records against the invariants
    """

    def __init__(
        self,
        settings: Optional[RemediationSettings] = None,
        service_lines: Optional[Mapping[int, ServiceLine]] = None,
        config_path: Optional[str] = None,
        spark: Optional[SparkSession] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Remediation settings; loaded from config_path when omitted
            service_lines: Service-line reference table (standard table when omitted)
            config_path: Path to remediation YAML file
            spark: Spark session, needed only for file input and csv/parquet output
        """
        if settings is None and config_path is not None:
            settings = RemediationConfigLoader(config_path).load_settings()
            logger.info(f"Loaded remediation settings from {config_path}")

        self.settings = settings or RemediationSettings()
        self.spark = spark
        self.engine = RemediationEngine(self.settings, service_lines)
        self.validator = InvariantValidator(self.settings.minor_delay_max_days)

    @property
    def service_lines(self) -> dict[int, ServiceLine]:
        return self.engine.service_lines

    def run(self, raw_records: Iterable[RawProjectRecord]) -> PipelineResult:
        """
        Clean and validate a raw dataset.

        Args:
            raw_records: Raw rows in input order

        Returns:
            PipelineResult
        """
        raw_records = list(raw_records)

        with log_operation("Data-quality run", logger=logger, record_count=len(raw_records)):
            with metrics.track_duration(metrics.pipeline_duration_seconds, phase="statistics"):
                stats = compute_statistics(raw_records, self.service_lines)

            with metrics.track_duration(metrics.pipeline_duration_seconds, phase="remediation"):
                cleaning = self.engine.clean(raw_records, stats)
            logger.info(
                f"Remediation complete: {len(cleaning.clean_records)} clean, "
                f"{len(cleaning.quarantined)} quarantined, {cleaning.duplicates_removed} duplicates removed"
            )

            with metrics.track_duration(metrics.pipeline_duration_seconds, phase="validation"):
                violations = self.validator.validate(cleaning.clean_records)

        metrics.record_cleaning_run(
            clean_records=len(cleaning.clean_records),
            violations=len(violations),
            rejected=len(cleaning.quarantined),
        )
        return PipelineResult(statistics=stats, cleaning=cleaning, violations=violations)

    def audit(self, raw_records: Iterable[RawProjectRecord]) -> list[AuditIssue]:
        """
        Report every issue in a raw dataset without correcting anything.

        Args:
            raw_records: Raw rows in input order

        Returns:
            List of AuditIssue
        """
        raw_records = list(raw_records)
        stats = compute_statistics(raw_records, self.service_lines)
        issues = self.engine.audit(raw_records, stats)
        for issue in issues:
            metrics.increment_counter(metrics.audit_issues_total, issue_type=issue.issue_type, severity=issue.severity)
        return issues

    def validate(self, clean_records: Iterable[CleanProjectRecord]) -> list[InvariantViolation]:
        """Check an already-cleaned dataset against the invariants."""
        return self.validator.validate(clean_records)

    def load(
        self,
        file_path: str,
        file_format: Optional[str] = None,
        service_lines_path: Optional[str] = None,
    ) -> tuple[list[RawProjectRecord], ProjectRecordLoader]:
        """
        Read raw rows (and optionally the service-line table) through Spark.

        Returns:
            Tuple of (raw records, loader holding unparseable rows)

        Raises:
            ValueError: If no Spark session was provided
            FileNotFoundError: If an input file does not exist
        """
        if self.spark is None:
            raise ValueError("Reading files requires a Spark session")
        for path in filter(None, (file_path, service_lines_path)):
            if not Path(path).exists():
                raise FileNotFoundError(f"Input file not found: {path}")

        loader = ProjectRecordLoader(self.spark)
        if service_lines_path:
            self.engine = RemediationEngine(self.settings, loader.load_service_lines(service_lines_path))
        return loader.load_projects(file_path, file_format=file_format), loader

    def process_file(
        self,
        file_path: str,
        file_format: Optional[str] = None,
        service_lines_path: Optional[str] = None,
        output_path: Optional[str] = None,
        output_format: str = "jsonl",
        quarantine_path: Optional[str] = None,
    ) -> PipelineResult:
        """
        Process a file through the complete pipeline.

        Args:
            file_path: Path to raw projects file
            file_format: csv, json or parquet; detected from the extension when omitted
            service_lines_path: Optional service-line reference file
            output_path: Where to write clean records (not written when omitted)
            output_format: jsonl, csv or parquet
            quarantine_path: Where to append quarantined records (not written when omitted)

        Returns:
            PipelineResult; rows that could not be parsed are included in the quarantine
        """
        logger.info(f"Starting data-quality processing for file: {file_path}")

        raw_records, loader = self.load(file_path, file_format, service_lines_path)
        result = self.run(raw_records)

        if loader.unparseable:
            cleaning = result.cleaning.model_copy(update={
                "total_records": result.cleaning.total_records + len(loader.unparseable),
                "quarantined": loader.unparseable + result.cleaning.quarantined,
            })
            result = result.model_copy(update={"cleaning": cleaning})

        if output_path:
            CleanRecordWriter(self.spark).write(result.cleaning.clean_records, output_path, output_format)

        if quarantine_path:
            QuarantineWriter(quarantine_path).write_batch(result.cleaning.quarantined)

        logger.info("Data-quality processing complete", extra=result.summary())
        return result
