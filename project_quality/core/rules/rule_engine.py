"""
Remediation engine for turning raw project rows into clean records.

The engine deduplicates the raw rows, applies every enabled rule of the
catalog to each survivor in a single pass, and collects per-record failures
instead of aborting the run.
"""

from collections import OrderedDict
from collections.abc import Iterable, Mapping
from typing import Any

from project_quality.core.models import (
    CLEAN_NOTE,
    AuditIssue,
    CleaningResult,
    CleanProjectRecord,
    DatasetStatistics,
    DEFAULT_SERVICE_LINES,
    QualityNote,
    QuarantineRecord,
    RawProjectRecord,
    ServiceLine,
)
from project_quality.observability import metrics
from project_quality.observability.logger import get_logger

from .advisory import AdvisoryCheck, DelayDateMismatchCheck, NonStandardStatusCheck, OverrunOutlierCheck
from .base_rule import (
    AmbiguousDuplicate,
    BaseRule,
    ConflictingCorrections,
    MissingImputationBasis,
    RecordRejected,
    RemediationError,
    RuleId,
    UnknownServiceLine,
)
from .cost_rules import CostImputationRule, NegativeCostRule, OverrunRecomputationRule
from .date_rules import DateCorrectionRule
from .identity_rules import BlankProjectNameRule, MissingClientNameRule
from .rule_config import RemediationSettings
from .status_rules import MissingDelayAndStatusRule, StatusCorrectionRule
from .utilization_rules import UtilizationCappingRule, UtilizationImputationRule

logger = get_logger(__name__)

# Fields no rule can repair; a clean record cannot be built without them.
REQUIRED_FIELDS = (
    "service_line_id",
    "start_date",
    "planned_end_date",
    "planned_duration_months",
    "team_size",
    "planned_cost_eur",
)
REQUIRED_FIELD_RULE = "REQUIRED_FIELD"


class RemediationEngine:
    """
    Applies the remediation rule catalog to raw project records.

    Rules are evaluated in catalog order and each reads only the raw record,
    so the output does not depend on the order in which rules run.
    """

    RULE_REGISTRY: "OrderedDict[RuleId, type[BaseRule]]" = OrderedDict([
        (RuleId.OVERRUN_RECOMPUTATION, OverrunRecomputationRule),
        (RuleId.STATUS_CORRECTION, StatusCorrectionRule),
        (RuleId.DATE_CORRECTION, DateCorrectionRule),
        (RuleId.COST_IMPUTATION, CostImputationRule),
        (RuleId.UTILIZATION_IMPUTATION, UtilizationImputationRule),
        (RuleId.UTILIZATION_CAPPING, UtilizationCappingRule),
        (RuleId.NEGATIVE_COST, NegativeCostRule),
        (RuleId.MISSING_CLIENT_NAME, MissingClientNameRule),
        (RuleId.BLANK_PROJECT_NAME, BlankProjectNameRule),
        (RuleId.MISSING_DELAY_AND_STATUS, MissingDelayAndStatusRule),
    ])

    def __init__(
        self,
        settings: RemediationSettings | None = None,
        service_lines: Mapping[int, ServiceLine] | None = None,
    ):
        """
        Initialize the remediation engine.

        Args:
            settings: Engine settings (defaults when omitted)
            service_lines: Service-line reference table keyed by id
                           (the three standard service lines when omitted)
        """
        self.settings = settings or RemediationSettings()
        self.service_lines = dict(service_lines) if service_lines is not None else dict(DEFAULT_SERVICE_LINES)
        self.rules: list[BaseRule] = []
        self.advisory_checks: list[AdvisoryCheck] = []
        self._build_rules()

    def _rule_parameters(self, rule_id: RuleId) -> dict[str, Any]:
        """Parameters for a rule, taken from the engine settings."""
        if rule_id is RuleId.OVERRUN_RECOMPUTATION:
            return {"tolerance_pct": self.settings.overrun_tolerance_pct}
        if rule_id in (RuleId.STATUS_CORRECTION, RuleId.MISSING_DELAY_AND_STATUS):
            return {"minor_delay_max_days": self.settings.minor_delay_max_days}
        if rule_id is RuleId.MISSING_CLIENT_NAME:
            return {"placeholder": self.settings.client_placeholder}
        if rule_id is RuleId.BLANK_PROJECT_NAME:
            return {"service_lines": self.service_lines}
        return {}

    def _build_rules(self) -> None:
        """Build rule instances for every enabled catalog entry."""
        for rule_id, rule_class in self.RULE_REGISTRY.items():
            # Skip disabled rules
            if not self.settings.is_enabled(rule_id):
                logger.info(f"Rule disabled by configuration: {rule_id.value}")
                continue

            try:
                self.rules.append(rule_class(self._rule_parameters(rule_id)))
            except ValueError as e:
                raise ValueError(f"Failed to create rule '{rule_id.value}': {e}")

        self.advisory_checks = [
            OverrunOutlierCheck({"sigma": self.settings.outlier_sigma}),
            DelayDateMismatchCheck({"tolerance_days": self.settings.delay_mismatch_tolerance_days}),
            NonStandardStatusCheck(),
        ]

    # =======================
    # DEDUPLICATION
    # =======================

    @staticmethod
    def _group_by_project(raw_records: Iterable[RawProjectRecord]) -> "OrderedDict[str, list[RawProjectRecord]]":
        """Group rows by project_id, preserving first-occurrence order."""
        groups: OrderedDict[str, list[RawProjectRecord]] = OrderedDict()
        for record in raw_records:
            groups.setdefault(record.project_id, []).append(record)
        return groups

    @staticmethod
    def _differing_fields(rows: list[RawProjectRecord]) -> list[str]:
        dumps = [row.model_dump() for row in rows]
        return [
            field_name
            for field_name in dumps[0]
            if any(dump[field_name] != dumps[0][field_name] for dump in dumps[1:])
        ]

    def resolve_duplicates(
        self, project_id: str, rows: list[RawProjectRecord]
    ) -> tuple[RawProjectRecord, QualityNote | None]:
        """
        Pick the surviving row for one project_id.

        Identical duplicates always keep the first occurrence. Duplicates that
        disagree follow ``duplicate_policy``.

        Returns:
            Tuple of (survivor, duplicate note or None for a single row)

        Raises:
            AmbiguousDuplicate: If the rows disagree and the policy is "error"
        """
        if len(rows) == 1:
            return rows[0], None

        differing = self._differing_fields(rows)
        if not differing:
            return rows[0], QualityNote(
                rule_id=RuleId.DUPLICATE_SUPPRESSION.value,
                justification=(
                    f"duplicate row removed; {project_id} appeared {len(rows)} times in raw data, "
                    "first occurrence kept"
                ),
            )

        policy = self.settings.duplicate_policy
        if policy == "error":
            raise AmbiguousDuplicate(project_id, differing, len(rows))

        survivor = rows[0] if policy == "first" else rows[-1]
        return survivor, QualityNote(
            rule_id=RuleId.DUPLICATE_SUPPRESSION.value,
            justification=(
                f"{project_id} appeared {len(rows)} times with conflicting {', '.join(differing)}; "
                f"{policy} occurrence kept per duplicate_policy={policy}"
            ),
        )

    # =======================
    # PER-RECORD REMEDIATION
    # =======================

    def _check_required(self, record: RawProjectRecord) -> list[RemediationError]:
        errors: list[RemediationError] = []
        for field_name in REQUIRED_FIELDS:
            if getattr(record, field_name) is None:
                errors.append(MissingImputationBasis(
                    REQUIRED_FIELD_RULE, record.project_id, field_name,
                    f"{field_name} is absent and no rule can repair it",
                ))
        # NEGATIVE_COST repairs the sign only; a zero cost has no basis for repair
        for field_name in ("planned_cost_eur", "actual_cost_eur"):
            if getattr(record, field_name) == 0:
                errors.append(MissingImputationBasis(
                    REQUIRED_FIELD_RULE, record.project_id, field_name,
                    f"{field_name} is zero and no rule can repair it",
                ))
        if record.service_line_id is not None and record.service_line_id not in self.service_lines:
            errors.append(UnknownServiceLine(record.project_id, record.service_line_id))
        return errors

    def remediate_record(
        self,
        record: RawProjectRecord,
        stats: DatasetStatistics,
        notes: list[QualityNote] | None = None,
    ) -> CleanProjectRecord:
        """
        Apply every matching rule to one deduplicated record.

        Args:
            record: Survivor row for a project
            stats: Statistics computed from the raw snapshot
            notes: Notes already attached (e.g., duplicate suppression)

        Returns:
            CleanProjectRecord with the quality trail

        Raises:
            RecordRejected: If any required correction cannot be computed
        """
        notes = list(notes or [])
        errors = self._check_required(record)
        changes: dict[str, Any] = {}
        changed_by: dict[str, str] = {}

        for rule in self.rules:
            try:
                if not rule.detect(record, stats):
                    continue
                correction = rule.correct(record, stats)
            except RemediationError as e:
                errors.append(e)
                continue

            for field_name, value in correction.changes.items():
                if field_name in changed_by:
                    errors.append(ConflictingCorrections(
                        record.project_id, field_name, [changed_by[field_name], rule.rule_id.value]
                    ))
                    continue
                changed_by[field_name] = rule.rule_id.value
                changes[field_name] = value

            notes.append(QualityNote(rule_id=rule.rule_id.value, justification=correction.justification))

        values = {**record.model_dump(), **changes}

        # Fields left empty because the rule that repairs them is disabled
        unrepaired = [
            field_name
            for field_name, value in values.items()
            if value is None and field_name not in REQUIRED_FIELDS
        ]
        if not errors:
            for field_name in unrepaired:
                errors.append(MissingImputationBasis(
                    REQUIRED_FIELD_RULE, record.project_id, field_name,
                    f"{field_name} is absent and no enabled rule repairs it",
                ))

        if errors:
            raise RecordRejected(record.project_id, errors)

        return CleanProjectRecord(**values, data_quality_note=notes or [CLEAN_NOTE])

    # =======================
    # BATCH OPERATIONS
    # =======================

    def clean(self, raw_records: Iterable[RawProjectRecord], stats: DatasetStatistics) -> CleaningResult:
        """
        Clean a raw dataset.

        Produces exactly one clean record per logical project that can be
        repaired. Records that cannot be repaired are quarantined with every
        error found; the rest of the batch is still processed.

        Args:
            raw_records: Raw rows in input order (not modified)
            stats: Statistics computed from the same raw rows

        Returns:
            CleaningResult
        """
        raw_records = list(raw_records)
        groups = self._group_by_project(raw_records)

        clean_records: list[CleanProjectRecord] = []
        quarantined: list[QuarantineRecord] = []
        warnings: list[AuditIssue] = []
        duplicates_removed = 0

        for project_id, rows in groups.items():
            try:
                if self.settings.is_enabled(RuleId.DUPLICATE_SUPPRESSION):
                    survivor, duplicate_note = self.resolve_duplicates(project_id, rows)
                    survivors = [(survivor, [duplicate_note] if duplicate_note else [])]
                    duplicates_removed += len(rows) - 1
                else:
                    survivors = [(row, []) for row in rows]
            except AmbiguousDuplicate as e:
                logger.warning(str(e), extra={"project_id": project_id, "error_type": e.error_type})
                quarantined.extend(self._quarantine(row, [e]) for row in rows)
                continue

            for record, notes in survivors:
                warnings.extend(self._advise(record, stats))
                try:
                    clean_records.append(self.remediate_record(record, stats, notes))
                except RecordRejected as e:
                    logger.warning(
                        f"Record rejected: {e}",
                        extra={"project_id": project_id, "errors": [err.error_type for err in e.errors]},
                    )
                    quarantined.append(self._quarantine(record, e.errors))

        result = CleaningResult(
            total_records=len(raw_records),
            clean_records=clean_records,
            quarantined=quarantined,
            duplicates_removed=duplicates_removed,
            warnings=warnings,
        )
        self._record_metrics(result)
        return result

    def audit(self, raw_records: Iterable[RawProjectRecord], stats: DatasetStatistics) -> list[AuditIssue]:
        """
        Detect-only pass: report every defect and advisory finding without fixing it.

        Duplicated project_ids are reported once each; the remaining checks
        run on the first occurrence of every project.

        Args:
            raw_records: Raw rows in input order
            stats: Statistics computed from the same raw rows

        Returns:
            List of AuditIssue ordered by project, then catalog order
        """
        issues: list[AuditIssue] = []

        for project_id, rows in self._group_by_project(raw_records).items():
            if len(rows) > 1:
                differing = self._differing_fields(rows)
                detail = f"conflicting fields: {', '.join(differing)}" if differing else "identical rows"
                issues.append(AuditIssue(
                    issue_type=RuleId.DUPLICATE_SUPPRESSION.value,
                    project_id=project_id,
                    description=f"project_id appears {len(rows)} times ({detail})",
                ))

            record = rows[0]
            for error in self._check_required(record):
                issues.append(AuditIssue(
                    issue_type=error.rule_id or error.error_type,
                    project_id=project_id,
                    description=error.message,
                ))

            for rule in self.rules:
                try:
                    if not rule.detect(record, stats):
                        continue
                    description = f"{rule.issue}: {rule.correct(record, stats).justification}"
                except RemediationError as e:
                    description = f"{rule.issue}: cannot be corrected ({e.message})"
                issues.append(AuditIssue(
                    issue_type=rule.rule_id.value,
                    project_id=project_id,
                    description=description,
                ))

            issues.extend(self._advise(record, stats))

        logger.info(f"Audit found {len(issues)} issues", extra={"issue_count": len(issues)})
        return issues

    def _advise(self, record: RawProjectRecord, stats: DatasetStatistics) -> list[AuditIssue]:
        findings = []
        for check in self.advisory_checks:
            finding = check.check(record, stats)
            if finding is not None:
                findings.append(finding)
        return findings

    @staticmethod
    def _quarantine(record: RawProjectRecord, errors: list[RemediationError]) -> QuarantineRecord:
        return QuarantineRecord(
            project_id=record.project_id,
            raw_payload=record.model_dump(mode="json"),
            failed_rules=[error.rule_id or error.error_type for error in errors],
            error_messages=[error.message for error in errors],
            error_type=errors[0].error_type if len(errors) == 1 else RecordRejected.__name__,
        )

    @staticmethod
    def _record_metrics(result: CleaningResult) -> None:
        metrics.increment_counter(metrics.records_processed_total, len(result.clean_records), status="clean")
        metrics.increment_counter(metrics.records_processed_total, len(result.quarantined), status="rejected")
        metrics.increment_counter(metrics.records_processed_total, result.duplicates_removed, status="duplicate")
        for rule_id, count in result.corrections_by_rule().items():
            metrics.increment_counter(metrics.corrections_applied_total, count, rule_id=rule_id)
        for record in result.quarantined:
            for rule_name in record.failed_rules:
                metrics.record_remediation_failure(rule_name, record.error_type or "unknown")

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with enabled and disabled rule ids and settings
        """
        enabled = [rule.rule_id.value for rule in self.rules]
        return {
            "total_rules": len(self.rules),
            "enabled_rules": enabled,
            "disabled_rules": sorted(rule_id.value for rule_id in self.settings.disabled_rules),
            "duplicate_policy": self.settings.duplicate_policy,
            "advisory_checks": [check.name for check in self.advisory_checks],
        }
