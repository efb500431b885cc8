"""
Identity rules: placeholders for missing client and project names.
"""

from collections.abc import Mapping

from project_quality.core.models import DatasetStatistics, RawProjectRecord, ServiceLine

from .base_rule import BaseRule, Correction, RuleId, UnknownServiceLine

DEFAULT_CLIENT_PLACEHOLDER = "Client_Unknown"
UNIDENTIFIED_CLIENT = "unidentified client"


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


class MissingClientNameRule(BaseRule):
    """
    Substitutes a placeholder for an absent client_name.

    Parameters:
    - placeholder: Value to substitute (default "Client_Unknown")

    The quality note flags the record for manual confirmation.
    """

    rule_id = RuleId.MISSING_CLIENT_NAME
    issue = "NULL Client Name"
    field_names = ("client_name",)

    def __init__(self, parameters=None):
        super().__init__(parameters)
        self.placeholder = self.parameters.get("placeholder", DEFAULT_CLIENT_PLACEHOLDER)
        if _is_blank(self.placeholder):
            raise ValueError("MissingClientNameRule requires a non-empty 'placeholder'")

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        return _is_blank(record.client_name)

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        return self._correction(
            {"client_name": self.placeholder},
            f"client_name missing; set to {self.placeholder}, flagged for PM to confirm actual client",
        )


class BlankProjectNameRule(BaseRule):
    """
    Substitutes a descriptive placeholder for an empty project_name.

    Parameters:
    - service_lines: Mapping of service_line_id to ServiceLine (required)

    The placeholder is built from the service line name and the client, e.g.
    "Process Transformation project for Client_Sigma".
    """

    rule_id = RuleId.BLANK_PROJECT_NAME
    issue = "Blank Project Name"
    field_names = ("project_name",)

    def __init__(self, parameters=None):
        super().__init__(parameters)
        self.service_lines: Mapping[int, ServiceLine] = self.parameters.get("service_lines") or {}

    def detect(self, record: RawProjectRecord, stats: DatasetStatistics) -> bool:
        return _is_blank(record.project_name)

    def correct(self, record: RawProjectRecord, stats: DatasetStatistics) -> Correction:
        service_line = self.service_lines.get(record.service_line_id)
        if service_line is None:
            raise UnknownServiceLine(record.project_id, record.service_line_id)

        client = UNIDENTIFIED_CLIENT if _is_blank(record.client_name) else record.client_name.strip()
        name = f"{service_line.service_line_name} project for {client}"
        return self._correction(
            {"project_name": name},
            f"project_name was empty; set to '{name}' from service line and client context",
        )
