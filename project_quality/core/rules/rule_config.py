"""
Remediation configuration management.

Loads engine settings and per-rule switches from YAML files.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .base_rule import RuleId
from .identity_rules import DEFAULT_CLIENT_PLACEHOLDER
from .status_rules import DEFAULT_MINOR_DELAY_MAX_DAYS


class RemediationSettings(BaseModel):
    """
    Tunable parameters of the remediation engine.

    Attributes:
        overrun_tolerance_pct: Allowed gap (percentage points) between recorded
                               and calculated overrun
        duplicate_policy: What to do with duplicates whose fields disagree:
                          "error" (quarantine), "first" or "last" (precedence)
        client_placeholder: Substitute for a missing client_name
        minor_delay_max_days: Upper bound of the Minor Delay band
        outlier_sigma: Standard deviations above the mean that make an overrun an outlier
        delay_mismatch_tolerance_days: Allowed gap between delay_days and the end-date difference
        disabled_rules: Rules switched off for this run
    """

    overrun_tolerance_pct: Decimal = Field(Decimal("1.0"), ge=0)
    duplicate_policy: Literal["error", "first", "last"] = "error"
    client_placeholder: str = Field(DEFAULT_CLIENT_PLACEHOLDER, min_length=1)
    minor_delay_max_days: int = Field(DEFAULT_MINOR_DELAY_MAX_DAYS, ge=1)
    outlier_sigma: Decimal = Field(Decimal("3"), gt=0)
    delay_mismatch_tolerance_days: int = Field(1, ge=0)
    disabled_rules: frozenset[RuleId] = frozenset()

    def is_enabled(self, rule_id: RuleId) -> bool:
        return rule_id not in self.disabled_rules

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "overrun_tolerance_pct": "1.0",
                "duplicate_policy": "error",
                "client_placeholder": "Client_Unknown",
                "minor_delay_max_days": 7,
                "outlier_sigma": "3",
                "delay_mismatch_tolerance_days": 1,
                "disabled_rules": []
            }
        }


class RemediationConfigLoader:
    """
    Loads remediation settings from YAML configuration files.

    Expected YAML format:
    ```yaml
    remediation:
      overrun_tolerance_pct: 1.0
      duplicate_policy: error
      client_placeholder: Client_Unknown
      minor_delay_max_days: 7
      outlier_sigma: 3

    rules:
      BLANK_PROJECT_NAME:
        enabled: true
      UTILIZATION_CAPPING:
        enabled: false
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Remediation configuration file not found: {config_path}")

    def load_settings(self) -> RemediationSettings:
        """
        Load and parse remediation settings from the YAML file.

        Returns:
            RemediationSettings

        Raises:
            ValueError: If YAML is invalid or references unknown rules
        """
        with open(self.config_path) as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {self.config_path}: {e}")

        if not config or "remediation" not in config:
            raise ValueError("Configuration file must contain 'remediation' section")

        options = config["remediation"] or {}
        if not isinstance(options, dict):
            raise ValueError("'remediation' section must be a mapping")

        disabled = self._parse_rules(config.get("rules") or {})

        try:
            return RemediationSettings(**{**options, "disabled_rules": disabled})
        except ValidationError as e:
            raise ValueError(f"Invalid remediation settings in {self.config_path}: {e}")

    def _parse_rules(self, rules: dict[str, Any]) -> frozenset[RuleId]:
        """
        Parse the per-rule section into the set of disabled rules.

        Raises:
            ValueError: If a rule name is unknown or its definition is malformed
        """
        if not isinstance(rules, dict):
            raise ValueError("'rules' section must be a mapping of rule id to options")

        disabled = set()
        for rule_name, rule_def in rules.items():
            try:
                rule_id = RuleId(str(rule_name).upper())
            except ValueError:
                raise ValueError(
                    f"Unknown rule '{rule_name}'. Valid rules: {', '.join(r.value for r in RuleId)}"
                )

            if rule_def is None:
                continue
            if not isinstance(rule_def, dict):
                raise ValueError(f"Options for rule '{rule_name}' must be a mapping")

            # Extract enabled flag (default: True)
            if not rule_def.get("enabled", True):
                disabled.add(rule_id)

        return frozenset(disabled)
