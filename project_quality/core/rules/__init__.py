"""
Remediation rule catalog, engine and configuration management.
"""

from .advisory import AdvisoryCheck, DelayDateMismatchCheck, NonStandardStatusCheck, OverrunOutlierCheck
from .base_rule import (
    AmbiguousDuplicate,
    BaseRule,
    ConflictingCorrections,
    Correction,
    MissingImputationBasis,
    RecordRejected,
    RemediationError,
    RuleId,
    UnknownServiceLine,
)
from .cost_rules import CostImputationRule, NegativeCostRule, OverrunRecomputationRule, calculate_overrun_pct
from .date_rules import DateCorrectionRule
from .identity_rules import BlankProjectNameRule, MissingClientNameRule
from .rule_config import RemediationConfigLoader, RemediationSettings
from .rule_engine import RemediationEngine
from .status_rules import MissingDelayAndStatusRule, StatusCorrectionRule, normalize_status, status_for_delay
from .utilization_rules import UtilizationCappingRule, UtilizationImputationRule

__all__ = [
    "RemediationEngine",
    "RemediationConfigLoader",
    "RemediationSettings",
    "RuleId",
    "BaseRule",
    "Correction",
    "RemediationError",
    "MissingImputationBasis",
    "AmbiguousDuplicate",
    "UnknownServiceLine",
    "ConflictingCorrections",
    "RecordRejected",
    "OverrunRecomputationRule",
    "StatusCorrectionRule",
    "DateCorrectionRule",
    "CostImputationRule",
    "UtilizationImputationRule",
    "UtilizationCappingRule",
    "NegativeCostRule",
    "MissingClientNameRule",
    "BlankProjectNameRule",
    "MissingDelayAndStatusRule",
    "AdvisoryCheck",
    "OverrunOutlierCheck",
    "DelayDateMismatchCheck",
    "NonStandardStatusCheck",
    "calculate_overrun_pct",
    "normalize_status",
    "status_for_delay",
]
