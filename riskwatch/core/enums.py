"""Shared enumerations used across the risk engine.

All enums use the (str, Enum) mixin pattern so their values are
serializable strings, compatible with database storage and JSON output.
"""

from enum import Enum


class Severity(str, Enum):
    """Severity of a concentration finding, VaR level, or stress result."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def points(self) -> int:
        """Score contribution used when summing findings (low=1 .. high=3)."""
        return _SEVERITY_POINTS[self]


_SEVERITY_POINTS = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}


class AlertSeverity(str, Enum):
    """Severity attached to an alert rule. Adds CRITICAL on top of Severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ConcentrationDimension(str, Enum):
    """Grouping dimension for concentration analysis."""

    SECTOR = "sector"
    GEOGRAPHIC = "geographic"
    ASSET_CLASS = "asset_class"


class AlertType(str, Enum):
    """Alert rule categories."""

    VAR_BREACH = "var_breach"
    CONCENTRATION_RISK = "concentration_risk"
    MARGIN_CALL = "margin_call"
    PERFORMANCE = "performance"
    COMPLIANCE = "compliance"


class ComparisonOperator(str, Enum):
    """Comparison used by an alert rule: ``metric <op> threshold``."""

    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    EQ = "="
    NE = "!="
