"""Alert rule evaluation against portfolio risk metrics.

An alert rule compares one named metric against a threshold
(``metric <operator> threshold``). Rules are evaluated against a flat metric
mapping built from the portfolio snapshot and, optionally, its VaR assessment
and concentration report. Triggered rules become Alert records for the
notification layer; delivery, cooldowns, and persistence live elsewhere.

All functions are pure computation -- no I/O or database access.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

import structlog

from riskwatch.core.enums import AlertSeverity, AlertType, ComparisonOperator
from riskwatch.core.exceptions import InvalidRuleError
from riskwatch.core.models import Portfolio
from riskwatch.risk.concentration import ConcentrationReport
from riskwatch.risk.var_classifier import VarAssessment

logger = structlog.get_logger(__name__)

_COMPARATORS: dict[ComparisonOperator, Callable[[float, float], bool]] = {
    ComparisonOperator.GT: operator.gt,
    ComparisonOperator.LT: operator.lt,
    ComparisonOperator.GTE: operator.ge,
    ComparisonOperator.LTE: operator.le,
    ComparisonOperator.EQ: operator.eq,
    ComparisonOperator.NE: operator.ne,
}


@dataclass(frozen=True)
class AlertRule:
    """Configurable threshold rule.

    Attributes:
        name: Human-readable rule name.
        alert_type: Category of the alert raised.
        condition_field: Metric name looked up in the metrics mapping.
        operator: Comparison applied as ``metric <operator> threshold_value``.
        threshold_value: Threshold in the metric's own units.
        severity: Severity attached to raised alerts.
        enabled: Disabled rules never fire.
        portfolios: Portfolio ids the rule is scoped to; empty means all.
    """

    name: str
    alert_type: AlertType
    condition_field: str
    operator: ComparisonOperator
    threshold_value: float
    severity: AlertSeverity = AlertSeverity.MEDIUM
    enabled: bool = True
    portfolios: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Coerce raw strings from the rule store into enums
        try:
            object.__setattr__(self, "alert_type", AlertType(self.alert_type))
            object.__setattr__(self, "operator", ComparisonOperator(self.operator))
            object.__setattr__(self, "severity", AlertSeverity(self.severity))
        except ValueError as exc:
            raise InvalidRuleError(f"Alert rule {self.name!r}: {exc}") from exc
        object.__setattr__(self, "portfolios", tuple(self.portfolios))

    def applies_to(self, portfolio_id: str) -> bool:
        return self.enabled and (not self.portfolios or portfolio_id in self.portfolios)

    def is_triggered(self, value: float) -> bool:
        return _COMPARATORS[self.operator](value, self.threshold_value)


@dataclass(frozen=True)
class Alert:
    """A triggered rule for one portfolio."""

    rule_name: str
    alert_type: AlertType
    severity: AlertSeverity
    portfolio_id: str
    condition_field: str
    threshold_value: float
    current_value: float
    description: str

    def to_dict(self) -> dict:
        return {
            "rule_name": self.rule_name,
            "type": self.alert_type.value,
            "severity": self.severity.value,
            "portfolio_id": self.portfolio_id,
            "condition_field": self.condition_field,
            "threshold_value": self.threshold_value,
            "current_value": self.current_value,
            "description": self.description,
        }


def portfolio_metrics(
    portfolio: Portfolio,
    var_assessment: VarAssessment | None = None,
    concentration: ConcentrationReport | None = None,
) -> dict[str, float]:
    """Flatten a portfolio and its analysis results into rule metrics.

    Concentration weights are expressed in percent (0-100).
    """
    metrics: dict[str, float] = {
        "total_value": portfolio.total_value,
        "var_1d": portfolio.var_1d,
        "margin_utilization": portfolio.margin_utilization,
        "pnl_today": portfolio.pnl_today,
    }

    if var_assessment is not None:
        metrics["var_percentage"] = var_assessment.var_percentage
        metrics["risk_score"] = var_assessment.risk_score

    if concentration is not None:
        metrics["max_sector_weight_pct"] = _max_pct(concentration.sector_concentration)
        metrics["max_region_weight_pct"] = _max_pct(concentration.region_concentration)
        metrics["max_asset_class_weight_pct"] = _max_pct(
            concentration.asset_class_concentration
        )
        metrics["concentration_risk_score"] = float(concentration.risk_score)

    return metrics


def _max_pct(buckets: Mapping[str, float]) -> float:
    return max(buckets.values(), default=0.0) * 100.0


def evaluate_alert_rules(
    rules: Iterable[AlertRule],
    portfolio_id: str,
    metrics: Mapping[str, float],
) -> list[Alert]:
    """Evaluate rules against a portfolio's metrics.

    Args:
        rules: Rules to evaluate, in priority order.
        portfolio_id: Portfolio the metrics belong to.
        metrics: Metric name -> value, e.g. from portfolio_metrics().

    Returns:
        One Alert per triggered rule, in rule order.
    """
    alerts: list[Alert] = []
    for rule in rules:
        if not rule.applies_to(portfolio_id):
            continue

        value = metrics.get(rule.condition_field)
        if value is None:
            logger.debug(
                "alert_rule_metric_missing",
                rule=rule.name,
                condition_field=rule.condition_field,
                portfolio_id=portfolio_id,
            )
            continue

        if rule.is_triggered(value):
            alerts.append(
                Alert(
                    rule_name=rule.name,
                    alert_type=rule.alert_type,
                    severity=rule.severity,
                    portfolio_id=portfolio_id,
                    condition_field=rule.condition_field,
                    threshold_value=rule.threshold_value,
                    current_value=value,
                    description=(
                        f"{rule.condition_field} = {value:.4f} "
                        f"{rule.operator.value} {rule.threshold_value:.4f}"
                    ),
                )
            )

    return alerts
