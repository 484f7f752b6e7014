"""Risk analysis package -- concentration, VaR, stress testing, alerts, and monitoring."""

from riskwatch.risk.alert_rules import (
    Alert,
    AlertRule,
    evaluate_alert_rules,
    portfolio_metrics,
)
from riskwatch.risk.concentration import (
    ConcentrationFinding,
    ConcentrationReport,
    ConcentrationThresholds,
    analyze_concentration,
    build_concentration_report,
    check_weight_consistency,
)
from riskwatch.risk.dashboard import DashboardSummary, summarize_portfolios
from riskwatch.risk.risk_monitor import PortfolioRiskReport, RiskMonitor, RiskScan
from riskwatch.risk.stress_tester import (
    HoldingImpact,
    StressResult,
    StressScenario,
    run_stress_test,
    worst_case,
)
from riskwatch.risk.var_classifier import (
    VarAssessment,
    classify_portfolios,
    classify_var,
    rank_by_risk_score,
)

__all__ = [
    "Alert",
    "AlertRule",
    "ConcentrationFinding",
    "ConcentrationReport",
    "ConcentrationThresholds",
    "DashboardSummary",
    "HoldingImpact",
    "PortfolioRiskReport",
    "RiskMonitor",
    "RiskScan",
    "StressResult",
    "StressScenario",
    "VarAssessment",
    "analyze_concentration",
    "build_concentration_report",
    "check_weight_consistency",
    "classify_portfolios",
    "classify_var",
    "evaluate_alert_rules",
    "portfolio_metrics",
    "rank_by_risk_score",
    "run_stress_test",
    "summarize_portfolios",
    "worst_case",
]
