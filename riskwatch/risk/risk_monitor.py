"""Per-portfolio risk assessment over a data provider.

RiskMonitor is the caller-side loop around the pure analyzers: it fetches
portfolio snapshots from a PortfolioDataProvider, runs concentration, VaR,
and stress analysis for each portfolio independently, evaluates alert rules,
and collects the results into PortfolioRiskReport objects. The analyzers
themselves never know whether one portfolio or all of them were requested.

Portfolios that cannot be fetched or that violate an analyzer precondition are
skipped and listed in the scan result; the remaining portfolios are still
reported.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from riskwatch.core.config import Settings, settings as default_settings
from riskwatch.core.data_provider import PortfolioDataProvider
from riskwatch.core.enums import Severity
from riskwatch.core.exceptions import InvalidPortfolioError, PortfolioNotFoundError
from riskwatch.core.models import Holding, Portfolio
from riskwatch.core.utils.logging_config import get_logger
from riskwatch.risk.alert_rules import (
    Alert,
    AlertRule,
    evaluate_alert_rules,
    portfolio_metrics,
)
from riskwatch.risk.concentration import (
    ConcentrationReport,
    ConcentrationThresholds,
    build_concentration_report,
    check_weight_consistency,
)
from riskwatch.risk.dashboard import DashboardSummary, summarize_portfolios
from riskwatch.risk.stress_tester import StressResult, StressScenario, run_stress_test
from riskwatch.risk.var_classifier import VarAssessment, classify_var

logger = get_logger(__name__)

_SEVERITY_ORDER = [Severity.LOW, Severity.MEDIUM, Severity.HIGH]


@dataclass
class PortfolioRiskReport:
    """All analysis results for one portfolio.

    Attributes:
        portfolio_id: Portfolio identifier.
        concentration: Concentration maps and findings.
        var_assessment: VaR classification.
        stress_results: One result per scenario; empty when none were given.
        alerts: Triggered alert rules.
        weight_sum: Summed holding weight-percent (nominally 100).
        overall_risk_level: Highest severity across VaR level, concentration
            findings, and stress results.
    """

    portfolio_id: str
    concentration: ConcentrationReport
    var_assessment: VarAssessment
    stress_results: list[StressResult]
    alerts: list[Alert]
    weight_sum: float
    overall_risk_level: Severity

    def to_dict(self) -> dict:
        return {
            "portfolio_id": self.portfolio_id,
            "concentration": self.concentration.to_dict(),
            "var_assessment": self.var_assessment.to_dict(),
            "stress_results": [r.to_dict() for r in self.stress_results],
            "alerts": [a.to_dict() for a in self.alerts],
            "weight_sum": self.weight_sum,
            "overall_risk_level": self.overall_risk_level.value,
        }


@dataclass
class RiskScan:
    """Reports for every assessed portfolio plus the ones that were skipped.

    Attributes:
        reports: Reports in provider order.
        skipped: portfolio_id -> reason for each skipped portfolio.
    """

    reports: list[PortfolioRiskReport] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)

    @property
    def alerts(self) -> list[Alert]:
        return [a for r in self.reports for a in r.alerts]


class RiskMonitor:
    """Runs the risk analyzers for portfolios served by a data provider.

    Args:
        provider: Source of portfolio and holding snapshots.
        thresholds: Concentration cutoffs. Defaults to the configured values.
        confidence_level: Carried into VaR assessments. Defaults to the
            configured value.
        max_workers: When set, scan() assesses portfolios on a thread pool
            of this size. Results keep provider order either way.
        config: Settings to read defaults from.
    """

    def __init__(
        self,
        provider: PortfolioDataProvider,
        thresholds: ConcentrationThresholds | None = None,
        confidence_level: float | None = None,
        max_workers: int | None = None,
        config: Settings | None = None,
    ) -> None:
        self.provider = provider
        self.config = config or default_settings
        self.thresholds = thresholds or ConcentrationThresholds.from_settings(self.config)
        self.confidence_level = (
            confidence_level
            if confidence_level is not None
            else self.config.default_confidence_level
        )
        self.max_workers = max_workers

    def assess_portfolio(
        self,
        portfolio_id: str,
        scenarios: Sequence[StressScenario] = (),
        rules: Sequence[AlertRule] = (),
    ) -> PortfolioRiskReport:
        """Fetch one portfolio and run every analyzer against it.

        Args:
            portfolio_id: Portfolio to assess.
            scenarios: Stress scenarios; the stress test is skipped when empty.
            rules: Alert rules to evaluate.

        Returns:
            PortfolioRiskReport.

        Raises:
            PortfolioNotFoundError: If the provider does not know the id.
            InvalidPortfolioError: If the portfolio's total value is not
                strictly positive.
        """
        portfolio = self.provider.get_portfolio(portfolio_id)
        holdings = self.provider.get_holdings(portfolio_id)
        return self._assess(portfolio, holdings, scenarios, rules)

    def _assess(
        self,
        portfolio: Portfolio,
        holdings: Sequence[Holding],
        scenarios: Sequence[StressScenario],
        rules: Sequence[AlertRule],
    ) -> PortfolioRiskReport:
        weight_sum = check_weight_consistency(
            holdings, self.config.weight_tolerance_pct, portfolio_id=portfolio.id
        )

        var_assessment = classify_var(portfolio, self.confidence_level)
        concentration = build_concentration_report(portfolio, holdings, self.thresholds)
        stress_results = (
            run_stress_test(
                portfolio, holdings, scenarios, self.config.default_market_shock
            )
            if scenarios
            else []
        )

        metrics = portfolio_metrics(portfolio, var_assessment, concentration)
        alerts = evaluate_alert_rules(rules, portfolio.id, metrics)

        severities = [var_assessment.risk_level]
        severities += [f.severity for f in concentration.findings]
        severities += [r.severity for r in stress_results]
        overall = max(severities, key=_SEVERITY_ORDER.index)

        return PortfolioRiskReport(
            portfolio_id=portfolio.id,
            concentration=concentration,
            var_assessment=var_assessment,
            stress_results=stress_results,
            alerts=alerts,
            weight_sum=weight_sum,
            overall_risk_level=overall,
        )

    def scan(
        self,
        portfolio_ids: Sequence[str] | None = None,
        scenarios: Sequence[StressScenario] = (),
        rules: Sequence[AlertRule] = (),
    ) -> RiskScan:
        """Assess the requested portfolios, or all of them when none are given.

        Args:
            portfolio_ids: Portfolios to assess. None means every portfolio
                the provider lists.
            scenarios: Stress scenarios applied to every portfolio.
            rules: Alert rules evaluated for every portfolio.

        Returns:
            RiskScan with reports in request order and the skipped ids.
        """
        ids = (
            list(portfolio_ids)
            if portfolio_ids is not None
            else [p.id for p in self.provider.list_portfolios()]
        )

        def _one(pid: str) -> tuple[str, PortfolioRiskReport | None, str | None]:
            try:
                return pid, self.assess_portfolio(pid, scenarios, rules), None
            except (PortfolioNotFoundError, InvalidPortfolioError) as exc:
                return pid, None, str(exc)

        if self.max_workers and len(ids) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(_one, ids))
        else:
            outcomes = [_one(pid) for pid in ids]

        result = RiskScan()
        for pid, report, reason in outcomes:
            if report is None:
                logger.warning("portfolio_skipped", portfolio_id=pid, reason=reason)
                result.skipped[pid] = reason or ""
            else:
                result.reports.append(report)

        logger.info(
            "risk_scan_completed",
            portfolios=len(ids),
            reported=len(result.reports),
            skipped=len(result.skipped),
            scenarios=len(scenarios),
            alerts=len(result.alerts),
        )
        return result

    def dashboard(self, top_n: int | None = None) -> DashboardSummary:
        """Summarize every portfolio the provider lists."""
        return summarize_portfolios(
            self.provider.list_portfolios(),
            top_n=top_n if top_n is not None else self.config.top_risk_portfolios,
        )
