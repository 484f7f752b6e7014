"""Simplified VaR classification and risk ranking.

Normalizes a portfolio's stored 1-day VaR against its total value, projects
5-day and 1-month VaR by square-root-of-time scaling over fixed trading-day
counts, and combines VaR percentage with margin utilization into a composite
risk score. This is a closed-form approximation, not a statistical VaR model.

All functions are pure computation -- no I/O or database access.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass

import structlog

from riskwatch.core.enums import Severity
from riskwatch.core.exceptions import InvalidPortfolioError
from riskwatch.core.models import Portfolio

logger = structlog.get_logger(__name__)

TRADING_DAYS_WEEK = 5
TRADING_DAYS_MONTH = 22

HIGH_VAR_PCT = 5.0
MEDIUM_VAR_PCT = 2.0

# Composite score: var_percentage * (margin_utilization + offset)
MARGIN_SCORE_OFFSET = 0.5


@dataclass
class VarAssessment:
    """VaR classification of one portfolio.

    VaR figures are reported as negative magnitudes (losses are negative).

    Attributes:
        portfolio_id: Portfolio identifier.
        var_1d: One-day VaR.
        var_5d: var_1d scaled by sqrt(5).
        var_1m: var_1d scaled by sqrt(22).
        var_percentage: |var_1d| / total_value * 100.
        risk_level: Classification of var_percentage.
        risk_score: var_percentage * (margin_utilization + 0.5).
        confidence_level: Informational; not used in the computation.
        portfolio_name: Portfolio display name.
        client_name: Owning client's display name.
        total_value: Portfolio total value.
        margin_utilization: Portfolio margin utilization.
    """

    portfolio_id: str
    var_1d: float
    var_5d: float
    var_1m: float
    var_percentage: float
    risk_level: Severity
    risk_score: float
    confidence_level: float
    portfolio_name: str = ""
    client_name: str = ""
    total_value: float = 0.0
    margin_utilization: float = 0.0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["risk_level"] = self.risk_level.value
        return data


def require_positive_value(portfolio: Portfolio) -> None:
    """Raise InvalidPortfolioError unless total_value is strictly positive.

    NaN fails the check as well.
    """
    if not portfolio.total_value > 0:
        raise InvalidPortfolioError(portfolio.id, portfolio.total_value)


def classify_var_percentage(var_percentage: float) -> Severity:
    """high above 5%, medium above 2%, otherwise low."""
    if var_percentage > HIGH_VAR_PCT:
        return Severity.HIGH
    if var_percentage > MEDIUM_VAR_PCT:
        return Severity.MEDIUM
    return Severity.LOW


def classify_var(portfolio: Portfolio, confidence_level: float = 0.95) -> VarAssessment:
    """Classify a portfolio's 1-day VaR and project it to longer horizons.

    Args:
        portfolio: Portfolio snapshot; ``var_1d`` may carry either sign.
        confidence_level: Carried through to the result unvalidated.

    Returns:
        VarAssessment with negative-signed VaR figures.

    Raises:
        InvalidPortfolioError: If ``total_value`` is not strictly positive.
    """
    require_positive_value(portfolio)

    var_1d_abs = abs(portfolio.var_1d)
    var_percentage = var_1d_abs / portfolio.total_value * 100.0
    var_5d_abs = var_1d_abs * math.sqrt(TRADING_DAYS_WEEK)
    var_1m_abs = var_1d_abs * math.sqrt(TRADING_DAYS_MONTH)
    risk_level = classify_var_percentage(var_percentage)
    risk_score = var_percentage * (portfolio.margin_utilization + MARGIN_SCORE_OFFSET)

    logger.debug(
        "var_classified",
        portfolio_id=portfolio.id,
        var_percentage=var_percentage,
        risk_level=risk_level.value,
    )

    return VarAssessment(
        portfolio_id=portfolio.id,
        var_1d=-var_1d_abs,
        var_5d=-var_5d_abs,
        var_1m=-var_1m_abs,
        var_percentage=var_percentage,
        risk_level=risk_level,
        risk_score=risk_score,
        confidence_level=confidence_level,
        portfolio_name=portfolio.name,
        client_name=portfolio.client_name,
        total_value=portfolio.total_value,
        margin_utilization=portfolio.margin_utilization,
    )


def rank_by_risk_score(assessments: Iterable[VarAssessment]) -> list[VarAssessment]:
    """Sort by composite risk score, highest first. Ties keep input order."""
    return sorted(assessments, key=lambda a: a.risk_score, reverse=True)


def classify_portfolios(
    portfolios: Sequence[Portfolio], confidence_level: float = 0.95
) -> list[VarAssessment]:
    """Classify every portfolio and return them ranked by risk score.

    Raises:
        InvalidPortfolioError: On the first portfolio with non-positive value;
            no partial result is returned.
    """
    return rank_by_risk_score(classify_var(p, confidence_level) for p in portfolios)
