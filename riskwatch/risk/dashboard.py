"""Dashboard-wide aggregate risk summary.

Rolls a list of portfolio snapshots up into the headline figures shown on the
risk dashboard: totals, average margin utilization, distribution of stored
risk levels, and the portfolios with the largest 1-day VaR.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field

import numpy as np

from riskwatch.core.models import Portfolio

DEFAULT_TOP_N = 5

# Weight of average margin utilization in the dashboard risk score
MARGIN_SCORE_WEIGHT = 50.0


@dataclass(frozen=True)
class TopRiskPortfolio:
    id: str
    name: str
    client_name: str
    var_1d: float
    risk_level: str | None
    margin_utilization: float


@dataclass
class DashboardSummary:
    """Aggregate figures across all portfolios.

    Attributes:
        total_portfolios: Number of portfolios summarized.
        total_value: Sum of total values.
        total_var: Negative sum of |var_1d|.
        total_pnl: Sum of pnl_today.
        avg_margin_utilization: Mean margin utilization.
        risk_distribution: Count of portfolios per stored risk level.
        top_risk_portfolios: Largest |var_1d| first.
        var_utilization_ratio: Sum of |var_1d| / total_value.
        risk_score: ratio * 100 + avg_margin_utilization * 50.
    """

    total_portfolios: int
    total_value: float
    total_var: float
    total_pnl: float
    avg_margin_utilization: float
    risk_distribution: dict[str, int] = field(default_factory=dict)
    top_risk_portfolios: list[TopRiskPortfolio] = field(default_factory=list)
    var_utilization_ratio: float = 0.0
    risk_score: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


def summarize_portfolios(
    portfolios: Sequence[Portfolio], top_n: int = DEFAULT_TOP_N
) -> DashboardSummary:
    """Aggregate portfolio snapshots for the dashboard.

    Empty input, or a zero combined value, produces zero ratios instead of
    dividing by zero.

    Args:
        portfolios: Portfolio snapshots.
        top_n: How many top-VaR portfolios to list.

    Returns:
        DashboardSummary.
    """
    if not portfolios:
        return DashboardSummary(
            total_portfolios=0,
            total_value=0.0,
            total_var=0.0,
            total_pnl=0.0,
            avg_margin_utilization=0.0,
        )

    values = np.array([p.total_value for p in portfolios], dtype=np.float64)
    var_abs = np.abs(np.array([p.var_1d for p in portfolios], dtype=np.float64))
    pnl = np.array([p.pnl_today for p in portfolios], dtype=np.float64)
    margin = np.array([p.margin_utilization for p in portfolios], dtype=np.float64)

    total_value = float(values.sum())
    total_var_abs = float(var_abs.sum())
    avg_margin = float(margin.mean())

    ratio = total_var_abs / total_value if total_value > 0 else 0.0

    distribution = Counter(p.risk_level for p in portfolios if p.risk_level is not None)

    ranked = sorted(portfolios, key=lambda p: abs(p.var_1d), reverse=True)[:top_n]
    top = [
        TopRiskPortfolio(
            id=p.id,
            name=p.name,
            client_name=p.client_name,
            var_1d=p.var_1d,
            risk_level=p.risk_level,
            margin_utilization=p.margin_utilization,
        )
        for p in ranked
    ]

    return DashboardSummary(
        total_portfolios=len(portfolios),
        total_value=total_value,
        total_var=-total_var_abs,
        total_pnl=float(pnl.sum()),
        avg_margin_utilization=avg_margin,
        risk_distribution=dict(distribution),
        top_risk_portfolios=top,
        var_utilization_ratio=ratio,
        risk_score=ratio * 100.0 + avg_margin * MARGIN_SCORE_WEIGHT,
    )
