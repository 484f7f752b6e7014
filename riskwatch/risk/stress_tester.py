"""Scenario stress testing of portfolio holdings.

Applies each scenario's shock to every holding (a per-sector override when
the scenario defines one for the holding's sector, the market-wide shock
otherwise), sums the holding impacts against the unshocked portfolio value,
and classifies the resulting loss percentage.

Scenarios are evaluated independently from the same unshocked baseline.
Stress tests are advisory only. All functions are pure computation.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field
from types import MappingProxyType

import structlog

from riskwatch.core.enums import Severity
from riskwatch.core.exceptions import InvalidScenarioError
from riskwatch.core.models import Holding, Portfolio
from riskwatch.risk.var_classifier import require_positive_value

logger = structlog.get_logger(__name__)

DEFAULT_MARKET_SHOCK = -0.10

HIGH_IMPACT_PCT = 20.0
MEDIUM_IMPACT_PCT = 10.0


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StressScenario:
    """A hypothetical market move.

    Attributes:
        name: Human-readable scenario name.
        market_shock: Fractional move applied to holdings without a sector
            override, e.g. -0.10 for a 10% decline. None defers to the
            default market shock of the run (-0.10 unless configured).
        sector_shocks: Mapping of sector -> fractional move. Takes precedence
            over ``market_shock``; an explicit 0.0 override leaves the sector
            unshocked.
    """

    name: str
    market_shock: float | None = None
    sector_shocks: Mapping[str, float] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Stored as a read-only copy of the caller's mapping
        object.__setattr__(
            self, "sector_shocks", MappingProxyType(dict(self.sector_shocks))
        )

    def shock_for(
        self, sector: str, default_shock: float = DEFAULT_MARKET_SHOCK
    ) -> float:
        if sector in self.sector_shocks:
            return self.sector_shocks[sector]
        if self.market_shock is None:
            return default_shock
        return self.market_shock


@dataclass(frozen=True)
class HoldingImpact:
    """Effect of a scenario on one holding."""

    symbol: str
    current_value: float
    shock: float
    impact: float
    stressed_value: float


@dataclass
class StressResult:
    """Result of applying one stress scenario to a portfolio.

    Attributes:
        portfolio_id: Portfolio identifier.
        scenario_name: Name of the scenario that was applied.
        current_value: Unshocked portfolio total value.
        stressed_value: current_value plus the summed holding impacts.
        total_impact: current_value - stressed_value (positive for a loss).
        impact_percentage: total_impact / current_value * 100.
        holding_impacts: Per-holding breakdown in holding order.
        severity: Classification of impact_percentage.
    """

    portfolio_id: str
    scenario_name: str
    current_value: float
    stressed_value: float
    total_impact: float
    impact_percentage: float
    holding_impacts: list[HoldingImpact]
    severity: Severity

    @property
    def worst_holding(self) -> HoldingImpact | None:
        """Holding with the most negative impact, or None without holdings."""
        if not self.holding_impacts:
            return None
        return min(self.holding_impacts, key=lambda h: h.impact)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


# ---------------------------------------------------------------------------
# Pure computation functions
# ---------------------------------------------------------------------------


def classify_impact(impact_percentage: float) -> Severity:
    """high above 20%, medium above 10%, otherwise low.

    Gains produce a negative impact_percentage and therefore always classify
    as low.
    """
    if impact_percentage > HIGH_IMPACT_PCT:
        return Severity.HIGH
    if impact_percentage > MEDIUM_IMPACT_PCT:
        return Severity.MEDIUM
    return Severity.LOW


def apply_scenario(
    portfolio: Portfolio,
    holdings: Sequence[Holding],
    scenario: StressScenario,
    default_market_shock: float = DEFAULT_MARKET_SHOCK,
) -> StressResult:
    """Apply a single scenario. Assumes ``portfolio.total_value > 0``."""
    holding_impacts: list[HoldingImpact] = []
    for holding in holdings:
        shock = scenario.shock_for(holding.sector, default_market_shock)
        impact = holding.market_value * shock
        holding_impacts.append(
            HoldingImpact(
                symbol=holding.symbol,
                current_value=holding.market_value,
                shock=shock,
                impact=impact,
                stressed_value=holding.market_value + impact,
            )
        )

    stressed_value = portfolio.total_value + sum(h.impact for h in holding_impacts)
    total_impact = portfolio.total_value - stressed_value
    impact_percentage = total_impact / portfolio.total_value * 100.0

    return StressResult(
        portfolio_id=portfolio.id,
        scenario_name=scenario.name,
        current_value=portfolio.total_value,
        stressed_value=stressed_value,
        total_impact=total_impact,
        impact_percentage=impact_percentage,
        holding_impacts=holding_impacts,
        severity=classify_impact(impact_percentage),
    )


def run_stress_test(
    portfolio: Portfolio,
    holdings: Sequence[Holding],
    scenarios: Sequence[StressScenario],
    default_market_shock: float = DEFAULT_MARKET_SHOCK,
) -> list[StressResult]:
    """Run every scenario against the portfolio.

    Args:
        portfolio: Portfolio snapshot.
        holdings: The portfolio's holdings.
        scenarios: Non-empty, ordered list of scenarios.
        default_market_shock: Market shock for scenarios that leave
            ``market_shock`` unset.

    Returns:
        One StressResult per scenario, in scenario order.

    Raises:
        InvalidScenarioError: If ``scenarios`` is empty.
        InvalidPortfolioError: If ``total_value`` is not strictly positive.
    """
    if not scenarios:
        raise InvalidScenarioError("At least one stress test scenario is required")
    require_positive_value(portfolio)

    results = [
        apply_scenario(portfolio, holdings, s, default_market_shock)
        for s in scenarios
    ]

    logger.debug(
        "stress_test_completed",
        portfolio_id=portfolio.id,
        scenarios=len(scenarios),
        holdings=len(holdings),
    )
    return results


def worst_case(results: Sequence[StressResult]) -> StressResult:
    """Return the result with the largest total impact (biggest loss).

    Ties resolve to the earliest scenario.

    Raises:
        ValueError: If results list is empty.
    """
    if not results:
        raise ValueError("Cannot determine worst case from empty results list")
    return max(results, key=lambda r: r.total_impact)
