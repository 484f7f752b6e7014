"""Unit tests for scenario stress testing.

Covers market-wide and per-sector shocks, additive impact aggregation,
severity breakpoints (including the 10% boundary), scenario independence and
ordering, idempotence, precondition failures, the documented gain-scenario
asymmetry, and worst-case selection.
"""

from __future__ import annotations

import copy

import pytest

from riskwatch.core.enums import Severity
from riskwatch.core.exceptions import InvalidPortfolioError, InvalidScenarioError
from riskwatch.core.models import Holding, Portfolio
from riskwatch.risk.stress_tester import (
    HoldingImpact,
    StressResult,
    StressScenario,
    classify_impact,
    run_stress_test,
    worst_case,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def single_holding_portfolio(make_holding) -> Portfolio:
    """1M portfolio fully invested in one Technology holding."""
    return Portfolio(
        id="pf-single",
        name="Single Name",
        client_name="Client",
        total_value=1_000_000.0,
        var_1d=-20_000.0,
        margin_utilization=0.3,
        holdings=(make_holding(symbol="NVDA", market_value=1_000_000.0,
                               weight_percent=100.0),),
    )


@pytest.fixture
def two_sector_holdings(make_holding) -> list[Holding]:
    return [
        make_holding(symbol="AAPL", sector="Technology", market_value=600_000.0,
                     weight_percent=60.0),
        make_holding(symbol="JPM", sector="Financials", market_value=400_000.0,
                     weight_percent=40.0),
    ]


# ---------------------------------------------------------------------------
# Single scenario
# ---------------------------------------------------------------------------


class TestSingleScenario:
    def test_ten_percent_decline_is_low(self, single_holding_portfolio: Portfolio) -> None:
        """-10% on 1M -> 100K loss, 10.0% impact, exactly at the boundary -> low."""
        scenario = StressScenario(name="Market -10%", market_shock=-0.10)
        [result] = run_stress_test(
            single_holding_portfolio, single_holding_portfolio.holdings, [scenario]
        )

        assert result.holding_impacts[0].impact == pytest.approx(-100_000.0)
        assert result.stressed_value == pytest.approx(900_000.0)
        assert result.total_impact == pytest.approx(100_000.0)
        assert result.impact_percentage == pytest.approx(10.0)
        assert result.severity == Severity.LOW

    def test_eleven_percent_decline_is_medium(
        self, single_holding_portfolio: Portfolio
    ) -> None:
        scenario = StressScenario(name="Market -11%", market_shock=-0.11)
        [result] = run_stress_test(
            single_holding_portfolio, single_holding_portfolio.holdings, [scenario]
        )
        assert result.impact_percentage == pytest.approx(11.0)
        assert result.severity == Severity.MEDIUM

    def test_deep_decline_is_high(self, single_holding_portfolio: Portfolio) -> None:
        scenario = StressScenario(name="Crash", market_shock=-0.35)
        [result] = run_stress_test(
            single_holding_portfolio, single_holding_portfolio.holdings, [scenario]
        )
        assert result.severity == Severity.HIGH

    def test_holding_breakdown(self, single_holding_portfolio: Portfolio) -> None:
        scenario = StressScenario(name="Market -10%", market_shock=-0.10)
        [result] = run_stress_test(
            single_holding_portfolio, single_holding_portfolio.holdings, [scenario]
        )
        impact = result.holding_impacts[0]
        assert isinstance(impact, HoldingImpact)
        assert impact.symbol == "NVDA"
        assert impact.current_value == 1_000_000.0
        assert impact.shock == -0.10
        assert impact.stressed_value == pytest.approx(900_000.0)

    def test_default_market_shock(self, single_holding_portfolio: Portfolio) -> None:
        scenario = StressScenario(name="Default")
        assert scenario.market_shock is None
        [result] = run_stress_test(
            single_holding_portfolio, single_holding_portfolio.holdings, [scenario]
        )
        assert result.holding_impacts[0].shock == -0.10
        assert result.total_impact == pytest.approx(100_000.0)

    def test_default_market_shock_override(
        self, single_holding_portfolio: Portfolio
    ) -> None:
        """Unset market shocks take the run's default; explicit ones do not."""
        results = run_stress_test(
            single_holding_portfolio,
            single_holding_portfolio.holdings,
            [
                StressScenario(name="Default"),
                StressScenario(name="Set", market_shock=-0.05),
            ],
            default_market_shock=-0.30,
        )
        assert [r.holding_impacts[0].shock for r in results] == [-0.30, -0.05]
        assert results[0].severity == Severity.HIGH

    def test_explicit_zero_market_shock(self, single_holding_portfolio: Portfolio) -> None:
        scenario = StressScenario(name="Flat", market_shock=0.0)
        [result] = run_stress_test(
            single_holding_portfolio, single_holding_portfolio.holdings, [scenario]
        )
        assert result.total_impact == 0.0
        assert result.stressed_value == 1_000_000.0
        assert result.severity == Severity.LOW

    def test_no_holdings(self, single_holding_portfolio: Portfolio) -> None:
        [result] = run_stress_test(
            single_holding_portfolio, [], [StressScenario(name="Any")]
        )
        assert result.holding_impacts == []
        assert result.total_impact == 0.0
        assert result.worst_holding is None


# ---------------------------------------------------------------------------
# Sector overrides
# ---------------------------------------------------------------------------


class TestSectorShocks:
    def test_sector_override_takes_precedence(
        self, single_holding_portfolio: Portfolio, two_sector_holdings: list[Holding]
    ) -> None:
        scenario = StressScenario(
            name="Tech selloff",
            market_shock=-0.05,
            sector_shocks={"Technology": -0.30},
        )
        [result] = run_stress_test(single_holding_portfolio, two_sector_holdings, [scenario])

        shocks = {h.symbol: h.shock for h in result.holding_impacts}
        assert shocks == {"AAPL": -0.30, "JPM": -0.05}
        # 600K * -0.30 + 400K * -0.05 = -200K
        assert result.total_impact == pytest.approx(200_000.0)
        assert result.impact_percentage == pytest.approx(20.0)

    def test_zero_sector_override_honoured(
        self, single_holding_portfolio: Portfolio, two_sector_holdings: list[Holding]
    ) -> None:
        scenario = StressScenario(
            name="Financials immune",
            market_shock=-0.20,
            sector_shocks={"Financials": 0.0},
        )
        [result] = run_stress_test(single_holding_portfolio, two_sector_holdings, [scenario])
        jpm = next(h for h in result.holding_impacts if h.symbol == "JPM")
        assert jpm.shock == 0.0
        assert jpm.impact == 0.0

    def test_worst_holding(
        self, single_holding_portfolio: Portfolio, two_sector_holdings: list[Holding]
    ) -> None:
        scenario = StressScenario(
            name="Banks", market_shock=-0.01, sector_shocks={"Financials": -0.40}
        )
        [result] = run_stress_test(single_holding_portfolio, two_sector_holdings, [scenario])
        assert result.worst_holding is not None
        assert result.worst_holding.symbol == "JPM"

    def test_shocks_are_additive_against_unshocked_total(
        self, make_holding
    ) -> None:
        """Impacts are summed once against total_value, not compounded."""
        portfolio = Portfolio(
            id="p", name="P", client_name="C", total_value=2_000_000.0,
            var_1d=0.0, margin_utilization=0.0,
        )
        holdings = [make_holding(market_value=1_000_000.0)]
        [result] = run_stress_test(
            portfolio, holdings, [StressScenario(name="S", market_shock=-0.50)]
        )
        assert result.stressed_value == pytest.approx(1_500_000.0)
        assert result.impact_percentage == pytest.approx(25.0)

    def test_sector_shocks_copied_on_construction(self) -> None:
        shocks = {"Technology": -0.30}
        scenario = StressScenario(name="Tech selloff", sector_shocks=shocks)
        shocks["Technology"] = 0.0

        assert scenario.shock_for("Technology") == -0.30
        with pytest.raises(TypeError):
            scenario.sector_shocks["Energy"] = -0.10  # type: ignore[index]

    def test_scenario_is_hashable(self) -> None:
        a = StressScenario(name="Tech", sector_shocks={"Technology": -0.30})
        b = StressScenario(name="Tech", sector_shocks={"Technology": -0.30})
        assert a == b
        assert len({a, b}) == 1


# ---------------------------------------------------------------------------
# Multiple scenarios
# ---------------------------------------------------------------------------


class TestMultipleScenarios:
    def test_order_preserved(self, single_holding_portfolio: Portfolio) -> None:
        scenarios = [
            StressScenario(name="B", market_shock=-0.30),
            StressScenario(name="A", market_shock=-0.05),
            StressScenario(name="C", market_shock=-0.15),
        ]
        results = run_stress_test(
            single_holding_portfolio, single_holding_portfolio.holdings, scenarios
        )
        assert [r.scenario_name for r in results] == ["B", "A", "C"]
        assert [r.severity for r in results] == [
            Severity.HIGH,
            Severity.LOW,
            Severity.MEDIUM,
        ]

    def test_scenarios_independent(self, single_holding_portfolio: Portfolio) -> None:
        """Each scenario starts from the unshocked portfolio."""
        scenarios = [
            StressScenario(name="first", market_shock=-0.20),
            StressScenario(name="second", market_shock=-0.20),
        ]
        first, second = run_stress_test(
            single_holding_portfolio, single_holding_portfolio.holdings, scenarios
        )
        assert first.stressed_value == second.stressed_value
        assert first.current_value == second.current_value == 1_000_000.0

    def test_idempotent(
        self, single_holding_portfolio: Portfolio, two_sector_holdings: list[Holding]
    ) -> None:
        scenario = StressScenario(
            name="Mixed", market_shock=-0.07, sector_shocks={"Technology": -0.22}
        )
        first = run_stress_test(single_holding_portfolio, two_sector_holdings, [scenario])
        second = run_stress_test(single_holding_portfolio, two_sector_holdings, [scenario])
        assert first == second

    def test_inputs_not_mutated(
        self, single_holding_portfolio: Portfolio, two_sector_holdings: list[Holding]
    ) -> None:
        before = copy.deepcopy(two_sector_holdings)
        run_stress_test(
            single_holding_portfolio,
            two_sector_holdings,
            [StressScenario(name="S", market_shock=-0.5)],
        )
        assert two_sector_holdings == before


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestPreconditions:
    def test_empty_scenarios_raise(self, single_holding_portfolio: Portfolio) -> None:
        with pytest.raises(InvalidScenarioError):
            run_stress_test(single_holding_portfolio, single_holding_portfolio.holdings, [])

    def test_empty_scenarios_checked_before_portfolio(
        self, zero_value_portfolio: Portfolio
    ) -> None:
        with pytest.raises(InvalidScenarioError):
            run_stress_test(zero_value_portfolio, [], [])

    def test_zero_value_portfolio_raises(self, zero_value_portfolio: Portfolio) -> None:
        with pytest.raises(InvalidPortfolioError):
            run_stress_test(zero_value_portfolio, [], [StressScenario(name="S")])


# ---------------------------------------------------------------------------
# Gain scenarios
# ---------------------------------------------------------------------------


class TestGainScenarios:
    def test_large_gain_classifies_low(self, single_holding_portfolio: Portfolio) -> None:
        """Known asymmetry: a +50% rally yields a negative impact and reads as low."""
        [result] = run_stress_test(
            single_holding_portfolio,
            single_holding_portfolio.holdings,
            [StressScenario(name="Rally", market_shock=0.50)],
        )
        assert result.total_impact == pytest.approx(-500_000.0)
        assert result.impact_percentage == pytest.approx(-50.0)
        assert result.severity == Severity.LOW


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestClassifyImpact:
    @pytest.mark.parametrize(
        ("pct", "expected"),
        [
            (-80.0, Severity.LOW),
            (10.0, Severity.LOW),
            (10.01, Severity.MEDIUM),
            (20.0, Severity.MEDIUM),
            (20.01, Severity.HIGH),
        ],
    )
    def test_breakpoints(self, pct: float, expected: Severity) -> None:
        assert classify_impact(pct) == expected


class TestWorstCase:
    def test_picks_largest_loss(self, single_holding_portfolio: Portfolio) -> None:
        results = run_stress_test(
            single_holding_portfolio,
            single_holding_portfolio.holdings,
            [
                StressScenario(name="mild", market_shock=-0.05),
                StressScenario(name="severe", market_shock=-0.40),
                StressScenario(name="rally", market_shock=0.10),
            ],
        )
        assert worst_case(results).scenario_name == "severe"

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError):
            worst_case([])

    def test_to_dict(self, single_holding_portfolio: Portfolio) -> None:
        [result] = run_stress_test(
            single_holding_portfolio,
            single_holding_portfolio.holdings,
            [StressScenario(name="S", market_shock=-0.25)],
        )
        assert isinstance(result, StressResult)
        data = result.to_dict()
        assert data["severity"] == "high"
        assert data["holding_impacts"][0]["symbol"] == "NVDA"
