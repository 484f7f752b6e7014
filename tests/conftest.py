"""Root pytest configuration and shared fixtures.

Provides common portfolio snapshots used across test modules:
- make_holding: factory for Holding with sensible defaults
- tech_portfolio: two Technology holdings, heavily concentrated
- balanced_portfolio: four sectors across two regions
- zero_value_portfolio: violates the total_value > 0 precondition
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from riskwatch.core.models import Holding, Portfolio


def _holding(**overrides: Any) -> Holding:
    fields: dict[str, Any] = {
        "symbol": "AAA",
        "market_value": 100_000.0,
        "sector": "Technology",
        "region": "North America",
        "asset_class": "Equity",
        "weight_percent": 10.0,
    }
    fields.update(overrides)
    return Holding(**fields)


@pytest.fixture
def make_holding() -> Callable[..., Holding]:
    """Return a factory building Holding objects from keyword overrides.

    Usage::

        def test_something(make_holding):
            h = make_holding(symbol="MSFT", weight_percent=25.0)
    """
    return _holding


@pytest.fixture
def tech_portfolio() -> Portfolio:
    """12.5M portfolio, ~99.9% in Technology across two holdings."""
    return Portfolio(
        id="pf-tech",
        name="Growth Equity Fund",
        client_name="Meridian Capital",
        total_value=12_500_000.0,
        var_1d=-187_500.0,
        margin_utilization=0.68,
        holdings=(
            _holding(
                symbol="AAPL",
                market_value=9_262_500.0,
                weight_percent=74.1,
            ),
            _holding(
                symbol="MSFT",
                market_value=3_220_650.0,
                weight_percent=25.77,
            ),
        ),
        pnl_today=42_000.0,
        risk_level="high",
    )


@pytest.fixture
def balanced_portfolio() -> Portfolio:
    """1M portfolio spread over four sectors and two regions."""
    return Portfolio(
        id="pf-balanced",
        name="Balanced Income",
        client_name="Harbor Trust",
        total_value=1_000_000.0,
        var_1d=-30_000.0,
        margin_utilization=0.25,
        holdings=(
            _holding(symbol="JNJ", sector="Healthcare", market_value=250_000.0,
                     weight_percent=25.0),
            _holding(symbol="XOM", sector="Energy", market_value=250_000.0,
                     weight_percent=25.0),
            _holding(symbol="SAP", sector="Technology", region="Europe",
                     market_value=250_000.0, weight_percent=25.0),
            _holding(symbol="BUND", sector="Government", region="Europe",
                     asset_class="Fixed Income", market_value=250_000.0,
                     weight_percent=25.0),
        ),
        pnl_today=-5_000.0,
        risk_level="medium",
    )


@pytest.fixture
def zero_value_portfolio() -> Portfolio:
    """Portfolio whose total value is zero."""
    return Portfolio(
        id="pf-empty",
        name="Closed Account",
        client_name="Former Client",
        total_value=0.0,
        var_1d=0.0,
        margin_utilization=0.0,
    )
