"""Portfolio and holding snapshots consumed by every analyzer.

Both are read-only inputs owned by the data provider. ``from_record`` maps a
row from the portfolio store (where the holding's market value lives in a
``value`` column) onto the dataclass, ignoring columns the engine does not use.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Holding:
    """A single position inside a portfolio.

    Attributes:
        symbol: Ticker or instrument identifier.
        market_value: Current market value in portfolio currency.
        sector: Sector classification, e.g. "Technology".
        region: Geographic classification, e.g. "North America".
        asset_class: Asset class, e.g. "Equity".
        weight_percent: Share of the portfolio total value, 0-100.
            Precomputed upstream; never derived here.
        name: Optional display name.
        quantity: Optional units held.
        price: Optional unit price.
        id: Optional record identifier.
    """

    symbol: str
    market_value: float
    sector: str
    region: str
    asset_class: str
    weight_percent: float
    name: str | None = None
    quantity: float | None = None
    price: float | None = None
    id: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Holding:
        market_value = record.get("market_value")
        if market_value is None:
            market_value = record.get("value")
        return cls(
            symbol=str(record["symbol"]),
            market_value=float(market_value),
            sector=str(record["sector"]),
            region=str(record["region"]),
            asset_class=str(record["asset_class"]),
            weight_percent=float(record["weight_percent"]),
            name=record.get("name"),
            quantity=_optional_float(record.get("quantity")),
            price=_optional_float(record.get("price")),
            id=_optional_str(record.get("id")),
        )


@dataclass(frozen=True)
class Portfolio:
    """Snapshot of a client portfolio.

    Attributes:
        id: Portfolio identifier.
        name: Display name.
        client_name: Owning client's display name.
        total_value: Total market value; must be > 0 for VaR and stress
            analysis.
        var_1d: One-day VaR in currency. Either sign is accepted; analyzers
            use its absolute value.
        margin_utilization: Fraction of available margin drawn, 0-1.
        holdings: Ordered holdings of the portfolio.
        pnl_today: Today's P&L, used by the dashboard summary.
        risk_level: Risk level stored alongside the portfolio, if any.
        client_id: Optional owning client identifier.
    """

    id: str
    name: str
    client_name: str
    total_value: float
    var_1d: float
    margin_utilization: float
    holdings: tuple[Holding, ...] = ()
    pnl_today: float = 0.0
    risk_level: str | None = None
    client_id: str | None = None

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        if not isinstance(self.holdings, tuple):
            object.__setattr__(self, "holdings", tuple(self.holdings))

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        holdings: Sequence[Holding | Mapping[str, Any]] = (),
    ) -> Portfolio:
        parsed = tuple(
            h if isinstance(h, Holding) else Holding.from_record(h) for h in holdings
        )
        return cls(
            id=str(record["id"]),
            name=str(record.get("name") or ""),
            client_name=str(record.get("client_name") or ""),
            total_value=float(record["total_value"]),
            var_1d=float(record.get("var_1d") or 0.0),
            margin_utilization=float(record.get("margin_utilization") or 0.0),
            holdings=parsed,
            pnl_today=float(record.get("pnl_today") or 0.0),
            risk_level=record.get("risk_level"),
            client_id=_optional_str(record.get("client_id")),
        )


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)
