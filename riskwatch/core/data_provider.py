"""Data provider interface for portfolio and holding snapshots.

The engine never talks to a database itself. Hosting applications implement
PortfolioDataProvider over their store; InMemoryPortfolioProvider serves
fixed snapshots for tests, notebooks, and batch jobs that already hold the
data in memory.

Exceptions:
- PortfolioNotFoundError: raised for unknown portfolio ids
"""

from __future__ import annotations

import abc
from collections.abc import Iterable, Mapping
from typing import Any

from riskwatch.core.exceptions import PortfolioNotFoundError
from riskwatch.core.models import Holding, Portfolio


class PortfolioDataProvider(abc.ABC):
    """Abstract source of portfolio snapshots.

    Subclasses MUST override:
        list_portfolios() - every portfolio, in a stable order
        get_portfolio(portfolio_id) - one portfolio or PortfolioNotFoundError

    Subclasses MAY override:
        get_holdings(portfolio_id) - defaults to the portfolio's own holdings
    """

    @abc.abstractmethod
    def list_portfolios(self) -> list[Portfolio]:
        """Return all portfolios."""

    @abc.abstractmethod
    def get_portfolio(self, portfolio_id: str) -> Portfolio:
        """Return one portfolio.

        Raises:
            PortfolioNotFoundError: If no portfolio has this id.
        """

    def get_holdings(self, portfolio_id: str) -> list[Holding]:
        """Return the ordered holdings of a portfolio."""
        return list(self.get_portfolio(portfolio_id).holdings)


class InMemoryPortfolioProvider(PortfolioDataProvider):
    """Provider over an in-memory list of portfolios, keeping insertion order."""

    def __init__(self, portfolios: Iterable[Portfolio] = ()) -> None:
        self._portfolios: dict[str, Portfolio] = {p.id: p for p in portfolios}

    @classmethod
    def from_records(
        cls,
        portfolio_records: Iterable[Mapping[str, Any]],
        holding_records: Iterable[Mapping[str, Any]] = (),
    ) -> InMemoryPortfolioProvider:
        """Build from store rows; holdings are matched on ``portfolio_id``."""
        by_portfolio: dict[str, list[Mapping[str, Any]]] = {}
        for row in holding_records:
            by_portfolio.setdefault(str(row["portfolio_id"]), []).append(row)

        return cls(
            Portfolio.from_record(rec, by_portfolio.get(str(rec["id"]), []))
            for rec in portfolio_records
        )

    def add(self, portfolio: Portfolio) -> None:
        self._portfolios[portfolio.id] = portfolio

    def list_portfolios(self) -> list[Portfolio]:
        return list(self._portfolios.values())

    def get_portfolio(self, portfolio_id: str) -> Portfolio:
        try:
            return self._portfolios[portfolio_id]
        except KeyError:
            raise PortfolioNotFoundError(portfolio_id) from None
