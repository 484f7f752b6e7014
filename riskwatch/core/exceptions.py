"""Exception hierarchy for the risk engine.

- RiskEngineError: base for all engine errors
- InvalidPortfolioError: portfolio violates a precondition (total_value <= 0)
- InvalidScenarioError: stress test called without scenarios
- InvalidRuleError: alert rule built with an unknown operator or type
- PortfolioNotFoundError: data provider has no portfolio with the given id

None of these are transient; callers should not retry.
"""


class RiskEngineError(Exception):
    """Base exception for all risk engine errors."""


class InvalidPortfolioError(RiskEngineError):
    """Raised when a portfolio's total value is zero, negative, or NaN."""

    def __init__(self, portfolio_id: str, total_value: float) -> None:
        self.portfolio_id = portfolio_id
        self.total_value = total_value
        super().__init__(
            f"Portfolio {portfolio_id!r} has non-positive total value {total_value!r}"
        )


class InvalidScenarioError(RiskEngineError):
    """Raised when a stress test is requested with no scenarios."""


class InvalidRuleError(RiskEngineError):
    """Raised when an alert rule cannot be evaluated as configured."""


class PortfolioNotFoundError(RiskEngineError):
    """Raised by a data provider when the requested portfolio does not exist."""

    def __init__(self, portfolio_id: str) -> None:
        self.portfolio_id = portfolio_id
        super().__init__(f"Portfolio {portfolio_id!r} not found")
