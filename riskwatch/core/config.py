"""Pydantic-settings configuration for the risk engine.

Loads rule thresholds and engine defaults from the environment (prefix
``RISKWATCH_``) or a local .env file. Every value has a default matching the
behaviour of the original risk dashboard, so an empty environment works.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RISKWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Concentration thresholds (fractions of portfolio value)
    sector_threshold: float = Field(default=0.30, ge=0.0, le=1.0)
    geographic_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    asset_class_threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    # Stress testing
    default_market_shock: float = -0.10

    # VaR
    default_confidence_level: float = 0.95

    # Holding weight-percent sanity check (percentage points away from 100)
    weight_tolerance_pct: float = Field(default=1.0, ge=0.0)

    # Dashboard
    top_risk_portfolios: int = Field(default=5, ge=1)

    # Logging
    log_level: str = "INFO"


# Singleton instance
settings = Settings()
