"""Concentration risk analysis by sector, region, and asset class.

Aggregates holding weights per dimension and flags any bucket whose summed
fraction strictly exceeds the configured threshold. Severity is derived from
the observed concentration alone, using fixed breakpoints per dimension,
independent of which threshold was configured.

All functions are pure computation -- no I/O or database access.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass, field

import structlog

from riskwatch.core.config import Settings
from riskwatch.core.enums import ConcentrationDimension, Severity
from riskwatch.core.models import Holding, Portfolio

logger = structlog.get_logger(__name__)

DEFAULT_SECTOR_THRESHOLD = 0.30
DEFAULT_GEOGRAPHIC_THRESHOLD = 0.75

# (high, medium) breakpoints on the observed fraction
_SEVERITY_BREAKPOINTS: dict[ConcentrationDimension, tuple[float, float]] = {
    ConcentrationDimension.SECTOR: (0.50, 0.40),
    ConcentrationDimension.ASSET_CLASS: (0.50, 0.40),
    ConcentrationDimension.GEOGRAPHIC: (0.90, 0.85),
}


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConcentrationThresholds:
    """Per-dimension concentration cutoffs, as fractions (0.30 = 30%).

    Attributes:
        sector_threshold: Flag sectors above this fraction.
        geographic_threshold: Flag regions above this fraction.
        asset_class_threshold: Flag asset classes above this fraction.
            None disables asset-class findings.
    """

    sector_threshold: float = DEFAULT_SECTOR_THRESHOLD
    geographic_threshold: float = DEFAULT_GEOGRAPHIC_THRESHOLD
    asset_class_threshold: float | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ConcentrationThresholds:
        return cls(
            sector_threshold=settings.sector_threshold,
            geographic_threshold=settings.geographic_threshold,
            asset_class_threshold=settings.asset_class_threshold,
        )


@dataclass(frozen=True)
class ConcentrationFinding:
    """A single dimension bucket above its threshold.

    Attributes:
        dimension: Which grouping produced the finding.
        name: The bucket value, e.g. "Technology" or "Europe".
        concentration: Observed summed fraction, 0-1.
        threshold: Threshold the observation was compared against.
        severity: Derived from ``concentration`` via fixed breakpoints.
    """

    dimension: ConcentrationDimension
    name: str
    concentration: float
    threshold: float
    severity: Severity

    def to_dict(self) -> dict:
        return {
            "type": self.dimension.value,
            "name": self.name,
            "concentration": self.concentration,
            "threshold": self.threshold,
            "severity": self.severity.value,
        }


@dataclass
class ConcentrationReport:
    """Per-portfolio concentration breakdown plus its findings.

    Attributes:
        portfolio_id: Portfolio identifier.
        portfolio_name: Portfolio display name.
        client_name: Owning client's display name.
        sector_concentration: Summed fraction per sector.
        region_concentration: Summed fraction per region.
        asset_class_concentration: Summed fraction per asset class.
        findings: Buckets above threshold.
        risk_score: Sum of severity points over findings (0 if none).
    """

    portfolio_id: str
    portfolio_name: str
    client_name: str
    sector_concentration: dict[str, float]
    region_concentration: dict[str, float]
    asset_class_concentration: dict[str, float]
    findings: list[ConcentrationFinding] = field(default_factory=list)
    risk_score: int = 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["findings"] = [f.to_dict() for f in self.findings]
        return data


# ---------------------------------------------------------------------------
# Pure computation functions
# ---------------------------------------------------------------------------


def classify_concentration(
    dimension: ConcentrationDimension, concentration: float
) -> Severity:
    """Map an observed fraction to a severity for the given dimension."""
    high, medium = _SEVERITY_BREAKPOINTS[dimension]
    if concentration > high:
        return Severity.HIGH
    if concentration > medium:
        return Severity.MEDIUM
    return Severity.LOW


def aggregate_weights(
    holdings: Iterable[Holding],
) -> tuple[dict[str, float], dict[str, float], dict[str, float]]:
    """Sum holding fractions by sector, region, and asset class.

    Each holding contributes ``weight_percent / 100``. Dict insertion order
    follows the first holding seen for each bucket.

    Returns:
        (sector_map, region_map, asset_class_map)
    """
    sectors: dict[str, float] = {}
    regions: dict[str, float] = {}
    asset_classes: dict[str, float] = {}

    for holding in holdings:
        weight = holding.weight_percent / 100.0
        sectors[holding.sector] = sectors.get(holding.sector, 0.0) + weight
        regions[holding.region] = regions.get(holding.region, 0.0) + weight
        asset_classes[holding.asset_class] = (
            asset_classes.get(holding.asset_class, 0.0) + weight
        )

    return sectors, regions, asset_classes


def _flag(
    dimension: ConcentrationDimension,
    buckets: dict[str, float],
    threshold: float | None,
) -> list[ConcentrationFinding]:
    if threshold is None:
        return []
    return [
        ConcentrationFinding(
            dimension=dimension,
            name=name,
            concentration=concentration,
            threshold=threshold,
            severity=classify_concentration(dimension, concentration),
        )
        for name, concentration in buckets.items()
        if concentration > threshold
    ]


def analyze_concentration(
    portfolio: Portfolio,
    holdings: Sequence[Holding],
    thresholds: ConcentrationThresholds | None = None,
) -> list[ConcentrationFinding]:
    """Flag sector, geographic, and asset-class buckets above threshold.

    A bucket exactly at its threshold is not flagged. A portfolio with no
    holdings yields an empty list; an empty list means no concentration risk.

    Args:
        portfolio: The portfolio the holdings belong to (context only).
        holdings: The portfolio's holdings.
        thresholds: Cutoffs per dimension. Defaults to ConcentrationThresholds().

    Returns:
        Findings ordered sector, geographic, then asset class.
    """
    return _analyze(portfolio, holdings, thresholds)[3]


def build_concentration_report(
    portfolio: Portfolio,
    holdings: Sequence[Holding],
    thresholds: ConcentrationThresholds | None = None,
) -> ConcentrationReport:
    """Aggregated concentration maps plus findings for one portfolio.

    ``risk_score`` sums severity points (high=3, medium=2, low=1).
    """
    sectors, regions, asset_classes, findings = _analyze(
        portfolio, holdings, thresholds
    )
    return ConcentrationReport(
        portfolio_id=portfolio.id,
        portfolio_name=portfolio.name,
        client_name=portfolio.client_name,
        sector_concentration=sectors,
        region_concentration=regions,
        asset_class_concentration=asset_classes,
        findings=findings,
        risk_score=sum(f.severity.points for f in findings),
    )


def _analyze(
    portfolio: Portfolio,
    holdings: Sequence[Holding],
    thresholds: ConcentrationThresholds | None,
) -> tuple[dict[str, float], dict[str, float], dict[str, float], list[ConcentrationFinding]]:
    cfg = thresholds if thresholds is not None else ConcentrationThresholds()
    sectors, regions, asset_classes = aggregate_weights(holdings)

    findings = (
        _flag(ConcentrationDimension.SECTOR, sectors, cfg.sector_threshold)
        + _flag(ConcentrationDimension.GEOGRAPHIC, regions, cfg.geographic_threshold)
        + _flag(
            ConcentrationDimension.ASSET_CLASS,
            asset_classes,
            cfg.asset_class_threshold,
        )
    )

    logger.debug(
        "concentration_analyzed",
        portfolio_id=portfolio.id,
        holdings=len(holdings),
        findings=len(findings),
    )
    return sectors, regions, asset_classes, findings


def check_weight_consistency(
    holdings: Sequence[Holding],
    tolerance_pct: float = 1.0,
    portfolio_id: str | None = None,
) -> float:
    """Sum holding weight-percents and warn when they stray from 100.

    Advisory only: analyzers trust upstream weights, so this never raises
    and never alters analysis results. An empty holding list is not checked.

    Args:
        holdings: Holdings to check.
        tolerance_pct: Allowed distance from 100, in percentage points.
        portfolio_id: Included in the log event when given.

    Returns:
        The summed weight-percent.
    """
    total = sum(h.weight_percent for h in holdings)
    if holdings and abs(total - 100.0) > tolerance_pct:
        logger.warning(
            "weight_sum_mismatch",
            portfolio_id=portfolio_id,
            weight_sum=round(total, 4),
            tolerance_pct=tolerance_pct,
        )
    return total
