"""riskwatch -- portfolio risk rule engine.

Pure analyzers for concentration risk, simplified VaR classification, and
scenario stress testing over portfolio/holding snapshots.
"""

__version__ = "0.1.0"
