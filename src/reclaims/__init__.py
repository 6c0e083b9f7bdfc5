"""Reclaim zone tracker: bullish/bearish reclaim zones with EV and swing scoring."""

from reclaims.engine import ReclaimEngine

__version__ = "0.1.0"

__all__ = ["ReclaimEngine", "__version__"]
