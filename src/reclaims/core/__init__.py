"""Core reclaim components: types, history, updater, scorer, trigger, tracker."""

from .types import (
    Side,
    Direction,
    BULLISH,
    BEARISH,
    Bar,
    FeedEvent,
    Sample,
    Zone,
    to_ticks,
)
from .history import ZoneHistory
from .updater import ZoneUpdater
from .scorer import PullbackScorer
from .trigger import NewZoneTrigger
from .tracker import ReclaimTracker

__all__ = [
    "Side",
    "Direction",
    "BULLISH",
    "BEARISH",
    "Bar",
    "FeedEvent",
    "Sample",
    "Zone",
    "to_ticks",
    "ZoneHistory",
    "ZoneUpdater",
    "PullbackScorer",
    "NewZoneTrigger",
    "ReclaimTracker",
]
