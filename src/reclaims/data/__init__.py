"""Bar loading and replay feed."""
from .candles import load_bars, resample_bars, iter_bar_events, iter_tick_events

__all__ = [
    "load_bars",
    "resample_bars",
    "iter_bar_events",
    "iter_tick_events",
]
