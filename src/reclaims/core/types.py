"""Data contracts for the reclaim tracking engine.

Defines the types shared by every stage of one event pass:
Feed(FeedEvent) -> ZoneUpdater -> PullbackScorer -> NewZoneTrigger -> ZonePainter
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Side(Enum):
    """Which way a zone's active side extends from its fixed side."""
    BULLISH = "up"
    BEARISH = "down"


def to_ticks(delta: float, tick_size: float) -> int:
    """Convert a price delta to whole ticks, truncating toward zero.

    The quotient is rounded to 9 decimals first so that tick-aligned float
    prices (0.3 / 0.1 == 2.9999999999999996) do not lose a tick.
    """
    return int(round(delta / tick_size, 9))


@dataclass(frozen=True)
class Direction:
    """Side capability: sign multiplier and the comparisons derived from it.

    Bullish zones have the active side above the fixed side (sign +1),
    bearish zones below it (sign -1).
    """
    side: Side
    sign: int

    def favorable(self, high: float, low: float) -> float:
        """Extreme that extends the active side (high for bullish)."""
        return high if self.sign > 0 else low

    def adverse(self, high: float, low: float) -> float:
        """Extreme that moves toward the fixed side (low for bullish)."""
        return low if self.sign > 0 else high

    def ticks(self, from_price: float, to_price: float, tick_size: float) -> int:
        """Signed tick distance from *from_price* to *to_price* along the side."""
        return to_ticks(self.sign * (to_price - from_price), tick_size)

    def offset(self, price: float, ticks: int, tick_size: float) -> float:
        """Price *ticks* away from *price* in the active direction."""
        return price + self.sign * ticks * tick_size

    def reaches(self, price: float, level: float) -> bool:
        """True if *price* is at *level* or past it toward the fixed side."""
        return self.sign * (price - level) <= 0

    def tighten(self, active: float, price: float, fixed: float) -> float:
        """Move *active* toward *fixed* if *price* is inside it, never past *fixed*."""
        if self.sign * (price - active) >= 0:
            return active
        if self.sign > 0:
            return max(price, fixed)
        return min(price, fixed)


BULLISH = Direction(Side.BULLISH, 1)
BEARISH = Direction(Side.BEARISH, -1)

DIRECTIONS: Dict[Side, Direction] = {
    Side.BULLISH: BULLISH,
    Side.BEARISH: BEARISH,
}


@dataclass
class Bar:
    """OHLCV bar representation."""
    ts: int  # epoch milliseconds, bar open time
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def is_doji(self) -> bool:
        """True if the bar closed where it opened."""
        return self.close == self.open

    @property
    def is_bullish(self) -> bool:
        """True if close > open."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """True if close < open."""
        return self.close < self.open

    def overlaps(self, other: "Bar") -> bool:
        """True if the high-low ranges of both bars intersect."""
        return not (other.low >= self.high or other.high <= self.low)


@dataclass
class FeedEvent:
    """One inbound price/bar event from the feed.

    ``prev_bar`` is the most recently closed bar; it is None until the feed
    has closed at least one bar.
    """
    price: float                           # last trade price
    bar: Bar                               # currently forming bar
    prev_bar: Optional[Bar]
    tick_size: float
    bar_index: int                         # index of the forming bar, monotonic
    ts: int                                # wall clock, epoch milliseconds
    is_new_bar: bool = False


@dataclass
class Sample:
    """Prices driving one update pass."""
    high: float
    low: float
    close: float

    @classmethod
    def from_bar(cls, bar: Bar) -> "Sample":
        return cls(high=bar.high, low=bar.low, close=bar.close)

    @classmethod
    def from_price(cls, price: float) -> "Sample":
        return cls(high=price, low=price, close=price)


@dataclass
class Zone:
    """A reclaim zone: fixed anchor, moving active side and its scores.

    Attributes:
        zone_id: Correlation key shared with the renderer
        side: BULLISH or BEARISH, never changes
        fixed_side_price: Anchor boundary
        active_side_price: Boundary tracking the extreme since the last reset
        start_time: Left anchor (epoch ms), moves with every reset
        current_height: Ticks between active and fixed side
        max_height: Largest current_height since the last reset
        max_retracement: Largest pullback from max_height to the close, in ticks
        ev: Completed pullback-then-touch cycles at the EV threshold
        swing: Completed pullback-then-touch cycles at the swing threshold
        decay_start_time: When the zone first shrank to the minimum size
        deleted: Zone has been reclaimed
        rect_handle: Renderer's rectangle handle
        label_handle: Renderer's label handle
    """
    zone_id: str
    side: Side
    fixed_side_price: float
    active_side_price: float
    start_time: int
    current_height: int = 0
    max_height: int = 0
    max_retracement: int = 0
    ev: int = 0
    increase_ev_on_next_touch: bool = False
    swing: int = 0
    increase_swing_on_next_touch: bool = False
    decay_start_time: Optional[int] = None
    deleted: bool = False
    rect_handle: Optional[Any] = None
    label_handle: Optional[Any] = None

    @classmethod
    def seed(cls, zone_id: str, side: Side, price: float, ts: int) -> "Zone":
        """Fresh zone with both boundaries at *price* and zeroed scores."""
        return cls(
            zone_id=zone_id,
            side=side,
            fixed_side_price=price,
            active_side_price=price,
            start_time=ts,
        )

    @property
    def direction(self) -> Direction:
        return DIRECTIONS[self.side]

    @property
    def is_decayed(self) -> bool:
        return self.decay_start_time is not None

    def reset(self, price: float, ts: int) -> None:
        """Collapse both boundaries onto *price* and restart the zone at *ts*."""
        self.fixed_side_price = price
        self.active_side_price = price
        self.start_time = ts
        self.current_height = 0
        self.max_height = 0
        self.max_retracement = 0
        self.ev = 0
        self.increase_ev_on_next_touch = False
        self.swing = 0
        self.increase_swing_on_next_touch = False
        self.decay_start_time = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reports."""
        data = asdict(self)
        data["side"] = self.side.value
        data.pop("rect_handle")
        data.pop("label_handle")
        return data

    def __repr__(self) -> str:
        return (
            f"Zone({self.zone_id}, "
            f"fixed={self.fixed_side_price:.6f}, active={self.active_side_price:.6f}, "
            f"h={self.current_height}/{self.max_height}, ev={self.ev}, swing={self.swing}"
            f"{', deleted' if self.deleted else ''})"
        )
