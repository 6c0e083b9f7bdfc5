"""Reclaim tracker: the per-side state machine.

One pass per event, in this order:
1. Update every zone (live zone first, then retired zones newest-first)
2. Score retired zones (bar close only)
3. Rotate the live zone into history if the trigger fires (bar close only)
4. Project zones onto the painter
"""

from typing import List, Optional, Sequence

import structlog

from reclaims.config import EngineConfig
from reclaims.core.history import ZoneHistory
from reclaims.core.scorer import PullbackScorer
from reclaims.core.trigger import NewZoneTrigger
from reclaims.core.types import DIRECTIONS, Bar, Sample, Side, Zone
from reclaims.core.updater import ZoneUpdater

logger = structlog.get_logger(__name__)


class ReclaimTracker:
    """Owns one side's zone history and runs the update/score/rotate cycle."""

    def __init__(self, side: Side, config: Optional[EngineConfig] = None, painter=None):
        """Initialize tracker.

        Args:
            side: BULLISH or BEARISH
            config: Engine configuration, defaults if None
            painter: Optional ZonePainter; zone state never depends on it
        """
        self.side = side
        self.config = config or EngineConfig()
        self.direction = DIRECTIONS[side]
        self.painter = painter

        self.history = ZoneHistory(self.config.max_zones, on_evict=self._erase)
        self.updater = ZoneUpdater(self.direction, self.config.min_zone_size_ticks)
        self.scorer = PullbackScorer(
            self.direction,
            self.config.ev_pullback_ticks,
            self.config.swing_pullback_ticks,
        )
        self.trigger = NewZoneTrigger(
            threshold=self.config.new_zone_retracement_threshold,
            opposite_bar_filter=self.config.opposite_bar_filter,
            opposite_bar_lookback=self.config.opposite_bar_lookback,
            overlap_bars=self.config.overlap_bars,
        )
        self._zone_counter = 0

    @property
    def started(self) -> bool:
        return self.history.head is not None

    def _generate_zone_id(self) -> str:
        """Generate unique zone ID."""
        self._zone_counter += 1
        return f"{self.side.value}-{self._zone_counter}"

    def _new_zone(self, price: float, ts: int) -> Zone:
        return Zone.seed(self._generate_zone_id(), self.side, price, ts)

    def _erase(self, zone: Zone) -> None:
        if self.painter is not None:
            self.painter.erase(zone)

    def start(self, price: float, ts: int) -> Zone:
        """Install the first live zone at *price*."""
        zone = self._new_zone(price, ts)
        self.history.set_head(zone)
        if self.painter is not None:
            self.painter.draw(zone, is_live=True, now_ts=ts)
        logger.debug("Tracker started", side=self.side.value, price=price)
        return zone

    def process(
        self,
        sample: Sample,
        price: float,
        tick_size: float,
        ts: int,
        closed_bar: Optional[Bar] = None,
        closed_bars: Sequence[Bar] = (),
    ) -> Optional[Zone]:
        """Run one pass.

        Args:
            sample: Prices driving the boundary updates
            price: Last trade price, seeds a new live zone on rotation
            tick_size: Instrument tick size
            ts: Event timestamp (epoch ms)
            closed_bar: The bar that just closed; None when this is not a bar close
            closed_bars: Recent closed bars, oldest to newest, for the trigger filters

        Returns:
            The zone retired into history on this pass, if any
        """
        if not self.started:
            raise RuntimeError(f"{self.side.value} tracker processed before start()")

        self._update(sample, tick_size, ts)

        retired = None
        if closed_bar is not None:
            for zone in self.history.retired():
                self.scorer.score(zone, closed_bar, tick_size)
            if self.trigger.should_rotate(self.history.head, closed_bars):
                retired = self._rotate(price, ts)

        self._draw(ts)
        return retired

    def _update(self, sample: Sample, tick_size: float, ts: int) -> None:
        for index, zone in self.history.enumerate_zones():
            if index == 0:
                if self.updater.update_live(zone, sample, tick_size, ts):
                    logger.debug(
                        "Live zone reset",
                        side=self.side.value,
                        zone_id=zone.zone_id,
                        fixed=zone.fixed_side_price,
                    )
            elif self.updater.update_retired(zone, sample, tick_size, ts):
                self._erase(zone)

    def _rotate(self, price: float, ts: int) -> Zone:
        retired = self.history.head
        new_head = self._new_zone(price, ts)
        evicted = self.history.rotate(new_head)
        logger.debug(
            "Zone rotated",
            side=self.side.value,
            retired=retired.zone_id,
            max_height=retired.max_height,
            max_retracement=retired.max_retracement,
            new_zone=new_head.zone_id,
            evicted=evicted.zone_id if evicted is not None else None,
        )
        return retired

    def _draw(self, ts: int) -> None:
        if self.painter is None:
            return
        for index, zone in self.history.enumerate_zones():
            self.painter.draw(zone, is_live=index == 0, now_ts=ts)

    def zones(self) -> List[Optional[Zone]]:
        """Newest-first snapshot of the history slots."""
        return self.history.snapshot()
