"""Reclaim engine: feeds events to the bullish and bearish trackers.

Pipeline per event:
FeedEvent -> validation -> ReclaimTracker(up) + ReclaimTracker(down) -> Renderer
"""

from collections import deque
from typing import Deque, Dict, Iterable, List, Optional

import structlog

from reclaims.config import EngineConfig, RenderConfig
from reclaims.core.tracker import ReclaimTracker
from reclaims.core.types import Bar, FeedEvent, Sample, Side, Zone
from reclaims.render.adapter import Renderer
from reclaims.render.painter import ZonePainter

logger = structlog.get_logger(__name__)


class ReclaimEngine:
    """Stateful annotation engine for one instrument.

    Events must arrive in order and from a single thread. An event is
    either applied to both sides or skipped as a whole.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        renderer: Optional[Renderer] = None,
        render_config: Optional[RenderConfig] = None,
    ):
        """Initialize engine.

        Args:
            config: Engine configuration, defaults if None
            renderer: Drawing surface; zones are tracked without one
            render_config: Drawing options, defaults if None
        """
        self.config = config or EngineConfig()
        self.painter = ZonePainter(renderer, render_config) if renderer is not None else None

        self.up = ReclaimTracker(Side.BULLISH, self.config, self.painter)
        self.down = ReclaimTracker(Side.BEARISH, self.config, self.painter)

        window = max(self.config.opposite_bar_lookback + 1, self.config.overlap_bars, 1)
        self.closed_bars: Deque[Bar] = deque(maxlen=window)

        self.last_bar_index: Optional[int] = None
        self.last_ts: Optional[int] = None
        self.events_applied = 0
        self.events_skipped = 0

    @property
    def trackers(self) -> Dict[Side, ReclaimTracker]:
        return {Side.BULLISH: self.up, Side.BEARISH: self.down}

    @property
    def started(self) -> bool:
        return self.up.started and self.down.started

    def _skip(self, reason: str, event: FeedEvent) -> bool:
        self.events_skipped += 1
        logger.warning(
            "Feed event skipped",
            reason=reason,
            bar_index=event.bar_index,
            ts=event.ts,
            last_bar_index=self.last_bar_index,
        )
        return False

    def _validate(self, event: FeedEvent) -> Optional[str]:
        if event.tick_size is None or event.tick_size <= 0:
            return "non_positive_tick_size"
        if self.last_bar_index is not None and event.bar_index < self.last_bar_index:
            return "bar_index_backwards"
        if self.last_ts is not None and event.ts < self.last_ts:
            return "timestamp_backwards"
        if event.is_new_bar and event.bar_index == self.last_bar_index:
            return "duplicate_bar"
        if self.started and event.is_new_bar and event.prev_bar is None:
            return "missing_previous_bar"
        return None

    def on_event(self, event: FeedEvent) -> bool:
        """Process one feed event.

        Returns:
            True if the event was applied, False if it was skipped
        """
        if self.started and self.config.update_on_bar_close and not event.is_new_bar:
            # Intrabar tick while updating on bar close only
            return False

        reason = self._validate(event)
        if reason is not None:
            return self._skip(reason, event)

        self.last_bar_index = event.bar_index
        self.last_ts = event.ts

        if not self.started:
            if event.is_new_bar and event.prev_bar is not None:
                self.closed_bars.append(event.prev_bar)
            self.up.start(event.price, event.ts)
            self.down.start(event.price, event.ts)
            self.events_applied += 1
            logger.info("Engine started", price=event.price, bar_index=event.bar_index)
            return True

        closed_bar = event.prev_bar if event.is_new_bar else None
        if closed_bar is not None:
            self.closed_bars.append(closed_bar)

        if self.config.update_on_bar_close:
            sample = Sample.from_bar(event.prev_bar)
        else:
            sample = Sample.from_price(event.price)

        recent = list(self.closed_bars)
        for tracker in (self.up, self.down):
            tracker.process(
                sample,
                price=event.price,
                tick_size=event.tick_size,
                ts=event.ts,
                closed_bar=closed_bar,
                closed_bars=recent,
            )

        self.events_applied += 1
        return True

    def run(self, events: Iterable[FeedEvent]) -> int:
        """Feed every event in order.

        Returns:
            Number of applied events
        """
        applied = 0
        for event in events:
            if self.on_event(event):
                applied += 1
        return applied

    def zones(self, side: Side) -> List[Optional[Zone]]:
        """Newest-first history snapshot for *side*."""
        return self.trackers[side].zones()
