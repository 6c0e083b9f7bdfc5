"""Pullback/touch scoring for retired zones.

A counter arms when a closed bar pulls away from the zone's active side by at
least its threshold, and scores when a later bar comes back to touch the
active side. EV and swing run the same cycle with independent thresholds.
"""

from reclaims.core.types import Bar, Direction, Zone


class PullbackScorer:
    """Updates EV and swing counters on bar close."""

    def __init__(self, direction: Direction, ev_pullback_ticks: int, swing_pullback_ticks: int):
        self.direction = direction
        self.ev_pullback_ticks = ev_pullback_ticks
        self.swing_pullback_ticks = swing_pullback_ticks

    def pullback_ticks(self, zone: Zone, bar: Bar, tick_size: float) -> int:
        """Ticks from the active side to the bar's extreme away from the zone."""
        d = self.direction
        return d.ticks(zone.active_side_price, d.favorable(bar.high, bar.low), tick_size)

    def touches(self, zone: Zone, bar: Bar) -> bool:
        """True if the bar came back to (or through) the active side."""
        d = self.direction
        return d.reaches(d.adverse(bar.high, bar.low), zone.active_side_price)

    def score(self, zone: Zone, bar: Bar, tick_size: float) -> None:
        if zone.deleted:
            return

        pullback = self.pullback_ticks(zone, bar, tick_size)
        touched = self.touches(zone, bar)

        if not zone.increase_ev_on_next_touch:
            if pullback >= self.ev_pullback_ticks:
                zone.increase_ev_on_next_touch = True
        elif touched:
            zone.ev += 1
            zone.increase_ev_on_next_touch = False

        if not zone.increase_swing_on_next_touch:
            if pullback >= self.swing_pullback_ticks:
                zone.increase_swing_on_next_touch = True
        elif touched:
            zone.swing += 1
            zone.increase_swing_on_next_touch = False
