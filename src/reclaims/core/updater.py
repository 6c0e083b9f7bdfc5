"""Zone update engine: boundary moves, heights, retracement and reclaim detection."""

import structlog

from reclaims.core.types import Direction, Sample, Zone

logger = structlog.get_logger(__name__)


class ZoneUpdater:
    """Recomputes one side's zones for a single update pass.

    The live zone follows price; retired zones only tighten toward their
    fixed side until they are reclaimed.
    """

    def __init__(self, direction: Direction, min_zone_size_ticks: int):
        self.direction = direction
        self.min_zone_size_ticks = min_zone_size_ticks

    def update_live(self, zone: Zone, sample: Sample, tick_size: float, ts: int) -> bool:
        """Update the index-0 zone.

        Args:
            zone: Live zone
            sample: Prices for this pass
            tick_size: Instrument tick size
            ts: Timestamp used when the zone is reset

        Returns:
            True if the fixed side was breached and the zone was reset
        """
        d = self.direction

        zone.active_side_price = d.favorable(sample.high, sample.low)
        zone.current_height = d.ticks(zone.fixed_side_price, zone.active_side_price, tick_size)
        if zone.current_height > zone.max_height:
            zone.max_height = zone.current_height

        peak = d.offset(zone.fixed_side_price, zone.max_height, tick_size)
        retracement = d.ticks(sample.close, peak, tick_size)
        if retracement > zone.max_retracement:
            zone.max_retracement = retracement

        breach = d.adverse(sample.high, sample.low)
        if d.reaches(breach, zone.fixed_side_price):
            zone.reset(breach, ts)
            return True
        return False

    def update_retired(self, zone: Zone, sample: Sample, tick_size: float, ts: int) -> bool:
        """Update a zone at index >= 1.

        Args:
            zone: Retired zone
            sample: Prices for this pass
            tick_size: Instrument tick size
            ts: Timestamp stamped on first decay

        Returns:
            True if the zone was reclaimed by this pass
        """
        if zone.deleted:
            return False

        d = self.direction
        inward = d.adverse(sample.high, sample.low)

        zone.active_side_price = d.tighten(zone.active_side_price, inward, zone.fixed_side_price)
        zone.current_height = max(
            0, d.ticks(zone.fixed_side_price, zone.active_side_price, tick_size)
        )

        if zone.decay_start_time is None and zone.current_height <= self.min_zone_size_ticks:
            zone.decay_start_time = ts

        if d.reaches(inward, zone.fixed_side_price) or d.reaches(
            zone.active_side_price, zone.fixed_side_price
        ):
            zone.deleted = True
            logger.debug(
                "Zone reclaimed",
                zone_id=zone.zone_id,
                fixed=zone.fixed_side_price,
                ev=zone.ev,
                swing=zone.swing,
            )
            return True
        return False
