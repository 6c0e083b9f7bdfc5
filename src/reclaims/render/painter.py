"""Projects zones onto a Renderer. Never changes zone state beyond handles."""

from typing import Optional

import structlog

from reclaims.config import RenderConfig
from reclaims.core.types import Side, Zone
from reclaims.render.adapter import Renderer, ZoneStyle

logger = structlog.get_logger(__name__)


class ZonePainter:
    """Draws, updates and removes zone visuals.

    Renderer failures are logged and ignored: the zone is the source of
    truth, not its drawing.
    """

    def __init__(self, renderer: Renderer, config: Optional[RenderConfig] = None):
        self.renderer = renderer
        self.config = config or RenderConfig()

    def style_for(self, zone: Zone, now_ts: int) -> ZoneStyle:
        """Side color, faded toward fully transparent once the zone decays."""
        cfg = self.config
        color = cfg.up_color if zone.side is Side.BULLISH else cfg.down_color
        transparency = cfg.transparency

        if zone.decay_start_time is not None:
            if cfg.decay_fade_seconds > 0:
                elapsed = max(0, now_ts - zone.decay_start_time) / 1000.0
                fade = min(1.0, elapsed / cfg.decay_fade_seconds)
            else:
                fade = 1.0
            transparency = int(round(transparency + (100 - transparency) * fade))

        return ZoneStyle(color=color, transparency=transparency, hollow=zone.is_decayed)

    def label_text(self, zone: Zone) -> Optional[str]:
        """Score label, or None while EV is below the display threshold."""
        if zone.ev < self.config.ev_hide_below_threshold:
            return None
        return f"EV {zone.ev} | SW {zone.swing}"

    def draw(self, zone: Zone, is_live: bool, now_ts: int) -> None:
        if zone.deleted:
            return
        if is_live and not self.config.show_current_zone:
            return

        style = self.style_for(zone, now_ts)
        try:
            handle = self.renderer.upsert_rectangle(
                zone.zone_id,
                zone.start_time,
                zone.fixed_side_price,
                self.config.extend_bars,
                zone.active_side_price,
                style,
            )
            if zone.rect_handle is None:
                zone.rect_handle = handle

            text = self.label_text(zone)
            if text is not None:
                handle = self.renderer.upsert_label(
                    zone.zone_id, zone.active_side_price, text, style
                )
                if zone.label_handle is None:
                    zone.label_handle = handle
        except Exception as e:
            logger.warning("Renderer draw failed", zone_id=zone.zone_id, error=str(e))

    def erase(self, zone: Zone) -> None:
        try:
            self.renderer.remove(zone.zone_id)
        except Exception as e:
            logger.warning("Renderer remove failed", zone_id=zone.zone_id, error=str(e))
