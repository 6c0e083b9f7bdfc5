"""Renderer boundary: the drawing surface the tracker projects zones onto."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple


@dataclass(frozen=True)
class ZoneStyle:
    """Visual style for one zone's rectangle and label."""
    color: Tuple[int, int, int]
    transparency: int
    hollow: bool = False


class Renderer(Protocol):
    """Chart surface. Calls are fire-and-forget apart from returned handles."""

    def upsert_rectangle(
        self,
        zone_id: str,
        from_time: int,
        from_price: float,
        to_time_extension: int,
        to_price: float,
        style: ZoneStyle,
    ) -> Any:
        ...

    def upsert_label(self, zone_id: str, anchor_price: float, text: str, style: ZoneStyle) -> Any:
        ...

    def remove(self, zone_id: str) -> None:
        ...


@dataclass
class Rectangle:
    handle: int
    from_time: int
    from_price: float
    to_time_extension: int
    to_price: float
    style: ZoneStyle


@dataclass
class Label:
    handle: int
    anchor_price: float
    text: str
    style: ZoneStyle


@dataclass
class InMemoryRenderer:
    """Renderer that keeps drawings in dicts keyed by zone id.

    Handles are assigned from a counter on first draw and reused on update.
    Every call is appended to ``calls`` as ``(method, zone_id)``.
    """
    rectangles: Dict[str, Rectangle] = field(default_factory=dict)
    labels: Dict[str, Label] = field(default_factory=dict)
    calls: List[Tuple[str, str]] = field(default_factory=list)
    _next_handle: int = 1

    def _handle(self, existing: Optional[Any]) -> int:
        if existing is not None:
            return existing.handle
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def upsert_rectangle(self, zone_id, from_time, from_price, to_time_extension, to_price, style):
        self.calls.append(("upsert_rectangle", zone_id))
        handle = self._handle(self.rectangles.get(zone_id))
        self.rectangles[zone_id] = Rectangle(
            handle=handle,
            from_time=from_time,
            from_price=from_price,
            to_time_extension=to_time_extension,
            to_price=to_price,
            style=style,
        )
        return handle

    def upsert_label(self, zone_id, anchor_price, text, style):
        self.calls.append(("upsert_label", zone_id))
        handle = self._handle(self.labels.get(zone_id))
        self.labels[zone_id] = Label(handle=handle, anchor_price=anchor_price, text=text, style=style)
        return handle

    def remove(self, zone_id):
        self.calls.append(("remove", zone_id))
        self.rectangles.pop(zone_id, None)
        self.labels.pop(zone_id, None)
