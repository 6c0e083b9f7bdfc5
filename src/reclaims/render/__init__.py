"""Renderer boundary and zone painter."""
from .adapter import InMemoryRenderer, Renderer, ZoneStyle
from .painter import ZonePainter

__all__ = [
    "InMemoryRenderer",
    "Renderer",
    "ZoneStyle",
    "ZonePainter",
]
