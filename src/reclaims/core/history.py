"""Fixed-capacity, newest-first zone history for one side."""

from typing import Callable, Iterator, List, Optional, Tuple

from reclaims.config import ConfigError
from reclaims.core.types import Zone


class ZoneHistory:
    """Newest-first ring of zones.

    Index 0 is the live zone, indices >= 1 are retired zones. Empty slots are
    None. Rotation moves the ring head instead of copying every slot, so
    ``history[i]`` after ``rotate`` is the zone that was at ``history[i - 1]``.
    """

    def __init__(self, capacity: int, on_evict: Optional[Callable[[Zone], None]] = None):
        """Initialize history.

        Args:
            capacity: Number of slots, fixed for the lifetime of the history
            on_evict: Called with the zone in the last slot before it is dropped
        """
        if capacity <= 0:
            raise ConfigError(f"History capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._slots: List[Optional[Zone]] = [None] * capacity
        self._head = 0
        self._on_evict = on_evict

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._capacity

    def _slot(self, index: int) -> int:
        if not 0 <= index < self._capacity:
            raise IndexError(f"History index {index} out of range 0..{self._capacity - 1}")
        return (self._head + index) % self._capacity

    def __getitem__(self, index: int) -> Optional[Zone]:
        return self._slots[self._slot(index)]

    def __iter__(self) -> Iterator[Optional[Zone]]:
        for i in range(self._capacity):
            yield self[i]

    @property
    def head(self) -> Optional[Zone]:
        """The live zone at index 0."""
        return self[0]

    def set_head(self, zone: Zone) -> None:
        """Install *zone* at index 0 without shifting (stream start)."""
        self._slots[self._head] = zone

    def rotate(self, new_head: Zone) -> Optional[Zone]:
        """Shift every zone one slot toward the tail and install *new_head*.

        The zone at the last index is evicted (after ``on_evict``) and returned.
        """
        tail = self._slot(self._capacity - 1)
        evicted = self._slots[tail]
        if evicted is not None and self._on_evict is not None:
            self._on_evict(evicted)

        # The tail slot becomes the new head slot.
        self._head = tail
        self._slots[self._head] = new_head
        return evicted

    def enumerate_zones(self) -> Iterator[Tuple[int, Zone]]:
        """Yield (index, zone) for occupied slots, newest first."""
        for i, zone in enumerate(self):
            if zone is not None:
                yield i, zone

    def retired(self) -> List[Zone]:
        """Occupied slots at index >= 1, newest first."""
        return [zone for i, zone in self.enumerate_zones() if i >= 1]

    def snapshot(self) -> List[Optional[Zone]]:
        """Newest-first list of slots."""
        return list(self)
