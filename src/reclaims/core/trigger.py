"""New-zone trigger: decides when the live zone is retired into history."""

from typing import Optional, Sequence

from reclaims.core.types import Bar, Zone


def opposite_bar_ok(closed_bars: Sequence[Bar], lookback: int) -> bool:
    """Check that the last closed bar reverses the previous non-doji bar.

    Args:
        closed_bars: Closed bars, oldest to newest
        lookback: How many bars before the last one to scan

    Returns:
        False if the last bar is a doji or points the same way as the nearest
        preceding non-doji bar. True if it points the other way, or if no
        non-doji bar is found within *lookback* bars.
    """
    if not closed_bars:
        return False

    last = closed_bars[-1]
    if last.is_doji:
        return False

    previous = _previous_non_doji(closed_bars[:-1], lookback)
    if previous is None:
        # Nothing but dojis: treat as indecision and start fresh
        return True
    return previous.is_bullish != last.is_bullish


def _previous_non_doji(bars: Sequence[Bar], lookback: int) -> Optional[Bar]:
    for bar in list(bars)[::-1][:lookback]:
        if not bar.is_doji:
            return bar
    return None


def bars_overlap(closed_bars: Sequence[Bar], number_of_bars: int) -> bool:
    """Check that each of the previous bars overlaps the last bar's range.

    Args:
        closed_bars: Closed bars, oldest to newest
        number_of_bars: Window size including the last bar

    Returns:
        True if every bar in the window overlaps the last one. False when
        there are fewer bars than the window.
    """
    if number_of_bars <= 0:
        return True
    if len(closed_bars) < number_of_bars:
        return False

    last = closed_bars[-1]
    window = closed_bars[len(closed_bars) - number_of_bars:-1]
    return all(last.overlaps(bar) for bar in window)


class NewZoneTrigger:
    """Rotation condition for one side, evaluated once per bar close."""

    def __init__(
        self,
        threshold: int,
        opposite_bar_filter: bool = False,
        opposite_bar_lookback: int = 10,
        overlap_bars: int = 0,
    ):
        """Initialize trigger.

        Args:
            threshold: Minimum max_retracement (ticks) on the live zone
            opposite_bar_filter: Require the last bar to reverse the prior bar
            opposite_bar_lookback: Bars scanned for a non-doji predecessor
            overlap_bars: Require this many mutually overlapping bars (0 = off)
        """
        self.threshold = threshold
        self.opposite_bar_filter = opposite_bar_filter
        self.opposite_bar_lookback = opposite_bar_lookback
        self.overlap_bars = overlap_bars

    def should_rotate(self, head: Optional[Zone], closed_bars: Sequence[Bar]) -> bool:
        if head is None or head.max_retracement < self.threshold:
            return False
        if self.opposite_bar_filter and not opposite_bar_ok(closed_bars, self.opposite_bar_lookback):
            return False
        if self.overlap_bars and not bars_overlap(closed_bars, self.overlap_bars):
            return False
        return True
