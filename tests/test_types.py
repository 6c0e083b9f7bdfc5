"""
Tests for tick arithmetic, the side capability and bar helpers.
"""
import pytest

from reclaims.core.types import BEARISH, BULLISH, Bar, Side, Zone, to_ticks


def make_bar(open_: float, high: float, low: float, close: float, ts: int = 0) -> Bar:
    """Helper to create bars."""
    return Bar(ts=ts, open=open_, high=high, low=low, close=close)


class TestToTicks:
    """Tests for tick conversion."""

    def test_exact_ticks(self):
        """Test that whole tick deltas convert exactly."""
        assert to_ticks(100.50 - 100.00, 0.25) == 2

    def test_truncates_partial_tick(self):
        """Test truncation of a partial tick."""
        assert to_ticks(0.60, 0.25) == 2

    def test_truncates_toward_zero_for_negative(self):
        """Test that negative deltas truncate toward zero."""
        assert to_ticks(-0.60, 0.25) == -2

    def test_float_noise_does_not_lose_a_tick(self):
        """Test that 0.3 / 0.1 counts as three ticks."""
        assert to_ticks(0.3, 0.1) == 3


class TestDirection:
    """Tests for the bullish/bearish capability."""

    def test_extremes(self):
        """Test favorable/adverse extreme selection."""
        assert BULLISH.favorable(101.0, 99.0) == 101.0
        assert BULLISH.adverse(101.0, 99.0) == 99.0
        assert BEARISH.favorable(101.0, 99.0) == 99.0
        assert BEARISH.adverse(101.0, 99.0) == 101.0

    def test_ticks_are_positive_in_active_direction(self):
        """Test signed distances for both sides."""
        assert BULLISH.ticks(100.0, 101.0, 0.25) == 4
        assert BEARISH.ticks(100.0, 99.0, 0.25) == 4
        assert BEARISH.ticks(100.0, 101.0, 0.25) == -4

    def test_retracement_arithmetic(self):
        """Test retracement from a 4-tick max height back to the fixed side."""
        peak = BULLISH.offset(100.00, 4, 0.25)
        assert peak == pytest.approx(101.00)
        assert BULLISH.ticks(100.00, peak, 0.25) == 4

    def test_reaches(self):
        """Test reaching a level toward the fixed side."""
        assert BULLISH.reaches(100.0, 100.0)
        assert BULLISH.reaches(99.75, 100.0)
        assert not BULLISH.reaches(100.25, 100.0)
        assert BEARISH.reaches(100.25, 100.0)
        assert not BEARISH.reaches(99.75, 100.0)

    def test_tighten_moves_toward_fixed_only(self):
        """Test that tighten never widens and never crosses fixed."""
        assert BULLISH.tighten(102.0, 101.0, 100.0) == 101.0
        assert BULLISH.tighten(102.0, 103.0, 100.0) == 102.0
        assert BULLISH.tighten(102.0, 99.0, 100.0) == 100.0
        assert BEARISH.tighten(98.0, 99.0, 100.0) == 99.0
        assert BEARISH.tighten(98.0, 97.0, 100.0) == 98.0
        assert BEARISH.tighten(98.0, 101.0, 100.0) == 100.0


class TestBar:
    """Tests for bar helpers."""

    def test_doji_and_color(self):
        """Test doji/bullish/bearish classification."""
        assert make_bar(100, 101, 99, 100).is_doji
        assert make_bar(100, 101, 99, 100.5).is_bullish
        assert make_bar(100, 101, 99, 99.5).is_bearish

    def test_overlap(self):
        """Test range overlap."""
        last = make_bar(100, 101, 99, 100.5)
        assert last.overlaps(make_bar(100, 100.5, 99.5, 100))
        assert not last.overlaps(make_bar(102, 103, 101, 102.5))
        assert not last.overlaps(make_bar(98, 99, 97, 98.5))


class TestZone:
    """Tests for zone construction and reset."""

    def test_seed(self):
        """Test that a seeded zone starts flat and unscored."""
        zone = Zone.seed("up-1", Side.BULLISH, 100.0, ts=5)

        assert zone.fixed_side_price == zone.active_side_price == 100.0
        assert zone.start_time == 5
        assert zone.ev == zone.swing == 0
        assert zone.max_height == zone.max_retracement == 0
        assert not zone.deleted
        assert zone.direction is BULLISH

    def test_reset_clears_decay(self):
        """Test that reset clears heights, scores and decay."""
        zone = Zone.seed("down-1", Side.BEARISH, 100.0, ts=0)
        zone.max_height = 6
        zone.max_retracement = 3
        zone.decay_start_time = 10
        zone.increase_ev_on_next_touch = True

        zone.reset(101.0, ts=20)

        assert zone.fixed_side_price == zone.active_side_price == 101.0
        assert zone.start_time == 20
        assert zone.max_height == zone.max_retracement == 0
        assert zone.decay_start_time is None
        assert not zone.increase_ev_on_next_touch

    def test_to_dict(self):
        """Test report serialization."""
        zone = Zone.seed("up-1", Side.BULLISH, 100.0, ts=0)
        zone.rect_handle = 7

        data = zone.to_dict()

        assert data["side"] == "up"
        assert data["zone_id"] == "up-1"
        assert "rect_handle" not in data
