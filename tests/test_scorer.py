"""
Tests for EV and swing pullback/touch scoring.
"""
import pytest

from reclaims.core.scorer import PullbackScorer
from reclaims.core.types import BEARISH, BULLISH, Bar, Side, Zone

TICK = 0.25


def make_bar(high: float, low: float, ts: int = 0) -> Bar:
    """Helper to create a bar from its range."""
    return Bar(ts=ts, open=low, high=high, low=low, close=high)


def make_zone(side: Side, fixed: float, active: float) -> Zone:
    """Helper to create a retired zone."""
    zone = Zone.seed(f"{side.value}-1", side, fixed, ts=0)
    zone.active_side_price = active
    return zone


@pytest.fixture
def up_scorer():
    """Bullish scorer: EV at 3 ticks, swing at 8 ticks."""
    return PullbackScorer(BULLISH, ev_pullback_ticks=3, swing_pullback_ticks=8)


@pytest.fixture
def down_scorer():
    """Bearish scorer: EV at 3 ticks, swing at 8 ticks."""
    return PullbackScorer(BEARISH, ev_pullback_ticks=3, swing_pullback_ticks=8)


class TestEV:
    """Tests for the EV counter."""

    def test_pullback_arms_then_touch_increments(self, up_scorer):
        """Test a 4-tick pullback arms EV and a touch back scores exactly once."""
        zone = make_zone(Side.BULLISH, 98.00, 100.00)

        up_scorer.score(zone, make_bar(high=101.00, low=100.50), TICK)
        assert zone.increase_ev_on_next_touch
        assert zone.ev == 0

        up_scorer.score(zone, make_bar(high=100.50, low=100.00), TICK)
        assert zone.ev == 1
        assert not zone.increase_ev_on_next_touch

    def test_small_pullback_does_not_arm(self, up_scorer):
        """Test that a pullback below threshold leaves EV unarmed."""
        zone = make_zone(Side.BULLISH, 98.00, 100.00)

        up_scorer.score(zone, make_bar(high=100.50, low=100.25), TICK)

        assert not zone.increase_ev_on_next_touch

    def test_arming_bar_cannot_also_score(self, up_scorer):
        """Test that the bar that arms EV does not count as the touch."""
        zone = make_zone(Side.BULLISH, 98.00, 100.00)

        up_scorer.score(zone, make_bar(high=101.00, low=99.75), TICK)

        assert zone.increase_ev_on_next_touch
        assert zone.ev == 0

    def test_armed_waits_for_touch(self, up_scorer):
        """Test that an armed counter stays armed until price comes back."""
        zone = make_zone(Side.BULLISH, 98.00, 100.00)
        up_scorer.score(zone, make_bar(high=101.00, low=100.50), TICK)

        up_scorer.score(zone, make_bar(high=101.50, low=100.75), TICK)

        assert zone.increase_ev_on_next_touch
        assert zone.ev == 0

    def test_bearish_mirror(self, down_scorer):
        """Test bearish pullback below and touch from below."""
        zone = make_zone(Side.BEARISH, 102.00, 100.00)

        down_scorer.score(zone, make_bar(high=99.50, low=99.00), TICK)
        assert zone.increase_ev_on_next_touch

        down_scorer.score(zone, make_bar(high=100.25, low=99.50), TICK)
        assert zone.ev == 1

    def test_deleted_zone_not_scored(self, up_scorer):
        """Test that reclaimed zones are ignored."""
        zone = make_zone(Side.BULLISH, 98.00, 100.00)
        zone.deleted = True

        up_scorer.score(zone, make_bar(high=105.00, low=104.00), TICK)

        assert not zone.increase_ev_on_next_touch


class TestSwing:
    """Tests for the swing counter and its independence from EV."""

    def test_swing_needs_larger_pullback(self, up_scorer):
        """Test that one bar can arm EV without arming swing."""
        zone = make_zone(Side.BULLISH, 98.00, 100.00)

        up_scorer.score(zone, make_bar(high=101.00, low=100.50), TICK)
        up_scorer.score(zone, make_bar(high=100.50, low=99.75), TICK)

        assert zone.ev == 1
        assert zone.swing == 0
        assert not zone.increase_swing_on_next_touch

    def test_large_pullback_scores_both(self, up_scorer):
        """Test that a 10-tick pullback arms and scores EV and swing together."""
        zone = make_zone(Side.BULLISH, 98.00, 100.00)

        up_scorer.score(zone, make_bar(high=102.50, low=101.00), TICK)
        assert zone.increase_ev_on_next_touch
        assert zone.increase_swing_on_next_touch

        up_scorer.score(zone, make_bar(high=101.00, low=100.00), TICK)
        assert zone.ev == 1
        assert zone.swing == 1

    def test_counters_cycle_independently(self, up_scorer):
        """Test that EV keeps cycling while swing stays armed."""
        zone = make_zone(Side.BULLISH, 98.00, 100.00)

        up_scorer.score(zone, make_bar(high=102.50, low=101.00), TICK)   # arm both
        up_scorer.score(zone, make_bar(high=101.00, low=100.00), TICK)   # score both
        up_scorer.score(zone, make_bar(high=101.00, low=100.50), TICK)   # arm EV only
        up_scorer.score(zone, make_bar(high=100.75, low=99.75), TICK)    # score EV

        assert zone.ev == 2
        assert zone.swing == 1
        assert not zone.increase_swing_on_next_touch
