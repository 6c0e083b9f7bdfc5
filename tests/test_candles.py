"""
Tests for bar loading and the replay feed.
"""
from pathlib import Path

import pandas as pd
import pytest

from reclaims.data.candles import (
    iter_bar_events,
    iter_tick_events,
    load_bars,
    resample_bars,
    synthesize_ticks,
    to_bars,
)
from reclaims.core.types import Bar

SAMPLE_BARS = Path(__file__).parent.parent / "data" / "sample_bars.csv"


def make_df(n: int = 5, start: str = "2024-01-01 00:00") -> pd.DataFrame:
    """Helper to create a 1m bar DataFrame."""
    timestamps = pd.date_range(start, periods=n, freq="1min")
    opens = [100.0 + i for i in range(n)]
    return pd.DataFrame({
        "timestamp": timestamps,
        "open": opens,
        "high": [o + 1.0 for o in opens],
        "low": [o - 0.5 for o in opens],
        "close": [o + 0.5 for o in opens],
        "volume": [10.0] * n,
    })


class TestLoadBars:
    """Tests for CSV loading."""

    def test_sample_file(self):
        df = load_bars(SAMPLE_BARS)

        assert len(df) == 40
        assert list(df.columns) == ["timestamp", "open", "high", "low", "close", "volume"]
        assert df["timestamp"].is_monotonic_increasing

    def test_sorts_and_drops_duplicates(self, tmp_path):
        path = tmp_path / "bars.csv"
        path.write_text(
            "Timestamp,Open,High,Low,Close\n"
            "2024-01-01 00:02,3,4,2,3\n"
            "2024-01-01 00:00,1,2,0,1\n"
            "2024-01-01 00:01,2,3,1,2\n"
            "2024-01-01 00:01,9,9,9,9\n"
        )

        df = load_bars(path)

        assert list(df["open"]) == [1, 2, 3]
        assert (df["volume"] == 0).all()

    def test_repairs_invalid_high_low(self, tmp_path):
        path = tmp_path / "bars.csv"
        path.write_text("timestamp,open,high,low,close\n2024-01-01 00:00,10,9,8,11\n")

        df = load_bars(path)

        assert df.loc[0, "high"] == 11
        assert df.loc[0, "low"] == 8

    def test_epoch_ms_timestamps(self, tmp_path):
        path = tmp_path / "bars.csv"
        path.write_text("timestamp,open,high,low,close\n1704067200000,1,2,0,1\n")

        df = load_bars(path)

        assert df.loc[0, "timestamp"] == pd.Timestamp("2024-01-01 00:00:00")

    def test_missing_column(self, tmp_path):
        path = tmp_path / "bars.csv"
        path.write_text("timestamp,open,high,close\n2024-01-01,1,2,1\n")

        with pytest.raises(ValueError, match="low"):
            load_bars(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_bars(tmp_path / "nope.csv")


class TestResample:
    """Tests for resample_bars."""

    def test_resample_5m(self):
        df = resample_bars(make_df(10), "5m")

        assert len(df) == 2
        first = df.iloc[0]
        assert first["open"] == 100.0
        assert first["high"] == 105.0
        assert first["low"] == 99.5
        assert first["close"] == 104.5
        assert first["volume"] == 50.0

    def test_unsupported(self):
        with pytest.raises(ValueError):
            resample_bars(make_df(), "7m")


class TestBarEvents:
    """Tests for the bar-open feed."""

    def test_one_event_per_bar(self):
        events = list(iter_bar_events(make_df(5), tick_size=0.25))

        assert len(events) == 5
        assert [e.bar_index for e in events] == [0, 1, 2, 3, 4]
        assert all(e.is_new_bar for e in events)

    def test_prev_bar_is_previous_row(self):
        df = make_df(3)
        bars = to_bars(df)

        events = list(iter_bar_events(df, tick_size=0.25))

        assert events[0].prev_bar is None
        assert events[1].prev_bar == bars[0]
        assert events[2].price == bars[2].open
        assert events[2].ts == bars[2].ts
        assert events[1].ts - events[0].ts == 60_000

    def test_bar_lookback(self):
        events = list(iter_bar_events(make_df(10), tick_size=0.25, bar_lookback=3))

        assert [e.bar_index for e in events] == [7, 8, 9]
        assert events[0].prev_bar is not None


class TestTickEvents:
    """Tests for the synthetic tick feed."""

    def test_tick_path(self):
        assert synthesize_ticks(Bar(0, 10, 12, 9, 11)) == [10, 9, 12, 11]
        assert synthesize_ticks(Bar(0, 11, 12, 9, 10)) == [11, 12, 9, 10]

    def test_four_ticks_per_bar(self):
        events = list(iter_tick_events(make_df(3), tick_size=0.25))

        assert len(events) == 12
        assert [e.is_new_bar for e in events[:4]] == [True, False, False, False]
        assert all(b.ts > a.ts for a, b in zip(events, events[1:]))

    def test_forming_bar_accumulates(self):
        events = list(iter_tick_events(make_df(1), tick_size=0.25))
        last = events[-1].bar

        assert last.high == 101.0
        assert last.low == 99.5
        assert last.close == 100.5
