"""Bar data loading and replay feed for the reclaim engine."""

from pathlib import Path
from typing import Iterator, List

import numpy as np
import pandas as pd
import structlog

from reclaims.core.types import Bar, FeedEvent

logger = structlog.get_logger(__name__)

REQUIRED_COLUMNS = ["timestamp", "open", "high", "low", "close"]

# Mapping of timeframe strings to pandas frequency strings
TF_MAP = {
    "1m": "1min",
    "3m": "3min",
    "5m": "5min",
    "15m": "15min",
    "30m": "30min",
    "1h": "1h",
    "4h": "4h",
    "1d": "1D",
}


def load_bars(path: str | Path, fix_issues: bool = True) -> pd.DataFrame:
    """Load OHLCV bars from a CSV file.

    Args:
        path: CSV with timestamp, open, high, low, close and optional volume
        fix_issues: If True, drop duplicates/invalid rows and repair high/low

    Returns:
        DataFrame sorted by timestamp with columns:
            - timestamp: UTC datetime (naive)
            - open, high, low, close: prices
            - volume: volume (0.0 if the file has none)

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If required columns are missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Bar file not found: {path}")

    df = pd.read_csv(path)
    df.columns = [c.strip().lower() for c in df.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    if "volume" not in df.columns:
        df["volume"] = 0.0

    if pd.api.types.is_numeric_dtype(df["timestamp"]):
        df["timestamp"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
    else:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    df["timestamp"] = df["timestamp"].dt.tz_localize(None)

    df = df[["timestamp", "open", "high", "low", "close", "volume"]]
    df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)
    df = _validate_bars(df, fix_issues=fix_issues)

    logger.info("Loaded bars", path=str(path), rows=len(df))
    return df


def _validate_bars(df: pd.DataFrame, fix_issues: bool = True) -> pd.DataFrame:
    """Validate OHLC data and optionally fix issues."""
    df = df.copy()

    nan_rows = df[["open", "high", "low", "close"]].isna().any(axis=1)
    if nan_rows.any():
        logger.warning("Found rows with missing prices", count=int(nan_rows.sum()))
        if fix_issues:
            df = df[~nan_rows]

    duplicates = df.duplicated(subset=["timestamp"], keep="first")
    if duplicates.any():
        logger.warning("Found duplicate timestamps", count=int(duplicates.sum()))
        if fix_issues:
            df = df[~duplicates]

    invalid_ohlc = (
        (df["high"] < df["low"]) |
        (df["high"] < df["open"]) |
        (df["high"] < df["close"]) |
        (df["low"] > df["open"]) |
        (df["low"] > df["close"])
    )
    if invalid_ohlc.any():
        logger.warning("Found rows with invalid OHLC values", count=int(invalid_ohlc.sum()))
        if fix_issues:
            prices = df.loc[invalid_ohlc, ["open", "high", "low", "close"]]
            df.loc[invalid_ohlc, "high"] = prices.max(axis=1)
            df.loc[invalid_ohlc, "low"] = prices.min(axis=1)

    return df.reset_index(drop=True)


def resample_bars(df: pd.DataFrame, timeframe: str) -> pd.DataFrame:
    """Resample bars to a higher timeframe.

    Args:
        df: DataFrame from load_bars
        timeframe: Target timeframe (e.g., "15m", "1h")

    Returns:
        Resampled DataFrame with the same columns
    """
    if timeframe not in TF_MAP:
        raise ValueError(f"Unsupported target timeframe: {timeframe}")

    resampled = df.set_index("timestamp").resample(TF_MAP[timeframe]).agg({
        "open": "first",
        "high": "max",
        "low": "min",
        "close": "last",
        "volume": "sum",
    })

    # Drop empty periods
    resampled = resampled.dropna(subset=["open", "high", "low", "close"])
    return resampled.reset_index()


def to_bars(df: pd.DataFrame) -> List[Bar]:
    """Convert a bar DataFrame to Bar objects."""
    ts_ms = _epoch_ms(df["timestamp"])
    return [
        Bar(
            ts=int(ts),
            open=float(o),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=float(v),
        )
        for ts, o, h, lo, c, v in zip(
            ts_ms, df["open"], df["high"], df["low"], df["close"], df["volume"]
        )
    ]


def _epoch_ms(timestamps: pd.Series) -> np.ndarray:
    delta = pd.to_datetime(timestamps) - pd.Timestamp("1970-01-01")
    return (delta // pd.Timedelta(milliseconds=1)).to_numpy(dtype=np.int64)


def _first_index(n_bars: int, bar_lookback: int) -> int:
    if bar_lookback > 0:
        return max(0, n_bars - bar_lookback)
    return 0


def iter_bar_events(df: pd.DataFrame, tick_size: float, bar_lookback: int = 0) -> Iterator[FeedEvent]:
    """One event per bar open; the previous row is the bar that just closed.

    Args:
        df: DataFrame from load_bars
        tick_size: Instrument tick size
        bar_lookback: Replay only the last N bars (0 = all)
    """
    bars = to_bars(df)
    for i in range(_first_index(len(bars), bar_lookback), len(bars)):
        bar = bars[i]
        forming = Bar(ts=bar.ts, open=bar.open, high=bar.open, low=bar.open, close=bar.open)
        yield FeedEvent(
            price=bar.open,
            bar=forming,
            prev_bar=bars[i - 1] if i > 0 else None,
            tick_size=tick_size,
            bar_index=i,
            ts=bar.ts,
            is_new_bar=True,
        )


def synthesize_ticks(bar: Bar) -> List[float]:
    """Four-tick path through a bar: open, nearer extreme, far extreme, close."""
    if bar.close >= bar.open:
        return [bar.open, bar.low, bar.high, bar.close]
    return [bar.open, bar.high, bar.low, bar.close]


def iter_tick_events(df: pd.DataFrame, tick_size: float, bar_lookback: int = 0) -> Iterator[FeedEvent]:
    """Replay bars as synthetic ticks, accumulating the forming bar.

    The first tick of each bar is flagged ``is_new_bar``.
    """
    bars = to_bars(df)
    if not bars:
        return

    spacing = int(np.min(np.diff([b.ts for b in bars]))) if len(bars) > 1 else 60_000
    step = max(1, spacing // 4)

    for i in range(_first_index(len(bars), bar_lookback), len(bars)):
        bar = bars[i]
        high = low = bar.open
        for k, price in enumerate(synthesize_ticks(bar)):
            high = max(high, price)
            low = min(low, price)
            yield FeedEvent(
                price=price,
                bar=Bar(ts=bar.ts, open=bar.open, high=high, low=low, close=price),
                prev_bar=bars[i - 1] if i > 0 else None,
                tick_size=tick_size,
                bar_index=i,
                ts=bar.ts + k * step,
                is_new_bar=k == 0,
            )
