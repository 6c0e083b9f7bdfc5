"""Report writer for replay results."""

import json
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import pandas as pd
import structlog

from reclaims.core.types import Side
from reclaims.engine import ReclaimEngine

logger = structlog.get_logger(__name__)


def zones_frame(engine: ReclaimEngine) -> pd.DataFrame:
    """One row per occupied history slot on both sides."""
    rows: List[Dict[str, Any]] = []
    for tracker in engine.trackers.values():
        for index, zone in tracker.history.enumerate_zones():
            row = {"index": index}
            row.update(zone.to_dict())
            rows.append(row)
    return pd.DataFrame(rows)


def summarize(engine: ReclaimEngine) -> Dict[str, Any]:
    """Per-side counts and score totals for the current zone histories."""
    summary: Dict[str, Any] = {
        "events_applied": engine.events_applied,
        "events_skipped": engine.events_skipped,
    }
    for side, tracker in engine.trackers.items():
        retired = tracker.history.retired()
        active = [z for z in retired if not z.deleted]
        heights = [z.current_height for z in active]
        summary[side.value] = {
            "live_zone": tracker.history.head.zone_id if tracker.history.head else None,
            "retired": len(retired),
            "active": len(active),
            "deleted": len(retired) - len(active),
            "total_ev": int(sum(z.ev for z in retired)),
            "total_swing": int(sum(z.swing for z in retired)),
            "median_height": float(np.median(heights)) if heights else 0.0,
        }
    return summary


class ReportWriter:
    """Write replay results to files."""

    def __init__(self, output_dir: Path):
        """Initialize report writer.

        Args:
            output_dir: Directory to write reports to
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_all(self, engine: ReclaimEngine) -> Dict[str, Any]:
        """Write zones and summary, return the summary."""
        self.write_zones(engine)
        summary = summarize(engine)
        self.write_summary(summary)

        logger.info("Reports written", output_dir=str(self.output_dir))
        return summary

    def write_zones(self, engine: ReclaimEngine) -> None:
        """Write zone histories to CSV."""
        df = zones_frame(engine)
        if df.empty:
            logger.warning("No zones to write")
            return

        output_path = self.output_dir / "zones.csv"
        df.to_csv(output_path, index=False)

        logger.debug("Zones written", path=str(output_path), rows=len(df))

    def write_summary(self, summary: Dict[str, Any]) -> None:
        """Write summary to JSON."""
        output_path = self.output_dir / "summary.json"
        with open(output_path, "w") as f:
            json.dump(summary, f, indent=2)

        logger.debug("Summary written", path=str(output_path))

    def print_summary(self, summary: Dict[str, Any]) -> None:
        """Print summary to console."""
        print("\n" + "=" * 60)
        print("RECLAIM REPLAY SUMMARY")
        print("=" * 60)
        print(f"Events applied:     {summary['events_applied']}")
        print(f"Events skipped:     {summary['events_skipped']}")
        for side in Side:
            stats = summary[side.value]
            print("-" * 60)
            print(f"[{side.value.upper()}] live zone: {stats['live_zone']}")
            print(f"  Retired zones:    {stats['retired']}")
            print(f"  Still active:     {stats['active']}")
            print(f"  Reclaimed:        {stats['deleted']}")
            print(f"  Total EV:         {stats['total_ev']}")
            print(f"  Total swing:      {stats['total_swing']}")
            print(f"  Median height:    {stats['median_height']:.1f} ticks")
        print("=" * 60 + "\n")
