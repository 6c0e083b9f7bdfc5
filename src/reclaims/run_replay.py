"""Replay historical bars through the reclaim engine.

Usage:
    python -m reclaims.run_replay --config configs/default.yaml
    python -m reclaims.run_replay --config configs/default.yaml --override engine.max_zones=50
"""

import argparse
import sys
from pathlib import Path

import structlog

# Configure logging
structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(min_level=20),  # INFO
)

logger = structlog.get_logger(__name__)


def main(argv=None):
    """Run a replay and write reports."""
    parser = argparse.ArgumentParser(description="Reclaim zone replay")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to config YAML file",
    )
    parser.add_argument(
        "--override",
        type=str,
        nargs="*",
        default=[],
        help="Config overrides in format key=value (e.g., engine.max_zones=50)",
    )
    args = parser.parse_args(argv)

    from reclaims.config import ConfigError, load_config, parse_overrides
    from reclaims.data.candles import iter_bar_events, iter_tick_events, load_bars, resample_bars
    from reclaims.engine import ReclaimEngine
    from reclaims.render.adapter import InMemoryRenderer
    from reclaims.report.writer import ReportWriter

    # Load config
    config_path = Path(args.config)
    if not config_path.exists():
        logger.error(f"Config file not found: {config_path}")
        return 1

    overrides = parse_overrides(args.override) if args.override else None
    try:
        config = load_config(config_path, overrides=overrides)
    except ConfigError as e:
        logger.error("Invalid configuration", error=str(e))
        return 1

    if overrides:
        logger.info("Config overrides applied", overrides=overrides)

    logger.info(
        "Loaded configuration",
        symbol=config.symbol,
        data_path=config.data_path,
        tick_size=config.tick_size,
        max_zones=config.engine.max_zones,
        update_on_bar_close=config.engine.update_on_bar_close,
    )

    try:
        df = load_bars(config.data_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not load bars", error=str(e))
        return 1

    if config.timeframe:
        df = resample_bars(df, config.timeframe)

    if df.empty:
        logger.error("No bar data loaded. Check the data file.")
        return 1

    renderer = InMemoryRenderer()
    engine = ReclaimEngine(config.engine, renderer=renderer, render_config=config.render)

    if config.tick_mode_replay:
        events = iter_tick_events(df, config.tick_size, config.bar_lookback)
    else:
        events = iter_bar_events(df, config.tick_size, config.bar_lookback)

    logger.info("Running replay...", bars=len(df), tick_mode=config.tick_mode_replay)
    applied = engine.run(events)
    logger.info(
        "Replay completed",
        applied=applied,
        skipped=engine.events_skipped,
        drawn_rectangles=len(renderer.rectangles),
    )

    output_dir = Path(config.output_dir) / config.run_id
    writer = ReportWriter(output_dir)
    summary = writer.write_all(engine)
    writer.print_summary(summary)

    logger.info("Replay complete!", output_dir=str(output_dir))
    return 0


if __name__ == "__main__":
    sys.exit(main())
