"""Configuration loader for the reclaim tracker."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


class ConfigError(ValueError):
    """Invalid configuration. Raised before any engine state is built."""


@dataclass
class EngineConfig:
    """Reclaim state machine configuration (shared by both sides)."""

    max_zones: int = 100                          # history capacity per side
    new_zone_retracement_threshold: int = 2       # ticks
    ev_pullback_ticks: int = 4
    swing_pullback_ticks: int = 12
    min_zone_size_ticks: int = 2                  # decay threshold
    update_on_bar_close: bool = True

    # Rotation gates
    opposite_bar_filter: bool = False
    opposite_bar_lookback: int = 10
    overlap_bars: int = 0                         # 0 disables the overlap gate

    def __post_init__(self):
        if self.max_zones <= 0:
            raise ConfigError(f"max_zones must be positive, got {self.max_zones}")
        for name in (
            "new_zone_retracement_threshold",
            "ev_pullback_ticks",
            "swing_pullback_ticks",
            "min_zone_size_ticks",
            "opposite_bar_lookback",
            "overlap_bars",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ConfigError(f"{name} must be >= 0, got {value}")


@dataclass
class RenderConfig:
    """Drawing options. None of these affect zone state."""

    show_current_zone: bool = False
    extend_bars: int = 10000
    up_color: Tuple[int, int, int] = (0, 100, 255)
    down_color: Tuple[int, int, int] = (255, 100, 0)
    transparency: int = 70
    decay_fade_seconds: int = 3600
    ev_hide_below_threshold: int = 1

    def __post_init__(self):
        self.up_color = tuple(self.up_color)
        self.down_color = tuple(self.down_color)
        if not 0 <= self.transparency <= 100:
            raise ConfigError(f"transparency must be within 0-100, got {self.transparency}")
        if self.extend_bars < 0:
            raise ConfigError(f"extend_bars must be >= 0, got {self.extend_bars}")
        if self.decay_fade_seconds < 0:
            raise ConfigError(f"decay_fade_seconds must be >= 0, got {self.decay_fade_seconds}")
        if self.ev_hide_below_threshold < 0:
            raise ConfigError(
                f"ev_hide_below_threshold must be >= 0, got {self.ev_hide_below_threshold}"
            )
        for color in (self.up_color, self.down_color):
            if len(color) != 3 or not all(0 <= c <= 255 for c in color):
                raise ConfigError(f"Invalid RGB color: {color}")


@dataclass
class ReplayConfig:
    """Top-level configuration for a replay run."""

    # Data parameters
    symbol: str
    data_path: str
    tick_size: float

    # Output
    output_dir: str = "reports"

    bar_lookback: int = 0              # 0 = replay every bar
    tick_mode_replay: bool = False     # synthesize intrabar ticks
    timeframe: Optional[str] = None    # resample input bars, None keeps them
    run_id: Optional[str] = None

    engine: EngineConfig = field(default_factory=EngineConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    def __post_init__(self):
        if self.tick_size <= 0:
            raise ConfigError(f"tick_size must be positive, got {self.tick_size}")
        if self.bar_lookback < 0:
            raise ConfigError(f"bar_lookback must be >= 0, got {self.bar_lookback}")


def load_config(config_path: str | Path, overrides: Optional[Dict[str, Any]] = None) -> ReplayConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file
        overrides: Optional dict of config overrides (e.g., {"engine.max_zones": 50})

    Returns:
        ReplayConfig instance

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If a value is invalid or a key is unknown
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    return config_from_dict(data, overrides)


def config_from_dict(data: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> ReplayConfig:
    """Build a ReplayConfig from a plain dict (as parsed from YAML)."""
    data = copy.deepcopy(data)

    # Apply overrides
    if overrides:
        for key, value in overrides.items():
            _set_nested_value(data, key, value)

    # Auto-generate run_id if not provided
    if not data.get("run_id"):
        data["run_id"] = datetime.now().strftime("%Y%m%d_%H%M%S")

    # Parse nested configs
    engine_data = data.pop("engine", None) or {}
    render_data = data.pop("render", None) or {}

    try:
        engine = EngineConfig(**engine_data)
        render = RenderConfig(**render_data)
        return ReplayConfig(**data, engine=engine, render=render)
    except TypeError as e:
        raise ConfigError(str(e)) from e


def _set_nested_value(data: dict, key: str, value: Any) -> None:
    """Set a nested value in a dictionary using dot notation.

    Args:
        data: Dictionary to update
        key: Dot-separated key path (e.g., "engine.max_zones")
        value: Value to set
    """
    keys = key.split(".")
    current = data

    for k in keys[:-1]:
        if k not in current or current[k] is None:
            current[k] = {}
        current = current[k]

    # Convert value to appropriate type
    final_key = keys[-1]
    if isinstance(value, str):
        # Try to parse as number
        try:
            if "." in value:
                value = float(value)
            else:
                value = int(value)
        except ValueError:
            # Try to parse as boolean
            if value.lower() == "true":
                value = True
            elif value.lower() == "false":
                value = False

    current[final_key] = value


def parse_overrides(override_args: list) -> Dict[str, Any]:
    """Parse CLI override arguments.

    Args:
        override_args: List of "key=value" strings

    Returns:
        Dict of overrides
    """
    overrides = {}
    for arg in override_args:
        if "=" in arg:
            key, value = arg.split("=", 1)
            overrides[key] = value
    return overrides
