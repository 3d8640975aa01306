import os
import tomllib
from datetime import date
from pathlib import Path
from typing import Any, Optional

from showcalendar.schedule import DEFAULT_WINDOW_DAYS, parse_date

_DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULT_PASSTHROUGH = ["posters", "logo.png", "map.png", "favicon.png"]
DEFAULT_PORT = 8080


def load(path: Path = _DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """Load config from TOML (empty if the file is missing), then apply environment overrides."""
    cfg: dict[str, Any] = {}
    if path.exists():
        with open(path, "rb") as f:
            cfg = tomllib.load(f)
    _apply_env_vars(cfg)
    return cfg


def _apply_env_vars(cfg: dict) -> None:
    # Shell environment takes precedence over config.toml
    if v := os.environ.get("SHOWCALENDAR_TODAY"):
        cfg.setdefault("site", {})["today"] = v


def get_site(cfg: dict) -> dict:
    return cfg.get("site", {})


def get_build(cfg: dict) -> dict:
    return cfg.get("build", {})


def get_today(cfg: dict) -> Optional[date]:
    """Fixed reference date for the build, or None to use the current day."""
    return parse_date(get_site(cfg).get("today"))


def get_input_dir(cfg: dict) -> Path:
    return Path(get_build(cfg).get("input", "src"))


def get_output_dir(cfg: dict) -> Path:
    return Path(get_build(cfg).get("output", "_site"))


def get_includes_dir(cfg: dict) -> Path:
    """Includes live inside the input directory, as with the data directory."""
    return get_input_dir(cfg) / get_build(cfg).get("includes", "_includes")


def get_data_dir(cfg: dict) -> Path:
    return get_input_dir(cfg) / get_build(cfg).get("data", "_data")


def get_passthrough(cfg: dict) -> list[str]:
    return list(get_build(cfg).get("passthrough", DEFAULT_PASSTHROUGH))


def get_window_days(cfg: dict) -> int:
    return int(cfg.get("events", {}).get("window_days", DEFAULT_WINDOW_DAYS))


def get_port(cfg: dict) -> int:
    return int(cfg.get("serve", {}).get("port", DEFAULT_PORT))
