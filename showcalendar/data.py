import json
import warnings
from pathlib import Path

from showcalendar.models import Event, Show
from showcalendar.schedule import slugify


class DataError(ValueError):
    """A data file exists but can't be turned into shows/events."""


def _read_table(path: Path, key: str) -> list[dict]:
    """
    Read a JSON table. Accepts either a bare list or {"<key>": [...]}.
    A missing file is an empty table.
    """
    if not path.exists():
        return []
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise DataError(f"{path}: invalid JSON ({exc})") from exc

    if isinstance(raw, dict):
        raw = raw.get(key, [])
    if not isinstance(raw, list):
        raise DataError(f"{path}: expected a list of {key}")
    for i, row in enumerate(raw):
        if not isinstance(row, dict):
            raise DataError(f"{path}: {key}[{i}] is not an object")
    return raw


# --- Shows ---

def load_shows(data_dir: Path) -> list[Show]:
    path = data_dir / "shows.json"
    shows = []
    seen: set[str] = set()
    for i, row in enumerate(_read_table(path, "shows")):
        if not row.get("slug"):
            raise DataError(f"{path}: shows[{i}] has no slug")
        show = Show.from_dict(row)
        # Slugs become output directories, so only lower-case words joined by hyphens
        if slugify(show.slug) != show.slug:
            raise DataError(f"{path}: show slug '{show.slug}' must be lower-case letters, digits and hyphens")
        if show.slug in seen:
            raise DataError(f"{path}: duplicate show slug '{show.slug}'")
        seen.add(show.slug)
        shows.append(show)
    return shows


# --- Events ---

def load_events(data_dir: Path, shows: list[Show]) -> list[Event]:
    """Load events, dropping (with a warning) any that point at an unknown show."""
    path = data_dir / "events.json"
    known = {s.slug for s in shows}
    events = []
    for i, row in enumerate(_read_table(path, "events")):
        if not row.get("show"):
            raise DataError(f"{path}: events[{i}] has no show")
        event = Event.from_dict(row)
        if event.show not in known:
            warnings.warn(f"{path}: events[{i}] refers to unknown show '{event.show}', skipped")
            continue
        events.append(event)
    return events
