from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

# Data files use the camelCase names of the original site; map them onto fields.
_SHOW_KEYS = {
    "pinPosition": "pin_position",
    "hideFromHomepage": "hide_from_homepage",
    "eventPages": "event_pages",
    "eventPageWindow": "event_page_window",
    "ticketLink": "ticket_link",
}

_EVENT_KEYS = {
    "displayName": "display_name",
    "ticketLink": "ticket_link",
}


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _rename(row: dict, key_map: dict[str, str]) -> dict:
    return {key_map.get(k, k): v for k, v in row.items()}


@dataclass(frozen=True)
class Show:
    slug: str          # Unique identifier, referenced by Event.show
    title: str
    pin_position: Optional[int] = None      # Lower = higher priority
    hide_from_homepage: bool = False
    event_pages: bool = False               # Generate one page per future event
    event_page_window: Optional[int] = None # Days ahead; None = site default
    poster: Optional[str] = None
    ticket_link: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, row: dict) -> "Show":
        data = _rename(row, _SHOW_KEYS)
        return cls(
            slug=str(data["slug"]),
            title=str(data.get("title") or data["slug"]),
            pin_position=_optional_int(data.get("pin_position")),
            hide_from_homepage=bool(data.get("hide_from_homepage", False)),
            event_pages=bool(data.get("event_pages", False)),
            event_page_window=_optional_int(data.get("event_page_window")),
            poster=_optional_str(data.get("poster")),
            ticket_link=_optional_str(data.get("ticket_link")),
            description=_optional_str(data.get("description")),
        )


@dataclass(frozen=True)
class Event:
    show: str          # Foreign key to Show.slug
    date: str          # ISO calendar day, as written in the data file
    time: Optional[str] = None              # Free-form, e.g. "7:30 PM"
    title: Optional[str] = None
    display_name: Optional[str] = None
    poster: Optional[str] = None
    ticket_link: Optional[str] = None

    @classmethod
    def from_dict(cls, row: dict) -> "Event":
        data = _rename(row, _EVENT_KEYS)
        return cls(
            show=str(data["show"]),
            date=str(data.get("date") or ""),
            time=_optional_str(data.get("time")),
            title=_optional_str(data.get("title")),
            display_name=_optional_str(data.get("display_name")),
            poster=_optional_str(data.get("poster")),
            ticket_link=_optional_str(data.get("ticket_link")),
        )

    @property
    def label(self) -> Optional[str]:
        """Name to show in listings: display name override, then title."""
        return self.display_name or self.title


@dataclass
class ListingEntry:
    kind: str          # "show" or "event"
    slug: str
    title: str
    url: str
    show: Show
    pin_position: Optional[int] = None
    instant: Optional[datetime] = None
    poster: Optional[str] = None
    ticket_link: Optional[str] = None
    event: Optional[Event] = field(default=None, repr=False)

    @property
    def date(self) -> Optional[str]:
        return self.instant.date().isoformat() if self.instant else None


@dataclass
class EventPage:
    show: Show
    event: Event
    slug: str
    url: str
