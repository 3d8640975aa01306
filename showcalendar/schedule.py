"""
Show and event scheduling.

Everything here is a pure function over lists of Show and Event objects and a
reference date. Nothing is mutated; callers get new lists back.

Date handling is deliberately forgiving, because the tables are edited by hand:
  - an event date that isn't an ISO day means the event is never upcoming
  - a time of day that can't be parsed counts as midnight, including
    free text around a time ("Doors 7pm show 8pm")
  - a missing or malformed reference date means today
"""

import re
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Union

from dateutil import parser as dateparser

from showcalendar.models import Event, EventPage, ListingEntry, Show

DEFAULT_WINDOW_DAYS = 90

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
# Anchor for time-only parses; only the time component is kept.
_TIME_DEFAULT = datetime(2000, 1, 1)

DateLike = Union[str, date, datetime, None]


# --- Parsing ---

def parse_date(value: DateLike) -> Optional[date]:
    """'2026-10-19' (or a longer ISO string starting with it) -> date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def parse_time(value: Optional[str]) -> time:
    """Parse a free-form time of day ("7:30 PM", "19:30", "8pm"); midnight if unparseable."""
    if not value:
        return time.min
    try:
        return dateparser.parse(value, default=_TIME_DEFAULT).time()
    except (ValueError, OverflowError):
        return time.min


def event_instant(event: Event) -> Optional[datetime]:
    event_date = parse_date(event.date)
    if event_date is None:
        return None
    return datetime.combine(event_date, parse_time(event.time))


def reference_instant(today: DateLike = None) -> datetime:
    """Start of the reference day. Events at or after this instant are upcoming."""
    if isinstance(today, datetime):
        return today
    ref = parse_date(today) or date.today()
    return datetime.combine(ref, time.min)


def slugify(text: Optional[str]) -> str:
    if not text:
        return ""
    return _NON_ALNUM.sub("-", str(text).lower()).strip("-")


def event_slug(event: Event, show: Show) -> str:
    return slugify(event.title) or slugify(f"{show.title} {event.date}")


def show_url(show: Show) -> str:
    return f"/{show.slug}/"


# --- Upcoming events ---

def _group_upcoming(events: Iterable[Event], ref: datetime) -> dict[str, list[tuple[datetime, Event]]]:
    """Upcoming events per show slug, earliest first (stable for equal instants)."""
    grouped: dict[str, list[tuple[datetime, Event]]] = defaultdict(list)
    for event in events:
        instant = event_instant(event)
        if instant is not None and instant >= ref:
            grouped[event.show].append((instant, event))
    for items in grouped.values():
        items.sort(key=lambda item: item[0])
    return grouped


def upcoming_events(show: Show, events: Iterable[Event], today: DateLike = None) -> list[Event]:
    """All of a show's events at or after the reference day, in chronological order."""
    grouped = _group_upcoming(events, reference_instant(today))
    return [event for _, event in grouped.get(show.slug, [])]


def next_event(show: Show, events: Iterable[Event], today: DateLike = None) -> Optional[Event]:
    upcoming = upcoming_events(show, events, today)
    return upcoming[0] if upcoming else None


def _alphabetical(title: str, slug: str) -> tuple[str, str]:
    return (title.casefold(), slug)


# --- Ranking ---

def rank_shows(shows: Iterable[Show], events: Iterable[Event], today: DateLike = None) -> list[Show]:
    """
    Order shows for display.

    Pinned shows with something scheduled come first, by pin position. Then
    the rest of the scheduled shows, soonest first. Shows with nothing
    scheduled go last, alphabetically, and their pin position is ignored.
    """
    grouped = _group_upcoming(events, reference_instant(today))
    next_instant = {slug: items[0][0] for slug, items in grouped.items()}

    pinned: list[Show] = []
    scheduled: list[Show] = []
    unscheduled: list[Show] = []
    for show in shows:
        if show.slug not in next_instant:
            unscheduled.append(show)
        elif show.pin_position is not None:
            pinned.append(show)
        else:
            scheduled.append(show)

    pinned.sort(key=lambda s: (s.pin_position, next_instant[s.slug]))
    scheduled.sort(key=lambda s: (next_instant[s.slug], _alphabetical(s.title, s.slug)))
    unscheduled.sort(key=lambda s: _alphabetical(s.title, s.slug))
    return pinned + scheduled + unscheduled


# --- Homepage listing ---

def _listing_key(entry: ListingEntry) -> tuple:
    return (
        entry.pin_position is None,
        entry.pin_position if entry.pin_position is not None else 0,
        entry.instant is None,
        entry.instant or datetime.min,
        _alphabetical(entry.title, entry.slug),
    )


def homepage_listing(
    shows: Iterable[Show],
    events: Iterable[Event],
    today: DateLike = None,
    window: int = DEFAULT_WINDOW_DAYS,
) -> list[ListingEntry]:
    """
    Build the homepage list: one entry per visible show, plus one entry per
    upcoming event with a poster for shows that have individual event pages.
    """
    shows = list(shows)
    events = list(events)
    grouped = _group_upcoming(events, reference_instant(today))
    # Keyed by identity: identical rows in the data file are still separate events
    pages = {id(page.event): page for page in event_pages(shows, events, today, window)}

    entries: list[ListingEntry] = []
    for show in shows:
        if show.hide_from_homepage:
            continue
        upcoming = grouped.get(show.slug, [])
        instant = upcoming[0][0] if upcoming else None
        entries.append(ListingEntry(
            kind="show",
            slug=show.slug,
            title=show.title,
            url=show_url(show),
            show=show,
            # A pin only counts while something is scheduled
            pin_position=show.pin_position if instant is not None else None,
            instant=instant,
            poster=show.poster,
            ticket_link=show.ticket_link,
            event=upcoming[0][1] if upcoming else None,
        ))
        if not show.event_pages:
            continue
        for event_at, event in upcoming:
            if not event.poster:
                continue
            page = pages.get(id(event))
            entries.append(ListingEntry(
                kind="event",
                slug=page.slug if page else event_slug(event, show),
                title=event.label or show.title,
                url=page.url if page else show_url(show),
                show=show,
                instant=event_at,
                poster=event.poster,
                ticket_link=event.ticket_link or show.ticket_link,
                event=event,
            ))

    entries.sort(key=_listing_key)
    return entries


# --- Event pages ---

def event_pages(
    shows: Iterable[Show],
    events: Iterable[Event],
    today: DateLike = None,
    window: int = DEFAULT_WINDOW_DAYS,
) -> list[EventPage]:
    """One page per titled, upcoming event of each show that opts in, within its window."""
    ref = reference_instant(today)
    grouped = _group_upcoming(events, ref)

    pages: list[EventPage] = []
    for show in shows:
        if not show.event_pages:
            continue
        days = show.event_page_window if show.event_page_window is not None else window
        last_day = (ref + timedelta(days=days)).date()
        used: dict[str, int] = {}
        for event_at, event in grouped.get(show.slug, []):
            if not event.title or event_at.date() > last_day:
                continue
            base = event_slug(event, show)
            used[base] = used.get(base, 0) + 1
            slug = base if used[base] == 1 else f"{base}-{used[base]}"
            pages.append(EventPage(
                show=show,
                event=event,
                slug=slug,
                url=f"/{show.slug}/{slug}/",
            ))
    return pages
