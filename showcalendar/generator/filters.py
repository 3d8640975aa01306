"""
Jinja2 filters and data collections for the site templates.

Filters that need the event table or the reference date are bound to the
current build, so templates can simply write ``shows | rank_shows``.
"""

from datetime import date

from jinja2 import Environment

from showcalendar import schedule
from showcalendar.models import Event, Show


def long_date(value) -> str:
    """'2026-10-19' -> 'Monday, October 19, 2026'. Unparseable input is returned as-is."""
    d = schedule.parse_date(value)
    if d is None:
        return "" if value is None else str(value)
    return f"{d:%A, %B} {d.day}, {d.year}"


def register(
    env: Environment,
    shows: list[Show],
    events: list[Event],
    today: date,
    window: int = schedule.DEFAULT_WINDOW_DAYS,
) -> None:
    env.filters["long_date"] = long_date
    env.filters["slugify"] = schedule.slugify
    env.filters["next_event"] = lambda show: schedule.next_event(show, events, today)
    env.filters["upcoming_events"] = lambda show: schedule.upcoming_events(show, events, today)
    env.filters["rank_shows"] = lambda items: schedule.rank_shows(items, events, today)
    env.filters["homepage_listing"] = lambda items: schedule.homepage_listing(items, events, today, window)
    env.filters["event_pages"] = lambda items: schedule.event_pages(items, events, today, window)

    # Collections
    env.globals["shows"] = shows
    env.globals["events"] = events
    env.globals["ranked_shows"] = schedule.rank_shows(shows, events, today)
    env.globals["homepage"] = schedule.homepage_listing(shows, events, today, window)
    env.globals["event_page_list"] = schedule.event_pages(shows, events, today, window)
    env.globals["today"] = today.isoformat()
