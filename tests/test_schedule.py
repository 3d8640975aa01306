from datetime import date, datetime, time

from showcalendar.models import Event, Show
from showcalendar.schedule import (
    event_instant,
    event_pages,
    event_slug,
    homepage_listing,
    next_event,
    parse_time,
    rank_shows,
    reference_instant,
    slugify,
    upcoming_events,
)

TODAY = date(2026, 10, 19)


def _slugs(items):
    return [item.slug for item in items]


# --- Parsing ---

def test_parse_time_accepts_common_formats():
    assert parse_time("7:30 PM") == time(19, 30)
    assert parse_time("19:30") == time(19, 30)
    assert parse_time("8pm") == time(20, 0)


def test_parse_time_falls_back_to_midnight():
    assert parse_time(None) == time(0, 0)
    assert parse_time("") == time(0, 0)
    assert parse_time("TBA") == time(0, 0)


def test_event_instant_with_bad_date_is_none():
    assert event_instant(Event(show="a", date="next tuesday")) is None
    assert event_instant(Event(show="a", date="")) is None


def test_event_instant_combines_date_and_time():
    event = Event(show="a", date="2026-10-20", time="9:15 PM")
    assert event_instant(event) == datetime(2026, 10, 20, 21, 15)


def test_reference_instant_is_start_of_day():
    assert reference_instant("2026-10-19") == datetime(2026, 10, 19)
    assert reference_instant(TODAY) == datetime(2026, 10, 19)


def test_reference_instant_falls_back_to_today():
    expected = datetime.combine(date.today(), time.min)
    assert reference_instant("garbage") == expected
    assert reference_instant(None) == expected


# --- Next event ---

def test_next_event_picks_earliest_upcoming():
    show = Show(slug="a", title="A")
    events = [
        Event(show="a", date="2026-11-01"),
        Event(show="a", date="2026-10-01"),  # past
        Event(show="a", date="2026-10-25", time="8pm"),
        Event(show="b", date="2026-10-20"),
    ]
    assert next_event(show, events, TODAY) == events[2]


def test_event_earlier_on_reference_day_is_still_upcoming():
    show = Show(slug="a", title="A")
    events = [Event(show="a", date="2026-10-19", time="9:00 AM")]
    assert next_event(show, events, TODAY) == events[0]


def test_next_event_none_when_nothing_scheduled():
    show = Show(slug="a", title="A")
    assert next_event(show, [Event(show="a", date="2026-01-01")], TODAY) is None
    assert next_event(show, [], TODAY) is None


def test_upcoming_events_in_order():
    show = Show(slug="a", title="A")
    events = [
        Event(show="a", date="2026-10-30"),
        Event(show="a", date="2026-10-20", time="9pm"),
        Event(show="a", date="2026-10-20", time="6pm"),
    ]
    assert upcoming_events(show, events, TODAY) == [events[2], events[1], events[0]]


# --- Ranking ---

def test_pinned_show_beats_unpinned_show():
    shows = [Show(slug="a", title="Zeta"), Show(slug="b", title="Alpha", pin_position=1)]
    events = [Event(show="b", date="2026-10-20")]
    assert _slugs(rank_shows(shows, events, TODAY)) == ["b", "a"]


def test_pinned_shows_come_before_earlier_unpinned_shows():
    shows = [
        Show(slug="soon", title="Soon"),
        Show(slug="p2", title="Pinned Two", pin_position=2),
        Show(slug="p1", title="Pinned One", pin_position=1),
    ]
    events = [
        Event(show="soon", date="2026-10-19"),
        Event(show="p2", date="2026-10-20"),
        Event(show="p1", date="2026-12-01"),
    ]
    assert _slugs(rank_shows(shows, events, TODAY)) == ["p1", "p2", "soon"]


def test_equal_pin_positions_tie_break_on_event_time():
    shows = [
        Show(slug="late", title="Late", pin_position=1),
        Show(slug="early", title="Early", pin_position=1),
    ]
    events = [
        Event(show="late", date="2026-10-20", time="9pm"),
        Event(show="early", date="2026-10-20", time="7pm"),
    ]
    assert _slugs(rank_shows(shows, events, TODAY)) == ["early", "late"]


def test_unpinned_shows_sorted_chronologically_then_alphabetically():
    shows = [
        Show(slug="c", title="charlie"),
        Show(slug="b", title="Bravo"),
        Show(slug="a", title="Alpha"),
    ]
    events = [
        Event(show="c", date="2026-10-20", time="8pm"),
        Event(show="b", date="2026-10-21", time="8pm"),
        Event(show="a", date="2026-10-21", time="8pm"),
    ]
    assert _slugs(rank_shows(shows, events, TODAY)) == ["c", "a", "b"]


def test_pinned_show_without_upcoming_event_sorts_alphabetically_with_the_rest():
    shows = [
        Show(slug="z", title="Zulu"),
        Show(slug="p", title="Papa", pin_position=1),
        Show(slug="s", title="Scheduled"),
        Show(slug="a", title="alpha"),
    ]
    events = [
        Event(show="s", date="2026-10-30"),
        Event(show="p", date="2026-09-01"),  # past only
    ]
    assert _slugs(rank_shows(shows, events, TODAY)) == ["s", "a", "p", "z"]


def test_rank_shows_does_not_modify_input():
    shows = [Show(slug="b", title="B"), Show(slug="a", title="A")]
    before = list(shows)
    rank_shows(shows, [], TODAY)
    assert shows == before


# --- Slugs ---

def test_slugify_collapses_and_trims():
    assert slugify("Low Tide & The Swells!") == "low-tide-the-swells"
    assert slugify("  --Hello,   World--  ") == "hello-world"
    assert slugify("2026 Halloween Bash") == "2026-halloween-bash"
    assert slugify("!!!") == ""
    assert slugify(None) == ""


def test_slugify_is_idempotent():
    for text in ["Low Tide & The Swells!", "A -- B", "already-a-slug", "MiXeD_case 42"]:
        once = slugify(text)
        assert slugify(once) == once


def test_event_slug_falls_back_to_show_title_and_date():
    show = Show(slug="bands", title="Guest Bands")
    assert event_slug(Event(show="bands", date="2026-10-24", title="Night Owls"), show) == "night-owls"
    assert event_slug(Event(show="bands", date="2026-10-24"), show) == "guest-bands-2026-10-24"


# --- Event pages ---

def test_event_pages_only_for_opted_in_shows_with_titled_events():
    shows = [
        Show(slug="bands", title="Guest Bands", event_pages=True),
        Show(slug="mic", title="Open Mic"),
    ]
    events = [
        Event(show="bands", date="2026-10-24", title="The Night Owls"),
        Event(show="bands", date="2026-10-31"),               # no title
        Event(show="bands", date="2026-10-01", title="Past"),  # past
        Event(show="mic", date="2026-10-21", title="Mic"),    # not opted in
    ]
    pages = event_pages(shows, events, TODAY)
    assert [(p.show.slug, p.slug, p.url) for p in pages] == [
        ("bands", "the-night-owls", "/bands/the-night-owls/"),
    ]


def test_event_pages_respect_default_window():
    shows = [Show(slug="bands", title="Guest Bands", event_pages=True)]
    events = [
        Event(show="bands", date="2027-01-17", title="Day Ninety"),
        Event(show="bands", date="2027-01-18", title="Day Ninety One"),
    ]
    assert _slugs(event_pages(shows, events, TODAY)) == ["day-ninety"]


def test_event_pages_respect_show_window():
    shows = [Show(slug="bands", title="Guest Bands", event_pages=True, event_page_window=7)]
    events = [
        Event(show="bands", date="2026-10-26", title="In"),
        Event(show="bands", date="2026-10-27", title="Out"),
    ]
    assert _slugs(event_pages(shows, events, TODAY)) == ["in"]


def test_event_pages_disambiguate_duplicate_titles():
    shows = [Show(slug="bands", title="Guest Bands", event_pages=True)]
    events = [
        Event(show="bands", date="2026-10-24", title="Residency"),
        Event(show="bands", date="2026-10-31", title="Residency"),
    ]
    assert _slugs(event_pages(shows, events, TODAY)) == ["residency", "residency-2"]


# --- Homepage listing ---

def test_homepage_listing_expands_event_pages_and_hides_shows():
    shows = [
        Show(slug="mic", title="Open Mic", pin_position=1),
        Show(slug="bands", title="Guest Bands", event_pages=True),
        Show(slug="trivia", title="Trivia", hide_from_homepage=True),
        Show(slug="idle", title="Idle"),
    ]
    events = [
        Event(show="mic", date="2026-10-30"),
        Event(show="bands", date="2026-10-24", time="9pm", title="Night Owls", poster="p/owls.png"),
        Event(show="bands", date="2026-10-24", time="10pm", title="No Poster"),
        Event(show="bands", date="2026-11-07", title="Low Tide", display_name="Low Tide Live", poster="p/tide.png"),
        Event(show="trivia", date="2026-10-20"),
    ]
    entries = homepage_listing(shows, events, TODAY)
    assert [(e.kind, e.slug) for e in entries] == [
        ("show", "mic"),
        ("show", "bands"),
        ("event", "night-owls"),
        ("event", "low-tide"),
        ("show", "idle"),
    ]
    by_slug = {e.slug: e for e in entries}
    assert by_slug["night-owls"].url == "/bands/night-owls/"
    assert by_slug["low-tide"].title == "Low Tide Live"
    assert by_slug["low-tide"].poster == "p/tide.png"
    assert by_slug["mic"].url == "/mic/"
    assert by_slug["idle"].instant is None


def test_homepage_listing_pin_ignored_without_upcoming_event():
    shows = [
        Show(slug="zed", title="Zed", pin_position=1),
        Show(slug="soon", title="Soon"),
    ]
    events = [Event(show="soon", date="2026-10-20")]
    entries = homepage_listing(shows, events, TODAY)
    assert _slugs(entries) == ["soon", "zed"]
    assert entries[1].pin_position is None


def test_homepage_event_entry_without_page_links_to_show():
    shows = [Show(slug="bands", title="Guest Bands", event_pages=True, event_page_window=3)]
    events = [Event(show="bands", date="2026-12-01", title="Late Addition", poster="p/late.png")]
    entries = homepage_listing(shows, events, TODAY)
    assert [(e.kind, e.url) for e in entries] == [("show", "/bands/"), ("event", "/bands/")]


def test_homepage_same_time_entries_sorted_alphabetically():
    shows = [Show(slug="b", title="Beta"), Show(slug="a", title="Alpha")]
    events = [Event(show="b", date="2026-10-20"), Event(show="a", date="2026-10-20")]
    assert _slugs(homepage_listing(shows, events, TODAY)) == ["a", "b"]


def test_parse_time_does_not_guess_from_free_text():
    assert parse_time("Doors 7pm show 8pm") == time(0, 0)


def test_homepage_same_title_events_keep_their_page_slugs():
    shows = [Show(slug="b", title="Bands", event_pages=True)]
    events = [
        Event(show="b", date="2026-10-24", title="Residency", poster="p/r.png"),
        Event(show="b", date="2026-10-31", title="Residency", poster="p/r.png"),
    ]
    entries = [e for e in homepage_listing(shows, events, TODAY) if e.kind == "event"]
    assert [(e.slug, e.url) for e in entries] == [
        ("residency", "/b/residency/"),
        ("residency-2", "/b/residency-2/"),
    ]


def test_homepage_identical_event_rows_link_to_separate_pages():
    shows = [Show(slug="b", title="Bands", event_pages=True)]
    row = dict(show="b", date="2026-10-24", time="8pm", title="Residency", poster="p/r.png")
    events = [Event(**row), Event(**row)]
    entries = [e for e in homepage_listing(shows, events, TODAY) if e.kind == "event"]
    assert sorted(e.url for e in entries) == ["/b/residency-2/", "/b/residency/"]
