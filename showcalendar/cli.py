import argparse
import sys
import tomllib
from pathlib import Path

from jinja2 import TemplateError

from showcalendar import __version__
import showcalendar.config as cfg_module
import showcalendar.data as data_module
from showcalendar import schedule
from showcalendar.generator.build import build_site
from showcalendar.serve import serve


def _today(args, cfg):
    if args.today:
        today = schedule.parse_date(args.today)
        if today is None:
            print(f"Error: --today must be a date like 2026-10-19, got '{args.today}'.", file=sys.stderr)
            sys.exit(1)
        return today
    return cfg_module.get_today(cfg)


def _build(args, cfg):
    try:
        result = build_site(cfg, today=_today(args, cfg))
    except (data_module.DataError, TemplateError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"Loaded {result.shows} shows and {result.events} events.")
    print(f"Wrote {len(result.pages)} pages, copied {len(result.assets)} assets.")
    print(f"Site generated in '{result.output_dir}/'.")


def _list(args, cfg):
    data_dir = cfg_module.get_data_dir(cfg)
    try:
        shows = data_module.load_shows(data_dir)
        events = data_module.load_events(data_dir, shows)
    except data_module.DataError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    entries = schedule.homepage_listing(
        shows, events, _today(args, cfg), cfg_module.get_window_days(cfg),
    )
    if not entries:
        print("Nothing to list. Check your shows.json.")
        return
    for entry in entries:
        pin = f"#{entry.pin_position}" if entry.pin_position is not None else "  "
        when = entry.instant.strftime("%Y-%m-%d %H:%M") if entry.instant else "(no upcoming event)"
        print(f"{pin:>4}  {when:<19}  {entry.kind:<5}  {entry.title}  {entry.url}")


def _serve(args, cfg):
    port = args.port or cfg_module.get_port(cfg)
    if not serve(cfg_module.get_output_dir(cfg), port, open_browser=args.open):
        sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="sc",
        description="Show calendar static site generator",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", default="config.toml", metavar="PATH",
        help="Path to config.toml (default: config.toml)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # build
    sp_build = subparsers.add_parser("build", help="Generate the static website from the data files")
    sp_build.add_argument(
        "--today", metavar="YYYY-MM-DD",
        help="Reference date for upcoming events (default: site.today or the current day)",
    )

    # list
    sp_list = subparsers.add_parser("list", help="Print the homepage ordering")
    sp_list.add_argument("--today", metavar="YYYY-MM-DD", help="Reference date for upcoming events")

    # serve
    sp_serve = subparsers.add_parser("serve", help="Serve the generated site locally")
    sp_serve.add_argument("--port", type=int, help="Port to listen on (default: serve.port or 8080)")
    sp_serve.add_argument("--open", action="store_true", help="Open the site in a browser")

    args = parser.parse_args(argv)
    try:
        cfg = cfg_module.load(Path(args.config))
    except tomllib.TOMLDecodeError as exc:
        print(f"Error: {args.config}: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.command == "build":
        _build(args, cfg)
    elif args.command == "list":
        _list(args, cfg)
    elif args.command == "serve":
        _serve(args, cfg)


if __name__ == "__main__":
    main()
