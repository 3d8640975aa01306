import shutil
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

import showcalendar.config as cfg_module
import showcalendar.data as data_module
from showcalendar import schedule
from showcalendar.generator import filters


@dataclass
class BuildResult:
    output_dir: Path
    pages: list[Path] = field(default_factory=list)
    assets: list[Path] = field(default_factory=list)
    shows: int = 0
    events: int = 0


def _copy_passthrough(names: list[str], output_dir: Path) -> list[Path]:
    """Copy static files/directories into the output directory unchanged."""
    copied = []
    for name in names:
        src = Path(name)
        if not src.exists():
            continue
        dst = output_dir / src.name
        if src.is_dir():
            if dst.exists():
                shutil.rmtree(dst)
            shutil.copytree(src, dst)
        else:
            shutil.copy2(src, dst)
        copied.append(dst)
    return copied


def _page_templates(input_dir: Path) -> list[str]:
    """Template names of the top-level pages: every .html file not under a '_' path."""
    names = []
    for path in sorted(input_dir.rglob("*.html")):
        rel = path.relative_to(input_dir)
        if any(part.startswith("_") for part in rel.parts):
            continue
        names.append(rel.as_posix())
    return names


def _check_show_paths(shows, page_names: list[str], passthrough: list[str]) -> None:
    """Show pages live at <slug>/; refuse slugs that would land on a page or asset."""
    taken = {Path(name).parts[0] for name in page_names}
    taken.update(Path(name).name for name in passthrough)
    for show in shows:
        if show.slug in taken:
            raise data_module.DataError(f"show slug '{show.slug}' clashes with a page or asset of the same name")


def _optional_template(env: Environment, name: str):
    try:
        return env.get_template(name)
    except TemplateNotFound:
        return None


def build_site(cfg: dict, today: Optional[date] = None) -> BuildResult:
    site_cfg = cfg_module.get_site(cfg)
    base_url = site_cfg.get("base_url", "").rstrip("/")
    site_title = site_cfg.get("title", "Upcoming Shows")
    window = cfg_module.get_window_days(cfg)

    today = today or cfg_module.get_today(cfg) or date.today()

    input_dir = cfg_module.get_input_dir(cfg)
    output_dir = cfg_module.get_output_dir(cfg)

    # Load data tables
    data_dir = cfg_module.get_data_dir(cfg)
    shows = data_module.load_shows(data_dir)
    events = data_module.load_events(data_dir, shows)
    page_names = _page_templates(input_dir)
    _check_show_paths(shows, page_names, cfg_module.get_passthrough(cfg))

    # Prepare output directory
    output_dir.mkdir(parents=True, exist_ok=True)
    result = BuildResult(output_dir=output_dir, shows=len(shows), events=len(events))

    # Copy static assets
    result.assets = _copy_passthrough(cfg_module.get_passthrough(cfg), output_dir)

    # Set up Jinja2
    env = Environment(
        loader=FileSystemLoader([str(input_dir), str(cfg_module.get_includes_dir(cfg))]),
        autoescape=select_autoescape(["html"]),
    )
    env.globals["base_url"] = base_url
    env.globals["site_title"] = site_title
    filters.register(env, shows, events, today, window)

    # Top-level pages
    for name in page_names:
        dest = output_dir / name
        _render(env, name, dest, {"page_title": site_title})
        result.pages.append(dest)

    # One page per show
    show_template = _optional_template(env, "show.html")
    if show_template is not None:
        for show in shows:
            dest = output_dir / show.slug / "index.html"
            _write(show_template.render(
                show=show,
                next_event=schedule.next_event(show, events, today),
                upcoming=schedule.upcoming_events(show, events, today),
                page_title=show.title,
            ), dest)
            result.pages.append(dest)

    # One page per derived event page
    event_template = _optional_template(env, "event.html")
    if event_template is not None:
        for page in env.globals["event_page_list"]:
            dest = output_dir / page.show.slug / page.slug / "index.html"
            _write(event_template.render(
                page=page,
                show=page.show,
                event=page.event,
                page_title=page.event.title,
            ), dest)
            result.pages.append(dest)

    return result


def _render(env: Environment, template_name: str, dest: Path, context: dict) -> None:
    template = env.get_template(template_name)
    _write(template.render(**context), dest)


def _write(content: str, dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(content, encoding="utf-8")
