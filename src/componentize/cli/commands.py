"""CLI command implementations"""

import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from componentize.config import Settings, load_config
from componentize.core.extract import extract_code
from componentize.core.metadata import parse_component_metadata
from componentize.core.scrape import scrape_url
from componentize.core.segment import segment
from componentize.crud.components import delete_component, save_component, search_components
from componentize.crud.database import init_db, make_engine, reset_db
from componentize.logger import configure_logging
from componentize.preview.browser import open_browser_runtime
from componentize.protocol.session import run_preview


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging from it."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def _read_text(path: str) -> str:
    """Read a file, or stdin when path is '-'."""
    if path == "-":
        return sys.stdin.read()
    p = Path(path)
    if not p.is_file():
        _fail(f"File not found: {path}")
    return p.read_text(encoding="utf-8")


def _read_code(path: str, raw: bool) -> str:
    text = _read_text(path)
    code = extract_code(text) if raw else text.strip()
    if not code:
        _fail("No component code found.")
    return code


def _read_html(source: str, settings: Settings) -> str:
    """Fetch source if it is a URL, otherwise read it as a local file."""
    if not source.startswith(("http://", "https://")):
        return _read_text(source)
    try:
        return scrape_url(source, settings.fetch_timeout, settings.max_html_length).html
    except (ValueError, RuntimeError) as e:
        _fail(f"Could not load {source}", e)


def sections_cmd(
    source: Annotated[str, typer.Argument(help="URL or HTML file to segment ('-' for stdin)")],
    as_json: Annotated[bool, typer.Option("--json", help="Print sections as JSON")] = False,
    max_sections: Annotated[Optional[int], typer.Option("--max-sections", help="Max sections returned")] = None,
    min_length: Annotated[Optional[int], typer.Option("--min-length", help="Min section markup length")] = None,
    ):
    """Split a page into labeled sections."""
    settings = _settings(overrides={"max_sections": max_sections, "min_section_length": min_length})
    html = _read_html(source, settings)
    sections = segment(html, settings.max_sections, settings.min_section_length)

    if as_json:
        typer.echo(json.dumps([s.model_dump() for s in sections], indent=2, ensure_ascii=False))
        return
    for s in sections:
        typer.echo(f"  {s.id}: {s.label} ({len(s.html)} chars)")
    typer.echo(f"Found {len(sections)} section(s)")


def extract_cmd(
    raw_file: Annotated[str, typer.Argument(help="Raw generation output ('-' for stdin)")],
    ):
    """Print the component code found in raw model output."""
    _settings()
    typer.echo(_read_code(raw_file, raw=True))


def preview_cmd(
    code_file: Annotated[str, typer.Argument(help="Component source file ('-' for stdin)")],
    raw: Annotated[bool, typer.Option("--raw", help="Input is raw model output; extract code first")] = False,
    headed: Annotated[bool, typer.Option("--headed", help="Show the browser window")] = False,
    ):
    """Render a component in an isolated browser page and print the result."""
    settings = _settings(overrides={"headless": False if headed else None})
    code = _read_code(code_file, raw)

    try:
        with open_browser_runtime(headless=settings.headless) as runtime:
            outcome = run_preview(code, runtime, settings)
    except Exception as e:
        _fail("Browser preview failed", e)

    typer.echo(f"State: {outcome.state.value} (sent {outcome.sends}x, ready {outcome.ready_signals}x)")
    if outcome.error:
        _fail(outcome.error)
    typer.echo(outcome.markup or "")


def save_cmd(
    code_file: Annotated[str, typer.Argument(help="Component source file ('-' for stdin)")],
    name: Annotated[Optional[str], typer.Option("--name", help="Display name; defaults to the component name")] = None,
    section_label: Annotated[Optional[str], typer.Option("--section-label", help="Label of the source section")] = None,
    html_file: Annotated[Optional[str], typer.Option("--html-file", help="Original section HTML")] = None,
    style: Annotated[Optional[str], typer.Option("--style", help="Style variant used for generation")] = None,
    raw: Annotated[bool, typer.Option("--raw", help="Input is raw model output; extract code first")] = False,
    ):
    """Store a component in the library."""
    settings = _settings()
    code = _read_code(code_file, raw)
    original_html = _read_text(html_file) if html_file else None

    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        component = save_component(
            session,
            name=name or parse_component_metadata(code).name,
            code=code,
            section_label=section_label,
            original_html=original_html,
            style_variant=style,
        )
        saved_id, saved_name = component.id, component.name
        session.commit()
    typer.echo(f"Saved {saved_name} as {saved_id}")


def library_cmd(
    query: Annotated[str, typer.Argument(help="Filter by name, section label, or code")] = "",
    ):
    """List saved components, newest first."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        components = search_components(session, query)
        if not components:
            typer.echo("No saved components found.")
            raise typer.Exit(1)
        for c in components:
            typer.echo(f"{c.id}  {c.name}  [{c.section_label or '-'}]  {c.created_at:%Y-%m-%d %H:%M}")


def delete_cmd(
    component_id: Annotated[str, typer.Argument(help="Id of the component to delete")],
    ):
    """Remove a saved component."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        deleted = delete_component(session, component_id)
        session.commit()
    if not deleted:
        _fail(f"No saved component with id {component_id}")
    typer.echo(f"Deleted {component_id}")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the component library schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")
