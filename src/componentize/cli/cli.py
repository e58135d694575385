"""CLI entrypoint: Typer app definition and command registration"""

import typer

from componentize.cli.commands import (
    delete_cmd, extract_cmd, init_cmd, library_cmd, preview_cmd, save_cmd, sections_cmd,
)


app = typer.Typer(name="componentize", no_args_is_help=True, help="Split web pages into sections and preview generated components")

app.command(name="sections")(sections_cmd)
app.command(name="extract")(extract_cmd)
app.command(name="preview")(preview_cmd)
app.command(name="save")(save_cmd)
app.command(name="library")(library_cmd)
app.command(name="delete")(delete_cmd)
app.command(name="init")(init_cmd)
