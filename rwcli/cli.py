#!/usr/bin/env python3
"""rw CLI - The RedwoodJS command line."""
from typing import Optional

import typer
import yaml
from rich.console import Console

from rwcli import __version__
from rwcli.cli_create_commands import register_create_commands
from rwcli.core.config import RwConfig
from rwcli.core.logger import get_logger, teardown_file_logging

app = typer.Typer(
    name="rw",
    help="""The RedwoodJS CLI

Quick start:
  rw create my-app        # Scaffold a new project
  cd my-app && yarn rw dev

More commands: rw --help
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def _version_callback(value: bool):
    if value:
        console.print(f"rw {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """The RedwoodJS CLI."""
    from rwcli.cli_support import handle_cli_error, setup_file_logging

    try:
        config = RwConfig.load()
        config.ensure_home()
    except (ValueError, OSError, yaml.YAMLError) as e:
        handle_cli_error(e, console, verbose)

    setup_file_logging(str(config.log_file), verbose=verbose)
    ctx.call_on_close(teardown_file_logging)

    ctx.obj = config
    ctx.meta["rw.verbose"] = verbose


register_create_commands(app, console)

if __name__ == "__main__":
    app()
