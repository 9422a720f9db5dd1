"""Shared utilities for rw CLI modules."""
from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich import box


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up debug file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose console logging
    """
    from rwcli.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print()
    console.print(Panel(
        f"An error occurred:\n{escape(str(e))}",
        box=box.DOUBLE,
        border_style="red",
        style="bold red",
    ))
    console.print()
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_banner(console: Console) -> None:
    """Print the welcome banner."""
    console.print(Rule(style="yellow"))
    console.print("🌲⚡️ Welcome to RedwoodJS! ⚡️🌲", justify="center")
    console.print(Rule(style="yellow"))


def print_epilogue(console: Console, project_dir: str) -> None:
    """Print next steps after a successful create."""
    console.print()
    console.print("[green]Thanks for trying out Redwood![/green]")
    console.print()
    console.print(" ⚡️ Get up and running fast with this Quick Start guide: https://redwoodjs.com/quick-start")
    console.print()
    console.print("Fire it up! 🚀")
    console.print()
    console.print(f"[green]  cd {escape(project_dir)}[/green]")
    console.print("[green]  yarn install[/green]")
    console.print("[green]  yarn rw dev[/green]")
    console.print()


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting.

    Args:
        console: Rich console for output
        message: Success message
        prefix: Prefix symbol (default: ✓)
    """
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting.

    Args:
        console: Rich console for output
        message: Error message
        prefix: Prefix symbol (default: ✗)
    """
    console.print(f"[red]{prefix}[/red] {message}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting.

    Args:
        console: Rich console for output
        message: Warning message
        prefix: Prefix symbol (default: ⚠)
    """
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting."""
    console.print(f"[cyan]{prefix}[/cyan] {message}")
