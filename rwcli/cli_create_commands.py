"""Create command - scaffold a new Redwood project."""
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from rwcli.core.config import RwConfig
from rwcli.core.logger import get_logger
from rwcli.scaffold.core import (
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_TARGET,
    CreateOptions,
    ScaffoldPipeline,
)
from rwcli.scaffold.errors import ScaffoldError
from rwcli.services.toolchain import check_toolchain

# Module-level console instance (will be set by register function)
console: Console = Console()
logger = get_logger(__name__)


def build_pipeline(config: RwConfig) -> ScaffoldPipeline:
    """Construct the pipeline for one create run."""
    return ScaffoldPipeline(config)


def _decide(value: Optional[bool], question: str, default: bool, yes: bool) -> bool:
    """Use the flag if given, the default under --yes, otherwise ask."""
    if value is not None:
        return value
    if yes:
        return default
    return typer.confirm(question, default=default)


def create(
    ctx: typer.Context,
    target: str = typer.Argument(DEFAULT_TARGET, help="Directory to create the project in"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip prompts and use defaults"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Create even if target directory isn't empty"),
    typescript: Optional[bool] = typer.Option(
        None, "--typescript/--javascript", help="Generate a TypeScript project (default) or a JavaScript one"
    ),
    git_init: Optional[bool] = typer.Option(
        None, "--git-init/--no-git-init", help="Initialize a git repository (default: yes)"
    ),
    commit_message: Optional[str] = typer.Option(
        None, "--commit-message", "-m", help="Commit message for the initial commit"
    ),
    bighorn: bool = typer.Option(False, "--bighorn", help="Use the bighorn template track"),
    install: Optional[bool] = typer.Option(
        None, "--install/--no-install", help="Run yarn install after scaffolding (default: no)"
    ),
):
    """Create a new Redwood project.

    Downloads the latest project template (cached under ~/.rw/templates),
    unpacks it into TARGET and optionally commits it to a new git repository.

    Examples:
        rw create my-app                  # Interactive
        rw create my-app -y               # Defaults: TypeScript, git init
        rw create my-app --javascript -y  # JavaScript project
        rw create . --overwrite -y        # Scaffold into a non-empty directory
    """
    from rwcli.cli_support import (
        handle_cli_error,
        print_banner,
        print_epilogue,
        print_error,
        print_info,
        print_success,
        print_warning,
    )

    config: RwConfig = ctx.obj if isinstance(ctx.obj, RwConfig) else RwConfig.load()
    verbose = bool(ctx.meta.get("rw.verbose"))

    print_banner(console)

    try:
        for tool in check_toolchain():
            console.print(f"{tool.name.capitalize()} found: [dim]{escape(', '.join(tool.paths))}[/dim]")
            console.print(f"{tool.name.capitalize()} version: {escape(str(tool.version))}")
    except ScaffoldError as e:
        handle_cli_error(e, console, verbose)

    use_ts = _decide(typescript, "Use TypeScript?", True, yes)
    use_git = _decide(git_init, "Initialize a git repository?", True, yes)

    message = commit_message
    if message is None:
        if use_git and not yes:
            message = typer.prompt("Commit message", default=DEFAULT_COMMIT_MESSAGE)
        else:
            message = DEFAULT_COMMIT_MESSAGE

    run_install = _decide(install, "Install dependencies with yarn?", False, yes)

    options = CreateOptions(
        target=target,
        overwrite=overwrite,
        typescript=use_ts,
        bighorn=bighorn,
        git_init=use_git,
        commit_message=message,
        install=run_install,
    )
    logger.debug(f"create options: {options}")

    try:
        result = build_pipeline(config).run(options)
    except (ScaffoldError, OSError) as e:
        logger.debug(f"create failed: {e}")
        handle_cli_error(e, console, verbose)

    console.print(f"Target directory: {escape(str(result.target))}")
    console.print(f"Use TypeScript: {use_ts}")
    console.print(f"Latest version: {escape(result.release_tag)}")
    console.print(f"Cached template: {result.cached}")
    print_success(console, f"Created {len(result.files)} files from {escape(result.asset_name)}")

    if use_git:
        if result.git_committed:
            print_success(console, f"Git repository initialized ({escape(message)})")
        else:
            print_info(console, "Git repository not committed")

    for warning in result.warnings:
        print_warning(console, escape(warning))

    if result.install is not None:
        if not result.install.ok:
            print_error(
                console,
                f"Dependency install failed with exit code {result.install.returncode}",
            )
            raise typer.Exit(1)
        print_success(console, f"Dependencies installed in {result.install.duration:.1f}s")

    print_epilogue(console, target)


def register_create_commands(app: typer.Typer, shared_console: Console):
    """Register the create command with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(create)
