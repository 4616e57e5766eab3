"""constbox CLI - Main entrypoint."""

import typer
from rich.console import Console

from constbox import __version__
from constbox.cli.commands import init_cmd, inspect_cmd, verify_cmd

# Create the main Typer app
app = typer.Typer(
    name="constbox",
    help="constbox - package boundary enforcement for Ruby codebases.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

_LOG_LEVELS = ("trace", "debug", "info", "warning", "error", "critical")

# Add commands
for _module in (verify_cmd, init_cmd, inspect_cmd):
    app.command(name=_module._CLI_NAME, help=_module._CLI_HELP)(
        getattr(_module, _module._CLI_FUNC)
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]constbox[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Suppress the summary line"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable verbose logging"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug|info|warning|error"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """constbox - resolve constant references and check them against package boundaries.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}

    if log_level is not None and log_level.lower() not in _LOG_LEVELS:
        raise typer.BadParameter(
            f"must be one of {', '.join(_LOG_LEVELS)}", param_hint="--log-level"
        )

    # Compute effective log level; None defers to the settings file
    effective_level = log_level.upper() if log_level else None
    if quiet:
        effective_level = "ERROR"
    elif verbose:
        effective_level = "DEBUG"

    ctx.obj.update({
        "quiet": quiet,
        "verbose": verbose,
        "log_level": effective_level,
        "version": __version__,
    })


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
