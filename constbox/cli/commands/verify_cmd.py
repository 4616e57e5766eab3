"""Verify command for constbox CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from constbox.cli.utils import (
    ConfigOption,
    FormatOption,
    IgnoreOption,
    RootOption,
    WorkersOption,
    detail_lines,
    echo_json,
    echo_lines,
    is_quiet,
    load_settings,
    print_error,
    print_summary,
    result_to_dict,
)
from constbox.compiler import analyze_repository
from constbox.kernel import ConstboxError, get_logger

logger = get_logger(__name__)

_CLI_NAME = "verify"
_CLI_HELP = "Check every cross-package reference against the declared allow-lists"
_CLI_TYPE = "command"
_CLI_FUNC = "verify"


def verify(
    ctx: typer.Context,
    root: RootOption = Path("."),
    config_file: ConfigOption = None,
    workers: WorkersOption = None,
    ignore: IgnoreOption = None,
    output_format: FormatOption = "text",
    show_unresolved: Annotated[
        bool,
        typer.Option("--show-unresolved", help="Also list references that could not be resolved"),
    ] = False,
) -> None:
    """Check every cross-package reference against exports and imports.

    Prints one line per violation, then configuration errors, definition
    conflicts and skipped files. Exits 1 if violations or invalid package
    configurations were found, 2 if the run could not complete.

    Examples
    --------
    constbox verify
    constbox verify --root path/to/repo --ignore "spec/*"
    constbox verify --format json
    """
    if output_format not in ("text", "json"):
        print_error(f"unknown format '{output_format}' (choose text or json)")
        raise typer.Exit(2)

    try:
        config = load_settings(ctx, root, config_file, workers, ignore)
        result = analyze_repository(root, config)
    except ConstboxError as e:
        logger.debug("Run failed: {error}", error=e)
        print_error(str(e))
        raise typer.Exit(2) from e

    if output_format == "json":
        echo_json(result_to_dict(result, show_unresolved))
    else:
        echo_lines([str(v) for v in result.report.violations])
        echo_lines(detail_lines(result, show_unresolved))
        if not is_quiet(ctx):
            print_summary(result)

    if result.has_errors:
        raise typer.Exit(1)
