"""Inspect command for constbox CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from constbox.cli.utils import (
    ConfigOption,
    FormatOption,
    IgnoreOption,
    RootOption,
    WorkersOption,
    echo_json,
    echo_lines,
    err_console,
    is_quiet,
    load_settings,
    print_error,
    violation_to_dict,
)
from constbox.compiler import dump_box, package_dir, package_usage
from constbox.kernel import BoxConfig, ConstboxError, get_logger

logger = get_logger(__name__)

_CLI_NAME = "inspect"
_CLI_HELP = "Show a package's cross-package usage without writing anything"
_CLI_TYPE = "command"
_CLI_FUNC = "inspect"


def inspect(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Package root directory (or its box.yml)"),
    ],
    root: RootOption = Path("."),
    config_file: ConfigOption = None,
    workers: WorkersOption = None,
    ignore: IgnoreOption = None,
    output_format: FormatOption = "text",
) -> None:
    """Show the references that cross PATH's boundary and the allow-lists they imply.

    PATH is analyzed as a package with nothing exported or imported. The
    references it makes into other packages and the references other
    packages make to its names are listed. Nothing is written.

    Examples
    --------
    constbox inspect lib/billing
    constbox inspect lib/billing --format json
    """
    if output_format not in ("text", "json"):
        print_error(f"unknown format '{output_format}' (choose text or json)")
        raise typer.Exit(2)

    try:
        config = load_settings(ctx, root, config_file, workers, ignore)
        directory = package_dir(root, path, config.box_filenames)
        _, usage = package_usage(root, config, directory)
    except ConstboxError as e:
        logger.debug("Inspect failed: {error}", error=e)
        print_error(str(e))
        raise typer.Exit(2) from e

    if output_format == "json":
        echo_json({
            "package": usage.package,
            "exports": list(usage.exports),
            "imports": list(usage.imports),
            "violations": [violation_to_dict(v) for v in usage.evidence],
        })
        return

    echo_lines([str(v) for v in usage.evidence])
    if usage.is_empty and not is_quiet(ctx):
        err_console.print(f"no references cross the boundary of {escape(usage.package)}")
    candidates = BoxConfig(exports=list(usage.exports), imports=list(usage.imports))
    typer.echo(dump_box(candidates), nl=False)
