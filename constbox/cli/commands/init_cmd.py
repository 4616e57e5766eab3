"""Init command for constbox CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from constbox.cli.utils import (
    ConfigOption,
    IgnoreOption,
    RootOption,
    WorkersOption,
    echo_lines,
    is_quiet,
    load_settings,
    print_error,
)
from constbox.compiler import box_path, load_box, package_dir, package_usage, write_box
from constbox.kernel import BoxConfig, ConstboxError, get_logger

logger = get_logger(__name__)

_CLI_NAME = "init"
_CLI_HELP = "Write a package configuration from the package's actual usage"
_CLI_TYPE = "command"
_CLI_FUNC = "init"


def init(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Package root directory (or its box.yml)"),
    ],
    root: RootOption = Path("."),
    config_file: ConfigOption = None,
    workers: WorkersOption = None,
    ignore: IgnoreOption = None,
) -> None:
    """Declare PATH as a package and write its exports and imports.

    Every name the package's code uses from other packages becomes an
    import, and every own name used from elsewhere becomes an export.
    Names already declared are kept. Running init again on an unchanged
    tree leaves the file byte-identical.

    Examples
    --------
    constbox init lib/billing
    constbox init lib/billing/box.yml --root path/to/repo
    """
    try:
        config = load_settings(ctx, root, config_file, workers, ignore)
        directory = package_dir(root, path, config.box_filenames)
        result, usage = package_usage(root, config, directory)

        target = box_path(root.resolve(), result.tree, directory)
        existing = load_box(target) if target.exists() else BoxConfig()
        merged = existing.merged(set(usage.exports), set(usage.imports))
        changed = write_box(target, merged)
    except ConstboxError as e:
        logger.debug("Init failed: {error}", error=e)
        print_error(str(e))
        raise typer.Exit(2) from e

    relative = target.relative_to(root.resolve()).as_posix()
    logger.info(
        "Package {package}: {exports} exports, {imports} imports (changed: {changed})",
        package=directory,
        exports=len(merged.exports),
        imports=len(merged.imports),
        changed=changed,
    )
    if not is_quiet(ctx):
        echo_lines([f"updating box {relative}"])
