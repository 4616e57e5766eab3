"""CLI helper utilities for constbox commands."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Annotated, Any, Protocol

import typer
from rich.console import Console
from rich.markup import escape

from constbox.compiler import load_config
from constbox.kernel import (
    AnalysisResult,
    ConstboxConfig,
    ReferenceEvent,
    Violation,
    configure_logging,
)


class ContextProtocol(Protocol):
    """Protocol for common interface between Click and Typer contexts."""

    @property
    def obj(self) -> dict[str, Any] | None: ...


RootOption = Annotated[
    Path,
    typer.Option("--root", "-r", help="Repository root to analyze"),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Settings file (default: <root>/.constbox.yml)"),
]
WorkersOption = Annotated[
    int | None,
    typer.Option("--workers", "-w", min=1, help="Worker threads per phase"),
]
IgnoreOption = Annotated[
    list[str] | None,
    typer.Option(
        "--ignore",
        "-i",
        help="Glob of files whose references are not checked (repeatable)",
    ),
]
FormatOption = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format (text, json)"),
]

# Report lines go to stdout; summaries, diagnostics and logs go to stderr
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def load_settings(
    ctx: ContextProtocol | None,
    root: Path,
    config_file: Path | None,
    workers: int | None,
    ignore: list[str] | None,
) -> ConstboxConfig:
    """Load tool settings, apply command-line overrides and configure logging."""
    config = load_config(root, config_file)
    overrides: dict[str, Any] = {}
    if workers is not None:
        overrides["workers"] = workers
    if ignore:
        overrides["ignore"] = config.ignore + tuple(ignore)
    if overrides:
        config = dataclasses.replace(config, **overrides)

    options = ctx.obj if ctx is not None and isinstance(ctx.obj, dict) else {}
    level = options.get("log_level") or config.logging.level
    configure_logging(
        level=level,
        format=config.logging.format,
        output_file=config.logging.output_file,
    )
    return config


def is_quiet(ctx: ContextProtocol | None) -> bool:
    return bool(ctx is not None and isinstance(ctx.obj, dict) and ctx.obj.get("quiet"))


def echo_lines(lines: list[str]) -> None:
    for line in lines:
        typer.echo(line)


def unresolved_line(reference: ReferenceEvent) -> str:
    return (
        f"unresolved reference {reference.name} found in "
        f"{reference.location.file} on line {reference.location.line}"
    )


def detail_lines(result: AnalysisResult, show_unresolved: bool = False) -> list[str]:
    """Informational lines printed after the violations."""
    lines = [str(error) for error in result.config_errors]
    lines.extend(str(conflict) for conflict in result.conflicts)
    lines.extend(str(failure) for failure in result.syntax_failures)
    if show_unresolved:
        lines.extend(unresolved_line(reference) for reference in result.unresolved)
    return lines


def print_summary(result: AnalysisResult) -> None:
    """One summary line on stderr."""
    violations = len(result.report)
    style = "red" if result.has_errors else "green"
    err_console.print(
        f"[{style}]{violations} violation(s)[/{style}] in {result.files} file(s): "
        f"{len(result.config_errors)} config error(s), "
        f"{len(result.conflicts)} conflict(s), "
        f"{len(result.syntax_failures)} skipped, "
        f"{len(result.unresolved)} unresolved"
    )


def print_error(message: str) -> None:
    err_console.print(f"[red]error:[/red] {escape(message)}")


def violation_to_dict(violation: Violation) -> dict[str, Any]:
    return {
        "kind": violation.kind,
        "label": violation.label,
        "name": violation.name,
        "referencing_package": violation.referencing_package,
        "defining_package": violation.defining_package,
        "file": violation.location.file,
        "line": violation.location.line,
    }


def result_to_dict(result: AnalysisResult, show_unresolved: bool = False) -> dict[str, Any]:
    """JSON-ready document describing a run."""
    data: dict[str, Any] = {
        "violations": [violation_to_dict(v) for v in result.report.violations],
        "config_errors": [{"path": e.path, "reason": e.reason} for e in result.config_errors],
        "conflicts": [
            {
                "name": c.name,
                "package": c.package,
                "location": str(c.location),
                "others": [{"package": p, "location": str(loc)} for p, loc in c.others],
            }
            for c in result.conflicts
        ],
        "skipped": [{"path": f.path, "reason": f.reason} for f in result.syntax_failures],
        "summary": {
            "files": result.files,
            "packages": len(result.tree),
            "names": len(result.table),
            "violations": len(result.report),
            "privacy": len(result.report.privacy),
            "dependency": len(result.report.dependency),
            "unresolved": len(result.unresolved),
        },
    }
    if show_unresolved:
        data["unresolved"] = [
            {
                "name": r.name,
                "file": r.location.file,
                "line": r.location.line,
            }
            for r in result.unresolved
        ]
    return data


def echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, default=str))
