"""Centralized logging configuration for constbox using Loguru.

All log output goes to stderr so that report lines written to stdout by the
CLI stay machine-friendly.

Examples
--------
Basic usage:

>>> from constbox.kernel.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Extracted {count} files", count=12)

Configure logging globally::

    from constbox.kernel.logging import configure_logging
    configure_logging(level="DEBUG", format="rich")
"""

import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from loguru import Logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

_CURRENT_CONFIG: dict | None = None
_HANDLER_IDS: list[int] = []


def _stderr_sink(message: str) -> None:
    # Looked up per record so redirected streams (pytest, CliRunner) are honored
    sys.stderr.write(message)


def configure_logging(
    level: LogLevel = "WARNING",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    include_timestamp: bool = True,
    force_reconfigure: bool = False,
) -> None:
    """Configure global logging for constbox.

    Calling it again with the same settings is a no-op.

    Parameters
    ----------
    level : LogLevel, default="WARNING"
        Minimum log level to output
    format : LogFormat, default="structured"
        Output format:
        - "console": plain text, no colors
        - "json": one JSON object per record
        - "structured": colored ``time [level] module | message`` lines
        - "rich": Rich console handler
    output_file : str | Path | None, default=None
        Optional file path to also write JSON logs to
    use_color : bool, default=True
        Use ANSI colors in structured format (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    force_reconfigure : bool, default=False
        Reconfigure even if the settings did not change
    """
    global _CURRENT_CONFIG

    current_config = {
        "level": level,
        "format": format,
        "output_file": str(output_file) if output_file else None,
        "use_color": use_color,
        "include_timestamp": include_timestamp,
    }

    if not force_reconfigure and current_config == _CURRENT_CONFIG:
        return

    # Remove only our previously added handlers so pytest's capture keeps working
    for handler_id in _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(handler_id)
    _HANDLER_IDS.clear()
    if _CURRENT_CONFIG is None:
        # loguru ships a DEBUG stderr handler with id 0
        with suppress(ValueError):
            logger.remove(0)

    # Formats reference extra[module]; records from unbound loggers need a default
    logger.configure(extra={"module": "constbox"})

    if format == "rich":
        rich_handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_time=include_timestamp,
            show_level=True,
            show_path=False,
        )
        handler_id = logger.add(sink=rich_handler, level=level, format="{message}")
        _HANDLER_IDS.append(handler_id)

    elif format == "json":
        handler_id = logger.add(sink=_stderr_sink, level=level, serialize=True)
        _HANDLER_IDS.append(handler_id)

    elif format == "structured":
        timestamp_fmt = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> " if include_timestamp else ""
        colorize = use_color and sys.stderr.isatty()
        color_level = "<level>{level: <8}</level>" if colorize else "{level: <8}"
        structured_format = (
            f"{timestamp_fmt}[{color_level}]"
            "<cyan>{extra[module]}</cyan> | <level>{message}</level>"
        )
        handler_id = logger.add(
            sink=_stderr_sink,
            level=level,
            format=structured_format,
            colorize=colorize,
        )
        _HANDLER_IDS.append(handler_id)

    else:  # console
        timestamp_fmt = "{time:YYYY-MM-DD HH:mm:ss} " if include_timestamp else ""
        console_format = f"{timestamp_fmt}{{level: <8}} | {{extra[module]}} | {{message}}"
        handler_id = logger.add(
            sink=_stderr_sink,
            level=level,
            format=console_format,
            colorize=False,
        )
        _HANDLER_IDS.append(handler_id)

    if output_file:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        handler_id = logger.add(sink=output_path, level=level, serialize=True)
        _HANDLER_IDS.append(handler_id)

    _CURRENT_CONFIG = current_config


@lru_cache(maxsize=256)
def get_logger(name: str) -> "Logger":
    """Get a logger bound with the given module name.

    Configures logging from ``CONSTBOX_LOG_LEVEL`` / ``CONSTBOX_LOG_FORMAT``
    on first use if ``configure_logging()`` was never called.
    """
    _ensure_configured()
    return logger.bind(module=name)


def _ensure_configured() -> None:
    if _CURRENT_CONFIG is None:
        level = os.getenv("CONSTBOX_LOG_LEVEL", "WARNING").upper()
        format_type = os.getenv("CONSTBOX_LOG_FORMAT", "structured").lower()
        configure_logging(level=level, format=format_type)  # type: ignore[arg-type]
