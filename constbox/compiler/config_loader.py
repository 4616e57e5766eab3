"""Tool settings loader for constbox.

Parses ``.constbox.yml`` (``kind: Config`` manifest format) into the kernel's
``ConstboxConfig``. Discovery order:

1. Explicit path argument
2. ``CONSTBOX_CONFIG_PATH`` env var
3. ``.constbox.yml`` in the analyzed repository root
4. Defaults

This is part of the compiler (userspace); the kernel never touches config
file formats directly.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, cast

import yaml

from constbox.kernel.config.models import DEFAULT_INCLUDE, ConstboxConfig, LoggingConfig
from constbox.kernel.exceptions import ConfigurationError, ValidationError
from constbox.kernel.logging import get_logger

logger = get_logger(__name__)

SETTINGS_FILENAME = ".constbox.yml"

_LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_LOG_FORMATS = frozenset({"console", "json", "structured", "rich"})


class ConfigLoader:
    """Loads and processes constbox settings files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load(self, root: Path, path: str | Path | None = None) -> ConstboxConfig:
        """Load settings for the repository at ``root``.

        Parameters
        ----------
        root : Path
            Analyzed repository root
        path : str | Path | None
            Explicit settings file; None searches using the discovery order

        Returns
        -------
        ConstboxConfig
            Parsed settings with environment overrides applied

        Raises
        ------
        ConfigurationError
            If an explicitly requested file is missing or a file is invalid
        """
        config_path = self._find_config_file(root, path)
        if config_path is None:
            logger.debug("No settings file found, using defaults")
            return self._parse_config({})

        logger.info("Loading settings from {path}", path=config_path)
        return self._parse_config(self._read_spec(config_path))

    def _find_config_file(self, root: Path, path: str | Path | None) -> Path | None:
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise ConfigurationError(str(config_path), "settings file not found")
            return config_path

        if env_path := os.getenv("CONSTBOX_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using settings from CONSTBOX_CONFIG_PATH: {}", config_path)
                return config_path
            logger.warning("CONSTBOX_CONFIG_PATH set but file not found: {}", config_path)

        candidate = root / SETTINGS_FILENAME
        return candidate if candidate.is_file() else None

    def _read_spec(self, config_path: Path) -> dict[str, Any]:
        """Read the ``spec`` mapping of a ``kind: Config`` file.

        Raises
        ------
        ConfigurationError
            If the file is not a valid ``kind: Config`` manifest
        """
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(str(config_path), f"cannot load: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                str(config_path), f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                str(config_path), f"must use 'kind: Config' manifest format, got 'kind: {kind}'"
            )

        spec = data.get("spec") or {}
        if not isinstance(spec, dict):
            raise ConfigurationError(str(config_path), "'spec' must be a mapping")

        return cast("dict[str, Any]", self._substitute_env_vars(spec))

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ``${VAR}`` placeholders from the environment."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    logger.debug(
                        "Environment variable ${{{var_name}}} not found, keeping placeholder",
                        var_name=var_name,
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> ConstboxConfig:
        """Parse settings data into ``ConstboxConfig``.

        Raises
        ------
        ConfigurationError
            If a value has the wrong type or fails validation
        """
        include = _string_list(data, "include", DEFAULT_INCLUDE)
        ignore = _string_list(data, "ignore", ())
        box_filenames = _string_list(data, "box_filenames", ("box.yml", "box.yaml"))

        workers = data.get("workers")
        if env_workers := os.getenv("CONSTBOX_WORKERS"):
            workers = env_workers
            logger.debug("Overriding workers from env: {}", workers)
        if workers is not None:
            try:
                workers = int(workers)
            except (TypeError, ValueError) as e:
                raise ConfigurationError("workers", f"expected an integer, got {workers!r}") from e

        logging_data = data.get("logging") or {}
        if not isinstance(logging_data, dict):
            raise ConfigurationError("logging", "must be a mapping")

        try:
            return ConstboxConfig(
                include=include,
                ignore=ignore,
                workers=workers,
                box_filenames=box_filenames,
                logging=self._parse_logging_config(logging_data),
            )
        except ValidationError as e:
            raise ConfigurationError(e.field, e.constraint) from e

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging settings with environment variable overrides.

        Environment variables take precedence over file values:
        - CONSTBOX_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - CONSTBOX_LOG_FORMAT: Output format (console, json, structured, rich)
        """
        level = str(logging_data.get("level", "WARNING")).upper()
        format_type = str(logging_data.get("format", "structured")).lower()
        output_file = logging_data.get("output_file")

        if env_level := os.getenv("CONSTBOX_LOG_LEVEL"):
            level = env_level.upper()
            logger.debug("Overriding log level from env: {}", level)

        if env_format := os.getenv("CONSTBOX_LOG_FORMAT"):
            format_type = env_format.lower()
            logger.debug("Overriding log format from env: {}", format_type)

        if level not in _LOG_LEVELS:
            raise ConfigurationError("logging.level", f"unknown level {level!r}")
        if format_type not in _LOG_FORMATS:
            raise ConfigurationError("logging.format", f"unknown format {format_type!r}")

        return LoggingConfig(
            level=cast("Any", level),
            format=cast("Any", format_type),
            output_file=output_file,
        )


def _string_list(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(key, "must be a list of strings")
    return tuple(value)


def load_config(root: Path, path: str | Path | None = None) -> ConstboxConfig:
    """Load settings for ``root`` or return defaults.

    Parameters
    ----------
    root : Path
        Analyzed repository root
    path : str | Path | None
        Explicit settings file, or None to search

    Returns
    -------
    ConstboxConfig
        Loaded settings or defaults if no file was found
    """
    return ConfigLoader().load(root, path)


def get_default_config() -> ConstboxConfig:
    """Default settings: every ``.rb`` file, one worker per CPU."""
    return ConstboxConfig()
