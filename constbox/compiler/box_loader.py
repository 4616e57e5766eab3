"""Reading and writing package configurations (``box.yml``).

The kernel only ever sees validated ``BoxConfig`` models; YAML stays here.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from constbox.kernel.config.models import BoxConfig
from constbox.kernel.exceptions import ConfigurationError
from constbox.kernel.logging import get_logger
from constbox.kernel.models import ConfigError
from constbox.kernel.packages import PackageDeclaration, parent_dir

logger = get_logger(__name__)


def _format_pydantic_error(error: PydanticValidationError) -> str:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        problems.append(f"{location}: {detail['msg']}")
    return "; ".join(problems)


def parse_box(text: str, source: str = "<string>") -> BoxConfig:
    """Parse and validate the text of a package configuration.

    Parameters
    ----------
    text : str
        YAML document
    source : str
        Name used in error messages

    Returns
    -------
    BoxConfig
        Validated configuration; an empty document is an empty configuration

    Raises
    ------
    ConfigurationError
        If the YAML is invalid or does not have the expected shape
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(source, f"invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(source, f"expected a mapping, got {type(data).__name__}")

    try:
        return BoxConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(source, _format_pydantic_error(e)) from e


def load_box(path: Path) -> BoxConfig:
    """Read and validate a package configuration file.

    Raises
    ------
    ConfigurationError
        If the file cannot be read or is invalid
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(str(path), f"unreadable: {e}") from e
    return parse_box(text, str(path))


def dump_box(config: BoxConfig) -> str:
    """Render a configuration as YAML, ``exports`` first, block style."""
    data = {
        "exports": sorted(set(config.exports)),
        "imports": sorted(set(config.imports)),
    }
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def write_box(path: Path, config: BoxConfig) -> bool:
    """Write ``config`` to ``path``.

    Returns
    -------
    bool
        True if the file content changed
    """
    text = dump_box(config)
    if path.exists() and path.read_text(encoding="utf-8") == text:
        logger.debug("Package configuration {path} unchanged", path=path)
        return False
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote package configuration {path}", path=path)
    return True


def load_declarations(
    root: Path, box_files: Iterable[str]
) -> tuple[list[PackageDeclaration], list[ConfigError]]:
    """Load every discovered configuration file.

    Invalid files become ``ConfigError`` values; their directory is not a
    package.

    Parameters
    ----------
    root : Path
        Repository root
    box_files : Iterable[str]
        Repository-relative paths of configuration files

    Returns
    -------
    tuple[list[PackageDeclaration], list[ConfigError]]
        Valid declarations and the errors for the rejected ones
    """
    declarations: list[PackageDeclaration] = []
    errors: list[ConfigError] = []
    for relative in box_files:
        try:
            config = load_box(root / relative)
        except ConfigurationError as e:
            logger.warning(
                "Ignoring package configuration {path}: {reason}", path=relative, reason=e.reason
            )
            errors.append(ConfigError(relative, e.reason))
            continue
        declarations.append(
            PackageDeclaration(directory=parent_dir(relative), config_path=relative, config=config)
        )
    return declarations, errors
