"""Configuration data models for constbox.

Two kinds of configuration exist:

- ``BoxConfig``: the per-package ``box.yml`` declaring exported and imported
  canonical names. Validated strictly; anything unexpected is rejected.
- ``ConstboxConfig``: tool settings for a whole run (source globs, ignores,
  worker count, logging), read from ``.constbox.yml``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from constbox.kernel.exceptions import ValidationError

DEFAULT_INCLUDE = ("**/*.rb",)

# Never scanned, regardless of settings. Names are pruned at any depth;
# root paths only directly under the repository root.
DEFAULT_EXCLUDED_DIRS = frozenset({".git", "node_modules"})
DEFAULT_EXCLUDED_ROOT_PATHS = frozenset({"tmp", "vendor/bundle"})


class BoxConfig(BaseModel):
    """Declared allow-lists of one package.

    Examples
    --------
    ``box.yml``::

        exports:
        - Billing::Invoice
        imports:
        - Accounts::User
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    exports: list[StrictStr] = Field(
        default_factory=list,
        description="Canonical names owned by this package that other packages may reference",
    )
    imports: list[StrictStr] = Field(
        default_factory=list,
        description="Canonical names owned by other packages that this package may reference",
    )

    @field_validator("exports", "imports", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        # "exports:" with nothing after it loads as None
        return [] if value is None else value

    @field_validator("exports", "imports")
    @classmethod
    def _names_not_blank(cls, value: list[str]) -> list[str]:
        names = [name.strip() for name in value]
        if any(not name for name in names):
            raise ValueError("names must be non-empty strings")
        return names

    @property
    def export_set(self) -> frozenset[str]:
        return frozenset(self.exports)

    @property
    def import_set(self) -> frozenset[str]:
        return frozenset(self.imports)

    def merged(
        self, exports: set[str] | frozenset[str], imports: set[str] | frozenset[str]
    ) -> BoxConfig:
        """Return a config holding the union of this one and the given names, sorted."""
        return BoxConfig(
            exports=sorted(self.export_set | exports),
            imports=sorted(self.import_set | imports),
        )


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write JSON logs to
    """

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None


@dataclass(frozen=True, slots=True)
class ConstboxConfig:
    """Settings for one analysis run.

    Attributes
    ----------
    include : tuple[str, ...]
        Glob patterns (relative to the repository root) selecting source files
    ignore : tuple[str, ...]
        Glob patterns of source files whose references are not checked;
        their definitions still count
    workers : int | None
        Worker threads per phase; None means ``os.cpu_count()``
    box_filenames : tuple[str, ...]
        File names that declare a package
    logging : LoggingConfig
        Logging configuration

    Examples
    --------
    ``.constbox.yml``::

        kind: Config
        spec:
          include: ["app/**/*.rb", "lib/**/*.rb"]
          ignore: ["spec/**"]
          workers: 4
          logging:
            level: INFO
    """

    include: tuple[str, ...] = DEFAULT_INCLUDE
    ignore: tuple[str, ...] = ()
    workers: int | None = None
    box_filenames: tuple[str, ...] = ("box.yml", "box.yaml")
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Validate settings.

        Raises
        ------
        ValidationError
            If workers is not positive or no include pattern is given
        """
        if self.workers is not None and self.workers < 1:
            raise ValidationError("workers", "must be positive", self.workers)
        if not self.include:
            raise ValidationError("include", "cannot be empty")
        if not self.box_filenames:
            raise ValidationError("box_filenames", "cannot be empty")
