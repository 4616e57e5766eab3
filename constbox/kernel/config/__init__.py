"""Configuration models for constbox."""

from constbox.kernel.config.models import (
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_EXCLUDED_ROOT_PATHS,
    DEFAULT_INCLUDE,
    BoxConfig,
    ConstboxConfig,
    LoggingConfig,
)

__all__ = [
    "DEFAULT_EXCLUDED_DIRS",
    "DEFAULT_EXCLUDED_ROOT_PATHS",
    "DEFAULT_INCLUDE",
    "BoxConfig",
    "ConstboxConfig",
    "LoggingConfig",
]
