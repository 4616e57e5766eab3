"""CLI command modules."""

from . import init_cmd, inspect_cmd, verify_cmd

__all__ = [
    "init_cmd",
    "inspect_cmd",
    "verify_cmd",
]
