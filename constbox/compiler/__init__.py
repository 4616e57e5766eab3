"""Persistence and discovery for constbox.

This package turns files on disk into kernel values: package configurations
(``box.yml``), tool settings (``.constbox.yml``), and the lists of source and
configuration files to analyze.
"""

from constbox.compiler.box_loader import dump_box, load_box, load_declarations, parse_box, write_box
from constbox.compiler.config_loader import (
    SETTINGS_FILENAME,
    ConfigLoader,
    get_default_config,
    load_config,
)
from constbox.compiler.discovery import (
    check_repository,
    discover_box_files,
    discover_source_files,
    matches_any,
)
from constbox.compiler.workspace import (
    analyze_repository,
    box_path,
    build_package_tree,
    package_dir,
    package_usage,
)

__all__ = [
    "SETTINGS_FILENAME",
    "ConfigLoader",
    "analyze_repository",
    "box_path",
    "build_package_tree",
    "check_repository",
    "discover_box_files",
    "discover_source_files",
    "dump_box",
    "get_default_config",
    "load_box",
    "load_config",
    "load_declarations",
    "matches_any",
    "package_dir",
    "package_usage",
    "parse_box",
    "write_box",
]
