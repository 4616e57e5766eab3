"""Workspace: composes discovery, configuration loading and the pipeline runner.

Examples
--------
Verify a repository::

    result = analyze_repository(Path("."), load_config(Path(".")))

Candidate allow-lists for one directory::

    result = analyze_repository(root, config, focus="b")
    usage = aggregate_usage(result.report, "b")
"""

from __future__ import annotations

from pathlib import Path

from constbox.compiler.box_loader import load_declarations
from constbox.compiler.discovery import (
    check_repository,
    discover_box_files,
    discover_source_files,
    matches_any,
)
from constbox.kernel.config.models import ConstboxConfig
from constbox.kernel.exceptions import ConfigurationError
from constbox.kernel.logging import get_logger
from constbox.kernel.models import ConfigError
from constbox.kernel.packages import ROOT_DIR, PackageTree, normalize_dir
from constbox.kernel.pipeline_runner import AnalysisResult, PipelineRunner
from constbox.kernel.usage import PackageUsage, aggregate_usage

logger = get_logger(__name__)


def build_package_tree(
    root: Path, config: ConstboxConfig
) -> tuple[PackageTree, list[ConfigError]]:
    """Discover and load package configurations into a tree.

    Returns
    -------
    tuple[PackageTree, list[ConfigError]]
        The tree and every rejected configuration
    """
    box_files = discover_box_files(root, config.box_filenames)
    declarations, load_errors = load_declarations(root, box_files)
    tree, tree_errors = PackageTree.build(declarations)
    for package in tree.packages:
        logger.debug("Package {root} ({config})", root=package.root, config=package.config_path)
    return tree, sorted(load_errors + tree_errors)


def analyze_repository(
    root: Path, config: ConstboxConfig, focus: str | None = None
) -> AnalysisResult:
    """Run the whole pipeline over the repository at ``root``.

    Parameters
    ----------
    root : Path
        Repository root
    config : ConstboxConfig
        Tool settings
    focus : str | None
        Repository-relative directory to treat as a package with every
        allow-list emptied, so that all of its cross-package usage surfaces
        as violations

    Returns
    -------
    AnalysisResult
        Result of the run

    Raises
    ------
    RepositoryError
        If ``root`` cannot be analyzed
    """
    root = check_repository(root)
    tree, config_errors = build_package_tree(root, config)
    if focus is not None:
        tree = tree.with_package(focus).without_allow_lists()

    files = discover_source_files(root, config.include)
    runner = PipelineRunner(
        workers=config.workers,
        is_ignored=(lambda path: matches_any(path, config.ignore)) if config.ignore else None,
    )
    logger.info(
        "Analyzing {files} files in {packages} packages with {workers} workers",
        files=len(files),
        packages=len(tree),
        workers=runner.workers,
    )
    return runner.run(root, files, tree, config_errors)


def package_dir(root: Path, path: str | Path, box_filenames: tuple[str, ...]) -> str:
    """Repository-relative package directory named by a command-line ``path``.

    Relative paths are taken from ``root``. A path naming a configuration
    file stands for its directory.

    Raises
    ------
    ConfigurationError
        If the path is outside ``root`` or is not a directory
    """
    root = root.resolve()
    target = Path(path)
    if target.name in box_filenames:
        target = target.parent
    if not target.is_absolute():
        target = root / target
    target = target.resolve()

    try:
        relative = target.relative_to(root)
    except ValueError as e:
        raise ConfigurationError(str(path), f"not inside repository {root}") from e
    if not target.is_dir():
        raise ConfigurationError(str(path), "not a directory")
    return normalize_dir(relative.as_posix())


def box_path(root: Path, tree: PackageTree, directory: str) -> Path:
    """Configuration file for the package at ``directory`` (existing or new)."""
    package = tree.get(directory)
    if package is not None and package.config_path is not None:
        return root / package.config_path
    return root / "box.yml" if directory == ROOT_DIR else root / directory / "box.yml"


def package_usage(
    root: Path, config: ConstboxConfig, directory: str
) -> tuple[AnalysisResult, PackageUsage]:
    """Candidate allow-lists for the package at ``directory``.

    The directory is analyzed as a package whether or not it declares one,
    with every package's allow-lists emptied.
    """
    result = analyze_repository(root, config, focus=directory)
    return result, aggregate_usage(result.report, directory)
