"""Package tree: which package owns a given file.

A package ("box") is a directory subtree declared by a configuration file in
its root directory. Packages nest; a file belongs to the nearest enclosing
declared package, or to the implicit root package when there is none.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import PurePosixPath

from constbox.kernel.config.models import BoxConfig
from constbox.kernel.logging import get_logger
from constbox.kernel.models import ConfigError

logger = get_logger(__name__)

ROOT_DIR = "."


def normalize_dir(path: str) -> str:
    """Normalize a repository-relative directory to ``a/b`` form (``.`` for the root)."""
    parts = [p for p in PurePosixPath(path.replace("\\", "/")).parts if p not in ("", ".")]
    return "/".join(parts) if parts else ROOT_DIR


def parent_dir(directory: str) -> str:
    if directory == ROOT_DIR:
        return ROOT_DIR
    parent = str(PurePosixPath(directory).parent)
    return ROOT_DIR if parent in ("", ".") else parent


@dataclass(frozen=True, slots=True)
class Package:
    """A declared (or the implicit root) package.

    Attributes
    ----------
    root : str
        Package root directory relative to the repository (``.`` for the root)
    exports : frozenset[str]
        Own canonical names other packages may reference
    imports : frozenset[str]
        Other packages' canonical names this package may reference
    parent : str | None
        Root of the nearest enclosing package, None for the repository root
    config_path : str | None
        Declaring configuration file, None for the implicit root
    """

    root: str
    exports: frozenset[str] = frozenset()
    imports: frozenset[str] = frozenset()
    parent: str | None = None
    config_path: str | None = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return self.root

    @property
    def implicit(self) -> bool:
        """True for a repository root that has no configuration of its own."""
        return self.config_path is None

    def contains(self, path: str) -> bool:
        if self.root == ROOT_DIR:
            return True
        return path == self.root or path.startswith(f"{self.root}/")


@dataclass(frozen=True, slots=True)
class PackageDeclaration:
    """A configuration file found in ``directory``."""

    directory: str
    config_path: str
    config: BoxConfig


class PackageTree:
    """Immutable index from directory to package.

    Lookups walk upward from a file's directory, caching the answer per
    directory, so each lookup is O(depth) the first time and O(1) after.
    """

    def __init__(self, packages: Mapping[str, Package]) -> None:
        self._packages = dict(packages)
        if ROOT_DIR not in self._packages:
            self._packages[ROOT_DIR] = Package(root=ROOT_DIR)
        self._owner_cache: dict[str, Package] = {}

    @classmethod
    def build(
        cls, declarations: Iterable[PackageDeclaration]
    ) -> tuple[PackageTree, list[ConfigError]]:
        """Build the tree from discovered configurations.

        Two configurations for the same directory are both rejected; that
        directory's files fall back to the next ancestor package.
        """
        by_dir: dict[str, list[PackageDeclaration]] = defaultdict(list)
        for declaration in declarations:
            by_dir[normalize_dir(declaration.directory)].append(declaration)

        errors: list[ConfigError] = []
        accepted: dict[str, PackageDeclaration] = {}
        for directory, found in by_dir.items():
            if len(found) > 1:
                paths = sorted(d.config_path for d in found)
                for path in paths:
                    others = ", ".join(p for p in paths if p != path)
                    errors.append(ConfigError(path, f"package declared twice (also {others})"))
                logger.warning(
                    "Ignoring package {directory}: declared by {paths}",
                    directory=directory,
                    paths=paths,
                )
                continue
            accepted[directory] = found[0]

        # Parents first so each package can point at its enclosing one
        packages: dict[str, Package] = {}
        for directory in sorted(accepted, key=lambda d: (_depth(d), d)):
            declaration = accepted[directory]
            packages[directory] = Package(
                root=directory,
                exports=declaration.config.export_set,
                imports=declaration.config.import_set,
                parent=None if directory == ROOT_DIR else _nearest(packages, parent_dir(directory)),
                config_path=declaration.config_path,
            )
            logger.debug("Registered package {root}", root=directory)

        return cls(packages), sorted(errors)

    @property
    def root(self) -> Package:
        return self._packages[ROOT_DIR]

    @property
    def packages(self) -> list[Package]:
        """All packages, sorted by root."""
        return [self._packages[key] for key in sorted(self._packages)]

    def get(self, directory: str) -> Package | None:
        """The package rooted exactly at ``directory``, if any."""
        return self._packages.get(normalize_dir(directory))

    def __contains__(self, directory: object) -> bool:
        return isinstance(directory, str) and normalize_dir(directory) in self._packages

    def __len__(self) -> int:
        return len(self._packages)

    def owner(self, path: str) -> Package:
        """The package owning the file at ``path``."""
        return self.owner_of_dir(parent_dir(normalize_dir(path)))

    def owner_of_dir(self, directory: str) -> Package:
        cached = self._owner_cache.get(directory)
        if cached is not None:
            return cached

        current = directory
        while current not in self._packages:
            current = parent_dir(current)
        package = self._packages[current]
        self._owner_cache[directory] = package
        return package

    def with_package(self, directory: str) -> PackageTree:
        """A copy with ``directory`` declared as a package with empty allow-lists.

        An existing package at ``directory`` keeps its configuration path.
        """
        directory = normalize_dir(directory)
        existing = self._packages.get(directory)
        packages = dict(self._packages)
        if existing is not None and existing.config_path is not None:
            config_path = existing.config_path
        else:
            config_path = "box.yml" if directory == ROOT_DIR else f"{directory}/box.yml"
        new = Package(
            root=directory,
            parent=None if directory == ROOT_DIR else self.owner_of_dir(parent_dir(directory)).root,
            config_path=config_path,
        )
        packages[directory] = new

        # Re-parent packages that now sit directly beneath the new one
        for key, package in list(packages.items()):
            if key in (directory, ROOT_DIR) or not new.contains(key):
                continue
            if package.parent is None or not new.contains(package.parent):
                packages[key] = replace(package, parent=directory)
        return PackageTree(packages)

    def without_allow_lists(self) -> PackageTree:
        """A copy in which every package declares nothing."""
        return PackageTree({
            key: replace(package, exports=frozenset(), imports=frozenset())
            for key, package in self._packages.items()
        })


def _depth(directory: str) -> int:
    return 0 if directory == ROOT_DIR else directory.count("/") + 1


def _nearest(packages: Mapping[str, Package], directory: str) -> str:
    current = directory
    while current not in packages and current != ROOT_DIR:
        current = parent_dir(current)
    return current
