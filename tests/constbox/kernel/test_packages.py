"""Tests for constbox.kernel.packages."""

from __future__ import annotations

from constbox.kernel.config.models import BoxConfig
from constbox.kernel.packages import (
    ROOT_DIR,
    PackageDeclaration,
    PackageTree,
    normalize_dir,
    parent_dir,
)


def _declare(
    directory: str, exports=(), imports=(), filename: str = "box.yml"
) -> PackageDeclaration:
    config_path = filename if directory == ROOT_DIR else f"{directory}/{filename}"
    return PackageDeclaration(
        directory=directory,
        config_path=config_path,
        config=BoxConfig(exports=list(exports), imports=list(imports)),
    )


class TestPaths:
    """Directory normalization helpers."""

    def test_normalize_dir(self) -> None:
        assert normalize_dir("a/b/") == "a/b"
        assert normalize_dir("./a//b") == "a/b"
        assert normalize_dir("") == ROOT_DIR
        assert normalize_dir(".") == ROOT_DIR

    def test_parent_dir(self) -> None:
        assert parent_dir("a/b") == "a"
        assert parent_dir("a") == ROOT_DIR
        assert parent_dir(ROOT_DIR) == ROOT_DIR


class TestPackageTree:
    """Ownership lookups."""

    def test_implicit_root_owns_everything_without_declarations(self) -> None:
        tree, errors = PackageTree.build([])
        assert errors == []
        owner = tree.owner("lib/deep/file.rb")
        assert owner.root == ROOT_DIR
        assert owner.implicit
        assert owner.exports == frozenset()

    def test_nearest_enclosing_package_wins(self) -> None:
        tree, _ = PackageTree.build([_declare("a"), _declare("a/b")])
        assert tree.owner("a/x.rb").root == "a"
        assert tree.owner("a/b/y.rb").root == "a/b"
        assert tree.owner("a/b/c/z.rb").root == "a/b"
        assert tree.owner("ab/z.rb").root == ROOT_DIR
        assert tree.owner("top.rb").root == ROOT_DIR

    def test_parents_point_at_enclosing_package(self) -> None:
        tree, _ = PackageTree.build([_declare("a/b/c"), _declare("a")])
        assert tree.get("a/b/c").parent == "a"
        assert tree.get("a").parent == ROOT_DIR
        assert tree.root.parent is None

    def test_declared_sets_are_carried(self) -> None:
        tree, _ = PackageTree.build([_declare("a", exports=["A::Widget"], imports=["B::Thing"])])
        package = tree.get("a")
        assert package.exports == frozenset({"A::Widget"})
        assert package.imports == frozenset({"B::Thing"})
        assert not package.implicit

    def test_explicit_root_package_is_enforced(self) -> None:
        tree, _ = PackageTree.build([_declare(ROOT_DIR)])
        assert not tree.root.implicit
        assert tree.root.config_path == "box.yml"

    def test_duplicate_declaration_falls_back_to_ancestor(self) -> None:
        tree, errors = PackageTree.build([
            _declare("a"),
            _declare("a/b"),
            _declare("a/b", filename="box.yaml"),
        ])
        assert [e.path for e in errors] == ["a/b/box.yaml", "a/b/box.yml"]
        assert all("declared twice" in e.reason for e in errors)
        assert "a/b" not in tree
        assert tree.owner("a/b/file.rb").root == "a"

    def test_packages_sorted(self) -> None:
        tree, _ = PackageTree.build([_declare("b"), _declare("a")])
        assert [p.root for p in tree.packages] == [ROOT_DIR, "a", "b"]
        assert len(tree) == 3


class TestTreeCopies:
    """Derived trees used by init and inspect."""

    def test_with_package_inserts_directory(self) -> None:
        tree, _ = PackageTree.build([_declare("a")])
        focused = tree.with_package("b")
        assert focused.owner("b/use.rb").root == "b"
        assert focused.get("b").config_path == "b/box.yml"
        assert not focused.get("b").implicit
        assert "b" not in tree

    def test_with_package_reparents_nested_packages(self) -> None:
        tree, _ = PackageTree.build([_declare("a/b/c")])
        focused = tree.with_package("a")
        assert focused.get("a/b/c").parent == "a"
        assert focused.get("a").parent == ROOT_DIR

    def test_with_package_keeps_existing_config_path(self) -> None:
        tree, _ = PackageTree.build([_declare("a", filename="box.yaml")])
        assert tree.with_package("a").get("a").config_path == "a/box.yaml"

    def test_with_package_on_implicit_root(self) -> None:
        tree, _ = PackageTree.build([])
        focused = tree.with_package(ROOT_DIR)
        assert not focused.root.implicit
        assert focused.root.config_path == "box.yml"

    def test_without_allow_lists(self) -> None:
        tree, _ = PackageTree.build([_declare("a", exports=["A::Widget"], imports=["B::Thing"])])
        cleared = tree.without_allow_lists()
        assert cleared.get("a").exports == frozenset()
        assert cleared.get("a").imports == frozenset()
        assert cleared.get("a").config_path == "a/box.yml"
