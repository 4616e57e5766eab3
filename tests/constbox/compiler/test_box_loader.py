"""Tests for constbox.compiler.box_loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from constbox.compiler.box_loader import (
    dump_box,
    load_box,
    load_declarations,
    parse_box,
    write_box,
)
from constbox.kernel.config.models import BoxConfig
from constbox.kernel.exceptions import ConfigurationError


class TestParseBox:
    """Validation of package configurations."""

    def test_full_config(self) -> None:
        config = parse_box("exports:\n- A::Widget\nimports:\n- B::Thing\n")
        assert config.exports == ["A::Widget"]
        assert config.imports == ["B::Thing"]

    def test_empty_document_is_empty_config(self) -> None:
        assert parse_box("") == BoxConfig()

    def test_empty_keys_are_empty_lists(self) -> None:
        config = parse_box("exports:\nimports:\n")
        assert config.exports == []
        assert config.imports == []

    @pytest.mark.parametrize(
        "text",
        [
            "exports: A::Widget\n",
            "exports:\n- 3\n",
            "exports:\n- ''\n",
            "publics:\n- A::Widget\n",
            "- A::Widget\n",
            "exports: [unclosed\n",
        ],
    )
    def test_invalid_shapes_are_rejected(self, text: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_box(text, "a/box.yml")
        assert exc_info.value.component == "a/box.yml"

    def test_load_box_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "box.yml"
        path.write_text("imports:\n- A::Widget\n", encoding="utf-8")
        assert load_box(path).imports == ["A::Widget"]

    def test_load_box_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_box(tmp_path / "box.yml")


class TestWriteBox:
    """Deterministic output."""

    def test_dump_is_sorted_block_style(self) -> None:
        text = dump_box(BoxConfig(exports=["B", "A", "A"], imports=["Z::Y", "C"]))
        assert text == "exports:\n- A\n- B\nimports:\n- C\n- Z::Y\n"

    def test_round_trip(self) -> None:
        config = BoxConfig(exports=["A::Widget"], imports=["B::Thing"])
        assert parse_box(dump_box(config)) == config

    def test_second_write_is_unchanged(self, tmp_path: Path) -> None:
        path = tmp_path / "box.yml"
        config = BoxConfig(imports=["A::Widget"])
        assert write_box(path, config) is True
        first = path.read_bytes()
        assert write_box(path, config) is False
        assert path.read_bytes() == first


class TestLoadDeclarations:
    """Turning discovered files into declarations."""

    def test_valid_and_invalid(self, write_repo) -> None:
        root = write_repo({
            "a/box.yml": "exports:\n- A::Widget\n",
            "b/box.yml": "exports: nope\n",
            "box.yml": "",
        })
        declarations, errors = load_declarations(root, ["a/box.yml", "b/box.yml", "box.yml"])
        assert [(d.directory, d.config_path) for d in declarations] == [
            ("a", "a/box.yml"),
            (".", "box.yml"),
        ]
        assert [e.path for e in errors] == ["b/box.yml"]
        assert str(errors[0]).startswith("invalid box b/box.yml: ")
