"""Tests for the config models module.

This module tests the configuration data models for constbox.
"""

from __future__ import annotations

import pydantic
import pytest

from constbox.kernel.config.models import (
    DEFAULT_INCLUDE,
    BoxConfig,
    ConstboxConfig,
    LoggingConfig,
)
from constbox.kernel.exceptions import ValidationError


class TestBoxConfig:
    """Tests for BoxConfig model."""

    def test_defaults_are_empty(self) -> None:
        config = BoxConfig()
        assert config.exports == []
        assert config.imports == []
        assert config.export_set == frozenset()

    def test_names_are_stripped(self) -> None:
        config = BoxConfig(exports=["  A::Widget "])
        assert config.exports == ["A::Widget"]

    def test_unknown_keys_are_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            BoxConfig.model_validate({"exports": [], "public": []})

    def test_frozen(self) -> None:
        config = BoxConfig()
        with pytest.raises(pydantic.ValidationError):
            config.exports = ["A"]  # type: ignore[misc]

    def test_merged_is_sorted_union(self) -> None:
        config = BoxConfig(exports=["B"], imports=["Z", "C"])
        merged = config.merged({"A", "B"}, {"D"})
        assert merged.exports == ["A", "B"]
        assert merged.imports == ["C", "D", "Z"]
        assert config.exports == ["B"]


class TestLoggingConfig:
    """Tests for LoggingConfig dataclass."""

    def test_default_values(self) -> None:
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert config.format == "structured"
        assert config.output_file is None


class TestConstboxConfig:
    """Tests for ConstboxConfig dataclass."""

    def test_default_values(self) -> None:
        config = ConstboxConfig()
        assert config.include == DEFAULT_INCLUDE
        assert config.ignore == ()
        assert config.workers is None
        assert config.box_filenames == ("box.yml", "box.yaml")
        assert config.logging == LoggingConfig()

    def test_workers_must_be_positive(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ConstboxConfig(workers=0)
        assert exc_info.value.field == "workers"

    def test_include_cannot_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            ConstboxConfig(include=())
