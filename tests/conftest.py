"""Configuration file for pytest containing fixtures and configuration.

This module provides fixtures that can be used across multiple test files:
- write_repo: writes a small Ruby repository under tmp_path
- widget_repo: the two-package ``a``/``b`` repository used by the CLI tests
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

RepoWriter = Callable[[dict[str, str]], Path]

WIDGET_SOURCE = """\
module A
  class Widget
  end
end
"""

# A::Widget is referenced on line 5
USE_SOURCE = """\
module B
  class Use
    def build
      # builds a widget
      A::Widget.new
    end
  end
end
"""


@pytest.fixture
def write_repo(tmp_path: Path) -> RepoWriter:
    """Fixture returning a function that writes files (dedented) under tmp_path."""

    def _write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(dedent(content), encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def widget_repo(write_repo: RepoWriter) -> Path:
    """Package ``a`` defines A::Widget, package ``b`` uses it; nothing declared."""
    return write_repo({
        "a/box.yml": "",
        "a/widget.rb": WIDGET_SOURCE,
        "b/box.yml": "",
        "b/use.rb": USE_SOURCE,
    })


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings from the developer's environment out of the tests."""
    for name in (
        "CONSTBOX_CONFIG_PATH",
        "CONSTBOX_LOG_LEVEL",
        "CONSTBOX_LOG_FORMAT",
        "CONSTBOX_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
