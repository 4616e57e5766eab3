"""
Parser Registry for Tree-sitter

Maps source files to tree-sitter languages and hands out parsers.
"""

import threading
from pathlib import PurePosixPath

from tree_sitter import Parser, Tree
from tree_sitter_language_pack import get_language

from constbox.kernel.exceptions import SourceParseError
from constbox.kernel.logging import get_logger

logger = get_logger(__name__)


class ParserRegistry:
    """
    Registry for language parsers.

    Parsers are not thread-safe, so each thread gets its own parser per
    language; the loaded grammars are shared.
    """

    _EXT_MAP = {
        ".rb": "ruby",
        ".rake": "ruby",
        ".ru": "ruby",
        ".gemspec": "ruby",
    }

    def __init__(self) -> None:
        self._languages: dict[str, object] = {}
        self._local = threading.local()
        self._setup_languages()

    def _register_language(self, name: str, aliases: list[str] | None = None) -> None:
        """
        Register a language and its aliases.

        Args:
            name: Language name (e.g., "ruby")
            aliases: Optional list of aliases (e.g., ["rb"] for ruby)
        """
        try:
            lang = get_language(name)
        except Exception as e:
            logger.warning("Failed to load {name} grammar: {error}", name=name, error=e)
            return

        self._languages[name] = lang
        for alias in aliases or []:
            self._languages[alias] = lang
        logger.debug("Loaded {name} grammar", name=name)

    def _setup_languages(self) -> None:
        self._register_language("ruby", ["rb"])

    def get_parser(self, language: str) -> Parser | None:
        """
        Get the calling thread's parser for a language.

        Returns:
            Parser instance or None if language not supported
        """
        language = language.lower()
        parsers: dict[str, Parser] = getattr(self._local, "parsers", None) or {}
        self._local.parsers = parsers

        if language in parsers:
            return parsers[language]

        lang = self._languages.get(language)
        if lang is None:
            return None

        parser = Parser(lang)
        parsers[language] = parser
        return parser

    def detect_language(self, file_path: str) -> str | None:
        """Detect language from file extension."""
        return self._EXT_MAP.get(PurePosixPath(file_path).suffix.lower())

    def language_for(self, file_path: str) -> str:
        """Language used for ``file_path``; Ruby unless the extension says otherwise."""
        return self.detect_language(file_path) or "ruby"

    def supports_language(self, language: str) -> bool:
        return language.lower() in self._languages

    def parse(self, file_path: str, source: bytes) -> Tree:
        """
        Parse source bytes of ``file_path``.

        Raises:
            SourceParseError: If the language is unsupported or the tree has errors
        """
        language = self.language_for(file_path)
        parser = self.get_parser(language)
        if parser is None:
            raise SourceParseError(file_path, f"no parser available for {language}")

        tree = parser.parse(source)
        if tree is None:
            raise SourceParseError(file_path, "parser returned no tree")
        if tree.root_node.has_error:
            line = _first_error_line(tree)
            raise SourceParseError(file_path, f"syntax error near line {line}")
        return tree


def _first_error_line(tree: Tree) -> int:
    """1-based line of the first ERROR or missing node."""
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        # Reverse so the leftmost child is examined first
        stack.extend(reversed([child for child in node.children if child.has_error]))
    return tree.root_node.start_point[0] + 1


# Global registry instance
_registry: ParserRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> ParserRegistry:
    """Get the process-wide parser registry."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = ParserRegistry()
        return _registry
