"""Source parsing and event extraction."""

from constbox.kernel.parsing.extractor import extract_source, extract_tree
from constbox.kernel.parsing.parser_registry import ParserRegistry, get_registry

__all__ = ["ParserRegistry", "extract_source", "extract_tree", "get_registry"]
