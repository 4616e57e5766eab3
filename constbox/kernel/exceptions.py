"""Core exception hierarchy for constbox.

All constbox exceptions inherit from ConstboxError so callers can catch the
whole family at the CLI boundary. Only ``RepositoryError`` is fatal to a run;
the other errors are raised at file or package granularity and converted into
report values (``ConfigError``, ``SyntaxFailure``) by the pipeline.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class ConstboxError(Exception):
    """Base exception for all constbox errors.

    Catch this to handle all constbox-specific errors.
    """

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(ConstboxError):
    """Raised when a package or tool configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("lib/billing/box.yml", "'exports' must be a list")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Configuration file or component with the problem
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(ConstboxError):
    """Raised when a single field fails validation.

    Examples
    --------
    Example usage::

        raise ValidationError("workers", "must be positive", value=-1)
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


# ============================================================================
# Run Errors
# ============================================================================


class RepositoryError(ConstboxError):
    """Raised when the repository root cannot be used at all.

    Examples
    --------
    Example usage::

        raise RepositoryError("/no/such/dir", "not a directory")
    """

    def __init__(self, root: str, reason: str) -> None:
        super().__init__(f"Cannot analyze repository '{root}': {reason}")
        self.root = root
        self.reason = reason


class ParserUnavailableError(ConstboxError):
    """Raised when no grammar is loaded for a language the run needs.

    Without a parser no file can be analyzed, so the run cannot tell a
    clean repository from an unchecked one.
    """

    def __init__(self, language: str) -> None:
        super().__init__(
            f"No parser available for {language}; is tree-sitter-language-pack installed?"
        )
        self.language = language


class SourceParseError(ConstboxError):
    """Raised when a source file cannot be turned into a syntax tree."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to parse '{path}': {reason}")
        self.path = path
        self.reason = reason
