"""constbox kernel: the analysis engine.

This module defines the **public API** of the kernel. User-space code
(``constbox.cli`` and end-user scripts) should import exclusively from
``constbox.kernel`` and ``constbox.compiler``, never from kernel submodules.

Kernel-space code (``constbox.kernel.*``, ``constbox.compiler.*``) may freely
import from kernel submodules.

The exports are grouped by category:
- Pipeline execution
- Domain types
- Packages
- Constant table and resolution
- Boundary checking
- Usage aggregation
- Parsing
- Configuration models
- Exceptions
- Logging
"""

# ============================================================================
# 1. Pipeline Execution
# ============================================================================
from constbox.kernel.pipeline_runner import AnalysisResult, PipelineRunner

# ============================================================================
# 2. Domain Types
# ============================================================================
from constbox.kernel.models import (
    SCOPE_SEPARATOR,
    ConfigError,
    DefinitionConflict,
    DefinitionEvent,
    ReferenceEvent,
    ResolvedReference,
    SourceLocation,
    SourceUnit,
    SyntaxFailure,
    Violation,
    join_name,
    split_name,
)

# ============================================================================
# 3. Packages
# ============================================================================
from constbox.kernel.packages import (
    ROOT_DIR,
    Package,
    PackageDeclaration,
    PackageTree,
    normalize_dir,
)

# ============================================================================
# 4. Constant Table and Resolution
# ============================================================================
from constbox.kernel.constant_table import ConstantEntry, ConstantTable
from constbox.kernel.resolver import candidate_prefixes, resolve, resolve_all

# ============================================================================
# 5. Boundary Checking
# ============================================================================
from constbox.kernel.checking import (
    ALL_BOUNDARY_RULES,
    BoundaryReport,
    BoundaryRule,
    DependencyRule,
    PrivacyRule,
    run_rules,
)

# ============================================================================
# 6. Usage Aggregation
# ============================================================================
from constbox.kernel.usage import PackageUsage, aggregate_usage

# ============================================================================
# 7. Parsing
# ============================================================================
from constbox.kernel.parsing import ParserRegistry, extract_source, extract_tree, get_registry

# ============================================================================
# 8. Configuration Models
# ============================================================================
from constbox.kernel.config import BoxConfig, ConstboxConfig, LoggingConfig

# ============================================================================
# 9. Exceptions
# ============================================================================
from constbox.kernel.exceptions import (
    ConfigurationError,
    ConstboxError,
    ParserUnavailableError,
    RepositoryError,
    SourceParseError,
    ValidationError,
)

# ============================================================================
# 10. Logging
# ============================================================================
from constbox.kernel.logging import configure_logging, get_logger

__all__ = [
    # Pipeline execution
    "AnalysisResult",
    "PipelineRunner",
    # Domain types
    "SCOPE_SEPARATOR",
    "ConfigError",
    "DefinitionConflict",
    "DefinitionEvent",
    "ReferenceEvent",
    "ResolvedReference",
    "SourceLocation",
    "SourceUnit",
    "SyntaxFailure",
    "Violation",
    "join_name",
    "split_name",
    # Packages
    "ROOT_DIR",
    "Package",
    "PackageDeclaration",
    "PackageTree",
    "normalize_dir",
    # Constant table and resolution
    "ConstantEntry",
    "ConstantTable",
    "candidate_prefixes",
    "resolve",
    "resolve_all",
    # Boundary checking
    "ALL_BOUNDARY_RULES",
    "BoundaryReport",
    "BoundaryRule",
    "DependencyRule",
    "PrivacyRule",
    "run_rules",
    # Usage aggregation
    "PackageUsage",
    "aggregate_usage",
    # Parsing
    "ParserRegistry",
    "extract_source",
    "extract_tree",
    "get_registry",
    # Configuration models
    "BoxConfig",
    "ConstboxConfig",
    "LoggingConfig",
    # Exceptions
    "ConfigurationError",
    "ConstboxError",
    "ParserUnavailableError",
    "RepositoryError",
    "SourceParseError",
    "ValidationError",
    # Logging
    "configure_logging",
    "get_logger",
]
