"""PipelineRunner: extraction, table building, resolution and checking in one call.

The run has two data-parallel phases separated by one barrier:

- Phase A reads and extracts every source file on a thread pool. Each task
  returns a ``SourceUnit`` or a ``SyntaxFailure``; nothing is shared.
- The constant table is folded from all units (the barrier).
- Phase B resolves and checks references in chunks on a thread pool over the
  frozen table and package tree. Each chunk returns its own report, merged
  by the caller.

The runner never touches configuration file formats; the caller hands it an
already built ``PackageTree`` and the list of source files.

Examples
--------
Basic usage::

    tree, errors = PackageTree.build(declarations)
    runner = PipelineRunner(workers=4)
    result = runner.run(Path("."), ["a/widget.rb", "b/use.rb"], tree, errors)
    for violation in result.report.violations:
        print(violation)
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from constbox.kernel.checking import ALL_BOUNDARY_RULES, BoundaryReport, BoundaryRule, run_rules
from constbox.kernel.constant_table import ConstantTable
from constbox.kernel.exceptions import ParserUnavailableError, SourceParseError
from constbox.kernel.logging import get_logger
from constbox.kernel.models import (
    ConfigError,
    DefinitionConflict,
    ReferenceEvent,
    SourceUnit,
    SyntaxFailure,
)
from constbox.kernel.packages import PackageTree
from constbox.kernel.parsing import ParserRegistry, extract_source, get_registry
from constbox.kernel.resolver import resolve_all

logger = get_logger(__name__)

_MIN_CHUNK = 256


@dataclass(slots=True)
class AnalysisResult:
    """Everything one run produced.

    Attributes
    ----------
    tree : PackageTree
        Package tree the run was checked against
    table : ConstantTable
        Canonical names and their defining packages
    report : BoundaryReport
        Privacy and dependency violations
    unresolved : list[ReferenceEvent]
        References no definition could be found for, sorted by location
    syntax_failures : list[SyntaxFailure]
        Files excluded from the run
    config_errors : list[ConfigError]
        Rejected package configurations
    files : int
        Number of source files considered
    """

    tree: PackageTree
    table: ConstantTable
    report: BoundaryReport
    unresolved: list[ReferenceEvent] = field(default_factory=list)
    syntax_failures: list[SyntaxFailure] = field(default_factory=list)
    config_errors: list[ConfigError] = field(default_factory=list)
    files: int = 0

    @property
    def conflicts(self) -> tuple[DefinitionConflict, ...]:
        return self.table.conflicts

    @property
    def has_errors(self) -> bool:
        """True if the run found violations or rejected package configurations."""
        return not self.report.is_clean or bool(self.config_errors)


class PipelineRunner:
    """Runs the analysis pipeline over a set of source files.

    Parameters
    ----------
    workers : int | None
        Threads per phase; None means ``os.cpu_count()``
    is_ignored : Callable[[str], bool] | None
        Predicate over repository-relative paths. References in matching
        files are not checked; their definitions still count.
    rules : Sequence[BoundaryRule] | None
        Rules applied to cross-package references (default: all)
    registry : ParserRegistry | None
        Parser registry (default: the process-wide one)
    """

    def __init__(
        self,
        *,
        workers: int | None = None,
        is_ignored: Callable[[str], bool] | None = None,
        rules: Sequence[BoundaryRule] | None = None,
        registry: ParserRegistry | None = None,
    ) -> None:
        self._workers = workers or os.cpu_count() or 1
        self._is_ignored = is_ignored or (lambda _path: False)
        self._rules = tuple(rules) if rules is not None else ALL_BOUNDARY_RULES
        self._registry = registry or get_registry()

    @property
    def workers(self) -> int:
        return self._workers

    def run(
        self,
        root: Path,
        files: Sequence[str],
        tree: PackageTree,
        config_errors: Iterable[ConfigError] = (),
    ) -> AnalysisResult:
        """Analyze ``files`` (relative to ``root``) against ``tree``.

        Parameters
        ----------
        root : Path
            Repository root the paths are relative to
        files : Sequence[str]
            Repository-relative POSIX paths of source files
        tree : PackageTree
            Package tree to check against
        config_errors : Iterable[ConfigError]
            Errors found while building ``tree``, carried into the result

        Returns
        -------
        AnalysisResult
            Violations, conflicts, unresolved references and skipped files

        Raises
        ------
        ParserUnavailableError
            If no grammar is loaded for a language the files need
        """
        started = time.perf_counter()
        units, failures = self.extract(root, files)
        extracted = time.perf_counter()
        logger.info(
            "Extracted {units} files ({failures} skipped) in {seconds:.3f}s",
            units=len(units),
            failures=len(failures),
            seconds=extracted - started,
        )

        table = ConstantTable.build(units, tree)
        references = [
            reference
            for unit in units
            if not self._is_ignored(unit.path)
            for reference in unit.references
        ]
        report, unresolved = self.check(references, table, tree)
        logger.info(
            "Checked {references} references against {names} names in {seconds:.3f}s: "
            "{violations} violations, {unresolved} unresolved",
            references=len(references),
            names=len(table),
            seconds=time.perf_counter() - extracted,
            violations=len(report),
            unresolved=len(unresolved),
        )

        return AnalysisResult(
            tree=tree,
            table=table,
            report=report,
            unresolved=unresolved,
            syntax_failures=sorted(failures),
            config_errors=sorted(config_errors),
            files=len(files),
        )

    def extract(
        self, root: Path, files: Sequence[str]
    ) -> tuple[list[SourceUnit], list[SyntaxFailure]]:
        """Phase A: extract every file; per-file failures are returned, never raised."""
        self._require_parsers(files)
        units: list[SourceUnit] = []
        failures: list[SyntaxFailure] = []
        with ThreadPoolExecutor(max_workers=self._workers) as pool:
            for outcome in pool.map(lambda path: self._extract_one(root, path), files):
                if isinstance(outcome, SyntaxFailure):
                    logger.warning(
                        "Skipping {path}: {reason}", path=outcome.path, reason=outcome.reason
                    )
                    failures.append(outcome)
                else:
                    units.append(outcome)
        return units, failures

    def _require_parsers(self, files: Sequence[str]) -> None:
        """Fail the whole run up front rather than skipping every file."""
        for language in sorted({self._registry.language_for(path) for path in files}):
            if not self._registry.supports_language(language):
                raise ParserUnavailableError(language)

    def _extract_one(self, root: Path, path: str) -> SourceUnit | SyntaxFailure:
        try:
            source = (root / path).read_bytes()
            source.decode("utf-8")
            return extract_source(path, source, self._registry)
        except OSError as e:
            return SyntaxFailure(path, f"unreadable ({e.strerror or e})")
        except UnicodeDecodeError:
            return SyntaxFailure(path, "not valid UTF-8")
        except SourceParseError as e:
            return SyntaxFailure(path, e.reason)
        except RecursionError:
            return SyntaxFailure(path, "too deeply nested")

    def check(
        self, references: Sequence[ReferenceEvent], table: ConstantTable, tree: PackageTree
    ) -> tuple[BoundaryReport, list[ReferenceEvent]]:
        """Phase B: resolve and check references in parallel chunks."""
        report = BoundaryReport()
        unresolved: list[ReferenceEvent] = []
        if not references:
            return report, unresolved

        size = max(_MIN_CHUNK, -(-len(references) // (self._workers * 4)))
        chunks = [references[i : i + size] for i in range(0, len(references), size)]

        def check_chunk(
            chunk: Sequence[ReferenceEvent],
        ) -> tuple[BoundaryReport, list[ReferenceEvent]]:
            resolved = resolve_all(chunk, table)
            missing = [item.reference for item in resolved if not item.is_resolved]
            return run_rules(self._rules, resolved, table, tree), missing

        with ThreadPoolExecutor(max_workers=self._workers) as pool:
            for chunk_report, chunk_unresolved in pool.map(check_chunk, chunks):
                report.merge(chunk_report)
                unresolved.extend(chunk_unresolved)

        unresolved.sort(key=lambda r: (r.location, r.name))
        return report, unresolved
