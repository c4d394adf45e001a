"""Search orchestration: builds the traversal context, runs it, and reports."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from time import perf_counter
from typing import TYPE_CHECKING

from pathspec import PathSpec

from fsearch.constants import PROG_NAME
from fsearch.criteria import SearchState
from fsearch.directory import CancelToken, ErrorReporter, TraversalContext, traverse_dir
from fsearch.logging_utils import StructuredLogEvent, get_logger, log_event
from fsearch.renderers import TreeRenderer

if TYPE_CHECKING:
    from collections.abc import Callable

    from fsearch.criteria import Criteria

logger = get_logger(__name__)


def format_os_error(path: str, error: OSError) -> str:
    reason = error.strerror or str(error)
    return f"{PROG_NAME}: '{path}': {reason}"


def print_os_error(path: str, error: OSError) -> None:
    print(format_os_error(path, error), file=sys.stderr)


@dataclass(slots=True)
class CountingReporter:
    """Forward per-entry errors to ``report`` and count them."""

    report: ErrorReporter = print_os_error
    count: int = 0

    def __call__(self, path: str, error: OSError) -> None:
        self.count += 1
        log_event(
            logger,
            StructuredLogEvent(
                name="search.entry_error",
                message="skipping entry after error",
                level=logging.DEBUG,
                context={"path": path, "errno": error.errno, "reason": error.strerror},
            ),
        )
        self.report(path, error)


@dataclass(frozen=True, slots=True)
class SearchResult:
    state: SearchState
    interrupted: bool
    error_count: int
    duration_seconds: float = field(default=0.0)

    @property
    def found_any(self) -> bool:
        return self.state.found_any


def compile_excludes(patterns: tuple[str, ...]) -> PathSpec | None:
    if not patterns:
        return None
    return PathSpec.from_lines("gitwildmatch", patterns)


def run_search(
    criteria: Criteria,
    *,
    sink: Callable[[str], None],
    cancel: CancelToken | None = None,
    state: SearchState | None = None,
    report: ErrorReporter | None = None,
) -> SearchResult:
    """Search ``criteria.directory`` and emit every match through ``sink``.

    Raises :class:`DirectoryOpenError` if the root directory cannot be opened;
    every other filesystem error is reported and skipped.
    """
    start = perf_counter()
    state = SearchState() if state is None else state
    cancel = CancelToken() if cancel is None else cancel
    reporter = CountingReporter() if report is None else CountingReporter(report=report)

    log_event(
        logger,
        StructuredLogEvent(
            name="search.start",
            message="starting directory search",
            context={
                "directory": criteria.directory,
                "recursive": criteria.recursive,
                "criteria_count": criteria.criteria_count,
                "token_mode": criteria.name.token_mode,
                "types": criteria.types,
                "indent": criteria.indent,
            },
        ),
    )

    context = TraversalContext(
        criteria=criteria,
        state=state,
        render=TreeRenderer(criteria, sink),
        report=reporter,
        cancel=cancel,
        root=criteria.directory,
        exclude=compile_excludes(criteria.exclude),
    )
    traverse_dir(criteria.directory, context)

    duration = perf_counter() - start
    if cancel.cancelled:
        log_event(
            logger,
            StructuredLogEvent(
                name="search.interrupted",
                message="search interrupted by user",
                level=logging.WARNING,
                context={"duration_seconds": duration, "matches": state.matches},
            ),
        )
    log_event(
        logger,
        StructuredLogEvent(
            name="search.complete",
            message="completed directory search",
            context={
                "duration_seconds": duration,
                "matches": state.matches,
                "errors": reporter.count,
            },
        ),
    )
    return SearchResult(
        state=state,
        interrupted=cancel.cancelled,
        error_count=reporter.count,
        duration_seconds=duration,
    )
