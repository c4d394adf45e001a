"""Depth-first directory traversal applying the search filters."""

from __future__ import annotations

import errno
import os
import stat
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from fsearch.constants import MAX_DEPTH, MAX_PATH_LENGTH, PATH_SEPARATOR
from fsearch.errors import DirectoryOpenError

if TYPE_CHECKING:
    from pathspec import PathSpec

    from fsearch.criteria import Criteria, SearchState


class MatchRenderer(Protocol):
    def __call__(self, st: os.stat_result, path: str, state: SearchState) -> None: ...


class ErrorReporter(Protocol):
    def __call__(self, path: str, error: OSError) -> None: ...


class CancelToken:
    """One-way cancellation flag polled once per directory entry."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True, slots=True)
class TraversalContext:
    criteria: Criteria
    state: SearchState
    render: MatchRenderer
    report: ErrorReporter
    cancel: CancelToken
    root: str
    exclude: PathSpec | None = None

    def is_excluded(self, path: str, *, is_dir: bool) -> bool:
        if self.exclude is None:
            return False
        rel = os.path.relpath(path, self.root)
        if is_dir:
            rel += "/"
        return self.exclude.match_file(rel)


def join_entry_path(parent: str, name: str) -> str:
    """Join with exactly one separator, even when ``parent`` ends with one."""
    if parent.endswith(PATH_SEPARATOR):
        return f"{parent}{name}"
    return f"{parent}{PATH_SEPARATOR}{name}"


def traverse_dir(directory: str, context: TraversalContext) -> None:
    """Walk ``directory``; failing to open it raises :class:`DirectoryOpenError`."""
    try:
        entries = os.scandir(directory)
    except OSError as err:
        raise DirectoryOpenError(directory, err) from err
    with entries:
        _walk_entries(directory, entries, context, depth=0)


def _walk_entries(
    directory: str,
    entries: os.ScandirIterator[str],
    context: TraversalContext,
    *,
    depth: int,
) -> None:
    criteria = context.criteria
    for entry in entries:
        if context.cancel.cancelled:
            break

        path = join_entry_path(directory, entry.name)
        if len(path) > MAX_PATH_LENGTH:
            context.report(path, OSError(errno.ENAMETOOLONG, os.strerror(errno.ENAMETOOLONG), path))
            continue

        try:
            st = os.lstat(path)
        except OSError as err:
            context.report(path, err)
            continue

        is_dir = stat.S_ISDIR(st.st_mode)
        if context.is_excluded(path, is_dir=is_dir):
            continue

        if criteria.selects(entry.name, st):
            context.render(st, path, context.state)
            context.state.record_match(path if is_dir else directory)

        if criteria.recursive and is_dir:
            _descend(directory, path, context, depth=depth + 1)


def _descend(parent: str, path: str, context: TraversalContext, *, depth: int) -> None:
    # Failures to enter a subdirectory are reported against its parent.
    if depth > MAX_DEPTH:
        context.report(parent, OSError(errno.ELOOP, "Maximum directory depth exceeded", path))
        return
    try:
        entries = os.scandir(path)
    except OSError as err:
        context.report(parent, err)
        return
    with entries:
        _walk_entries(path, entries, context, depth=depth)
