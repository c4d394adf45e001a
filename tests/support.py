from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fsearch.criteria import Criteria, SearchState
from fsearch.directory import CancelToken, TraversalContext
from fsearch.renderers import TreeRenderer

if TYPE_CHECKING:
    from pathspec import PathSpec


def fake_stat(
    *,
    mode: int = stat.S_IFREG | 0o644,
    size: int = 0,
    nlink: int = 1,
    uid: int = 0,
    gid: int = 0,
    atime: int = 0,
) -> os.stat_result:
    return os.stat_result((mode, 0, 0, nlink, uid, gid, size, atime, 0, 0))


@dataclass
class LineCollector:
    lines: list[str] = field(default_factory=list)

    def __call__(self, line: str) -> None:
        self.lines.append(line)


@dataclass
class ErrorCollector:
    errors: list[tuple[str, OSError]] = field(default_factory=list)

    def __call__(self, path: str, error: OSError) -> None:
        self.errors.append((path, error))

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.errors]


def make_context(
    criteria: Criteria,
    *,
    sink: LineCollector | None = None,
    report: ErrorCollector | None = None,
    cancel: CancelToken | None = None,
    exclude: PathSpec | None = None,
) -> TraversalContext:
    return TraversalContext(
        criteria=criteria,
        state=SearchState(),
        render=TreeRenderer(criteria, sink or LineCollector()),
        report=report or ErrorCollector(),
        cancel=cancel or CancelToken(),
        root=criteria.directory,
        exclude=exclude,
    )
