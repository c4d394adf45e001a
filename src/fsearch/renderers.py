"""Line rendering for matched entries: flat listing and shared-prefix tree."""

from __future__ import annotations

import grp
import pwd
import time
from typing import TYPE_CHECKING

from rich.style import Style

from fsearch.constants import ACCESS_TIME_SLICE, PATH_SEPARATOR, SIZE_FIELD_WIDTH
from fsearch.filters import permission_string, type_char

if TYPE_CHECKING:
    import os
    from collections.abc import Callable

    from fsearch.criteria import Criteria, SearchState

EMPHASIS = Style(bold=True)


def owner_name(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return ""


def group_name(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return ""


def format_size(size: int) -> str:
    """Right-align ``size`` in a fixed-width field; zero renders as blanks."""
    if size == 0:
        return " " * SIZE_FIELD_WIDTH
    return f"{size:>{SIZE_FIELD_WIDTH}}"


def format_access_time(atime: float) -> str:
    return time.ctime(atime)[ACCESS_TIME_SLICE]


def describe_entry(st: os.stat_result) -> str:
    """Return the verbose info block printed before a path in flat mode."""
    return (
        f"{type_char(st.st_mode)}{permission_string(st.st_mode)}  {st.st_nlink}  "
        f"{owner_name(st.st_uid)}  {group_name(st.st_gid)}  "
        f"{format_size(st.st_size)} [{format_access_time(st.st_atime)}] "
    )


def path_components(path: str) -> list[str]:
    return [part for part in path.split(PATH_SEPARATOR) if part]


def match_depth(path: str, last_shown: str, indent: int) -> int:
    """Indentation already covered by the components ``path`` shares with ``last_shown``."""
    depth = 0
    for ours, theirs in zip(path_components(path), path_components(last_shown), strict=False):
        if ours != theirs:
            break
        depth += indent
    return depth


def tree_lines(path: str, *, last_shown: str, indent: int, emphasize: bool) -> list[str]:
    """Return the lines needed to show ``path`` below what was already shown.

    With no shared prefix the first component is printed bare as the tree
    root and every following component gets a connector.
    """
    depth = match_depth(path, last_shown, indent)
    parts = path_components(path)
    lines: list[str] = []
    tabs = 0
    for idx, part in enumerate(parts):
        if (not depth and tabs) or (depth and tabs >= depth):
            label = EMPHASIS.render(part) if emphasize and idx == len(parts) - 1 else part
            lines.append(f"|{'-' * tabs}{label}")
        elif not depth:
            lines.append(part)
        tabs += indent
    return lines


class TreeRenderer:
    """Format matches for ``criteria`` and hand each line to ``sink``."""

    def __init__(self, criteria: Criteria, sink: Callable[[str], None]) -> None:
        self._criteria = criteria
        self._sink = sink

    def lines_for(self, st: os.stat_result, path: str, state: SearchState) -> list[str]:
        criteria = self._criteria
        if not criteria.tree_mode:
            info = describe_entry(st) if criteria.verbose else ""
            return [f"{info}{path}"]
        return tree_lines(
            path,
            last_shown=state.last_shown,
            indent=criteria.indent,
            emphasize=criteria.criteria_count > 0,
        )

    def render(self, st: os.stat_result, path: str, state: SearchState) -> None:
        for line in self.lines_for(st, path, state):
            self._sink(line)

    __call__ = render
