"""Search criteria and the mutable cursor threaded through a search."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fsearch.constants import DEFAULT_DIRECTORY, FileType
from fsearch.errors import ERROR_MSG_NEGATIVE_INDENT, CriteriaError
from fsearch.filters import entry_selected, parse_permission_string, parse_type_letters
from fsearch.matcher import NamePattern

if TYPE_CHECKING:
    import os
    from pathlib import Path


@dataclass(frozen=True, slots=True)
class Criteria:
    """Filters and rendering options for one search.

    ``size`` and ``links`` below zero, an empty ``types`` set and zero
    ``permissions`` each mean "unconstrained".
    """

    directory: str = DEFAULT_DIRECTORY
    name: NamePattern = field(default_factory=NamePattern)
    size: int = -1
    links: int = -1
    types: frozenset[FileType] = frozenset()
    permissions: int = 0
    indent: int = 0
    recursive: bool = False
    verbose: bool = False
    output: Path | None = None
    exclude: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise CriteriaError(str(self.indent), ERROR_MSG_NEGATIVE_INDENT)

    @classmethod
    def from_options(
        cls,
        *,
        directory: str | None = None,
        name: str | None = None,
        size: int | None = None,
        links: int | None = None,
        types: str | None = None,
        permissions: str | None = None,
        indent: int = 0,
        recursive: bool = False,
        verbose: bool = False,
        output: Path | None = None,
        exclude: tuple[str, ...] = (),
    ) -> Criteria:
        """Build criteria from raw option strings, validating as it goes."""
        return cls(
            directory=directory or DEFAULT_DIRECTORY,
            name=NamePattern.parse(name),
            size=-1 if size is None else size,
            links=-1 if links is None else links,
            types=parse_type_letters(types) if types else frozenset(),
            permissions=parse_permission_string(permissions) if permissions is not None else 0,
            indent=indent,
            recursive=recursive,
            verbose=verbose,
            output=output,
            exclude=exclude,
        )

    @property
    def tree_mode(self) -> bool:
        return self.indent > 0

    @property
    def criteria_count(self) -> int:
        """Number of filters actually constraining the search."""
        return sum((
            self.name.configured,
            self.size >= 0,
            self.links >= 0,
            bool(self.types),
            bool(self.permissions),
        ))

    def selects(self, name: str, st: os.stat_result) -> bool:
        return entry_selected(self, name, st)


@dataclass(slots=True)
class SearchState:
    """Cursor shared by the traversal and the renderer.

    ``last_shown`` starts empty so the first match also prints the root
    label of the tree.
    """

    last_shown: str = ""
    found_any: bool = False
    matches: int = 0

    def record_match(self, shown_directory: str) -> None:
        self.found_any = True
        self.matches += 1
        self.last_shown = shown_directory
