"""Attribute filters over ``lstat`` results plus permission/type codecs."""

from __future__ import annotations

import stat
from typing import TYPE_CHECKING

from fsearch.constants import PERMISSION_STRING_LENGTH, TYPE_LETTERS, FileType
from fsearch.errors import ERROR_MSG_INVALID_PERMISSION, ERROR_MSG_INVALID_TYPE, CriteriaError

if TYPE_CHECKING:
    import os
    from collections.abc import Set

    from fsearch.criteria import Criteria

_FORMAT_TYPES: dict[int, FileType] = {
    stat.S_IFBLK: FileType.BLOCK_DEVICE,
    stat.S_IFCHR: FileType.CHAR_DEVICE,
    stat.S_IFDIR: FileType.DIRECTORY,
    stat.S_IFIFO: FileType.PIPE,
    stat.S_IFLNK: FileType.SYMLINK,
    stat.S_IFREG: FileType.REGULAR,
    stat.S_IFSOCK: FileType.SOCKET,
}

# (bit, letter) for owner, group, other in display order
_PERMISSION_BITS: tuple[tuple[int, str], ...] = (
    (stat.S_IRUSR, "r"),
    (stat.S_IWUSR, "w"),
    (stat.S_IXUSR, "x"),
    (stat.S_IRGRP, "r"),
    (stat.S_IWGRP, "w"),
    (stat.S_IXGRP, "x"),
    (stat.S_IROTH, "r"),
    (stat.S_IWOTH, "w"),
    (stat.S_IXOTH, "x"),
)


def classify(mode: int) -> FileType:
    """Map the format bits of ``mode`` to exactly one file type."""
    return _FORMAT_TYPES.get(stat.S_IFMT(mode), FileType.UNKNOWN)


def type_char(mode: int) -> str:
    """Return the listing character for ``mode`` (``-`` for regular files)."""
    kind = classify(mode)
    return "-" if kind is FileType.REGULAR else kind.value


def permission_digits(mode: int) -> str:
    """Return the owner/group/other triplet of ``mode`` as three digits, e.g. ``"754"``."""
    return f"{mode & 0o777:03o}"


def permission_string(mode: int) -> str:
    """Return the ``rwxr-xr--`` rendering of the permission bits in ``mode``."""
    return "".join(letter if mode & bit else "-" for bit, letter in _PERMISSION_BITS)


def parse_permission_string(text: str) -> int:
    """Decode a nine-character ``rwx`` string into permission bits (``0o754``)."""
    if len(text) != PERMISSION_STRING_LENGTH:
        raise CriteriaError(text, ERROR_MSG_INVALID_PERMISSION)

    bits = 0
    for (bit, letter), char in zip(_PERMISSION_BITS, text, strict=True):
        if char == letter:
            bits |= bit
        elif char != "-":
            raise CriteriaError(text, ERROR_MSG_INVALID_PERMISSION)
    return bits


def parse_type_letters(text: str) -> frozenset[FileType]:
    """Decode ``-t`` letters such as ``"ldb"`` into a set of file types."""
    types: set[FileType] = set()
    for letter in text:
        try:
            types.add(TYPE_LETTERS[letter])
        except KeyError as err:
            raise CriteriaError(letter, ERROR_MSG_INVALID_TYPE) from err
    return frozenset(types)


def size_matches(expected: int, actual: int) -> bool:
    return expected < 0 or expected == actual


def links_matches(expected: int, actual: int) -> bool:
    return expected < 0 or expected == actual


def type_matches(mask: Set[FileType], mode: int) -> bool:
    if not mask:
        return True
    return classify(mode) in mask


def permissions_matches(expected: int, mode: int) -> bool:
    """``expected`` holds permission bits; zero means unconstrained."""
    if not expected:
        return True
    return permission_digits(mode) == permission_digits(expected)


def entry_selected(criteria: Criteria, name: str, st: os.stat_result) -> bool:
    """Return True if the entry passes every configured filter."""
    return (
        criteria.name.matches(name)
        and size_matches(criteria.size, st.st_size)
        and type_matches(criteria.types, st.st_mode)
        and links_matches(criteria.links, st.st_nlink)
        and permissions_matches(criteria.permissions, st.st_mode)
    )
