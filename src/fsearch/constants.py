"""Project-wide constants and the closed set of file-type variants."""

from __future__ import annotations

from enum import StrEnum


class FileType(StrEnum):
    """File-type variants, valued by their command-line letter."""

    REGULAR = "f"
    BLOCK_DEVICE = "b"
    CHAR_DEVICE = "c"
    DIRECTORY = "d"
    SYMLINK = "l"
    SOCKET = "s"
    PIPE = "p"
    UNKNOWN = "u"


# Letters accepted by ``-t``; UNKNOWN is never selectable.
TYPE_LETTERS: dict[str, FileType] = {t.value: t for t in FileType if t is not FileType.UNKNOWN}

TYPE_DESCRIPTIONS: dict[FileType, str] = {
    FileType.BLOCK_DEVICE: "block device",
    FileType.CHAR_DEVICE: "character device",
    FileType.DIRECTORY: "directory",
    FileType.REGULAR: "regular file",
    FileType.SYMLINK: "symbolic link",
    FileType.PIPE: "pipe",
    FileType.SOCKET: "socket",
}

TOKEN_SEPARATOR = "+"
PATH_SEPARATOR = "/"
DEFAULT_DIRECTORY = "./"

PERMISSION_STRING_LENGTH = 9
SIZE_FIELD_WIDTH = 10
# ctime() -> "Mon Oct 19 01:59:07 2026"; keep "Oct 19 01:59"
ACCESS_TIME_SLICE = slice(4, 16)

MAX_PATH_LENGTH = 4096
MAX_DEPTH = 512

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_USAGE = 2
EXIT_CONFIG = 3
EXIT_PATH = 4

NO_FILE_FOUND = "No file found"
PROG_NAME = "fsearch"
