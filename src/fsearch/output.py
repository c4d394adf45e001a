"""Output strategies for emitted lines: stdout plus an optional append-only copy."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TextIO

from fsearch.logging_utils import get_logger

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


class OutputStrategy(Protocol):
    """Write-only destination for a single formatted line."""

    def write(self, line: str) -> None: ...


class StdoutOutput:
    """Write lines to stdout (looked up per call so redirection is honoured).

    Names that are not valid in the stream encoding (undecodable bytes that
    ``os.scandir`` hands back as surrogates) are written as their original
    bytes when the stream exposes a binary buffer.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def write(self, line: str) -> None:
        stream = sys.stdout if self._stream is None else self._stream
        try:
            stream.write(f"{line}\n")
        except UnicodeEncodeError:
            buffer = getattr(stream, "buffer", None)
            if buffer is None:
                raise
            stream.flush()
            buffer.write(os.fsencode(line) + b"\n")
        stream.flush()


class AppendFileOutput:
    """Append lines to a file, opening and closing it for every line."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def write(self, line: str) -> None:
        with self._path.open("a", encoding="utf-8", errors="surrogateescape") as fh:
            fh.write(f"{line}\n")


@dataclass(frozen=True, slots=True)
class StrategyLink:
    """One destination of a :class:`LineSink`."""

    strategy: OutputStrategy
    suppress_errors: bool = False

    def write(self, line: str) -> bool:
        try:
            self.strategy.write(line)
        except (OSError, UnicodeError):
            if not self.suppress_errors:
                raise
            logger.debug("suppressing writer failure", exc_info=True)
            return False
        return True


@dataclass(slots=True)
class LineSink:
    """Send every line to each link in order."""

    links: tuple[StrategyLink, ...]

    def __call__(self, line: str) -> None:
        self.write(line)

    def write(self, line: str) -> None:
        for link in self.links:
            link.write(line)


def build_line_sink(*, output: Path | None, stdout: OutputStrategy | None = None) -> LineSink:
    """Stdout first, then the duplicate file whose failures never stop a search."""
    links = [StrategyLink(strategy=stdout or StdoutOutput())]
    if output is not None:
        links.append(StrategyLink(strategy=AppendFileOutput(output), suppress_errors=True))
    return LineSink(tuple(links))
