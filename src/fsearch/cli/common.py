"""Shared CLI helpers: interrupt wiring and broken-pipe handling."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
import threading
from typing import TYPE_CHECKING, NoReturn

from fsearch.constants import EXIT_OK

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import FrameType

    from fsearch.directory import CancelToken


def exit_on_broken_pipe() -> NoReturn:
    """Leave quietly when the reader of stdout has gone away."""
    # Point stdout at devnull so the interpreter's final flush cannot fail again.
    with contextlib.suppress(OSError, ValueError):
        devnull = os.open(os.devnull, os.O_WRONLY)
        try:
            os.dup2(devnull, sys.stdout.fileno())
        finally:
            os.close(devnull)
    raise SystemExit(EXIT_OK)


@contextlib.contextmanager
def interrupt_handler(token: CancelToken) -> Iterator[None]:
    """Turn SIGINT into a cancellation request for the duration of the block."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handle(signum: int, _frame: FrameType | None) -> None:
        # print() is not reentrant; the signal may land inside a stdout write
        with contextlib.suppress(OSError, ValueError):
            os.write(sys.stdout.fileno(), f"\nInterrupted with signal: {signum}\n".encode())
        token.cancel()

    previous = signal.signal(signal.SIGINT, _handle)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)
