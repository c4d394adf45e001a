"""Structured logging helpers shared by the search pipeline and the CLI."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

type LogValue = str | int | float | bool | list[LogValue] | dict[str, LogValue] | None

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
DEFAULT_LOG_LEVEL = "WARNING"


def _serialise_value(value: object) -> LogValue:
    """Convert ``value`` into a log-friendly representation."""
    if isinstance(value, Enum):
        return _serialise_value(value.value)
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (set, frozenset)):
        return sorted(str(_serialise_value(v)) for v in value)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_serialise_value(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): _serialise_value(v) for k, v in value.items()}
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


@dataclass(frozen=True, slots=True)
class StructuredLogEvent:
    """A named log event with a context payload."""

    name: str
    message: str
    context: dict[str, object] = field(default_factory=dict)
    level: int = logging.INFO

    def serialised_context(self) -> dict[str, LogValue]:
        return {str(k): _serialise_value(v) for k, v in self.context.items()}


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``."""
    return logging.getLogger(name)


def log_event(logger: logging.Logger, event: StructuredLogEvent) -> None:
    """Emit ``event`` to ``logger`` with structured metadata."""
    if not logger.isEnabledFor(event.level):
        return
    logger.log(event.level, event.message, extra={"event": event.name, "context": event.serialised_context()})


def configure_logging(level_name: str | None) -> int:
    """Configure the root logger from a level name and return the numeric level."""
    name = (level_name or DEFAULT_LOG_LEVEL).upper()
    if name not in LOG_LEVELS:
        msg = f"unknown log level: {level_name}"
        raise ValueError(msg)
    level = getattr(logging, name)
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s", force=True)
    return level


__all__ = ["LOG_LEVELS", "StructuredLogEvent", "configure_logging", "get_logger", "log_event"]
