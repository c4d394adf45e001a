"""Layered TOML configuration for search defaults."""

from __future__ import annotations

import importlib.resources
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from fsearch.errors import ConfigLoadError
from fsearch.logging_utils import StructuredLogEvent, get_logger, log_event

TOML_CONFIG = ".fsearch.toml"
ENV_CONFIG_PATH = "FSEARCH_CONFIG_PATH"

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SearchSettings:
    """Configured defaults for the rendering options."""

    indent: int = 0
    recursive: bool = False
    verbose: bool = False
    exclude: tuple[str, ...] = ()
    output: Path | None = None


def load_default_config() -> dict[str, Any]:
    """Return the bundled default configuration as a Python dict."""
    try:
        cfg_path = importlib.resources.files("fsearch.resources").joinpath("default_config.toml")
        with cfg_path.open("r", encoding="utf-8") as f:
            text = f.read()
    except OSError as err:  # pragma: no cover - packaging problem
        msg = f"Error loading default configuration: {err}"
        raise ConfigLoadError(msg) from err
    return tomllib.loads(text)


def load_toml_config(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as err:
        msg = f"Error reading {path}: {err.strerror}"
        raise ConfigLoadError(msg) from err
    try:
        return tomlkit.loads(raw).unwrap()
    except TOMLKitError as e:
        msg = f"Error parsing {path.name}: {e}"
        raise ConfigLoadError(msg) from e


def _xdg_config_path() -> Path:
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    xdg_dir = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return xdg_dir / "fsearch" / "config.toml"


def _pyproject_table(pyproject_path: Path) -> dict[str, Any]:
    if not pyproject_path.exists():
        return {}
    data = load_toml_config(pyproject_path)
    tool = data.get("tool", {})
    if isinstance(tool, dict):
        table = tool.get("fsearch")
        if isinstance(table, dict):
            return table
    return {}


def read_config(
    *,
    base_path: Path,
    explicit_config: Path | None = None,
    use_files: bool = True,
) -> dict[str, Any]:
    """Read configuration merging multiple sources with clear precedence.

    Precedence (low to high):
      1. bundled defaults
      2. XDG config: $XDG_CONFIG_HOME/fsearch/config.toml (or ~/.config/fsearch/config.toml)
      3. ``.fsearch.toml`` in ``base_path``
      4. [tool.fsearch] table in ``base_path``/pyproject.toml
      5. $FSEARCH_CONFIG_PATH (if set and present)
      6. ``explicit_config`` (from --config)
    """
    cfg = load_default_config()
    if not use_files:
        return cfg

    sources: list[Path] = []

    for p in (_xdg_config_path(), base_path / TOML_CONFIG):
        if p.exists():
            cfg |= load_toml_config(p)
            sources.append(p)

    table = _pyproject_table(base_path / "pyproject.toml")
    if table:
        cfg |= table
        sources.append(base_path / "pyproject.toml")

    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        p = Path(env_path)
        if p.exists():
            cfg |= load_toml_config(p)
            sources.append(p)

    if explicit_config:
        if not explicit_config.exists():
            msg = f"Explicit config file not found: {explicit_config}"
            raise ConfigLoadError(msg)
        cfg |= load_toml_config(explicit_config)
        sources.append(explicit_config)

    log_event(
        logger,
        StructuredLogEvent(
            name="config.loaded",
            message="configuration loaded",
            level=logging.DEBUG,
            context={"sources": sources, "keys": sorted(cfg)},
        ),
    )
    return cfg


def _expect(cfg: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    value = cfg.get(key)
    # bool is an int subclass; reject it where a number is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        msg = f"Config key '{key}' has invalid value: {value!r}"
        raise ConfigLoadError(msg)
    return value


def settings_from_config(cfg: dict[str, Any]) -> SearchSettings:
    """Validate the merged mapping and convert it into :class:`SearchSettings`."""
    indent = _expect(cfg, "indent", int) if "indent" in cfg else 0
    if indent < 0:
        msg = f"Config key 'indent' must not be negative: {indent}"
        raise ConfigLoadError(msg)
    exclude = _expect(cfg, "exclude", list) if "exclude" in cfg else []
    if not all(isinstance(pat, str) for pat in exclude):
        msg = f"Config key 'exclude' must be a list of strings: {exclude!r}"
        raise ConfigLoadError(msg)
    output = _expect(cfg, "output", str) if cfg.get("output") else None
    return SearchSettings(
        indent=indent,
        recursive=_expect(cfg, "recursive", bool) if "recursive" in cfg else False,
        verbose=_expect(cfg, "verbose", bool) if "verbose" in cfg else False,
        exclude=tuple(exclude),
        output=Path(output) if output else None,
    )


def load_settings(
    *,
    base_path: Path,
    explicit_config: Path | None = None,
    use_files: bool = True,
) -> SearchSettings:
    """Read every configuration layer and return validated settings."""
    cfg = read_config(base_path=base_path, explicit_config=explicit_config, use_files=use_files)
    return settings_from_config(cfg)
