from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's real configuration files out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    monkeypatch.delenv("FSEARCH_CONFIG_PATH", raising=False)


@pytest.fixture
def sample_tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A small tree rooted at the working directory.

    ./a/            directory
    ./a/b.txt       3 bytes
    ./a/deep/       directory
    ./a/deep/c.log  empty
    ./top.txt       5 bytes
    """
    root = tmp_path / "root"
    (root / "a" / "deep").mkdir(parents=True)
    (root / "a" / "b.txt").write_text("abc", encoding="utf-8")
    (root / "a" / "deep" / "c.log").write_text("", encoding="utf-8")
    (root / "top.txt").write_text("hello", encoding="utf-8")
    monkeypatch.chdir(root)
    return root
