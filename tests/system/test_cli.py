from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from fsearch import __version__
from fsearch.cli import cli, main
from fsearch.constants import EXIT_CONFIG, EXIT_NOT_FOUND, EXIT_PATH, EXIT_USAGE

pytestmark = pytest.mark.medium

BOLD = "\x1b[1m"
RESET = "\x1b[0m"


def run(*args: str) -> tuple[int, list[str]]:
    result = CliRunner().invoke(cli, list(args))
    return result.exit_code, result.output.splitlines()


def test_help_lists_options_and_file_types() -> None:
    result = CliRunner().invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "-d, --directory" in result.output
    assert "-p, --permissions" in result.output
    assert "File types:" in result.output
    assert "symbolic link" in result.output
    assert "lost+file" in result.output


def test_version_flag() -> None:
    result = CliRunner().invoke(cli, ["-V"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_main_entry_point_exits_through_click(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_lost_file_scenario(tmp_path: Path) -> None:
    (tmp_path / "lostfile.txt").write_text("x", encoding="utf-8")
    (tmp_path / "other.txt").write_text("y", encoding="utf-8")
    code, lines = run("-f", "lost+file", "-d", str(tmp_path))
    assert code == 0
    assert lines == [f"{tmp_path}/lostfile.txt"]


def test_empty_directory_reports_no_file_found(tmp_path: Path) -> None:
    code, lines = run("-d", str(tmp_path))
    assert code == EXIT_NOT_FOUND
    assert lines == ["No file found"]


def test_unopenable_root_is_fatal(tmp_path: Path) -> None:
    missing = tmp_path / "missing"
    code, lines = run("-d", str(missing))
    assert code == EXIT_PATH
    assert lines == [f"fsearch: '{missing}': No such file or directory"]


def test_invalid_type_is_usage_error() -> None:
    code, lines = run("-t", "x")
    assert code == EXIT_USAGE
    assert any("Invalid file type" in line for line in lines)


def test_negative_indent_is_usage_error() -> None:
    code, _ = run("-i", "-1")
    assert code == EXIT_USAGE


@pytest.mark.usefixtures("sample_tree")
def test_tree_output_without_filters() -> None:
    code, lines = run("-d", ".", "-r", "-i", "2")
    assert code == 0
    assert lines[0] == "."
    assert len(lines) == 6
    assert lines.count("|--a") == 1
    assert not any(BOLD in line for line in lines)


@pytest.mark.usefixtures("sample_tree")
def test_tree_output_emphasizes_match() -> None:
    code, lines = run("-d", ".", "-r", "-i", "2", "-f", "C.LOG")
    assert code == 0
    assert lines == [".", "|--a", "|----deep", f"|------{BOLD}c.log{RESET}"]


@pytest.mark.usefixtures("sample_tree")
def test_size_and_link_filters() -> None:
    assert run("-b", "5") == (0, ["./top.txt"])
    code, lines = run("-r", "-l", "1", "-t", "f")
    assert code == 0
    assert sorted(lines) == ["./a/b.txt", "./a/deep/c.log", "./top.txt"]


@pytest.mark.usefixtures("sample_tree")
def test_type_filter_accepts_several_letters() -> None:
    code, lines = run("-r", "-t", "dl")
    assert code == 0
    assert sorted(lines) == ["./a", "./a/deep"]


def test_permission_filter(tmp_path: Path) -> None:
    match = tmp_path / "match.sh"
    other = tmp_path / "other.sh"
    for path, mode in ((match, 0o754), (other, 0o744)):
        path.write_text("", encoding="utf-8")
        path.chmod(mode)
    code, lines = run("-d", str(tmp_path), "-p", "rwxr-xr--")
    assert code == 0
    assert lines == [f"{match}"]


@pytest.mark.usefixtures("sample_tree")
def test_verbose_flat_listing() -> None:
    code, lines = run("-v", "-f", "top.txt")
    assert code == 0
    assert len(lines) == 1
    assert lines[0].startswith("-rw")
    assert lines[0].endswith("] ./top.txt")
    assert "         5 [" in lines[0]


def test_output_file_mirrors_stdout(sample_tree: Path) -> None:
    out = sample_tree.parent / "copy.txt"
    code, lines = run("-r", "-i", "3", "-o", str(out))
    assert code == 0
    assert out.read_text(encoding="utf-8").splitlines() == lines


@pytest.mark.usefixtures("sample_tree")
def test_exclude_option_prunes_entries() -> None:
    code, lines = run("-r", "-x", "*.txt", "-x", "*.log")
    assert code == 0
    assert sorted(lines) == ["./a", "./a/deep"]


def test_config_file_supplies_defaults(sample_tree: Path) -> None:
    (sample_tree / ".fsearch.toml").write_text(
        "indent = 2\nrecursive = true\nexclude = ['deep/']\n",
        encoding="utf-8",
    )
    code, lines = run("-d", ".", "-f", "b.txt")
    assert code == 0
    assert lines == [".", "|--a", f"|----{BOLD}b.txt{RESET}"]

    code, lines = run("-d", ".", "-f", "b.txt", "--no-config")
    assert code == EXIT_NOT_FOUND

    code, lines = run("-d", ".", "-f", "c.log")
    assert code == EXIT_NOT_FOUND


def test_command_line_overrides_config_indent(sample_tree: Path) -> None:
    (sample_tree / ".fsearch.toml").write_text("indent = 2\n", encoding="utf-8")
    code, lines = run("-f", "top.txt", "-i", "0")
    assert code == 0
    assert lines == ["./top.txt"]


def test_bad_config_exits_with_config_code(sample_tree: Path) -> None:
    (sample_tree / ".fsearch.toml").write_text("indent = 'deep'\n", encoding="utf-8")
    code, lines = run("-f", "top.txt")
    assert code == EXIT_CONFIG
    assert any("indent" in line for line in lines)


@pytest.mark.skipif(os.geteuid() == 0, reason="root can read any directory")
def test_unreadable_subdirectory_is_reported_and_skipped(sample_tree: Path) -> None:
    locked = sample_tree / "a" / "deep"
    locked.chmod(0o000)
    try:
        code, lines = run("-r", "-f", "top.txt")
    finally:
        locked.chmod(0o755)
    assert code == 0
    assert "./top.txt" in lines
    assert "fsearch: './a': Permission denied" in lines


@pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that accepts arbitrary name bytes")
def test_undecodable_name_is_listed_and_copied(tmp_path: Path) -> None:
    tree = tmp_path / "tree"
    tree.mkdir()
    fd = os.open(os.fsencode(tree) + b"/bad\xffname", os.O_CREAT | os.O_WRONLY, 0o644)
    os.close(fd)
    out = tmp_path / "copy.txt"
    result = CliRunner().invoke(cli, ["-d", str(tree), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_bytes() == os.fsencode(tree) + b"/bad\xffname\n"
    assert result.stdout_bytes.endswith(b"/bad\xffname\n")


def test_broken_stdout_pipe_exits_cleanly(monkeypatch: pytest.MonkeyPatch) -> None:
    def closed_reader(*_args: object, **_kwargs: object) -> None:
        raise BrokenPipeError

    monkeypatch.setattr("fsearch.cli.root.run_search", closed_reader)
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 0
    assert result.output == ""


@pytest.mark.skipif(os.name != "posix", reason="POSIX pipe semantics")
def test_reader_closing_pipe_early_exits_zero(tmp_path: Path) -> None:
    tree = tmp_path / "tree"
    tree.mkdir()
    for idx in range(4000):
        (tree / f"entry-{idx:05d}-{'x' * 40}").touch()
    env = os.environ | {"PYTHONPATH": str(Path(__file__).resolve().parents[2] / "src")}
    errors = tmp_path / "stderr.txt"
    with errors.open("wb") as err_fh:
        proc = subprocess.Popen(  # noqa: S603
            [sys.executable, "-m", "fsearch", "-d", str(tree)],
            stdout=subprocess.PIPE,
            stderr=err_fh,
            env=env,
        )
        assert proc.stdout is not None
        assert proc.stdout.readline()
        proc.stdout.close()
        code = proc.wait(timeout=60)
    assert code == 0
    assert b"Traceback" not in errors.read_bytes()
