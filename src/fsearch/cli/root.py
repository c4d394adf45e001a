"""The ``fsearch`` command: option parsing, configuration, and exit codes."""

from __future__ import annotations

import io
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from fsearch import __version__
from fsearch.config import load_settings
from fsearch.constants import (
    EXIT_CONFIG,
    EXIT_NOT_FOUND,
    EXIT_PATH,
    NO_FILE_FOUND,
    PROG_NAME,
    TYPE_DESCRIPTIONS,
)
from fsearch.core import format_os_error, run_search
from fsearch.criteria import Criteria
from fsearch.directory import CancelToken
from fsearch.errors import ConfigLoadError, CriteriaError, DirectoryOpenError
from fsearch.logging_utils import LOG_LEVELS, configure_logging
from fsearch.output import build_line_sink

from .common import exit_on_broken_pipe, interrupt_handler
from .params import FILE_TYPES, PERMISSIONS

CLI_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

EXAMPLE = "fsearch -d targetDirectoryPath -f lost+file -b 100 -t b"


def _table() -> Table:
    table = Table(show_header=False, show_edge=False, box=None, pad_edge=False, expand=False)
    table.add_column(style="cyan", no_wrap=True)
    table.add_column(style="default")
    return table


class _RichHelpCommand(click.Command):
    """Click command rendering its usage screen with rich."""

    def get_help(self, ctx: click.Context) -> str:  # type: ignore[override]
        console = Console(record=True, file=io.StringIO())
        console.print(f"[bold]Usage:[/bold] {PROG_NAME} [OPTIONS]")
        console.print()
        console.print("  Search a directory for entries matching name, size, link, type and")
        console.print("  permission criteria; print them as a flat list or an indented tree.")
        console.print()

        console.print("[bold]Options:[/bold]")
        options = _table()
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record:
                opts, help_text = record
                options.add_row(opts, help_text or "")
        console.print(options)
        console.print()

        console.print("[bold]File types:[/bold]")
        types = _table()
        for kind, description in sorted(TYPE_DESCRIPTIONS.items(), key=lambda item: item[0].value):
            types.add_row(kind.value, description)
        console.print(types)
        console.print()

        console.print("[bold]Notes:[/bold]")
        console.print("  1) -f is case insensitive; '+' splits it into tokens that must follow each other")
        console.print("  2) -t accepts one or more file types, e.g. -t ldb")
        console.print()
        console.print(f"[bold]Example:[/bold] {EXAMPLE}")
        return console.export_text()


@click.command(cls=_RichHelpCommand, context_settings=CLI_CONTEXT_SETTINGS)
@click.option("-d", "--directory", metavar="PATH", help="Target directory path (default: current directory)")
@click.option("-f", "--file-name", "name", metavar="NAME", help="Target file name (case insensitive, '+' tokens)")
@click.option("-b", "--size", type=int, metavar="BYTES", help="Target file size in bytes")
@click.option("-l", "--links", type=int, metavar="COUNT", help="Target file link count")
@click.option("-t", "--type", "types", type=FILE_TYPES, help="Target file types, any of: b c d f l p s")
@click.option("-p", "--permissions", type=PERMISSIONS, help="Target file permissions (e.g. 'rwxr-xr--')")
@click.option("-i", "--indent", type=click.IntRange(min=0), help="Indent a tree using this many columns per level")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Also append output to this file")
@click.option("-r", "--recursive", is_flag=True, help="Search subdirectories recursively")
@click.option("-v", "--verbose", is_flag=True, help="Display additional information per entry")
@click.option("-x", "--exclude", multiple=True, metavar="PATTERN", help="Skip entries matching a gitignore pattern")
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Explicit config file path")
@click.option("--no-config", is_flag=True, help="Ignore configuration files")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    metavar="LEVEL",
    help="Set log level explicitly (CRITICAL, ERROR, WARNING, INFO, DEBUG)",
)
@click.version_option(__version__, "-V", "--version")
def cli(
    *,
    directory: str | None,
    name: str | None,
    size: int | None,
    links: int | None,
    types: str | None,
    permissions: str | None,
    indent: int | None,
    output: Path | None,
    recursive: bool,
    verbose: bool,
    exclude: tuple[str, ...],
    config_path: Path | None,
    no_config: bool,
    log_level: str | None,
) -> None:
    """Search a directory tree for entries matching the given criteria."""
    configure_logging(log_level)

    try:
        settings = load_settings(base_path=Path(), explicit_config=config_path, use_files=not no_config)
    except ConfigLoadError as err:
        print(err, file=sys.stderr)
        raise SystemExit(EXIT_CONFIG) from err

    try:
        criteria = Criteria.from_options(
            directory=directory,
            name=name,
            size=size,
            links=links,
            types=types,
            permissions=permissions,
            indent=settings.indent if indent is None else indent,
            recursive=recursive or settings.recursive,
            verbose=verbose or settings.verbose,
            output=output or settings.output,
            exclude=settings.exclude + exclude,
        )
    except CriteriaError as err:
        raise click.UsageError(str(err)) from err

    token = CancelToken()
    sink = build_line_sink(output=criteria.output)
    try:
        with interrupt_handler(token):
            result = run_search(criteria, sink=sink, cancel=token)
    except DirectoryOpenError as err:
        print(format_os_error(err.path, err.cause), file=sys.stderr)
        raise SystemExit(EXIT_PATH) from err
    except BrokenPipeError:
        # click turns an escaping EPIPE into exit status 1
        exit_on_broken_pipe()

    if not result.found_any:
        try:
            print(NO_FILE_FOUND, flush=True)
        except BrokenPipeError:
            exit_on_broken_pipe()
        raise SystemExit(EXIT_NOT_FOUND)


def main(argv: list[str] | None = None) -> None:
    """Console entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)
    cli.main(args=argv, prog_name=PROG_NAME)
