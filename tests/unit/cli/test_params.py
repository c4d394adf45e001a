from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from fsearch.cli.params import FILE_TYPES, PERMISSIONS

pytestmark = pytest.mark.small


@click.command()
@click.option("-t", "types", type=FILE_TYPES)
@click.option("-p", "permissions", type=PERMISSIONS)
def probe(types: str | None, permissions: str | None) -> None:
    click.echo(f"{types}|{permissions}")


def test_valid_values_pass_through() -> None:
    result = CliRunner().invoke(probe, ["-t", "ldb", "-p", "rwxr-xr--"])
    assert result.exit_code == 0
    assert result.output == "ldb|rwxr-xr--\n"


def test_invalid_type_letter_is_a_usage_error() -> None:
    result = CliRunner().invoke(probe, ["-t", "fz"])
    assert result.exit_code == 2
    assert "'z': Invalid file type" in result.output


@pytest.mark.parametrize("value", ["rwx", "rwxr-xr-q"])
def test_invalid_permission_is_a_usage_error(value: str) -> None:
    result = CliRunner().invoke(probe, ["-p", value])
    assert result.exit_code == 2
    assert "Invalid permission" in result.output
