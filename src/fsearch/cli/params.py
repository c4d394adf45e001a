"""Click parameter types for criteria that must be validated before a search starts."""

from __future__ import annotations

from typing import Any

import click

from fsearch.errors import CriteriaError
from fsearch.filters import parse_permission_string, parse_type_letters


class FileTypesParamType(click.ParamType):
    """``-t ldb`` validated letter by letter."""

    name = "letters"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> str:
        try:
            parse_type_letters(str(value))
        except CriteriaError as err:
            self.fail(str(err), param, ctx)
        return str(value)


class PermissionsParamType(click.ParamType):
    """``-p rwxr-xr--`` validated as a nine-character permission string."""

    name = "rwxrwxrwx"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> str:
        try:
            parse_permission_string(str(value))
        except CriteriaError as err:
            self.fail(str(err), param, ctx)
        return str(value)


FILE_TYPES = FileTypesParamType()
PERMISSIONS = PermissionsParamType()
