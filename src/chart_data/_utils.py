'''
Misc internal utilities

'''
from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING, Any

from chart_data.errors import ConfigurationError, OutOfRangeError
from chart_data.structs import Cell

if TYPE_CHECKING:
    from chart_data.base import AbstractTable


def _is_index(i: Any) -> bool:
    return isinstance(i, int) and not isinstance(i, bool)


def validate_row_index(data: AbstractTable, row: Any) -> None:
    num_rows = data.get_number_of_rows()
    if num_rows == 0:
        raise OutOfRangeError(f'Invalid row index {row!r}. Table has no rows.')

    if not _is_index(row) or not 0 <= row < num_rows:
        raise OutOfRangeError(
            f'Invalid row index {row!r}. Should be in the range [0-{num_rows - 1}].'
        )


def validate_column_index(data: AbstractTable, column: Any) -> None:
    num_cols = data.get_number_of_columns()
    if num_cols == 0:
        raise OutOfRangeError(f'Invalid column index {column!r}. Table has no columns.')

    if not _is_index(column) or not 0 <= column < num_cols:
        raise OutOfRangeError(
            f'Invalid column index {column!r}. Should be an integer in the range [0-{num_cols - 1}].'
        )


def resolve_column_reference(data: AbstractTable, column: Any) -> int:
    '''
    Resolve a column index or id/label against `data`, raising
    `ConfigurationError` when it does not point at an existing column.

    '''
    if not isinstance(column, str) and not _is_index(column):
        raise ConfigurationError(
            f'Column reference {column!r} must be a number or string'
        )

    index = data.get_column_index(column)
    if index == -1:
        if isinstance(column, str):
            raise ConfigurationError(f'Invalid column id {column!r}')

        raise ConfigurationError(
            f'Invalid column index {column}. Source has {data.get_number_of_columns()} columns.'
        )

    return index


def _own(value: Any) -> Any:
    return list(value) if isinstance(value, list | tuple) else value


def parse_cell(raw: Any) -> Cell:
    '''
    Accept a bare value, a `{v, f?, p?}` dict or a `Cell` and always return a
    fresh `Cell`.

    '''
    if isinstance(raw, Cell):
        return raw.clone()

    if not isinstance(raw, dict):
        return Cell(v=_own(raw))

    formatted = raw.get('f')
    if formatted is not None and not isinstance(formatted, str):
        raise ConfigurationError("Formatted value ('f'), if specified, must be a string.")

    properties = raw.get('p')
    if properties is not None and not isinstance(properties, dict):
        raise ConfigurationError("Properties ('p'), if specified, must be a dict.")

    return Cell(v=_own(raw.get('v')), f=formatted, p=deepcopy(properties))


def compare_values(type: str, a: Any, b: Any) -> int:
    '''
    Three way compare, `None` sorts first, time of day compares component wise
    with missing millis treated as zero.

    '''
    if a is None:
        return 0 if b is None else -1

    if b is None:
        return 1

    if type == 'timeofday':
        a = list(a[:3]) + [a[3] if len(a) > 3 else 0]
        b = list(b[:3]) + [b[3] if len(b) > 3 else 0]

    return (a > b) - (a < b)
