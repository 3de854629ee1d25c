'''
# Overview

Cells hold plain python values, each column declares one of a closed set of
types that constrain what its cells may contain:

    - boolean: `bool`
    - number: `int` or `float`, never `bool`
    - string: `str`
    - date & datetime: any `datetime.date` (so `datetime.datetime` too)
    - timeofday: a list of 1 to 7 integers `[hours, minutes, seconds, millis]`
    - function: any callable

`None` is a valid value for every type.

Every column type also maps to a `polars` data type, used by
`chart_data.interop` to move tables in and out of dataframes.

'''

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal, get_args

import polars as pl

from chart_data.errors import ConfigurationError, TypeMismatchError


ColumnType = Literal[
    'boolean',
    'number',
    'string',
    'date',
    'datetime',
    'timeofday',
    'function',
]

column_types: tuple[str, ...] = get_args(ColumnType)


def validate_column_type(type: Any, *, where: str = '') -> ColumnType:
    if type not in column_types:
        suffix = f' for column {where}' if where else ''
        raise ConfigurationError(f'Invalid type, {type!r}{suffix}.')

    return type


def is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def is_timeofday(value: Any) -> bool:
    return (
        isinstance(value, list | tuple)
        and 0 < len(value) < 8
        and all(isinstance(part, int) and not isinstance(part, bool) for part in value)
    )


def check_value_type(value: Any, type: str) -> bool:
    if value is None:
        return True

    match type:
        case 'number':
            return is_number(value)

        case 'string':
            return isinstance(value, str)

        case 'boolean':
            return isinstance(value, bool)

        case 'date' | 'datetime':
            return isinstance(value, date)

        case 'timeofday':
            return is_timeofday(value)

        case 'function':
            return callable(value)

    return False


def validate_type_match(value: Any, type: str, *, where: str = '') -> None:
    if not check_value_type(value, type):
        suffix = f' in column {where}' if where else ''
        raise TypeMismatchError(
            f'Type mismatch. Value {value!r} does not match type {type}{suffix}.'
        )


def infer_type_of_value(value: Any) -> ColumnType | None:
    '''
    Guess the column type a value belongs to, `None` when the value carries
    no type information (is `None`).

    '''
    if value is None:
        return None

    if isinstance(value, str):
        return 'string'

    if isinstance(value, bool):
        return 'boolean'

    if is_number(value):
        return 'number'

    if isinstance(value, list | tuple):
        return 'timeofday'

    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second, value.microsecond) != (0, 0, 0, 0):
            return 'datetime'

        return 'date'

    if isinstance(value, date):
        return 'date'

    if callable(value):
        return 'function'

    raise ConfigurationError(f'Unknown type of value, {value!r}')


def normalize_value(value: Any, type: str) -> Any:
    '''
    Store time of day as a list owned by the table, regardless of the sequence
    type given.

    '''
    if type == 'timeofday' and isinstance(value, list | tuple):
        return list(value)

    return value


# polars mapping

# column type -> polars dtype used when exporting
polars_type_map: dict[str, pl.DataType | type[pl.DataType]] = {
    'boolean': pl.Boolean,
    'number': pl.Float64,
    'string': pl.String,
    'date': pl.Date,
    'datetime': pl.Datetime(time_unit='us'),
    'timeofday': pl.List(pl.Int64),
}


def column_type_for_polars(dtype: pl.DataType | type[pl.DataType]) -> ColumnType:
    '''
    Given a polars dtype, obtain which column type holds its values.

    '''
    if dtype == pl.Boolean:
        return 'boolean'

    if dtype.is_numeric():
        return 'number'

    if dtype in (pl.String, pl.Utf8, pl.Categorical, pl.Enum):
        return 'string'

    if dtype == pl.Date:
        return 'date'

    if isinstance(dtype, pl.Datetime) or dtype == pl.Datetime:
        return 'datetime'

    if isinstance(dtype, pl.List) and dtype.inner.is_integer():
        return 'timeofday'

    raise ConfigurationError(f'No column type for polars dtype {dtype}')


def polars_type_for(type: str) -> pl.DataType | type[pl.DataType]:
    try:
        return polars_type_map[type]

    except KeyError:
        raise ConfigurationError(f'Column type {type} has no polars equivalent') from None
