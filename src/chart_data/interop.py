'''
Move tables in & out of `polars` dataframes.

Column names come from the column id, then its label, then its position;
types follow `chart_data.dtypes.polars_type_map`.

'''
from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any

import polars as pl

from chart_data.dtypes import column_type_for_polars, polars_type_for
from chart_data.table import DataTable

if TYPE_CHECKING:
    from chart_data.base import AbstractTable


log = logging.getLogger(__name__)


def _frame_names(data: AbstractTable) -> list[str]:
    names = []
    seen = set()
    for i in range(data.get_number_of_columns()):
        name = data.get_column_id(i) or data.get_column_label(i) or f'col{i}'
        if name in seen:
            name = f'{name}_{i}'

        seen.add(name)
        names.append(name)

    return names


def _to_polars_value(value: Any, type: str) -> Any:
    match type:
        case 'date' if isinstance(value, datetime):
            return value.date()

        case 'datetime' if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time())

    return value


def to_polars(data: AbstractTable) -> pl.DataFrame:
    '''
    Snapshot of a table or view as a `pl.DataFrame`, computed columns
    included.

    '''
    series = []
    for i, name in enumerate(_frame_names(data)):
        type = data.get_column_type(i)
        dtype = polars_type_for(type)
        values = [
            _to_polars_value(data.get_value(row, i), type)
            for row in range(data.get_number_of_rows())
        ]
        series.append(pl.Series(name, values, dtype=dtype, strict=False))

    return pl.DataFrame(series)


def from_polars(frame: pl.DataFrame) -> DataTable:
    '''
    Build a `DataTable` out of a `pl.DataFrame`, one column per frame column
    with both id & label set to its name.

    '''
    cols = []
    columns = []
    for name, dtype in frame.schema.items():
        s = frame.get_column(name)
        if isinstance(dtype, pl.Decimal):
            s = s.cast(pl.Float64)

        cols.append({'id': name, 'label': name, 'type': column_type_for_polars(dtype)})
        columns.append(s.to_list())

    table = DataTable({'cols': cols, 'rows': [list(row) for row in zip(*columns)]})
    log.debug(f'loaded {frame.height}x{frame.width} frame')
    return table
