'''
Turn any table or view into a standalone `DataTable`.

Every cell gets evaluated once, computed columns included, and every
property bag is deep copied: the result keeps no reference to the chain it
came from, so later mutations of the source never show up in it.

'''
from __future__ import annotations

import logging
from copy import deepcopy
from typing import TYPE_CHECKING

from chart_data.schema import Column
from chart_data.structs import Cell, Row

if TYPE_CHECKING:
    from chart_data.base import AbstractTable
    from chart_data.table import DataTable


log = logging.getLogger(__name__)


def _column_of(data: AbstractTable, column: int) -> Column:
    properties = deepcopy(data.get_column_properties(column))
    return Column(
        type=data.get_column_type(column),
        id=data.get_column_id(column),
        label=data.get_column_label(column),
        pattern=data.get_column_pattern(column),
        role=data.get_column_role(column),
        p=properties or None,
    )


def _cell_of(data: AbstractTable, row: int, column: int) -> Cell:
    value = data.get_value(row, column)
    if isinstance(value, list):
        value = list(value)

    properties = data.get_properties(row, column)
    return Cell(
        v=value,
        f=data.get_formatted_value(row, column),
        p=deepcopy(properties) if properties else None,
    )


def to_data_table(data: AbstractTable) -> DataTable:
    from chart_data.table import DataTable

    num_cols = data.get_number_of_columns()
    num_rows = data.get_number_of_rows()

    cols = [_column_of(data, i) for i in range(num_cols)]
    rows = []
    for r in range(num_rows):
        properties = data.get_row_properties(r)
        rows.append(Row(
            c=[_cell_of(data, r, c) for c in range(num_cols)],
            p=deepcopy(properties) if properties else None,
        ))

    table = DataTable.from_parts(cols, rows, deepcopy(data.get_table_properties()))

    log.debug(f'materialized {num_rows}x{num_cols} table')
    return table
