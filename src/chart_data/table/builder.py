from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from chart_data.dtypes import ColumnType, infer_type_of_value
from chart_data.errors import ConfigurationError
from chart_data.table import DataTable


log = logging.getLogger(__name__)


class TableBuilder:
    '''
    Accumulate rows of plain values, then build a `DataTable` whose column
    types are taken from the first non-null value seen in each column
    (`string` for all null columns) unless the header declares one.

    - `append`/`extend` only buffer python values, one list per column.
    - `build()` infers missing types and validates every value once.

    '''

    def __init__(self, header: Sequence[str | dict[str, Any]]):
        self._header = [
            h if isinstance(h, dict) else {'label': str(h)} for h in header
        ]
        self._ncols = len(self._header)

        # one python list per column (header order)
        self._col_lists: list[list[Any]] = [[] for _ in self._header]

    @property
    def num_columns(self) -> int:
        return self._ncols

    def append(self, row: Iterable[Any]) -> None:
        row = tuple(row)
        if len(row) > self._ncols:
            raise ConfigurationError(
                f'Row {self.rows()} has {len(row)} values, but the header only has {self._ncols} columns.'
            )

        cols = self._col_lists
        for i in range(self._ncols):
            cols[i].append(row[i] if i < len(row) else None)

    def extend(self, rows: Iterable[Iterable[Any]]) -> None:
        for row in rows:
            self.append(row)

    def rows(self) -> int:
        return len(self._col_lists[0]) if self._col_lists else 0

    def _column_type(self, i: int) -> ColumnType:
        declared = self._header[i].get('type')
        if declared:
            return declared

        for value in self._col_lists[i]:
            inferred = infer_type_of_value(value)
            if inferred is not None:
                return inferred

        return 'string'

    def build(self) -> DataTable:
        cols = [
            {**spec, 'type': self._column_type(i)}
            for i, spec in enumerate(self._header)
        ]
        rows = [list(row) for row in zip(*self._col_lists)] if self._col_lists else []
        table = DataTable({'cols': cols, 'rows': rows})
        log.debug(f'built {table.get_number_of_rows()}x{self._ncols} table')
        return table


def array_to_data_table(rows: Sequence[Sequence[Any]], no_headers: bool = False) -> DataTable:
    '''
    Build a table from a list of rows, the first one being the header
    (labels or column spec dicts) unless `no_headers` is set, in which case
    columns get no label.

    '''
    if not isinstance(rows, list | tuple):
        raise ConfigurationError(f'Expected a list of rows, got {type(rows).__name__}')

    for i, row in enumerate(rows):
        if not isinstance(row, list | tuple):
            raise ConfigurationError(f'Row {i} is not a list.')

    if no_headers:
        width = max((len(row) for row in rows), default=0)
        builder = TableBuilder([{} for _ in range(width)])
        builder.extend(rows)

    else:
        if not rows:
            raise ConfigurationError('No rows given, expected at least a header row.')

        builder = TableBuilder(rows[0])
        builder.extend(rows[1:])

    return builder.build()


def records_to_data_table(records: Iterable[dict[str, Any]]) -> DataTable:
    '''
    Build a table from a list of dicts, one column per key in first seen
    order labeled & identified by that key. Missing keys become nulls.

    '''
    records = list(records)
    keys: dict[str, None] = {}
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise ConfigurationError(f'Record {i} is not a dict.')

        for key in record:
            keys.setdefault(str(key), None)

    builder = TableBuilder([{'id': key, 'label': key} for key in keys])
    builder.extend(
        [record.get(key) for key in keys]
        for record in (
            {str(k): v for k, v in record.items()} for record in records
        )
    )
    return builder.build()
