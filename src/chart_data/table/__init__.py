from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Any, Iterable

from chart_data import serialize
from chart_data._utils import validate_column_index, validate_row_index
from chart_data.base import AbstractTable
from chart_data.dtypes import normalize_value, validate_type_match
from chart_data.errors import ConfigurationError
from chart_data.format import Formatter, default_formatted_value
from chart_data.ops import SortColumnsLike, standardize_sort_columns
from chart_data.schema import Column, ColumnLike
from chart_data.structs import Cell, Properties, Row


log = logging.getLogger(__name__)


# marks an argument the caller did not pass, `None` is a valid cell value
_UNSET: Any = object()


RowLike = list | tuple | dict | None
TableSpec = dict[str, Any]


class DataTable(AbstractTable):
    '''
    Concrete in-memory table, owns its columns, rows & every cell.

    Defines the canonical index space every view chain resolves to. All cell
    writes are type checked against the declared column type.

    '''

    def __init__(self, data: TableSpec | str | bytes | None = None) -> None:
        super().__init__()
        self._cols: list[Column] = []
        self._rows: list[Row] = []
        self._properties: Properties | None = None

        # (row, column) -> formatted string computed by a formatter
        self._fmt_cache: dict[tuple[int, int], str] = {}
        self._revision: int = 0

        if data is None:
            return

        if isinstance(data, str | bytes):
            data = serialize.decode_table_json(data)

        cols, rows, properties = serialize.table_from_pojo(data)
        self._cols = cols
        self._rows = rows
        self._properties = properties

    @staticmethod
    def from_json(raw: str | bytes) -> DataTable:
        return DataTable(serialize.decode_table_json(raw))

    @staticmethod
    def from_parts(
        cols: list[Column],
        rows: list[Row],
        properties: Properties | None = None,
    ) -> DataTable:
        '''
        Adopt already validated columns & rows without copying them.

        '''
        table = DataTable()
        table._cols = cols
        table._rows = rows
        table._properties = properties
        return table

    @property
    def revision(self) -> int:
        return self._revision

    def _touch(self) -> None:
        self._revision += 1

    def _invalidate_entire_cell_cache(self) -> None:
        self._fmt_cache.clear()

    # shape & column metadata

    def get_number_of_rows(self) -> int:
        return len(self._rows)

    def get_number_of_columns(self) -> int:
        return len(self._cols)

    def get_columns(self) -> list[dict[str, Any]]:
        return [col.to_pojo() for col in self._cols]

    def get_column_id(self, column: int) -> str:
        validate_column_index(self, column)
        return self._cols[column].id

    def get_column_label(self, column: int) -> str:
        validate_column_index(self, column)
        return self._cols[column].label

    def get_column_pattern(self, column: int) -> str | None:
        validate_column_index(self, column)
        return self._cols[column].pattern

    def get_column_type(self, column: int) -> str:
        validate_column_index(self, column)
        return self._cols[column].type

    def set_column_label(self, column: int, label: str) -> None:
        validate_column_index(self, column)
        self._cols[column].label = label
        self._touch()

    # cells

    def get_cell(self, row: int, column: int) -> Cell:
        validate_row_index(self, row)
        validate_column_index(self, column)
        return self._rows[row].c[column]

    def get_value(self, row: int, column: int) -> Any:
        return self.get_cell(row, column).v

    def get_formatted_value(
        self,
        row: int,
        column: int,
        formatter: Formatter | None = None,
    ) -> str:
        cell = self.get_cell(row, column)
        if cell.f is not None:
            return cell.f

        cached = self._fmt_cache.get((row, column))
        if cached is not None:
            return cached

        formatted = default_formatted_value(
            cell.v, self._cols[column].type, formatter
        )
        self._fmt_cache[(row, column)] = formatted
        return formatted

    def set_cell(
        self,
        row: int,
        column: int,
        value: Any = _UNSET,
        formatted: str | None = _UNSET,
        properties: Properties | None = _UNSET,
    ) -> None:
        '''
        Update any combination of value, formatted value & properties of a
        cell, arguments not passed are left untouched.

        '''
        cell = self.get_cell(row, column)
        self._fmt_cache.pop((row, column), None)

        if value is not _UNSET:
            col = self._cols[column]
            validate_type_match(value, col.type, where=str(column))
            cell.v = normalize_value(value, col.type)

        if formatted is not _UNSET:
            if formatted is not None and not isinstance(formatted, str):
                raise ConfigurationError("Formatted value, if specified, must be a string.")

            cell.f = formatted

        if properties is not _UNSET:
            cell.p = properties if isinstance(properties, dict) else {}

        self._touch()

    def set_value(self, row: int, column: int, value: Any) -> None:
        self.set_cell(row, column, value)

    def set_formatted_value(self, row: int, column: int, formatted: str | None) -> None:
        self.set_cell(row, column, formatted=formatted)

    # cell properties

    def get_properties(self, row: int, column: int) -> Properties:
        cell = self.get_cell(row, column)
        if cell.p is None:
            cell.p = {}

        return cell.p

    def get_property(self, row: int, column: int, key: str) -> Any:
        properties = self.get_cell(row, column).p
        return properties.get(key) if properties else None

    def set_properties(self, row: int, column: int, properties: Properties | None) -> None:
        self.set_cell(row, column, properties=properties)

    def set_property(self, row: int, column: int, key: str, value: Any) -> None:
        self.get_properties(row, column)[key] = value
        self._touch()

    # table properties

    def get_table_properties(self) -> Properties | None:
        return self._properties

    def set_table_properties(self, properties: Properties | None) -> None:
        self._properties = properties if properties is not None else {}
        self._touch()

    def set_table_property(self, key: str, value: Any) -> None:
        if self._properties is None:
            self._properties = {}

        self._properties[key] = value
        self._touch()

    # row properties

    def get_row_properties(self, row: int) -> Properties:
        validate_row_index(self, row)
        r = self._rows[row]
        if r.p is None:
            r.p = {}

        return r.p

    def get_row_property(self, row: int, key: str) -> Any:
        validate_row_index(self, row)
        properties = self._rows[row].p
        return properties.get(key) if properties else None

    def set_row_properties(self, row: int, properties: Properties | None) -> None:
        validate_row_index(self, row)
        self._rows[row].p = properties
        self._touch()

    def set_row_property(self, row: int, key: str, value: Any) -> None:
        self.get_row_properties(row)[key] = value
        self._touch()

    # column properties

    def get_column_properties(self, column: int) -> Properties:
        validate_column_index(self, column)
        col = self._cols[column]
        if col.p is None:
            col.p = {}

        return col.p

    def get_column_property(self, column: int, key: str) -> Any:
        validate_column_index(self, column)
        properties = self._cols[column].p
        return properties.get(key) if properties else None

    def set_column_properties(self, column: int, properties: Properties | None) -> None:
        validate_column_index(self, column)
        self._cols[column].p = properties
        self._touch()

    def set_column_property(self, column: int, key: str, value: Any) -> None:
        self.get_column_properties(column)[key] = value
        self._touch()

    # structural mutation

    def insert_column(
        self,
        at: int,
        spec: ColumnLike,
        label: str | None = None,
        id: str | None = None,
    ) -> None:
        if at != len(self._cols):
            validate_column_index(self, at)
            self._invalidate_entire_cell_cache()

        col = Column.from_like(spec, label=label, id=id, where=str(at))
        self._cols.insert(at, col)
        for row in self._rows:
            row.c.insert(at, Cell())

        self._touch()
        log.debug(f'inserted {col.type} column {col.id or col.label or at!r} at {at}')

    def add_column(
        self,
        spec: ColumnLike,
        label: str | None = None,
        id: str | None = None,
    ) -> int:
        self.insert_column(len(self._cols), spec, label, id)
        return len(self._cols) - 1

    def insert_rows(self, at: int, rows: int | Iterable[RowLike]) -> int:
        '''
        Insert `rows` (a count of empty rows or an iterable of row specs) at
        `at`, return the index of the last inserted row.

        '''
        if at != len(self._rows):
            validate_row_index(self, at)

        if isinstance(rows, bool):
            raise ConfigurationError(f'Invalid rows argument: {rows!r}')

        if isinstance(rows, int):
            if rows < 0:
                raise ConfigurationError(
                    f'Invalid number of rows: {rows}. Must be a non negative integer.'
                )

            new_rows = [serialize.parse_row(None, self._cols, i) for i in range(rows)]

        elif isinstance(rows, Iterable) and not isinstance(rows, dict | str | bytes):
            new_rows = [
                serialize.parse_row(raw, self._cols, i) for i, raw in enumerate(rows)
            ]

        else:
            raise ConfigurationError(
                f'Invalid rows argument: {rows!r}. Must be a count or a list of rows.'
            )

        if at != len(self._rows):
            self._invalidate_entire_cell_cache()

        self._rows[at:at] = new_rows
        self._touch()
        return at + len(new_rows) - 1

    def add_rows(self, rows: int | Iterable[RowLike]) -> int:
        return self.insert_rows(len(self._rows), rows)

    def add_row(self, row: RowLike = None) -> int:
        return self.add_rows([row])

    def remove_rows(self, start: int, count: int) -> None:
        if count <= 0:
            return

        validate_row_index(self, start)
        del self._rows[start:start + count]
        self._invalidate_entire_cell_cache()
        self._touch()

    def remove_row(self, row: int) -> None:
        self.remove_rows(row, 1)

    def remove_columns(self, start: int, count: int) -> None:
        if count <= 0:
            return

        validate_column_index(self, start)
        del self._cols[start:start + count]
        for row in self._rows:
            del row.c[start:start + count]

        self._invalidate_entire_cell_cache()
        self._touch()

    def remove_column(self, column: int) -> None:
        self.remove_columns(column, 1)

    def sort(self, sort_columns: SortColumnsLike) -> None:
        '''
        Stable in place sort of the rows.

        '''
        compare = standardize_sort_columns(
            self, lambda row, column: row.c[column].v, sort_columns
        )
        self._rows.sort(key=cmp_to_key(compare))
        self._invalidate_entire_cell_cache()
        self._touch()

    # index translation, identity at the root of every chain

    def get_table_column_index(self, column: int) -> int:
        validate_column_index(self, column)
        return column

    def get_table_row_index(self, row: int) -> int:
        validate_row_index(self, row)
        return row

    def get_underlying_table_column_index(self, column: int) -> int:
        return self.get_table_column_index(column)

    def get_underlying_table_row_index(self, row: int) -> int:
        return self.get_table_row_index(row)

    # terminal operations

    def clone(self) -> DataTable:
        return DataTable(self.to_pojo())

    def to_data_table(self) -> DataTable:
        return self.clone()

    def to_pojo(self) -> TableSpec:
        return serialize.table_to_pojo(self)

    def to_json(self) -> str:
        return serialize.table_to_json(self)

    def iter_rows(self) -> Iterable[Row]:
        return iter(self._rows)

    def iter_columns(self) -> Iterable[Column]:
        return iter(self._cols)
