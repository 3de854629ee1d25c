'''
Views: lazy, read only projections over any `AbstractTable`.

A view stores only which source columns & rows it exposes (plus computed
column definitions), every read is translated one level down and delegated.
Since the source of a view may itself be a view, chains of any depth resolve
to the concrete table at their root.

Column & row configuration are each either unset, tracking the source
(including later shape changes), or an explicit list fixed at configure time.

'''
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from chart_data import serialize
from chart_data._utils import _is_index, validate_column_index, validate_row_index
from chart_data.base import AbstractTable
from chart_data.errors import ConfigurationError
from chart_data.format import Formatter, default_formatted_value
from chart_data.structs import Cell, Properties
from chart_data.view.calc import CalcEngine
from chart_data.view.selectors import (
    CalcColumn,
    Passthrough,
    Selector,
    normalize_selector,
)

if TYPE_CHECKING:
    from chart_data.table import DataTable


log = logging.getLogger(__name__)


RowsLike = int | Iterable[int]


def _standardize_rows(rows: RowsLike, end: int | None) -> list[int]:
    if _is_index(rows):
        if not _is_index(end):
            raise ConfigurationError(
                f'Row range starting at {rows} needs an integer end, got {end!r}'
            )

        if rows > end:
            raise ConfigurationError(f'Invalid row range, start {rows} is after end {end}.')

        return list(range(rows, end + 1))

    if end is not None:
        raise ConfigurationError('End of range given without a start index.')

    if not isinstance(rows, Iterable) or isinstance(rows, dict | str | bytes):
        raise ConfigurationError(
            f'Invalid rows {rows!r}, expected a list of indices or a start & end.'
        )

    indices = list(rows)
    for row in indices:
        if not _is_index(row):
            raise ConfigurationError(f'Invalid row index {row!r}, must be an integer.')

    return indices


class DataView(AbstractTable):
    '''
    Read only window over `source`: a subset, reordering or duplication of
    its columns & rows, optionally mixed with computed columns.

    Writes through a view never reach the source, cell & column properties
    set on a view live in view local overlays.

    '''

    def __init__(self, source: AbstractTable) -> None:
        if not isinstance(source, AbstractTable):
            raise ConfigurationError(
                f'View source must be a table or a view, got {type(source).__name__}'
            )

        super().__init__()
        self._source = source

        # None means unset, track the source
        self._columns: list[Selector] | None = None
        self._rows: list[int] | None = None

        self._version: int = 0
        self._calc = CalcEngine(self)

        # column -> properties set on this view while its columns are unset
        self._column_overlays: dict[int, Properties] = {}

        # (column, row) -> formatted value & properties overriding the source,
        # only valid for the revision they were set at
        self._overlays: dict[tuple[int, int], Cell] = {}
        self._overlays_tag: int = self.revision

    @staticmethod
    def from_json(source: AbstractTable, raw: str | bytes | dict[str, Any]) -> DataView:
        return serialize.view_from_json(source, raw)

    @property
    def source(self) -> AbstractTable:
        return self._source

    @property
    def version(self) -> int:
        return self._version

    @property
    def revision(self) -> int:
        # both counters only grow, so the sum moves on any change of either
        return self._version + self._source.revision

    @property
    def column_config(self) -> list[Selector] | None:
        return self._columns

    @property
    def row_config(self) -> list[int] | None:
        return self._rows

    def _selection_changed(self) -> None:
        self._version += 1
        log.debug(
            f'view selection v{self._version}: '
            f'{self.get_number_of_columns()} columns, {self.get_number_of_rows()} rows'
        )

    def _cell_overlays(self) -> dict[tuple[int, int], Cell]:
        # positions are remapped by any change up the chain
        tag = self.revision
        if tag != self._overlays_tag:
            if self._overlays:
                log.debug(
                    f'dropping {len(self._overlays)} cell overlays, '
                    f'revision {self._overlays_tag} -> {tag}'
                )

            self._overlays.clear()
            self._overlays_tag = tag

        return self._overlays

    def _materialize_columns(self) -> list[Selector]:
        if self._columns is None:
            self._columns = [
                Passthrough(column=i, p=self._column_overlays.get(i))
                for i in range(self._source.get_number_of_columns())
            ]
            self._column_overlays = {}

        return self._columns

    def _materialize_rows(self) -> list[int]:
        if self._rows is None:
            self._rows = list(range(self._source.get_number_of_rows()))

        return self._rows

    def _selector(self, column: int) -> Selector:
        validate_column_index(self, column)
        if self._columns is None:
            return Passthrough(column=column, p=self._column_overlays.get(column))

        return self._columns[column]

    def _source_row(self, row: int) -> int:
        validate_row_index(self, row)
        return row if self._rows is None else self._rows[row]

    # configuration

    def set_columns(self, columns: Sequence[Any]) -> None:
        '''
        Replace the exposed columns, each entry being a source column index or
        id (passthrough) or a computed column spec dict. Fully validated here,
        nothing is deferred to the first read.

        '''
        if not isinstance(columns, list | tuple):
            raise ConfigurationError(f'Columns must be a list, got {type(columns).__name__}')

        selectors = [
            normalize_selector(self._source, raw, i) for i, raw in enumerate(columns)
        ]

        # while unset, view positions are source columns
        for sel in selectors:
            if not isinstance(sel, Passthrough) or sel.p is not None:
                continue

            if sel.column in self._column_overlays:
                sel.p = dict(self._column_overlays[sel.column])

        self._columns = selectors
        self._column_overlays = {}
        self._selection_changed()

    def set_rows(self, rows: RowsLike, end: int | None = None) -> None:
        '''
        Replace the exposed rows with a list of source row indices, or with
        the inclusive range `rows..end`.

        '''
        indices = _standardize_rows(rows, end)
        num_rows = self._source.get_number_of_rows()
        for row in indices:
            if not 0 <= row < num_rows:
                raise ConfigurationError(
                    f'Invalid row index {row}. Source has {num_rows} rows.'
                )

        self._rows = indices
        self._selection_changed()

    def hide_columns(self, columns: Iterable[int | str]) -> None:
        '''
        Remove every passthrough column showing one of the given source
        columns, references that resolve to nothing shown are ignored.

        '''
        hidden = set()
        for column in columns:
            if isinstance(column, str) or _is_index(column):
                index = self._source.get_column_index(column)
                if index != -1:
                    hidden.add(index)

        current = self._materialize_columns()
        kept = [
            sel for sel in current
            if not (isinstance(sel, Passthrough) and sel.column in hidden)
        ]
        if len(kept) != len(current):
            self._columns = kept
            self._selection_changed()

    def hide_rows(self, rows: RowsLike, end: int | None = None) -> None:
        '''
        Remove every exposed row pointing at one of the given source rows,
        unknown rows are ignored.

        '''
        hidden = set(_standardize_rows(rows, end))
        current = self._materialize_rows()
        kept = [row for row in current if row not in hidden]
        if len(kept) != len(current):
            self._rows = kept
            self._selection_changed()

    def get_view_columns(self) -> list[int | dict[str, Any]]:
        if self._columns is None:
            return list(range(self._source.get_number_of_columns()))

        return [sel.to_config() for sel in self._columns]

    def get_view_rows(self) -> list[int]:
        if self._rows is None:
            return list(range(self._source.get_number_of_rows()))

        return list(self._rows)

    # shape & column metadata

    def get_number_of_rows(self) -> int:
        if self._rows is None:
            return self._source.get_number_of_rows()

        return len(self._rows)

    def get_number_of_columns(self) -> int:
        if self._columns is None:
            return self._source.get_number_of_columns()

        return len(self._columns)

    def get_columns(self) -> list[int | dict[str, Any]]:
        return self.get_view_columns()

    def get_column_id(self, column: int) -> str:
        sel = self._selector(column)
        if isinstance(sel, CalcColumn):
            return sel.id

        return self._source.get_column_id(sel.column)

    def get_column_label(self, column: int) -> str:
        sel = self._selector(column)
        if isinstance(sel, CalcColumn):
            return sel.label

        return self._source.get_column_label(sel.column)

    def get_column_pattern(self, column: int) -> str | None:
        sel = self._selector(column)
        if isinstance(sel, CalcColumn):
            return None

        return self._source.get_column_pattern(sel.column)

    def get_column_type(self, column: int) -> str:
        sel = self._selector(column)
        if isinstance(sel, CalcColumn):
            return sel.type

        return self._source.get_column_type(sel.column)

    # cells

    def get_cell(self, row: int, column: int) -> Cell:
        '''
        Cell at (`row`, `column`) as stored by the source or computed, without
        the view local overlay. Must be treated as read only.

        '''
        sel = self._selector(column)
        if isinstance(sel, CalcColumn):
            validate_row_index(self, row)
            return self._calc.get_cell(column, sel, row)

        return self._source.get_cell(self._source_row(row), sel.column)

    def get_value(self, row: int, column: int) -> Any:
        return self.get_cell(row, column).v

    def get_formatted_value(
        self,
        row: int,
        column: int,
        formatter: Formatter | None = None,
    ) -> str:
        sel = self._selector(column)
        validate_row_index(self, row)
        overlay = self._cell_overlays().get((column, row))
        if overlay is not None and overlay.f is not None:
            return overlay.f

        if isinstance(sel, CalcColumn):
            cell = self._calc.get_cell(column, sel, row)
            if cell.f is not None:
                return cell.f

            return default_formatted_value(cell.v, sel.type, formatter)

        return self._source.get_formatted_value(self._source_row(row), sel.column, formatter)

    def set_formatted_value(self, row: int, column: int, formatted: str | None) -> None:
        validate_column_index(self, column)
        validate_row_index(self, row)
        self._cell_overlays().setdefault((column, row), Cell()).f = formatted

    # cell properties

    def get_properties(self, row: int, column: int) -> Properties:
        '''
        Merged copy of the cell properties, source (or computed) ones first,
        view local ones on top.

        '''
        sel = self._selector(column)
        if isinstance(sel, CalcColumn):
            validate_row_index(self, row)
            base = self._calc.get_cell(column, sel, row).p

        else:
            base = self._source.get_properties(self._source_row(row), sel.column)

        overlay = self._cell_overlays().get((column, row))
        return {**(base or {}), **(overlay.p if overlay and overlay.p else {})}

    def get_property(self, row: int, column: int, key: str) -> Any:
        return self.get_properties(row, column).get(key)

    def set_property(self, row: int, column: int, key: str, value: Any) -> None:
        validate_column_index(self, column)
        validate_row_index(self, row)
        overlay = self._cell_overlays().setdefault((column, row), Cell())
        if overlay.p is None:
            overlay.p = {}

        overlay.p[key] = value

    # table & row properties

    def get_table_properties(self) -> Properties | None:
        return self._source.get_table_properties()

    def get_row_properties(self, row: int) -> Properties:
        return dict(self._source.get_row_properties(self._source_row(row)))

    def get_row_property(self, row: int, key: str) -> Any:
        return self._source.get_row_property(self._source_row(row), key)

    # column properties

    def get_column_properties(self, column: int) -> Properties:
        '''
        Merged copy of the column properties, the ones set on this view win
        over the source's.

        '''
        sel = self._selector(column)
        if isinstance(sel, CalcColumn):
            return dict(sel.p or {})

        return {**self._source.get_column_properties(sel.column), **(sel.p or {})}

    def get_column_property(self, column: int, key: str) -> Any:
        sel = self._selector(column)
        if sel.p and key in sel.p:
            return sel.p[key]

        if isinstance(sel, CalcColumn):
            return None

        return self._source.get_column_property(sel.column, key)

    def set_column_property(self, column: int, key: str, value: Any) -> None:
        validate_column_index(self, column)
        if self._columns is None:
            self._column_overlays.setdefault(column, {})[key] = value
            return

        sel = self._columns[column]
        if sel.p is None:
            sel.p = {}

        sel.p[key] = value
        if key == 'role' and isinstance(sel, CalcColumn):
            sel.role = value if isinstance(value, str) else ''

    # index translation

    def get_table_column_index(self, column: int) -> int:
        sel = self._selector(column)
        if isinstance(sel, CalcColumn):
            return -1

        index = sel.column
        return index if 0 <= index < self._source.get_number_of_columns() else -1

    def get_table_row_index(self, row: int) -> int:
        index = self._source_row(row)
        return index if 0 <= index < self._source.get_number_of_rows() else -1

    def get_underlying_table_column_index(self, column: int) -> int:
        index = self.get_table_column_index(column)
        if index == -1:
            return -1

        return self._source.get_underlying_table_column_index(index)

    def get_underlying_table_row_index(self, row: int) -> int:
        index = self.get_table_row_index(row)
        if index == -1:
            return -1

        return self._source.get_underlying_table_row_index(index)

    def get_view_column_index(self, column: int | str) -> int:
        '''
        First view column showing source column `column` (index or id), -1
        when it is not shown.

        '''
        index = self._source.get_column_index(column)
        if index == -1:
            return -1

        for i in range(self.get_number_of_columns()):
            if self.get_table_column_index(i) == index:
                return i

        return -1

    def get_view_row_index(self, row: int) -> int:
        '''
        First view row showing source row `row`, -1 when it is not shown.

        '''
        if not _is_index(row) or not 0 <= row < self._source.get_number_of_rows():
            return -1

        if self._rows is None:
            return row

        try:
            return self._rows.index(row)

        except ValueError:
            return -1

    # terminal operations

    def to_data_table(self) -> DataTable:
        from chart_data.materialize import to_data_table

        return to_data_table(self)

    def to_pojo(self) -> dict[str, Any]:
        return serialize.view_to_pojo(self)

    def to_json(self) -> str:
        return serialize.view_to_json(self)

