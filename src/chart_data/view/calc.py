'''
Computed column evaluation.

Every predefined function reads the view's immediate source at the row the
view row translates to, custom callables get the view itself and are free to
read anything. Results are cached per `(column, view row)` until the view's
`revision` moves, which happens on any selection change of the view (or of a
view it reads from) and on any mutation of the root table.

'''
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from chart_data._utils import parse_cell
from chart_data.dtypes import is_number, normalize_value, validate_type_match
from chart_data.structs import Cell
from chart_data.view.selectors import CalcColumn

if TYPE_CHECKING:
    from chart_data.view import DataView


log = logging.getLogger(__name__)


def _source_value(view: DataView, row: int, col: CalcColumn) -> Any:
    return view.source.get_value(view._source_row(row), col.source_column)


def identity(view: DataView, row: int, col: CalcColumn) -> Any:
    return _source_value(view, row, col)


def empty_string(view: DataView, row: int, col: CalcColumn) -> str:
    return ''


def stringify(view: DataView, row: int, col: CalcColumn) -> str:
    return view.source.get_formatted_value(view._source_row(row), col.source_column)


def error(view: DataView, row: int, col: CalcColumn) -> float | None:
    value = _source_value(view, row, col)
    if not is_number(value):
        return None

    if col.error_type == 'percent':
        return value * (1 + col.magnitude / 100)

    return value + col.magnitude


def map_from_source(view: DataView, row: int, col: CalcColumn) -> Any:
    # only string source values are looked up
    value = _source_value(view, row, col)
    if not isinstance(value, str):
        return None

    return col.mapping.get(value)


# functions evaluated one cell at a time
predefined_functions: dict[str, Callable[[DataView, int, CalcColumn], Any]] = {
    'identity': identity,
    'emptyString': empty_string,
    'stringify': stringify,
    'error': error,
    'mapFromSource': map_from_source,
}


def fill_column(view: DataView, col: CalcColumn, from_top: bool) -> list[Cell]:
    '''
    Fill null values with the nearest non-null one above (`from_top`) or
    below, considering only the rows visible in `view`.

    '''
    num_rows = view.get_number_of_rows()
    order = range(num_rows) if from_top else range(num_rows - 1, -1, -1)

    cells: list[Cell] = []
    last = None
    for row in order:
        value = _source_value(view, row, col)
        if value is not None:
            last = value

        cells.append(Cell(v=normalize_value(last, col.type)))

    if not from_top:
        cells.reverse()

    return cells


# functions evaluated for the whole column in one pass
fill_functions: dict[str, bool] = {
    'fillFromTop': True,
    'fillFromBottom': False,
}


class CalcEngine:
    '''
    Owns the computed cell cache of a single `DataView`.

    '''

    def __init__(self, view: DataView) -> None:
        self._view = view
        self._cache: dict[tuple[int, int], Cell] = {}
        self._tag: int | None = None

    def _check_tag(self) -> None:
        tag = self._view.revision
        if tag != self._tag:
            if self._cache:
                log.debug(f'dropping {len(self._cache)} computed cells, revision {self._tag} -> {tag}')

            self._cache.clear()
            self._tag = tag

    def _evaluate(self, column: int, col: CalcColumn, row: int) -> Cell:
        if col.is_custom:
            raw = col.calc(self._view, row)

        else:
            raw = predefined_functions[col.calc](self._view, row, col)

        cell = parse_cell(raw)
        validate_type_match(cell.v, col.type, where=str(column))
        cell.v = normalize_value(cell.v, col.type)
        return cell

    def get_cell(self, column: int, col: CalcColumn, row: int) -> Cell:
        '''
        Computed cell at (`row`, `column`) of the view, `col` being the
        selector at `column`. Indices must be already validated.

        '''
        self._check_tag()
        key = (column, row)
        cell = self._cache.get(key)
        if cell is not None:
            return cell

        if not col.is_custom and col.calc in fill_functions:
            filled = fill_column(self._view, col, fill_functions[col.calc])
            for i, filled_cell in enumerate(filled):
                self._cache[(column, i)] = filled_cell

            return filled[row]

        cell = self._evaluate(column, col, row)
        self._cache[key] = cell
        return cell
