'''
Plain data interchange.

Tables go to & from the `{cols, rows, p?}` shape, fully explicit on the way
out, shorthand tolerant on the way in. Views only serialize their
configuration (`{view: true, columns, rows}`), never data: rebuilding one
needs the caller to hand back an equivalent source.

JSON encoding goes through `msgspec.json`; dates & datetimes travel as ISO
8601 strings and are revived using the declared column type.

'''
from __future__ import annotations

import logging
from copy import deepcopy
from typing import TYPE_CHECKING, Any, Sequence

from chart_data._utils import parse_cell
from chart_data.dtypes import (
    infer_type_of_value,
    normalize_value,
    validate_type_match,
)
from chart_data.errors import ConfigurationError
from chart_data.schema import Column
from chart_data.structs import Cell, Properties, Row, decode_json, encode_json, revive_date

if TYPE_CHECKING:
    from chart_data.base import AbstractTable
    from chart_data.table import DataTable
    from chart_data.view import DataView


log = logging.getLogger(__name__)


_date_types = ('date', 'datetime')


# tables

def _row_cells(raw: Any, i: int) -> tuple[Sequence[Any], Properties | None]:
    if isinstance(raw, dict):
        if 'c' not in raw:
            raise ConfigurationError(f'Row {i} is not a list or a {{c, p?}} dict.')

        properties = raw.get('p')
        if properties is not None and not isinstance(properties, dict):
            raise ConfigurationError(f'Row {i} properties must be a dict.')

        cells = raw['c']

    else:
        properties = None
        cells = raw

    if not isinstance(cells, list | tuple):
        raise ConfigurationError(f'Row {i} is not None or a list of cells.')

    return cells, properties


def parse_row(raw: Any, cols: Sequence[Column], i: int) -> Row:
    '''
    Normalize one row spec into a `Row`: accepts `None` (all nulls), a list of
    values or cells, or a `{c, p?}` dict. Short rows are padded with null
    cells, every value is type checked.

    '''
    if raw is None:
        return Row(c=[Cell() for _ in cols])

    raw_cells, properties = _row_cells(raw, i)
    if len(raw_cells) > len(cols):
        raise ConfigurationError(
            f'Row {i} has {len(raw_cells)} cells, but the table only has {len(cols)} columns.'
        )

    cells = []
    for j, col in enumerate(cols):
        cell = parse_cell(raw_cells[j]) if j < len(raw_cells) else Cell()
        if col.type in _date_types:
            cell.v = revive_date(cell.v)

        validate_type_match(cell.v, col.type, where=str(j))
        cell.v = normalize_value(cell.v, col.type)
        cells.append(cell)

    return Row(c=cells, p=deepcopy(properties))


def _first_row_value(rows: Sequence[Any], column: int) -> Any:
    if not rows or rows[0] is None:
        return None

    raw_cells, _ = _row_cells(rows[0], 0)
    if column >= len(raw_cells):
        return None

    return parse_cell(raw_cells[column]).v


def table_from_pojo(
    spec: dict[str, Any],
) -> tuple[list[Column], list[Row], Properties | None]:
    '''
    Validate & normalize a table spec into columns, rows and table properties.
    Columns without a type take it from the first row's value, `string` when
    that value is null or missing.

    '''
    if not isinstance(spec, dict):
        raise ConfigurationError(f'Table spec must be a dict, got {type(spec).__name__}')

    raw_cols = spec.get('cols') or []
    raw_rows = spec.get('rows') or []
    properties = spec.get('p')
    if not isinstance(raw_cols, list) or not isinstance(raw_rows, list):
        raise ConfigurationError('Table spec "cols" and "rows" must be lists.')

    if properties is not None and not isinstance(properties, dict):
        raise ConfigurationError('Table spec properties ("p") must be a dict.')

    cols = []
    for i, raw in enumerate(raw_cols):
        default_type = None
        if isinstance(raw, dict) and not raw.get('type'):
            default_type = infer_type_of_value(_first_row_value(raw_rows, i))

        cols.append(Column.from_like(raw, default_type=default_type, where=str(i)))

    rows = [parse_row(raw, cols, i) for i, raw in enumerate(raw_rows)]
    return cols, rows, deepcopy(properties)


def table_to_pojo(table: DataTable) -> dict[str, Any]:
    '''
    Fully explicit, deep copied representation of `table`, accepted back by
    the `DataTable` constructor.

    '''
    rows = []
    for row in table.iter_rows():
        r: dict[str, Any] = {'c': [cell.to_pojo() for cell in row.c]}
        if row.p is not None:
            r['p'] = deepcopy(row.p)

        rows.append(r)

    ret: dict[str, Any] = {
        'cols': [col.to_pojo() for col in table.iter_columns()],
        'rows': rows,
    }
    properties = table.get_table_properties()
    if properties is not None:
        ret['p'] = deepcopy(properties)

    return ret


def table_to_json(table: DataTable) -> str:
    for i, col in enumerate(table.iter_columns()):
        if col.type == 'function':
            raise ConfigurationError(
                f'Cannot get JSON representation of data table due to function data type at column {i}'
            )

    return encode_json(table_to_pojo(table))


def decode_table_json(raw: str | bytes) -> dict[str, Any]:
    spec = decode_json(raw)
    if not isinstance(spec, dict):
        raise ConfigurationError('Table JSON must decode to an object.')

    return spec


# views

def view_to_pojo(view: DataView) -> dict[str, Any]:
    '''
    Configuration of `view` referencing source column & row indices.

    '''
    columns = view.column_config
    rows = view.row_config
    return {
        'view': True,
        'columns': [sel.to_pojo() for sel in columns] if columns is not None else None,
        'rows': list(rows) if rows is not None else None,
    }


def view_to_json(view: DataView) -> str:
    return encode_json(view_to_pojo(view))


def view_from_json(source: AbstractTable, raw: str | bytes | dict[str, Any]) -> DataView:
    '''
    Rebuild a view over `source` from its serialized configuration. `source`
    must have the same column & row identities as the one the configuration
    was taken from, this is not checked.

    '''
    from chart_data.view import DataView

    spec = decode_json(raw) if isinstance(raw, str | bytes) else raw
    if not isinstance(spec, dict) or spec.get('view') is not True:
        raise ConfigurationError('View JSON must be an object with "view": true.')

    view = DataView(source)
    if (columns := spec.get('columns')) is not None:
        view.set_columns(columns)

    if (rows := spec.get('rows')) is not None:
        view.set_rows(rows)

    log.debug(f'restored view with {view.get_number_of_columns()} columns & {view.get_number_of_rows()} rows')
    return view
