'''
Read-only row operations shared by tables and views: ranges, distinct values,
sorting & filtering. All of them only use the `AbstractTable` read interface,
so they work the same on a `DataTable` or any chain of `DataView`s.

'''
from __future__ import annotations

from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Callable

from chart_data._utils import compare_values, resolve_column_reference
from chart_data.errors import ConfigurationError
from chart_data.structs import FrozenStruct

if TYPE_CHECKING:
    from chart_data.base import AbstractTable


class ColumnRange(FrozenStruct, frozen=True):
    min: Any = None
    max: Any = None


class SortColumn(FrozenStruct, frozen=True):
    column: int
    desc: bool = False
    compare: Callable[[Any, Any], int] | None = None


SortColumnsLike = (
    int
    | str
    | dict
    | list[int | str | dict]
    | Callable[[int, int], int]
)

FilterLike = list[dict] | Callable[['AbstractTable', int], bool]


def get_column_range(data: AbstractTable, column: int | str) -> ColumnRange:
    index = resolve_column_reference(data, column)
    type = data.get_column_type(index)
    low = high = None
    for row in range(data.get_number_of_rows()):
        value = data.get_value(row, index)
        if value is None:
            continue

        if low is None or compare_values(type, value, low) < 0:
            low = value

        if high is None or compare_values(type, high, value) < 0:
            high = value

    return ColumnRange(min=low, max=high)


def get_distinct_values(data: AbstractTable, column: int | str) -> list[Any]:
    '''
    Sorted unique values of a column, `None` first when present.

    '''
    index = resolve_column_reference(data, column)
    type = data.get_column_type(index)
    values = sorted(
        (data.get_value(row, index) for row in range(data.get_number_of_rows())),
        key=cmp_to_key(lambda a, b: compare_values(type, a, b)),
    )
    result: list[Any] = []
    for value in values:
        if not result or compare_values(type, value, result[-1]) != 0:
            result.append(value)

    return result


def _sort_column(data: AbstractTable, raw: int | str | dict, title: str) -> SortColumn:
    if isinstance(raw, dict):
        if 'column' not in raw:
            raise ConfigurationError(f'{title} must be a dict with a "column" key.')

        desc = raw.get('desc', False)
        if not isinstance(desc, bool):
            raise ConfigurationError(f'Key "desc" in {title} must be boolean.')

        compare = raw.get('compare')
        if compare is not None and not callable(compare):
            raise ConfigurationError(f'Key "compare" in {title} must be callable.')

        return SortColumn(
            column=resolve_column_reference(data, raw['column']),
            desc=desc,
            compare=compare,
        )

    return SortColumn(column=resolve_column_reference(data, raw))


def standardize_sort_columns(
    data: AbstractTable,
    get_value: Callable[[Any, int], Any],
    sort_columns: SortColumnsLike,
) -> Callable[[Any, Any], int]:
    '''
    Turn any accepted sort spec into a single three way comparison function
    over whatever `get_value` knows how to read (row indices or rows).

    '''
    if callable(sort_columns) and not isinstance(sort_columns, dict):
        return sort_columns

    if isinstance(sort_columns, list):
        if not sort_columns:
            raise ConfigurationError('sort_columns is an empty list. Must have at least one element.')

        specs = [
            _sort_column(data, raw, f'sort_columns[{i}]')
            for i, raw in enumerate(sort_columns)
        ]
        seen = [spec.column for spec in specs]
        if len(set(seen)) != len(seen):
            raise ConfigurationError(f'Duplicated column in sort_columns: {seen}')

    else:
        specs = [_sort_column(data, sort_columns, 'sort_columns')]

    types = [data.get_column_type(spec.column) for spec in specs]

    def compare(a: Any, b: Any) -> int:
        for spec, type in zip(specs, types, strict=True):
            va = get_value(a, spec.column)
            vb = get_value(b, spec.column)
            if spec.compare is not None and va is not None and vb is not None:
                result = spec.compare(va, vb)
            else:
                result = compare_values(type, va, vb)

            if result != 0:
                return -result if spec.desc else result

        return 0

    return compare


def get_sorted_rows(data: AbstractTable, sort_columns: SortColumnsLike) -> list[int]:
    compare = standardize_sort_columns(data, data.get_value, sort_columns)
    return sorted(range(data.get_number_of_rows()), key=cmp_to_key(compare))


def _validate_filters(data: AbstractTable, filters: list[dict]) -> None:
    if not isinstance(filters, list) or not filters:
        raise ConfigurationError('Column filters must be a non empty list or a callable.')

    for i, spec in enumerate(filters):
        if not isinstance(spec, dict) or 'column' not in spec:
            raise ConfigurationError(f'Column filter {i} must be a dict with a "column" key.')

        resolve_column_reference(data, spec['column'])
        if not (
            'value' in spec
            or spec.get('minValue') is not None
            or spec.get('maxValue') is not None
            or callable(spec.get('test'))
        ):
            raise ConfigurationError(
                f'Column filter {i} needs one of "value", "minValue", "maxValue" or "test".'
            )


def is_filter_match(data: AbstractTable, filters: FilterLike, row: int) -> bool:
    if callable(filters):
        return bool(filters(data, row))

    for spec in filters:
        column = data.get_column_index(spec['column'])
        value = data.get_value(row, column)
        type = data.get_column_type(column)
        if 'value' in spec:
            if compare_values(type, value, spec['value']) != 0:
                return False

        elif spec.get('minValue') is not None or spec.get('maxValue') is not None:
            # range filters never match nulls
            if value is None:
                return False

            low, high = spec.get('minValue'), spec.get('maxValue')
            if low is not None and compare_values(type, value, low) < 0:
                return False

            if high is not None and compare_values(type, value, high) > 0:
                return False

        test = spec.get('test')
        if callable(test) and not test(value, row, column, data):
            return False

    return True


def get_filtered_rows(data: AbstractTable, filters: FilterLike) -> list[int]:
    if not callable(filters):
        _validate_filters(data, filters)

    return [
        row
        for row in range(data.get_number_of_rows())
        if is_filter_match(data, filters, row)
    ]
