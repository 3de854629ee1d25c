from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from chart_data import ops
from chart_data._utils import validate_column_index, validate_row_index
from chart_data.errors import TypeMismatchError
from chart_data.format import Formatter, DefaultFormatter
from chart_data.structs import Cell, Properties

if TYPE_CHECKING:
    from chart_data.table import DataTable


class AbstractTable(ABC):
    '''
    Read interface shared by concrete tables and views.

    A view holds one reference to anything implementing this interface and
    resolves every call by delegation, which is what lets views nest to any
    depth.

    '''

    def __init__(self) -> None:
        self._column_ref_map: dict[str, int] | None = None
        self._column_ref_tag: int | None = None

    # column lookup

    def rebuild_column_ref_map(self) -> dict[str, int]:
        '''
        Map column ids & labels to indices, tagged with the current
        `revision` so a change anywhere up a view chain forces a rebuild.

        '''
        # ids take precedence over labels, first match wins in both
        ref_map: dict[str, int] = {}
        num_cols = self.get_number_of_columns()
        for i in range(num_cols):
            ref_map.setdefault(self.get_column_id(i) or '', i)

        for i in range(num_cols):
            ref_map.setdefault(self.get_column_label(i) or '', i)

        ref_map.pop('', None)
        self._column_ref_map = ref_map
        self._column_ref_tag = self.revision
        return ref_map

    def get_column_index(self, column: int | str) -> int:
        '''
        Index of a column given its index, id or label, -1 when there is no
        such column.

        '''
        if isinstance(column, int) and not isinstance(column, bool):
            return column if 0 <= column < self.get_number_of_columns() else -1

        ref_map = self._column_ref_map
        if ref_map is None or self._column_ref_tag != self.revision:
            ref_map = self.rebuild_column_ref_map()

        return ref_map.get(column, -1)

    # shape & column metadata

    @abstractmethod
    def get_number_of_rows(self) -> int: ...

    @abstractmethod
    def get_number_of_columns(self) -> int: ...

    @abstractmethod
    def get_columns(self) -> list[Any]: ...

    @abstractmethod
    def get_column_id(self, column: int) -> str: ...

    @abstractmethod
    def get_column_label(self, column: int) -> str: ...

    @abstractmethod
    def get_column_pattern(self, column: int) -> str | None: ...

    @abstractmethod
    def get_column_type(self, column: int) -> str: ...

    def get_column_role(self, column: int) -> str:
        role = self.get_column_property(column, 'role')
        return role if isinstance(role, str) else ''

    # cells

    @abstractmethod
    def get_cell(self, row: int, column: int) -> Cell: ...

    @abstractmethod
    def get_value(self, row: int, column: int) -> Any: ...

    @abstractmethod
    def get_formatted_value(
        self,
        row: int,
        column: int,
        formatter: Formatter | None = None,
    ) -> str: ...

    @abstractmethod
    def set_formatted_value(self, row: int, column: int, formatted: str | None) -> None: ...

    def get_string_value(self, row: int, column: int) -> str | None:
        type = self.get_column_type(column)
        if type != 'string':
            raise TypeMismatchError(f'Column {column} must be of type string, but is {type}.')

        return self.get_value(row, column)

    def get_date_value(self, row: int, column: int) -> Any:
        type = self.get_column_type(column)
        if type not in ('date', 'datetime'):
            raise TypeMismatchError(
                f'Column {column} must be of type date or datetime, but is {type}.'
            )

        return self.get_value(row, column)

    def format(self, column: int, formatter: Formatter | None = None) -> None:
        '''
        Write explicit formatted values for every cell of `column`.

        '''
        validate_column_index(self, column)
        fmt = formatter or DefaultFormatter(self.get_column_type(column))
        for row in range(self.get_number_of_rows()):
            value = self.get_value(row, column)
            self.set_formatted_value(
                row, column, None if value is None else fmt.format_value(value)
            )

    # properties

    @abstractmethod
    def get_properties(self, row: int, column: int) -> Properties: ...

    def get_property(self, row: int, column: int, key: str) -> Any:
        return self.get_properties(row, column).get(key)

    @abstractmethod
    def set_property(self, row: int, column: int, key: str, value: Any) -> None: ...

    @abstractmethod
    def get_table_properties(self) -> Properties | None: ...

    def get_table_property(self, key: str) -> Any:
        properties = self.get_table_properties()
        return properties.get(key) if properties else None

    @abstractmethod
    def get_row_properties(self, row: int) -> Properties: ...

    def get_row_property(self, row: int, key: str) -> Any:
        validate_row_index(self, row)
        return self.get_row_properties(row).get(key)

    @abstractmethod
    def get_column_properties(self, column: int) -> Properties: ...

    def get_column_property(self, column: int, key: str) -> Any:
        validate_column_index(self, column)
        return self.get_column_properties(column).get(key)

    # index translation

    @abstractmethod
    def get_table_column_index(self, column: int) -> int: ...

    @abstractmethod
    def get_table_row_index(self, row: int) -> int: ...

    @abstractmethod
    def get_underlying_table_column_index(self, column: int) -> int: ...

    @abstractmethod
    def get_underlying_table_row_index(self, row: int) -> int: ...

    @property
    @abstractmethod
    def revision(self) -> int:
        '''
        Change counter of everything the contents of this table depend on:
        mutations of the concrete table at the root of the chain plus the
        selection changes of every view in between.

        '''

    # row operations

    def get_column_range(self, column: int | str) -> ops.ColumnRange:
        return ops.get_column_range(self, column)

    def get_distinct_values(self, column: int | str) -> list[Any]:
        return ops.get_distinct_values(self, column)

    def get_sorted_rows(self, sort_columns: ops.SortColumnsLike) -> list[int]:
        return ops.get_sorted_rows(self, sort_columns)

    def get_filtered_rows(self, filters: ops.FilterLike) -> list[int]:
        return ops.get_filtered_rows(self, filters)

    # terminal operations

    @abstractmethod
    def to_data_table(self) -> DataTable: ...

    @abstractmethod
    def to_pojo(self) -> dict[str, Any]: ...

    @abstractmethod
    def to_json(self) -> str: ...
