'''
Glossary:
    - Table: A concrete, in-memory grid of typed columns & rows, owns every cell.
    - View: A lazy, read only projection over a table or another view, stores indices not data.
    - Chain: A view, its source, that source's source... down to the table at the root.
    - Selector: One output column of a view, a passthrough to a source column or a computed column.
    - Computed column: A view column whose cells come from a function of the source, evaluated on read & cached.
    - Materialize: Copy whatever a table or view shows into a new, independent table.

'''

from .errors import (
    ChartDataError as ChartDataError,
    ConfigurationError as ConfigurationError,
    OutOfRangeError as OutOfRangeError,
    TypeMismatchError as TypeMismatchError,
)

from .base import AbstractTable as AbstractTable

from .table import DataTable as DataTable

from .table.builder import (
    array_to_data_table as array_to_data_table,
    records_to_data_table as records_to_data_table,
)

from .view import DataView as DataView
