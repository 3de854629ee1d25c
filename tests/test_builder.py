from datetime import date

import pytest

from chart_data import array_to_data_table, records_to_data_table
from chart_data.errors import ConfigurationError, TypeMismatchError
from chart_data.table.builder import TableBuilder


def test_array_with_header():
    table = array_to_data_table([
        ['Name', 'Age', 'Born'],
        ['Alice', 34, date(1990, 1, 5)],
        ['Bob', None],
    ])
    assert [table.get_column_label(i) for i in range(3)] == ['Name', 'Age', 'Born']
    assert [table.get_column_type(i) for i in range(3)] == ['string', 'number', 'date']
    assert table.get_number_of_rows() == 2
    assert table.get_value(1, 2) is None


def test_array_types_skip_nulls():
    table = array_to_data_table([['a', 'b'], [None, None], [3, None]])
    assert table.get_column_type(0) == 'number'
    assert table.get_column_type(1) == 'string'


def test_array_header_specs():
    table = array_to_data_table([
        [{'label': 'When', 'type': 'datetime', 'id': 'when'}, 'Count'],
        [None, 1],
    ])
    assert table.get_column_type(0) == 'datetime'
    assert table.get_column_index('when') == 0
    assert table.get_column_type(1) == 'number'


def test_array_no_headers():
    table = array_to_data_table([[1, 'x'], [2, 'y', True]], no_headers=True)
    assert table.get_number_of_columns() == 3
    assert table.get_column_label(0) == ''
    assert [table.get_column_type(i) for i in range(3)] == ['number', 'string', 'boolean']
    assert table.get_value(0, 2) is None

    assert array_to_data_table([], no_headers=True).get_number_of_columns() == 0


def test_array_errors():
    with pytest.raises(ConfigurationError):
        array_to_data_table([])

    with pytest.raises(ConfigurationError):
        array_to_data_table([['a'], [1, 2]])

    with pytest.raises(ConfigurationError):
        array_to_data_table([['a'], 'row'])

    with pytest.raises(TypeMismatchError):
        array_to_data_table([['a'], [1], ['two']])


def test_records():
    table = records_to_data_table([
        {'name': 'Alice', 'age': 34},
        {'name': 'Bob', 'active': False},
    ])
    assert [table.get_column_id(i) for i in range(3)] == ['name', 'age', 'active']
    assert [table.get_column_type(i) for i in range(3)] == ['string', 'number', 'boolean']
    assert table.get_value(1, 1) is None
    assert table.get_value(0, 2) is None
    assert table.get_column_index('active') == 2

    with pytest.raises(ConfigurationError):
        records_to_data_table([{'a': 1}, ['b']])


def test_builder_buffers():
    builder = TableBuilder(['x', 'y'])
    builder.append([1])
    builder.extend([[2, 'b'], (3, 'c')])
    assert builder.rows() == 3

    table = builder.build()
    assert table.get_value(0, 1) is None
    assert table.get_value(2, 1) == 'c'

    with pytest.raises(ConfigurationError):
        builder.append([1, 2, 3])
