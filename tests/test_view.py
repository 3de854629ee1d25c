import pytest

from chart_data import DataTable, DataView
from chart_data.errors import ConfigurationError, OutOfRangeError

from chart_data._testing import grid_table, numbers_table


def column_values(data, column=0):
    return [data.get_value(r, column) for r in range(data.get_number_of_rows())]


def test_unset_view_tracks_source(people):
    view = DataView(people)
    assert view.get_number_of_rows() == 5
    assert view.get_number_of_columns() == 6
    assert view.column_config is None
    assert view.row_config is None

    people.add_row(['Zed'])
    people.add_column('number', id='score')
    assert view.get_number_of_rows() == 6
    assert view.get_number_of_columns() == 7
    assert view.get_value(5, 0) == 'Zed'
    assert view.get_view_rows() == list(range(6))
    assert view.get_view_columns() == list(range(7))


def test_source_must_be_a_table():
    with pytest.raises(ConfigurationError):
        DataView({'cols': []})


def test_set_columns_by_index_and_id(people):
    view = DataView(people)
    view.set_columns(['age', 0, 'Born'])
    assert view.get_number_of_columns() == 3
    assert view.get_column_id(0) == 'age'
    assert view.get_column_type(2) == 'date'
    assert view.get_value(0, 1) == 'Alice'
    assert view.get_view_columns() == [1, 0, 2]
    assert view.get_column_index('name') == 1

    with pytest.raises(ConfigurationError):
        view.set_columns(['missing'])

    with pytest.raises(ConfigurationError):
        view.set_columns([6])

    with pytest.raises(ConfigurationError):
        view.set_columns([True])

    with pytest.raises(ConfigurationError):
        view.set_columns(0)


def test_set_rows(numbers):
    view = DataView(numbers)
    view.set_rows([3, 1, 5])
    assert column_values(view) == [3, 1, 5]

    view.set_rows(1, 3)
    assert column_values(view) == [1, 2, 3]
    assert view.get_view_rows() == [1, 2, 3]

    for bad in (([6],), ([-1],), (3, 1), (['a'],), (1,), ('rows',)):
        with pytest.raises(ConfigurationError):
            view.set_rows(*bad)

    # failed calls leave the configuration alone
    assert view.get_view_rows() == [1, 2, 3]


def test_nested_underlying_rows(numbers):
    view = DataView(numbers)
    view.set_rows([3, 1, 5])
    nested = DataView(view)
    nested.set_rows([2, 0, 1])

    assert [nested.get_underlying_table_row_index(i) for i in range(3)] == [5, 3, 1]
    assert [nested.get_table_row_index(i) for i in range(3)] == [2, 0, 1]
    assert column_values(nested) == [5, 3, 1]


def test_index_composition_law(people):
    view = DataView(people)
    view.set_columns([5, 0, 1, 0])
    view.set_rows([4, 2, 0, 3])
    nested = DataView(view)
    nested.set_columns([3, 2, 1])
    nested.set_rows([3, 0, 1])
    top = DataView(nested)
    top.set_rows([2, 0])

    for row in range(top.get_number_of_rows()):
        table_row = top.get_underlying_table_row_index(row)
        for column in range(top.get_number_of_columns()):
            table_column = top.get_underlying_table_column_index(column)
            assert top.get_value(row, column) == people.get_value(table_row, table_column)
            assert top.get_formatted_value(row, column) == people.get_formatted_value(
                table_row, table_column
            )


def test_hide_columns_ignores_unknown():
    table = grid_table()
    view = DataView(table)
    view.set_columns([0, 2])
    before = [view.get_value(0, c) for c in range(2)]

    view.hide_columns([1, 6])
    assert view.get_number_of_columns() == 2
    assert [view.get_value(0, c) for c in range(2)] == before


def test_hide_columns(grid):
    view = DataView(grid)
    view.hide_columns([1, 'c3'])
    assert view.get_view_columns() == [0, 2, 4]
    version = view.version

    view.hide_columns([1, 'c3'])
    assert view.get_view_columns() == [0, 2, 4]
    assert view.version == version

    # computed columns are never hidden
    view.set_columns([0, {'calc': 'emptyString', 'type': 'string'}, 0])
    view.hide_columns([0])
    assert view.get_number_of_columns() == 1
    assert view.get_column_type(0) == 'string'
    assert view.get_value(0, 0) == ''


def test_hide_rows(numbers):
    view = DataView(numbers)
    view.hide_rows([1, 4, 17])
    assert view.get_view_rows() == [0, 2, 3, 5]

    view.hide_rows([1, 4])
    assert view.get_view_rows() == [0, 2, 3, 5]

    view.hide_rows(2, 3)
    assert column_values(view) == [0, 5]

    # materialized on first hide, later source growth is not shown
    numbers.add_row([6])
    assert view.get_number_of_rows() == 2


def test_duplicated_columns_hold_distinct_properties(people):
    view = DataView(people)
    view.set_columns([0, 0])
    view.set_column_property(0, 'color', 'red')
    view.set_column_property(1, 'color', 'blue')

    assert view.get_column_property(0, 'color') == 'red'
    assert view.get_column_property(1, 'color') == 'blue'
    assert view.get_column_properties(1) == {'color': 'blue'}
    assert people.get_column_property(0, 'color') is None
    assert view.get_value(3, 0) == view.get_value(3, 1) == 'Dan'


def test_column_property_on_unset_view(people):
    people.set_column_property(1, 'unit', 'years')
    view = DataView(people)
    view.set_column_property(1, 'color', 'red')

    assert view.get_column_properties(1) == {'unit': 'years', 'color': 'red'}
    assert view.get_column_property(1, 'color') == 'red'
    assert view.column_config is None
    assert people.get_column_properties(1) == {'unit': 'years'}

    # still tracking the source
    people.add_column('number', id='score')
    assert view.get_number_of_columns() == 7
    assert view.get_column_index('score') == 6


def test_unset_column_properties_fold_into_selectors(people):
    view = DataView(people)
    view.set_column_property(0, 'color', 'red')
    view.set_columns([1, 'name', 0])
    assert view.get_column_property(0, 'color') is None
    assert view.get_column_property(1, 'color') == 'red'
    assert view.get_column_property(2, 'color') == 'red'

    view.set_column_property(2, 'color', 'blue')
    assert view.get_column_property(1, 'color') == 'red'

    hiding = DataView(people)
    hiding.set_column_property(2, 'color', 'green')
    hiding.hide_columns([0])
    assert hiding.get_column_property(1, 'color') == 'green'
    assert hiding.get_column_property(0, 'color') is None


def test_column_ids_track_source_changes():
    table = DataTable({'cols': [{'type': 'number', 'id': 'a'}], 'rows': [[1]]})
    view = DataView(table)
    outer = DataView(view)
    assert outer.get_column_index('a') == 0
    assert outer.get_column_index('b') == -1

    table.add_column('number', id='b')
    assert view.get_column_index('b') == 1
    assert outer.get_column_index('b') == 1

    outer.set_columns(['b', 'a'])
    assert outer.get_column_id(0) == 'b'

    table.set_column_label(0, 'Alpha')
    assert outer.get_column_index('Alpha') == 1

    hiding = DataView(view)
    hiding.hide_columns(['b'])
    assert hiding.get_view_columns() == [0]


def test_cell_property_overlay(people):
    view = DataView(people)
    view.set_rows([2, 0])
    assert view.get_property(0, 0, 'style') == 'bold'

    view.set_property(0, 0, 'style', 'italic')
    view.set_property(1, 0, 'note', 'x')
    assert view.get_property(0, 0, 'style') == 'italic'
    assert view.get_properties(1, 0) == {'note': 'x'}
    assert people.get_property(2, 0, 'style') == 'bold'
    assert people.get_property(0, 0, 'note') is None

    view.set_rows([2, 0])
    assert view.get_property(0, 0, 'style') == 'bold'


def test_formatted_value_overlay(people):
    view = DataView(people)
    view.set_formatted_value(0, 1, 'thirty four')
    assert view.get_formatted_value(0, 1) == 'thirty four'
    assert people.get_formatted_value(0, 1) == '34'


def test_row_and_table_properties(people):
    view = DataView(people)
    view.set_rows([3])
    assert view.get_row_property(0, 'vip') is True
    assert view.get_row_properties(0) == {'vip': True}
    assert view.get_table_property('source') == 'fixture'


def test_reads_out_of_range(people):
    view = DataView(people)
    view.set_columns([0, 1])
    view.set_rows([0, 1])

    for row, column in ((2, 0), (0, 2), (-1, 0)):
        with pytest.raises(OutOfRangeError):
            view.get_value(row, column)

    with pytest.raises(OutOfRangeError):
        view.get_table_row_index(2)

    with pytest.raises(OutOfRangeError):
        view.get_column_type(5)


def test_stale_indices_resolve_to_minus_one(numbers):
    view = DataView(numbers)
    view.set_rows([1, 4, 5])
    numbers.remove_rows(4, 2)

    assert view.get_table_row_index(0) == 1
    assert view.get_table_row_index(1) == -1
    assert view.get_underlying_table_row_index(2) == -1

    with pytest.raises(OutOfRangeError):
        view.get_value(1, 0)

    # unknown entries are silently dropped by hide
    view.hide_rows([4, 5])
    assert view.get_view_rows() == [1]


def test_view_index_lookup(numbers):
    view = DataView(numbers)
    assert view.get_view_row_index(4) == 4
    assert view.get_view_row_index(6) == -1

    view.set_rows([3, 1, 5, 1])
    assert view.get_view_row_index(1) == 1
    assert view.get_view_row_index(5) == 2
    assert view.get_view_row_index(0) == -1

    view.set_columns([{'calc': 'emptyString', 'type': 'string'}, 'n'])
    assert view.get_view_column_index(0) == 1
    assert view.get_view_column_index('n') == 1
    assert view.get_view_column_index('missing') == -1
    assert view.get_table_column_index(0) == -1
    assert view.get_underlying_table_column_index(0) == -1


def test_ops_over_views(people):
    view = DataView(people)
    view.set_rows([0, 1, 3])
    assert view.get_sorted_rows('age') == [1, 2, 0]
    assert view.get_filtered_rows([{'column': 'active', 'value': True}]) == [0, 2]
    assert view.get_column_range('age').max == 34
    assert view.get_distinct_values(4) == [False, True]


def test_selection_changes_bump_version(numbers):
    view = DataView(numbers)
    versions = [view.version]
    view.set_rows([0, 1, 2])
    versions.append(view.version)
    view.set_columns([0])
    versions.append(view.version)
    view.hide_rows([0])
    versions.append(view.version)
    view.hide_columns([0])
    versions.append(view.version)

    assert versions == sorted(set(versions))
    assert view.get_number_of_columns() == 0


def test_views_never_write_through():
    table = DataTable({'cols': ['number'], 'rows': [[1]]})
    view = DataView(table)
    revision = table.revision
    view.set_property(0, 0, 'k', 'v')
    view.set_column_property(0, 'k', 'v')
    view.set_formatted_value(0, 0, 'one')
    view.format(0)

    assert table.revision == revision
    assert table.get_formatted_value(0, 0) == '1'
    assert view.get_formatted_value(0, 0) == '1'


def test_views_over_views_see_source_mutations():
    table = numbers_table(3)
    view = DataView(DataView(table))
    table.set_value(1, 0, 10)
    assert view.get_value(1, 0) == 10
    assert view.revision > 0


def test_nested_views_see_parent_overlays(people):
    view = DataView(people)
    view.set_property(0, 0, 'note', 'x')
    view.set_formatted_value(1, 1, 'unknown')
    nested = DataView(view)

    assert nested.get_property(0, 0, 'note') == 'x'
    assert nested.get_properties(2, 0) == {'style': 'bold'}
    assert nested.get_formatted_value(1, 1) == 'unknown'


def test_cell_overlays_dropped_on_source_mutation(numbers):
    view = DataView(numbers)
    view.set_property(0, 0, 'highlight', True)
    view.set_formatted_value(1, 0, 'one')
    assert view.get_property(0, 0, 'highlight') is True

    numbers.remove_row(0)
    assert view.get_value(0, 0) == 1
    assert view.get_property(0, 0, 'highlight') is None
    assert view.get_formatted_value(1, 0) == '2'

    nested = DataView(DataView(numbers))
    nested.set_property(0, 0, 'highlight', True)
    numbers.insert_rows(0, 1)
    assert nested.get_property(0, 0, 'highlight') is None
