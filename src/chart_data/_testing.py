from datetime import date, datetime
from typing import Any

from chart_data.table import DataTable


# one numeric column valued 0..n-1
def numbers_table(n: int = 6) -> DataTable:
    return DataTable({
        'cols': [{'id': 'n', 'label': 'N', 'type': 'number'}],
        'rows': [[i] for i in range(n)],
    })


people_spec: dict[str, Any] = {
    'cols': [
        {'id': 'name', 'label': 'Name', 'type': 'string'},
        {'id': 'age', 'label': 'Age', 'type': 'number'},
        {'id': 'born', 'label': 'Born', 'type': 'date'},
        {'id': 'seen', 'label': 'Last seen', 'type': 'datetime'},
        {'id': 'active', 'label': 'Active', 'type': 'boolean'},
        {'id': 'wake', 'label': 'Wakes at', 'type': 'timeofday'},
    ],
    'rows': [
        {'c': ['Alice', 34, date(1990, 1, 5), datetime(2024, 3, 1, 13, 2, 3), True, [7, 30, 0]]},
        {'c': ['Bob', None, date(1985, 7, 21), None, False, [6, 0, 0, 500]]},
        {'c': [{'v': 'Charlie', 'p': {'style': 'bold'}}, 41, None, datetime(2023, 12, 31, 23, 59, 59), None, None]},
        {'c': ['Dan', 27, date(1997, 2, 14), datetime(2024, 1, 15, 8, 0, 0), True, [9, 15]], 'p': {'vip': True}},
        {'c': ['Eve', 41, date(1983, 11, 2), None, False, [5, 45, 0]]},
    ],
    'p': {'source': 'fixture'},
}


def people_table() -> DataTable:
    return DataTable(people_spec)


# five columns, two rows, every cell its own "r{row}c{column}" string
def grid_table(rows: int = 2, cols: int = 5) -> DataTable:
    return DataTable({
        'cols': [{'id': f'c{j}', 'label': f'Col {j}', 'type': 'string'} for j in range(cols)],
        'rows': [[f'r{i}c{j}' for j in range(cols)] for i in range(rows)],
    })


# sparse series for fill functions
gaps_spec: dict[str, Any] = {
    'cols': [
        {'id': 'x', 'type': 'number'},
        {'id': 'y', 'type': 'number'},
    ],
    'rows': [
        [0, None],
        [1, 10],
        [2, None],
        [3, None],
        [4, 40],
        [5, None],
    ],
}


def gaps_table() -> DataTable:
    return DataTable(gaps_spec)
