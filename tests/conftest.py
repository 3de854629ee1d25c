import logging

import pytest

from chart_data._testing import (
    gaps_table,
    grid_table,
    numbers_table,
    people_table,
)


@pytest.fixture
def people():
    return people_table()


@pytest.fixture
def numbers():
    return numbers_table()


@pytest.fixture
def grid():
    return grid_table()


@pytest.fixture
def gaps():
    return gaps_table()


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
