class ChartDataError(Exception):
    '''
    Base for every error raised by chart_data itself.

    '''


class ConfigurationError(ChartDataError, ValueError):
    '''
    Invalid table spec, unsupported column type, bad view selector or any
    other shape problem, raised at the call that introduces it.

    '''


class TypeMismatchError(ChartDataError, TypeError):
    '''
    A value does not match the declared type of its column.

    '''


class OutOfRangeError(ChartDataError, IndexError):
    '''
    Single cell, row or column read outside of `[0, count)`.

    '''
