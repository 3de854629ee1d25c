'''
Formatting seam.

Tables never format values on their own, they go through anything with a
`format_value(value) -> str` method. Locale aware number & date formatting
lives outside this package, what is here is only the fallback used when a
caller passes no formatter.

'''
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Formatter(Protocol):
    def format_value(self, value: Any) -> str:
        ...


def _format_number(value: int | float) -> str:
    if isinstance(value, float):
        if value != value:
            return 'NaN'

        if value in (float('inf'), float('-inf')):
            return '∞' if value > 0 else '-∞'

        if not value.is_integer():
            return f'{value:,.3f}'.rstrip('0').rstrip('.')

        value = int(value)

    return f'{value:,}'


def _format_date(value: date) -> str:
    return f'{value:%b} {value.day}, {value.year}'


def _format_datetime(value: datetime) -> str:
    hour = value.hour % 12 or 12
    meridiem = 'AM' if value.hour < 12 else 'PM'
    return f'{_format_date(value)}, {hour}:{value:%M:%S} {meridiem}'


def _format_timeofday(value: list[int]) -> str:
    parts = list(value) + [0] * (4 - len(value))
    hours, minutes, seconds, millis = parts[:4]
    ret = f'{hours:02d}:{minutes:02d}'
    if seconds or millis:
        ret += f':{seconds:02d}'

    if millis:
        ret += f'.{millis:03d}'

    return ret


class DefaultFormatter:
    '''
    Fallback formatter for a given column type.

    '''

    def __init__(self, type: str) -> None:
        self.type = type

    def format_value(self, value: Any) -> str:
        if value is None:
            return ''

        match self.type:
            case 'number' if not isinstance(value, bool):
                return _format_number(value)

            case 'date':
                return _format_date(value)

            case 'datetime':
                if isinstance(value, datetime):
                    return _format_datetime(value)

                return _format_date(value)

            case 'timeofday':
                return _format_timeofday(value)

            case 'boolean':
                return 'true' if value else 'false'

        return str(value)


def default_formatted_value(
    value: Any,
    type: str,
    formatter: Formatter | None = None,
) -> str:
    if value is None:
        return ''

    fmt = formatter if formatter is not None else DefaultFormatter(type)
    formatted = fmt.format_value(value)
    return '' if formatted is None else str(formatted)
