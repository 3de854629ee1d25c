from __future__ import annotations

import re
from copy import deepcopy
from datetime import date, datetime
from typing import Any

import msgspec

from chart_data.errors import ConfigurationError


Properties = dict[str, Any]


def decode_json(raw: str | bytes) -> Any:
    try:
        return msgspec.json.decode(raw)

    except msgspec.DecodeError as e:
        raise ConfigurationError(f'Invalid JSON input: {e}') from e


def encode_json(obj: Any) -> str:
    try:
        return msgspec.json.encode(obj).decode()

    except TypeError as e:
        raise ConfigurationError(f'Cannot serialize to JSON: {e}') from e


# legacy wire notation for dates, month is 0-based:
#   Date(2009, 7, 11)  Date(2009, 7, 11, 10, 16, 0)  Date(2009, 7, 11, 10, 16, 0, 500)
_legacy_date_re = re.compile(r'^Date\(\s*([\d,\s]*)\)$')


def revive_date(raw: Any) -> Any:
    '''
    Turn a serialized date back into a `date` or `datetime`, accepting ISO
    8601 strings and the legacy `Date(...)` notation. Strings without a time
    part become `date`, the rest `datetime`. Non string input is returned
    untouched.

    '''
    if not isinstance(raw, str):
        return raw

    if (match := _legacy_date_re.match(raw)):
        parts = [int(n) for n in re.split(r',\s*', match.group(1).strip()) if n]
        if len(parts) < 3:
            raise ConfigurationError(f'Legacy date string {raw!r} needs year, month & day')

        if len(parts) == 3:
            return date(parts[0], parts[1] + 1, parts[2])

        parts += [0] * (7 - len(parts))
        year, month, day, hour, minute, second, milli = parts[:7]
        return datetime(year, month + 1, day, hour, minute, second, milli * 1000)

    try:
        if len(raw) == 10:
            return date.fromisoformat(raw)

        return datetime.fromisoformat(raw)

    except ValueError as e:
        raise ConfigurationError(f'Invalid date string {raw!r}') from e


class Struct(msgspec.Struct): ...


class FrozenStruct(msgspec.Struct, frozen=True): ...


class Cell(Struct):
    '''
    A single table cell: raw value, optional explicit formatted string and
    optional property bag.

    '''
    v: Any = None
    f: str | None = None
    p: Properties | None = None

    def clone(self) -> Cell:
        return Cell(
            v=list(self.v) if isinstance(self.v, list) else self.v,
            f=self.f,
            p=deepcopy(self.p) if self.p is not None else None,
        )

    def to_pojo(self) -> dict[str, Any]:
        ret: dict[str, Any] = {'v': self.clone().v}
        if self.f is not None:
            ret['f'] = self.f

        if self.p is not None:
            ret['p'] = deepcopy(self.p)

        return ret


class Row(Struct):
    c: list[Cell]
    p: Properties | None = None
