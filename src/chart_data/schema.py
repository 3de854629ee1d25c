from __future__ import annotations

from copy import deepcopy
from typing import Any

from chart_data.dtypes import ColumnType, validate_column_type
from chart_data.errors import ConfigurationError
from chart_data.structs import Properties, Struct


class Column(Struct):
    '''
    Column metadata of a concrete table. `role` is mirrored into `p['role']`,
    which is where readers look it up.

    '''
    type: ColumnType = 'string'
    id: str = ''
    label: str = ''
    pattern: str | None = None
    role: str = ''
    p: Properties | None = None

    def __post_init__(self) -> None:
        if self.role:
            if self.p is None:
                self.p = {}

            self.p.setdefault('role', self.role)

    @staticmethod
    def from_like(
        c: ColumnLike,
        *,
        label: str | None = None,
        id: str | None = None,
        default_type: ColumnType | None = None,
        where: str = '',
    ) -> Column:
        '''
        Build a column from a bare type name or a `{type?, id?, label?,
        pattern?, role?, p?}` spec dict; the input is never aliased.

        '''
        match c:
            case Column():
                return Column(
                    type=c.type,
                    id=c.id,
                    label=c.label,
                    pattern=c.pattern,
                    role=c.role,
                    p=deepcopy(c.p),
                )

            case str():
                return Column(
                    type=validate_column_type(c, where=label or id or where),
                    id=id or '',
                    label=label or '',
                )

            case dict():
                spec = dict(c)
                if label is not None and 'label' not in spec:
                    spec['label'] = label

                if id is not None and 'id' not in spec:
                    spec['id'] = id

                type = spec.get('type') or default_type or 'string'
                name = spec.get('label') or spec.get('id') or where
                properties = spec.get('p')
                if properties is not None and not isinstance(properties, dict):
                    raise ConfigurationError(f'Column {name} properties must be a dict.')

                return Column(
                    type=validate_column_type(type, where=str(name)),
                    id=str(spec.get('id') or ''),
                    label=str(spec.get('label') or ''),
                    pattern=spec.get('pattern'),
                    role=spec.get('role') or '',
                    p=deepcopy(properties),
                )

        raise ConfigurationError(
            f'Invalid column specification, {c!r}, for column {where!r}.'
        )

    def to_pojo(self) -> dict[str, Any]:
        ret: dict[str, Any] = {
            'id': self.id,
            'label': self.label,
            'type': self.type,
            'pattern': self.pattern,
            'p': deepcopy(self.p) if self.p is not None else {},
        }
        if self.role:
            ret['role'] = self.role

        return ret


ColumnLike = str | dict | Column
