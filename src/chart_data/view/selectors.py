'''
Column selectors, one per output column of a `DataView`.

    - `Passthrough`: points at a source column (possibly reordered or
      duplicated), carries a view local property overlay so duplicates can
      hold distinct column properties.
    - `CalcColumn`: a computed column, its cells come from a predefined
      function or a user callable, evaluated by `chart_data.view.calc`.

Both are validated when the view is configured, never on first read.

'''
from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING, Any, Callable

from chart_data._utils import resolve_column_reference
from chart_data.dtypes import is_number, validate_column_type
from chart_data.errors import ConfigurationError
from chart_data.structs import Properties, Struct

if TYPE_CHECKING:
    from chart_data.base import AbstractTable


# predefined function name -> how its result type is derived when the spec
# does not declare one: a fixed type, 'source' to inherit the source column
# type, or None when the spec must declare it
predefined_types: dict[str, str | None] = {
    'identity': 'source',
    'emptyString': 'string',
    'stringify': 'string',
    'fillFromTop': 'source',
    'fillFromBottom': 'source',
    'error': 'number',
    'mapFromSource': None,
}

error_types: tuple[str, ...] = ('constant', 'percent')


class Passthrough(Struct):
    column: int
    p: Properties | None = None

    def to_config(self) -> int:
        return self.column

    def to_pojo(self) -> int | dict[str, Any]:
        if not self.p:
            return self.column

        return {'column': self.column, 'properties': deepcopy(self.p)}


class CalcColumn(Struct):
    calc: str | Callable[..., Any]
    type: str
    source_column: int | None = None
    label: str = ''
    id: str = ''
    role: str = ''
    p: Properties | None = None

    # error
    magnitude: float | None = None
    error_type: str = 'constant'

    # mapFromSource
    mapping: dict[str, Any] | None = None

    @property
    def is_custom(self) -> bool:
        return callable(self.calc)

    @staticmethod
    def from_spec(source: AbstractTable, raw: dict[str, Any], where: int) -> CalcColumn:
        '''
        Validate a `{calc, sourceColumn?, type?, ...}` spec against `source`
        and resolve its result type.

        '''
        calc = raw.get('calc')
        source_column = raw.get('sourceColumn')
        if source_column is not None:
            source_column = resolve_column_reference(source, source_column)

        if calc is None:
            if source_column is None:
                raise ConfigurationError(
                    f'Calculated column {where} needs a "calc" or a "sourceColumn".'
                )

            calc = 'identity'

        type = raw.get('type')
        if isinstance(calc, str):
            if calc not in predefined_types:
                raise ConfigurationError(f'Unknown function "{calc}"')

            if calc != 'emptyString' and source_column is None:
                raise ConfigurationError(
                    f'Function "{calc}" in column {where} requires a "sourceColumn".'
                )

            if not type:
                derived = predefined_types[calc]
                if derived == 'source':
                    type = source.get_column_type(source_column)

                else:
                    type = derived

        elif not callable(calc):
            raise ConfigurationError(
                f'Invalid "calc" in column {where}, expected a function name or a callable.'
            )

        if not type:
            raise ConfigurationError(f'Calculated column {where} must have a "type" property.')

        magnitude = raw.get('magnitude')
        error_type = raw.get('errorType') or 'constant'
        mapping = raw.get('mapping')
        if calc == 'error':
            if not is_number(magnitude):
                raise ConfigurationError(f'Function "error" in column {where} requires a numeric "magnitude".')

            if error_type not in error_types:
                raise ConfigurationError(
                    f'Invalid "errorType" {error_type!r} in column {where}, expected one of {error_types}.'
                )

        if calc == 'mapFromSource' and not isinstance(mapping, dict):
            raise ConfigurationError(f'Function "mapFromSource" in column {where} requires a "mapping" dict.')

        properties = raw.get('properties', raw.get('p'))
        if properties is not None and not isinstance(properties, dict):
            raise ConfigurationError(f'Properties of column {where} must be a dict.')

        properties = deepcopy(properties) if properties is not None else {}
        role = raw.get('role') or ''
        if role:
            properties.setdefault('role', role)

        return CalcColumn(
            calc=calc,
            type=validate_column_type(type, where=str(where)),
            source_column=source_column,
            label=str(raw.get('label') or ''),
            id=str(raw.get('id') or ''),
            role=role,
            p=properties,
            magnitude=magnitude,
            error_type=error_type,
            mapping=deepcopy(mapping),
        )

    def to_config(self) -> dict[str, Any]:
        ret: dict[str, Any] = {
            'calc': self.calc,
            'type': self.type,
            'label': self.label,
            'id': self.id,
        }
        if self.source_column is not None:
            ret['sourceColumn'] = self.source_column

        if self.role:
            ret['role'] = self.role

        if self.p:
            ret['properties'] = deepcopy(self.p)

        if self.calc == 'error':
            ret['magnitude'] = self.magnitude
            ret['errorType'] = self.error_type

        if self.calc == 'mapFromSource':
            ret['mapping'] = deepcopy(self.mapping)

        return ret

    def to_pojo(self) -> dict[str, Any]:
        if self.is_custom:
            raise ConfigurationError(
                f'Calculated column {self.id or self.label or self.calc!r} uses a custom function and cannot be serialized.'
            )

        return self.to_config()


Selector = Passthrough | CalcColumn


def normalize_selector(source: AbstractTable, raw: Any, where: int) -> Selector:
    '''
    Turn one entry of a `set_columns` list into a fresh selector: indices,
    ids & `{column, properties?}` dicts become passthroughs, any other dict a
    computed column.

    '''
    match raw:
        case bool():
            pass

        case int() | str():
            return Passthrough(column=resolve_column_reference(source, raw))

        case Passthrough():
            return Passthrough(
                column=resolve_column_reference(source, raw.column),
                p=deepcopy(raw.p),
            )

        case CalcColumn():
            return CalcColumn.from_spec(source, raw.to_config(), where)

        case {'column': column, **rest} if 'calc' not in rest:
            properties = rest.get('properties')
            if properties is not None and not isinstance(properties, dict):
                raise ConfigurationError(f'Column {where} properties must be a dict.')

            return Passthrough(
                column=resolve_column_reference(source, column),
                p=deepcopy(properties),
            )

        case dict():
            return CalcColumn.from_spec(source, raw, where)

    raise ConfigurationError(
        f'Invalid column input {raw!r}, expected either a number, string, or a dict.'
    )
