import logging
import pathlib
import typing

from onecode import common
from onecode import decoder
from onecode import encoder
from onecode import json


mlog: logging.Logger = logging.getLogger(__name__)

definitions_schema: json.Data = json.decode_file(
    pathlib.Path(__file__).parent / 'schemas/definitions.yaml')
"""JSON schema of type definitions"""


class Repository:
    """1code type definitions repository.

    Supported initialization arguments:
        * ``dict`` mapping type names to JSON type descriptions
        * path to .json, .yaml or .yml file containing type definitions
        * path to directory recursively searched for definition files
        * other repository

    Definitions added later replace previously added definitions with the
    same name.

    Example::

        repo = Repository({
            'Point': {'struct': [{'name': 'x', 'type': 'i32'},
                                 {'name': 'y', 'type': 'i32'}]},
            'Shape': {'enum': [{'name': 'Empty'},
                               {'name': 'Dot', 'type': 'Point'},
                               {'name': 'Line', 'types': ['Point',
                                                          'Point']}]}})
        data = ('Dot', {'x': 1, 'y': -1})
        encoded = repo.encode('Shape', data)
        assert encoded == 'd3:Dotd1:xi1e1:yi-1eee'
        assert repo.decode('Shape', encoded) == data

    Raises:
        jsonschema.ValidationError: invalid type definitions
        ValueError: unresolvable type references

    """

    def __init__(self, *args: typing.Union['Repository',
                                           pathlib.PurePath,
                                           json.Object]):
        self._definitions = {}
        for arg in args:
            if isinstance(arg, pathlib.PurePath):
                self._load_path(arg)
            elif isinstance(arg, Repository):
                self._definitions.update(arg._definitions)
            elif isinstance(arg, dict):
                self._load_definitions(arg)
            else:
                raise ValueError('invalid argument')
        self._refs = _evaluate_definitions(self._definitions)

    @property
    def refs(self) -> common.Refs:
        """Evaluated type definitions"""
        return self._refs

    def get_type(self, name: str) -> common.Type:
        """Get type description"""
        ref = common.Ref(name)
        if ref not in self._refs:
            raise ValueError(f'unknown type {name}')
        return self._refs[ref]

    def encode(self,
               name: str,
               value: common.Data
               ) -> str:
        """Encode value of named type"""
        return encoder.encode(value, self.get_type(name), self._refs)

    def decode(self,
               name: str,
               data: typing.Union[str, bytes, bytearray, memoryview]
               ) -> common.Data:
        """Decode data as value of named type"""
        return decoder.decode(data, self.get_type(name), self._refs)

    def to_json(self) -> json.Data:
        """Export repository content as json serializable data.

        New repository can be created from the exported content by using
        :meth:`Repository.from_json`.

        """
        return dict(self._definitions)

    @staticmethod
    def from_json(data: typing.Union[pathlib.PurePath, json.Data]
                  ) -> 'Repository':
        """Create new repository from content exported as json serializable
        data."""
        if isinstance(data, pathlib.PurePath):
            data = json.decode_file(data)
        return Repository(data)

    def _load_path(self, path):
        paths = ([path] if path.suffix in json.suffixes
                 else sorted(i for i in pathlib.Path(path).rglob('*')
                             if i.suffix in json.suffixes))
        for i in paths:
            mlog.debug('loading type definitions from %s', i)
            self._load_definitions(json.decode_file(i))

    def _load_definitions(self, definitions):
        json.validate(definitions_schema, definitions)
        self._definitions.update(definitions)


builtin_types: typing.Dict[str, common.Type] = {
    'any': common.AnyType(),
    'bool': common.BooleanType(),
    'int': common.IntegerType(signed=True),
    'uint': common.IntegerType(signed=False),
    'i8': common.IntegerType(signed=True, bits=8),
    'i16': common.IntegerType(signed=True, bits=16),
    'i32': common.IntegerType(signed=True, bits=32),
    'i64': common.IntegerType(signed=True, bits=64),
    'u8': common.IntegerType(signed=False, bits=8),
    'u16': common.IntegerType(signed=False, bits=16),
    'u32': common.IntegerType(signed=False, bits=32),
    'u64': common.IntegerType(signed=False, bits=64),
    'float': common.FloatType(),
    'str': common.StringType(),
    'char': common.CharType(),
    'bytes': common.BytesType(),
    'unit': common.UnitType()}
"""Builtin type names"""


def type_from_json(data: json.Data) -> common.Type:
    """Create type description from its JSON representation"""
    if isinstance(data, str):
        if data in builtin_types:
            return builtin_types[data]
        return common.Ref(data)

    if 'option' in data:
        return common.OptionalType(type_from_json(data['option']))

    if 'list' in data:
        return common.ListType(type_from_json(data['list']))

    if 'tuple' in data:
        return common.TupleType([type_from_json(i) for i in data['tuple']])

    if 'map' in data:
        return common.MapType(
            key=type_from_json(data['map'].get('key', 'str')),
            value=type_from_json(data['map']['value']))

    if 'struct' in data:
        return common.StructType(_fields_from_json(data['struct']))

    if 'enum' in data:
        return common.EnumType([_variant_from_json(i) for i in data['enum']])

    raise ValueError('unsupported type')


def _fields_from_json(data):
    return [common.Field(name=i['name'],
                         type=type_from_json(i['type']))
            for i in data]


def _variant_from_json(data):
    if 'type' in data:
        return common.NewtypeVariant(name=data['name'],
                                     type=type_from_json(data['type']))

    if 'types' in data:
        return common.TupleVariant(name=data['name'],
                                   types=[type_from_json(i)
                                          for i in data['types']])

    if 'fields' in data:
        return common.StructVariant(name=data['name'],
                                    fields=_fields_from_json(data['fields']))

    return common.UnitVariant(name=data['name'])


def _evaluate_definitions(definitions):
    refs = {common.Ref(name): type_from_json(data)
            for name, data in definitions.items()}

    for ref, t in refs.items():
        for i in _get_type_refs(t):
            if i not in refs:
                raise ValueError(f'unknown type reference {i.name} '
                                 f'in {ref.name}')

        visited = {ref}
        while isinstance(t, common.Ref):
            if t in visited:
                raise ValueError(f'circular type reference {ref.name}')
            visited.add(t)
            t = refs[t]

    mlog.debug('evaluated %s type definitions', len(refs))
    return refs


def _get_type_refs(t):
    if isinstance(t, common.Ref):
        yield t

    elif isinstance(t, (common.OptionalType, common.ListType)):
        yield from _get_type_refs(t.t)

    elif isinstance(t, common.TupleType):
        for i in t.types:
            yield from _get_type_refs(i)

    elif isinstance(t, common.MapType):
        yield from _get_type_refs(t.key)
        yield from _get_type_refs(t.value)

    elif isinstance(t, common.StructType):
        for field in t.fields:
            yield from _get_type_refs(field.type)

    elif isinstance(t, common.EnumType):
        for variant in t.variants:
            if isinstance(variant, common.NewtypeVariant):
                yield from _get_type_refs(variant.type)
            elif isinstance(variant, common.TupleVariant):
                for i in variant.types:
                    yield from _get_type_refs(i)
            elif isinstance(variant, common.StructVariant):
                for field in variant.fields:
                    yield from _get_type_refs(field.type)
