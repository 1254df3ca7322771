import json

import jsonschema
import pytest
import yaml

import onecode
from onecode.repository import type_from_json


definitions = {
    'Point': {'struct': [{'name': 'x', 'type': 'i32'},
                         {'name': 'y', 'type': 'i32'}]},
    'Shape': {'enum': [{'name': 'Empty'},
                       {'name': 'Dot', 'type': 'Point'},
                       {'name': 'Line', 'types': ['Point', 'Point']},
                       {'name': 'Circle', 'fields': [
                           {'name': 'center', 'type': 'Point'},
                           {'name': 'radius', 'type': 'u32'}]}]},
    'Shapes': {'list': 'Shape'},
    'Tree': {'struct': [{'name': 'value', 'type': 'any'},
                        {'name': 'children', 'type': {'list': 'Tree'}}]},
    'Labels': {'map': {'value': {'option': 'str'}}},
    'Ids': {'map': {'key': 'u8', 'value': 'str'}},
    'Pair': {'tuple': ['char', 'bool']},
    'Alias': 'Point'}


def write_definitions(path, data):
    if path.suffix == '.json':
        path.write_text(json.dumps(data), encoding='utf-8')
    else:
        path.write_text(yaml.safe_dump(data), encoding='utf-8')


def test_example():
    repo = onecode.Repository({
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


@pytest.mark.parametrize("name, value, encoded", [
    ('Point', {'x': 1, 'y': 2}, 'd1:xi1e1:yi2ee'),
    ('Alias', {'x': 1, 'y': 2}, 'd1:xi1e1:yi2ee'),
    ('Shape', ('Line', ({'x': 0, 'y': 0}, {'x': 1, 'y': 1})),
     'd4:Lineld1:xi0e1:yi0eed1:xi1e1:yi1eeee'),
    ('Shape', ('Circle', {'center': {'x': 0, 'y': 0}, 'radius': 2}),
     'd6:Circled6:centerd1:xi0e1:yi0ee6:radiusi2eee'),
    ('Shapes', [('Dot', {'x': 0, 'y': 0})], 'ld3:Dotd1:xi0e1:yi0eeee'),
    ('Tree', {'value': 'a', 'children': [{'value': 1, 'children': []}]},
     'd5:value1:a8:childrenld5:valuei1e8:childrenleeee'),
    ('Labels', {'a': 'x', 'b': None}, 'd1:a1:x1:bNe'),
    ('Ids', {1: 'a'}, 'di1e1:ae'),
    ('Pair', ('x', True), 'l1:xTe'),
])
def test_encode_decode(name, value, encoded):
    repo = onecode.Repository(definitions)
    assert repo.encode(name, value) == encoded
    assert repo.decode(name, encoded) == value


def test_unit_variant_asymmetry():
    repo = onecode.Repository(definitions)
    encoded = repo.encode('Shape', ('Empty', None))
    assert encoded == '5:Empty'
    with pytest.raises(onecode.DecodeError):
        repo.decode('Shape', encoded)


def test_integer_range():
    repo = onecode.Repository(definitions)
    with pytest.raises(onecode.EncodeError):
        repo.encode('Ids', {256: 'a'})
    with pytest.raises(onecode.DecodeError) as e:
        repo.decode('Ids', 'di256e1:ae')
    assert e.value.kind == onecode.ErrorKind.INTEGER_OUT_OF_RANGE


@pytest.mark.parametrize("data, t", [
    ('any', onecode.AnyType()),
    ('bool', onecode.BooleanType()),
    ('int', onecode.IntegerType(True, None)),
    ('uint', onecode.IntegerType(False, None)),
    ('i16', onecode.IntegerType(True, 16)),
    ('u64', onecode.IntegerType(False, 64)),
    ('float', onecode.FloatType()),
    ('char', onecode.CharType()),
    ('bytes', onecode.BytesType()),
    ('unit', onecode.UnitType()),
    ('X', onecode.Ref('X')),
    ({'option': 'str'}, onecode.OptionalType(onecode.StringType())),
    ({'list': 'X'}, onecode.ListType(onecode.Ref('X'))),
    ({'tuple': []}, onecode.TupleType([])),
    ({'map': {'value': 'bool'}},
     onecode.MapType(onecode.StringType(), onecode.BooleanType())),
    ({'struct': [{'name': 'a', 'type': 'unit'}]},
     onecode.StructType([onecode.Field('a', onecode.UnitType())])),
    ({'enum': [{'name': 'A'},
               {'name': 'B', 'type': 'str'},
               {'name': 'C', 'types': ['str']},
               {'name': 'D', 'fields': []}]},
     onecode.EnumType([onecode.UnitVariant('A'),
                       onecode.NewtypeVariant('B', onecode.StringType()),
                       onecode.TupleVariant('C', [onecode.StringType()]),
                       onecode.StructVariant('D', [])])),
])
def test_type_from_json(data, t):
    assert type_from_json(data) == t


def test_get_type():
    repo = onecode.Repository(definitions)
    assert repo.get_type('Alias') == onecode.Ref('Point')
    assert repo.get_type('Shapes') == onecode.ListType(onecode.Ref('Shape'))
    assert onecode.Ref('Tree') in repo.refs
    with pytest.raises(ValueError):
        repo.get_type('Unknown')


@pytest.mark.parametrize("data", [
    {'T': 1},
    {'T': ''},
    {'T': {'list': 'str', 'option': 'str'}},
    {'T': {'array': 'str'}},
    {'T': {'tuple': 'str'}},
    {'T': {'map': {'key': 'str'}}},
    {'T': {'struct': [{'name': 'a'}]}},
    {'T': {'enum': [{'type': 'str'}]}},
    {'T': {'enum': [{'name': 'A', 'type': 'str', 'types': ['str']}]}},
])
def test_invalid_definitions(data):
    with pytest.raises(jsonschema.ValidationError):
        onecode.Repository(data)


@pytest.mark.parametrize("data", [
    {'T': 'X'},
    {'T': {'list': {'option': 'X'}}},
    {'T': {'enum': [{'name': 'A', 'fields': [{'name': 'a', 'type': 'X'}]}]}},
    {'T1': 'T2', 'T2': 'T1'},
    {'T': 'T'},
])
def test_invalid_references(data):
    with pytest.raises(ValueError):
        onecode.Repository(data)


def test_invalid_argument():
    with pytest.raises(ValueError):
        onecode.Repository(123)


def test_init_from_other_repo():
    base = onecode.Repository({'A': 'u8'})
    derived = onecode.Repository(base, {'B': {'list': 'A'}})
    assert derived.encode('B', [1, 2]) == 'li1ei2ee'
    assert derived.to_json() == {'A': 'u8', 'B': {'list': 'A'}}


def test_later_definitions_replace_earlier():
    repo = onecode.Repository({'A': 'u8'}, {'A': 'str'})
    assert repo.encode('A', 'x') == '1:x'


@pytest.mark.parametrize("suffix", ['.json', '.yaml', '.yml'])
def test_init_from_file(tmp_path, suffix):
    path = tmp_path / f'definitions{suffix}'
    write_definitions(path, definitions)
    repo = onecode.Repository(path)
    assert repo.to_json() == definitions
    assert repo.encode('Point', {'x': 1, 'y': 2}) == 'd1:xi1e1:yi2ee'


def test_init_from_directory(tmp_path):
    (tmp_path / 'a').mkdir()
    write_definitions(tmp_path / 'a' / 'a.yaml', {'A': 'u8'})
    write_definitions(tmp_path / 'b.json', {'B': {'list': 'A'}})
    (tmp_path / 'c.txt').write_text('not definitions')

    repo = onecode.Repository(tmp_path)
    assert repo.to_json() == {'A': 'u8', 'B': {'list': 'A'}}
    assert repo.decode('B', 'li1ee') == [1]


def test_to_json_from_json(tmp_path):
    repo = onecode.Repository(definitions)
    data = repo.to_json()
    assert onecode.Repository.from_json(data).to_json() == data

    path = tmp_path / 'repo.json'
    write_definitions(path, data)
    repo = onecode.Repository.from_json(path)
    assert repo.to_json() == data


def test_load_is_logged(tmp_path, caplog):
    path = tmp_path / 'definitions.yaml'
    write_definitions(path, {'A': 'u8'})
    onecode.Repository(path)
    assert str(path) in caplog.text
