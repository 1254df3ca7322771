"""1code encoder

Encoding is split between :class:`Encoder`, which knows how each token is
written, and :func:`encode_value`, which walks a value according to its type
description and calls appropriate :class:`Encoder` methods.

"""

import collections
import decimal
import math
import typing

from onecode import common


EncodeError = common.EncodeError


def encode(value: common.Data,
           t: common.Type = common.AnyType(),
           refs: typing.Optional[common.Refs] = None
           ) -> str:
    """Encode value

    Args:
        value: value
        t: value type description (default is inferred from value)
        refs: named type definitions used for resolving `common.Ref`

    Raises:
        common.EncodeError

    """
    encoder = Encoder()
    try:
        encode_value(encoder, refs or {}, t, value)
    except RecursionError as e:
        raise EncodeError('maximum nesting depth exceeded') from e
    return encoder.finalize()


class Encoder:
    """1code token writer

    Every method appends one token (or part of container token) to output
    buffer. Written data is never modified.

    Example::

        encoder = Encoder()
        encoder.open_list()
        encoder.write_integer(-1)
        encoder.write_string('abc')
        encoder.close_list()
        assert encoder.finalize() == 'li-1e3:abce'

    """

    def __init__(self):
        self._parts = collections.deque()

    def finalize(self) -> str:
        """Get encoded data"""
        return ''.join(self._parts)

    def write_bool(self, value: bool):
        self._parts.append('T' if value else 'F')

    def write_integer(self, value: int):
        self._parts.append(f'i{_int_to_str(int(value))}e')

    def write_float(self, value: float):
        """Write float as integer token with embedded decimal point

        Resulting token can not be decoded.

        """
        self._parts.append(f'i{_float_to_str(value)}e')

    def write_string(self, value: str):
        try:
            length = len(value.encode('utf-8'))
        except UnicodeEncodeError as e:
            raise EncodeError('string is not encodable as UTF-8') from e
        self._parts.append(f'{length}:{value}')

    def write_null(self):
        self._parts.append('N')

    def open_list(self):
        self._parts.append('l')

    def close_list(self):
        self._parts.append('e')

    def open_dict(self):
        self._parts.append('d')

    def close_dict(self):
        self._parts.append('e')

    def write_unit_variant(self, name: str):
        self.write_string(name)

    def open_newtype_variant(self, name: str):
        self.open_dict()
        self.write_string(name)

    def close_newtype_variant(self):
        self.close_dict()

    def open_tuple_variant(self, name: str):
        self.open_dict()
        self.write_string(name)
        self.open_list()

    def close_tuple_variant(self):
        self.close_list()
        self.close_dict()

    def open_struct_variant(self, name: str):
        self.open_dict()
        self.write_string(name)
        self.open_dict()

    def close_struct_variant(self):
        self.close_dict()
        self.close_dict()


def encode_value(encoder: Encoder,
                 refs: common.Refs,
                 t: common.Type,
                 value: common.Data):
    """Write value described by type `t`"""
    t = common.resolve(refs, t)

    if isinstance(t, common.AnyType):
        return _encode_any(encoder, value)

    if isinstance(t, common.BooleanType):
        if not isinstance(value, bool):
            raise EncodeError(f'expected bool, got {_type_name(value)}')
        return encoder.write_bool(value)

    if isinstance(t, common.IntegerType):
        if not _is_integer(value):
            raise EncodeError(f'expected int, got {_type_name(value)}')
        if not common.is_integer_in_range(t, value):
            name = common.get_integer_name(t)
            raise EncodeError(f'integer out of {name} range')
        return encoder.write_integer(value)

    if isinstance(t, common.FloatType):
        if not (_is_integer(value) or isinstance(value, float)):
            raise EncodeError(f'expected float, got {_type_name(value)}')
        return encoder.write_float(float(value))

    if isinstance(t, common.StringType):
        if not isinstance(value, str):
            raise EncodeError(f'expected str, got {_type_name(value)}')
        return encoder.write_string(value)

    if isinstance(t, common.CharType):
        if not isinstance(value, str) or len(value) != 1:
            raise EncodeError('expected single character string')
        return encoder.write_string(value)

    if isinstance(t, common.BytesType):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f'expected bytes, got {_type_name(value)}')
        return _encode_bytes(encoder, value)

    if isinstance(t, common.UnitType):
        if value is not None:
            raise EncodeError(f'expected None, got {_type_name(value)}')
        return encoder.write_null()

    if isinstance(t, common.OptionalType):
        if value is None:
            return encoder.write_null()
        return encode_value(encoder, refs, t.t, value)

    if isinstance(t, common.ListType):
        if not isinstance(value, (list, tuple)):
            raise EncodeError(f'expected list, got {_type_name(value)}')
        encoder.open_list()
        for i in value:
            encode_value(encoder, refs, t.t, i)
        return encoder.close_list()

    if isinstance(t, common.TupleType):
        encoder.open_list()
        _encode_elements(encoder, refs, t.types, value)
        return encoder.close_list()

    if isinstance(t, common.MapType):
        if not isinstance(value, dict):
            raise EncodeError(f'expected dict, got {_type_name(value)}')
        encoder.open_dict()
        for k, v in value.items():
            encode_value(encoder, refs, t.key, k)
            encode_value(encoder, refs, t.value, v)
        return encoder.close_dict()

    if isinstance(t, common.StructType):
        encoder.open_dict()
        _encode_fields(encoder, refs, t.fields, value)
        return encoder.close_dict()

    if isinstance(t, common.EnumType):
        return _encode_enum(encoder, refs, t, value)

    raise ValueError('unsupported type')


def _encode_any(encoder, value):
    if value is None:
        encoder.write_null()

    elif isinstance(value, bool):
        encoder.write_bool(value)

    elif isinstance(value, int):
        encoder.write_integer(value)

    elif isinstance(value, float):
        encoder.write_float(value)

    elif isinstance(value, str):
        encoder.write_string(value)

    elif isinstance(value, (bytes, bytearray, memoryview)):
        _encode_bytes(encoder, value)

    elif isinstance(value, dict):
        encoder.open_dict()
        for k, v in value.items():
            _encode_any(encoder, k)
            _encode_any(encoder, v)
        encoder.close_dict()

    elif isinstance(value, (list, tuple)):
        encoder.open_list()
        for i in value:
            _encode_any(encoder, i)
        encoder.close_list()

    else:
        raise EncodeError(f'unsupported value type {_type_name(value)}')


def _encode_bytes(encoder, value):
    encoder.open_list()
    for i in bytes(value):
        encoder.write_integer(i)
    encoder.close_list()


def _encode_elements(encoder, refs, types, value):
    if not isinstance(value, (list, tuple)):
        raise EncodeError(f'expected tuple, got {_type_name(value)}')
    if len(value) != len(types):
        raise EncodeError(f'expected {len(types)} elements, '
                          f'got {len(value)}')
    for element_type, element in zip(types, value):
        encode_value(encoder, refs, element_type, element)


def _encode_fields(encoder, refs, fields, value):
    if not isinstance(value, dict):
        raise EncodeError(f'expected dict, got {_type_name(value)}')

    field_names = {field.name for field in fields}
    for name in value.keys():
        if name not in field_names:
            raise EncodeError(f'unknown field {name!r}')

    for field in fields:
        if field.name in value:
            field_value = value[field.name]
        elif isinstance(common.resolve(refs, field.type),
                        common.OptionalType):
            field_value = None
        else:
            raise EncodeError(f'missing field {field.name!r}')
        encoder.write_string(field.name)
        encode_value(encoder, refs, field.type, field_value)


def _encode_enum(encoder, refs, t, value):
    if not isinstance(value, tuple) or len(value) != 2:
        raise EncodeError('expected (variant name, payload) pair')

    name, payload = value
    variant = next((i for i in t.variants if i.name == name), None)
    if variant is None:
        raise EncodeError(f'unknown variant {name!r}')

    if isinstance(variant, common.UnitVariant):
        if payload is not None:
            raise EncodeError(f'unit variant {name!r} has no payload')
        encoder.write_unit_variant(name)

    elif isinstance(variant, common.NewtypeVariant):
        encoder.open_newtype_variant(name)
        encode_value(encoder, refs, variant.type, payload)
        encoder.close_newtype_variant()

    elif isinstance(variant, common.TupleVariant):
        encoder.open_tuple_variant(name)
        _encode_elements(encoder, refs, variant.types, payload)
        encoder.close_tuple_variant()

    elif isinstance(variant, common.StructVariant):
        encoder.open_struct_variant(name)
        _encode_fields(encoder, refs, variant.fields, payload)
        encoder.close_struct_variant()

    else:
        raise ValueError('unsupported variant')


def _float_to_str(value):
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    # positional notation - exponent marker would terminate token
    return format(decimal.Decimal(repr(value)).normalize(), 'f')


def _is_integer(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _type_name(value):
    return type(value).__name__


def _int_to_str(value):
    # chunked conversion - str() of large int is limited to 4300 digits
    if value < 0:
        return '-' + _int_to_str(-value)
    chunks = collections.deque()
    while value >= _int_chunk_base:
        value, chunk = divmod(value, _int_chunk_base)
        chunks.appendleft(f'{chunk:0{_int_chunk_digits}d}')
    chunks.appendleft(str(value))
    return ''.join(chunks)


_int_chunk_digits = 1000
_int_chunk_base = 10 ** _int_chunk_digits
