"""1code decoder

Decoding is split between :class:`Decoder`, which owns input cursor and
recognizes single tokens, and :func:`decode_value`/:func:`decode_any`, which
reconstruct values according to type description or according to the next
token alone.

Decoded strings are copies of input data, so decoded values do not hold
references to input buffer.

"""

import typing

from onecode import common


ErrorKind = common.ErrorKind
DecodeError = common.DecodeError

_NULL = ord('N')
_TRUE = ord('T')
_FALSE = ord('F')
_INTEGER = ord('i')
_LIST = ord('l')
_DICT = ord('d')
_END = ord('e')
_MINUS = ord('-')
_COLON = ord(':')
_ZERO = ord('0')
_NINE = ord('9')


def decode(data: typing.Union[str, bytes, bytearray, memoryview],
           t: common.Type = common.AnyType(),
           refs: typing.Optional[common.Refs] = None
           ) -> common.Data:
    """Decode data

    Whole input has to be consumed by single top-level value. Nesting depth
    is bounded by interpreter recursion limit.

    Args:
        data: encoded data (``str`` is encoded as UTF-8 prior to decoding)
        t: expected value type (default is self-describing decoding)
        refs: named type definitions used for resolving `common.Ref`

    Raises:
        common.DecodeError
        NotImplementedError

    """
    decoder = Decoder(data)
    try:
        value = decode_value(decoder, refs or {}, t)
    except RecursionError as e:
        raise DecodeError(ErrorKind.MESSAGE, decoder.position,
                          'maximum nesting depth exceeded') from e
    decoder.finalize()
    return value


class Decoder:
    """1code token reader

    Each successful ``parse_*``, ``open_*`` or ``close_*`` call consumes
    exactly one token (or container marker) and leaves cursor at the first
    byte after it.

    """

    def __init__(self, data: typing.Union[str, bytes, bytearray, memoryview]):
        if isinstance(data, str):
            data = data.encode('utf-8')
        self._data = memoryview(data)
        self._pos = 0

    @property
    def position(self) -> int:
        """Offset of the next unconsumed byte"""
        return self._pos

    def is_empty(self) -> bool:
        return self._pos >= len(self._data)

    def finalize(self):
        """Check that all input data is consumed"""
        if not self.is_empty():
            raise DecodeError(ErrorKind.TRAILING_CHARACTERS, self._pos)

    def peek(self, offset: int = 0) -> int:
        """Get byte at `offset` from cursor without consuming it"""
        pos = self._pos + offset
        if pos >= len(self._data):
            raise DecodeError(ErrorKind.EOF, pos)
        return self._data[pos]

    def parse_bool(self) -> bool:
        marker = self.peek()
        if marker == _TRUE:
            self._pos += 1
            return True
        if marker == _FALSE:
            self._pos += 1
            return False
        raise DecodeError(ErrorKind.EXPECTED_BOOLEAN, self._pos)

    def parse_unsigned(self) -> int:
        self._expect(_INTEGER, ErrorKind.EXPECTED_INTEGER)
        return self._parse_digits()

    def parse_signed(self) -> int:
        self._expect(_INTEGER, ErrorKind.EXPECTED_INTEGER)
        negative = self.peek() == _MINUS
        if negative:
            self._pos += 1
        value = self._parse_digits()
        return -value if negative else value

    def parse_string(self) -> str:
        if not _is_digit(self.peek()):
            raise DecodeError(ErrorKind.EXPECTED_STRING, self._pos)
        length = 0
        while True:
            b = self._next()
            if _is_digit(b):
                length = length * 10 + (b - _ZERO)
            elif b == _COLON:
                break
            else:
                raise DecodeError(ErrorKind.EXPECTED_STRING, self._pos - 1)

        if len(self._data) - self._pos < length:
            raise DecodeError(ErrorKind.EOF, len(self._data),
                              f'string of length {length} exceeds input')
        data = self._data[self._pos:self._pos + length]
        try:
            value = str(data, encoding='utf-8')
        except UnicodeDecodeError as e:
            raise DecodeError(ErrorKind.SYNTAX, self._pos,
                              'invalid UTF-8 string') from e
        self._pos += length
        return value

    def parse_null(self):
        if self.peek() != _NULL:
            raise DecodeError(ErrorKind.EXPECTED_NULL, self._pos)
        self._pos += 1

    def skip_null(self) -> bool:
        """Consume null token if it is the next token"""
        if self.is_empty() or self._data[self._pos] != _NULL:
            return False
        self._pos += 1
        return True

    def open_list(self):
        self._expect(_LIST, ErrorKind.EXPECTED_LIST)

    def is_list_end(self) -> bool:
        return self._is_end(ErrorKind.EXPECTED_LIST_END)

    def close_list(self):
        self._close(ErrorKind.EXPECTED_LIST_END)

    def open_dict(self):
        self._expect(_DICT, ErrorKind.EXPECTED_DICTIONARY)

    def is_dict_end(self) -> bool:
        return self._is_end(ErrorKind.EXPECTED_DICTIONARY_END)

    def close_dict(self):
        self._close(ErrorKind.EXPECTED_DICTIONARY_END)

    def _next(self):
        b = self.peek()
        self._pos += 1
        return b

    def _expect(self, marker, kind):
        if self.peek() != marker:
            raise DecodeError(kind, self._pos)
        self._pos += 1

    def _parse_digits(self):
        value = 0
        digits = 0
        while True:
            b = self._next()
            if _is_digit(b):
                value = value * 10 + (b - _ZERO)
                digits += 1
            elif b == _END and digits:
                return value
            else:
                raise DecodeError(ErrorKind.EXPECTED_INTEGER, self._pos - 1)

    def _is_end(self, kind):
        # exhausted input can only mean missing container terminator
        if self.is_empty():
            raise DecodeError(kind, self._pos)
        return self._data[self._pos] == _END

    def _close(self, kind):
        if not self._is_end(kind):
            raise DecodeError(kind, self._pos)
        self._pos += 1


def decode_any(decoder: Decoder) -> common.Data:
    """Decode value with shape inferred from the next token"""
    marker = decoder.peek()
    fn = _any_decoders.get(marker)
    if fn is None:
        raise DecodeError(ErrorKind.SYNTAX, decoder.position,
                          f'unexpected {chr(marker)!r}')
    return fn(decoder)


def decode_value(decoder: Decoder,
                 refs: common.Refs,
                 t: common.Type
                 ) -> common.Data:
    """Decode value described by type `t`"""
    t = common.resolve(refs, t)

    if isinstance(t, common.AnyType):
        return decode_any(decoder)

    if isinstance(t, common.BooleanType):
        return decoder.parse_bool()

    if isinstance(t, common.IntegerType):
        position = decoder.position
        value = (decoder.parse_signed() if t.signed
                 else decoder.parse_unsigned())
        if not common.is_integer_in_range(t, value):
            name = common.get_integer_name(t)
            raise DecodeError(ErrorKind.INTEGER_OUT_OF_RANGE, position,
                              f'value does not fit into {name}')
        return value

    if isinstance(t, common.FloatType):
        raise NotImplementedError('float decoding is not supported')

    if isinstance(t, common.StringType):
        return decoder.parse_string()

    if isinstance(t, common.CharType):
        position = decoder.position
        value = decoder.parse_string()
        if len(value) != 1:
            raise DecodeError(ErrorKind.SYNTAX, position,
                              'expected single character')
        return value

    if isinstance(t, common.BytesType):
        raise NotImplementedError('bytes decoding is not supported')

    if isinstance(t, common.UnitType):
        decoder.parse_null()
        return None

    if isinstance(t, common.OptionalType):
        if decoder.skip_null():
            return None
        return decode_value(decoder, refs, t.t)

    if isinstance(t, common.ListType):
        decoder.open_list()
        value = []
        while not decoder.is_list_end():
            value.append(decode_value(decoder, refs, t.t))
        decoder.close_list()
        return value

    if isinstance(t, common.TupleType):
        decoder.open_list()
        value = _decode_elements(decoder, refs, t.types)
        decoder.close_list()
        return value

    if isinstance(t, common.MapType):
        decoder.open_dict()
        value = {}
        while not decoder.is_dict_end():
            position = decoder.position
            k = decode_value(decoder, refs, t.key)
            v = decode_value(decoder, refs, t.value)
            _set_item(value, k, v, position)
        decoder.close_dict()
        return value

    if isinstance(t, common.StructType):
        decoder.open_dict()
        value = _decode_fields(decoder, refs, t.fields)
        decoder.close_dict()
        return value

    if isinstance(t, common.EnumType):
        return _decode_enum(decoder, refs, t)

    raise ValueError('unsupported type')


def _decode_any_null(decoder):
    decoder.parse_null()
    return None


def _decode_any_integer(decoder):
    sign = decoder.peek(1)
    if sign == _MINUS:
        return decoder.parse_signed()
    if _is_digit(sign):
        return decoder.parse_unsigned()
    raise DecodeError(ErrorKind.SYNTAX, decoder.position + 1,
                      f'unexpected {chr(sign)!r} in integer')


def _decode_any_list(decoder):
    decoder.open_list()
    value = []
    while not decoder.is_list_end():
        value.append(decode_any(decoder))
    decoder.close_list()
    return value


def _decode_any_dict(decoder):
    decoder.open_dict()
    value = {}
    while not decoder.is_dict_end():
        position = decoder.position
        k = decode_any(decoder)
        v = decode_any(decoder)
        _set_item(value, k, v, position)
    decoder.close_dict()
    return value


_any_decoders = {
    _NULL: _decode_any_null,
    _TRUE: Decoder.parse_bool,
    _FALSE: Decoder.parse_bool,
    **{i: Decoder.parse_string for i in range(_ZERO, _NINE + 1)},
    _INTEGER: _decode_any_integer,
    _LIST: _decode_any_list,
    _DICT: _decode_any_dict}


def _decode_elements(decoder, refs, types):
    value = []
    for t in types:
        if decoder.is_list_end():
            raise DecodeError(ErrorKind.MESSAGE, decoder.position,
                              f'expected {len(types)} elements, '
                              f'got {len(value)}')
        value.append(decode_value(decoder, refs, t))
    return tuple(value)


def _decode_fields(decoder, refs, fields):
    fields_dict = {field.name: field for field in fields}
    value = {}
    while not decoder.is_dict_end():
        position = decoder.position
        name = decoder.parse_string()
        field = fields_dict.get(name)
        if field is None:
            raise DecodeError(ErrorKind.MESSAGE, position,
                              f'unknown field {name!r}')
        if name in value:
            raise DecodeError(ErrorKind.MESSAGE, position,
                              f'duplicate field {name!r}')
        value[name] = decode_value(decoder, refs, field.type)

    for field in fields:
        if field.name in value:
            continue
        if not isinstance(common.resolve(refs, field.type),
                          common.OptionalType):
            raise DecodeError(ErrorKind.MESSAGE, decoder.position,
                              f'missing field {field.name!r}')
        value[field.name] = None

    return {field.name: value[field.name] for field in fields}


def _decode_enum(decoder, refs, t):
    decoder.open_dict()
    position = decoder.position
    name = decoder.parse_string()
    variant = next((i for i in t.variants if i.name == name), None)
    if variant is None:
        raise DecodeError(ErrorKind.MESSAGE, position,
                          f'unknown variant {name!r}')

    if isinstance(variant, common.UnitVariant):
        raise NotImplementedError('unit variant decoding is not supported')

    if isinstance(variant, common.NewtypeVariant):
        payload = decode_value(decoder, refs, variant.type)

    elif isinstance(variant, common.TupleVariant):
        decoder.open_list()
        payload = _decode_elements(decoder, refs, variant.types)
        decoder.close_list()

    elif isinstance(variant, common.StructVariant):
        decoder.open_dict()
        payload = _decode_fields(decoder, refs, variant.fields)
        decoder.close_dict()

    else:
        raise ValueError('unsupported variant')

    decoder.close_dict()
    return name, payload


def _set_item(value, k, v, position):
    try:
        value[k] = v
    except TypeError as e:
        raise DecodeError(ErrorKind.MESSAGE, position,
                          'dictionary key is not hashable') from e


def _is_digit(b):
    return _ZERO <= b <= _NINE
