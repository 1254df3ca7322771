import enum
import typing


class Ref(typing.NamedTuple):
    name: str


class AnyType(typing.NamedTuple):
    pass


class BooleanType(typing.NamedTuple):
    pass


class IntegerType(typing.NamedTuple):
    signed: bool = True
    bits: typing.Optional[int] = None


class FloatType(typing.NamedTuple):
    pass


class StringType(typing.NamedTuple):
    pass


class CharType(typing.NamedTuple):
    pass


class BytesType(typing.NamedTuple):
    pass


class UnitType(typing.NamedTuple):
    pass


class OptionalType(typing.NamedTuple):
    t: 'Type'


class ListType(typing.NamedTuple):
    t: 'Type'


class TupleType(typing.NamedTuple):
    types: typing.List['Type']


class MapType(typing.NamedTuple):
    key: 'Type'
    value: 'Type'


class Field(typing.NamedTuple):
    name: str
    type: 'Type'


class StructType(typing.NamedTuple):
    fields: typing.List[Field]


class UnitVariant(typing.NamedTuple):
    name: str


class NewtypeVariant(typing.NamedTuple):
    name: str
    type: 'Type'


class TupleVariant(typing.NamedTuple):
    name: str
    types: typing.List['Type']


class StructVariant(typing.NamedTuple):
    name: str
    fields: typing.List[Field]


Variant = typing.Union[UnitVariant,
                       NewtypeVariant,
                       TupleVariant,
                       StructVariant]


class EnumType(typing.NamedTuple):
    variants: typing.List[Variant]


Type = typing.Union[Ref,
                    AnyType,
                    BooleanType,
                    IntegerType,
                    FloatType,
                    StringType,
                    CharType,
                    BytesType,
                    UnitType,
                    OptionalType,
                    ListType,
                    TupleType,
                    MapType,
                    StructType,
                    EnumType]

Data = typing.Union[None, bool, int, float, str, bytes,
                    typing.List['Data'],
                    typing.Tuple['Data', ...],
                    typing.Dict[typing.Any, 'Data']]

Refs = typing.Dict[Ref, Type]


ErrorKind = enum.Enum('ErrorKind', [
    'EOF',
    'TRAILING_CHARACTERS',
    'SYNTAX',
    'EXPECTED_BOOLEAN',
    'EXPECTED_INTEGER',
    'EXPECTED_STRING',
    'EXPECTED_LIST',
    'EXPECTED_LIST_END',
    'EXPECTED_DICTIONARY',
    'EXPECTED_DICTIONARY_END',
    'EXPECTED_NULL',
    'INTEGER_OUT_OF_RANGE',
    'MESSAGE'])


class DecodeError(Exception):
    """Error signaling malformed or unexpected 1code data

    Args:
        kind: error kind
        position: byte offset of the failing token
        message: optional description

    """

    def __init__(self,
                 kind: ErrorKind,
                 position: int,
                 message: typing.Optional[str] = None):
        text = f'{kind.name} at position {position}'
        if message:
            text = f'{text}: {message}'
        super().__init__(text)
        self.kind = kind
        self.position = position


class EncodeError(Exception):
    """Error signaling value not matching its type description"""


def resolve(refs: Refs, t: Type) -> Type:
    """Follow type references until a concrete type is reached"""
    while isinstance(t, Ref):
        if t not in refs:
            raise ValueError(f'unknown type reference {t.name}')
        t = refs[t]
    return t


def get_integer_bounds(t: IntegerType
                       ) -> typing.Tuple[typing.Optional[int],
                                         typing.Optional[int]]:
    """Get inclusive lower and upper bound (``None`` if unbounded)"""
    if t.bits is None:
        return (None if t.signed else 0), None
    if t.signed:
        return -(1 << (t.bits - 1)), (1 << (t.bits - 1)) - 1
    return 0, (1 << t.bits) - 1


def get_integer_name(t: IntegerType) -> str:
    """Get type name as used in definitions (`i8`, `u32`, `int`, ...)"""
    if t.bits is None:
        return 'int' if t.signed else 'uint'
    prefix = 'i' if t.signed else 'u'
    return f'{prefix}{t.bits}'


def is_integer_in_range(t: IntegerType, value: int) -> bool:
    lower, upper = get_integer_bounds(t)
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True
