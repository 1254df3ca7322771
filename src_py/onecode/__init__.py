"""1code serializer

1code is compact, self-describing, text based serialization format
structurally close to bencode::

    value      := "N" | bool | int | string | list | dict
    bool       := "T" | "F"
    int        := "i" ["-"] digit+ "e"
    string     := length ":" byte{length}
    length     := digit+
    list       := "l" value* "e"
    dict       := "d" (value value)* "e"

String length is number of UTF-8 encoded bytes.

This implementation translates between 1code and Python types according to
following translation table:

    +----------------+-----------------------+-------------------------+
    | Type           | Python type           | 1code                   |
    +================+=======================+=========================+
    | BooleanType    | bool                  | ``T`` / ``F``           |
    +----------------+-----------------------+-------------------------+
    | IntegerType    | int                   | ``i-42e``               |
    +----------------+-----------------------+-------------------------+
    | FloatType      | float                 | ``i1.5e`` (encode only) |
    +----------------+-----------------------+-------------------------+
    | StringType     | str                   | ``5:hello``             |
    +----------------+-----------------------+-------------------------+
    | CharType       | str                   | ``1:x``                 |
    +----------------+-----------------------+-------------------------+
    | BytesType      | bytes                 | ``li1ei2ee`` (encode    |
    |                |                       | only)                   |
    +----------------+-----------------------+-------------------------+
    | UnitType       | None                  | ``N``                   |
    +----------------+-----------------------+-------------------------+
    | OptionalType   | None / Data           | ``N`` / value           |
    +----------------+-----------------------+-------------------------+
    | ListType       | List[Data]            | ``l...e``               |
    +----------------+-----------------------+-------------------------+
    | TupleType      | Tuple[Data, ...]      | ``l...e``               |
    +----------------+-----------------------+-------------------------+
    | MapType        | Dict[Data, Data]      | ``d...e``               |
    +----------------+-----------------------+-------------------------+
    | StructType     | Dict[str, Data]       | ``d...e``               |
    +----------------+-----------------------+-------------------------+
    | EnumType       | Tuple[str, Data]      | see below               |
    +----------------+-----------------------+-------------------------+

Enum variants are encoded as:

    * unit variant ``('A', None)`` - ``1:A``
    * newtype variant ``('A', 1)`` - ``d1:Ai1ee``
    * tuple variant ``('A', (1, 2))`` - ``d1:Ali1ei2eee``
    * struct variant ``('A', {'x': 1})`` - ``d1:Ad1:xi1eee``

Unit variants are encoded as plain strings and can not be decoded back as
enum values.

If type is not provided (`AnyType`), encoding infers type from Python value
and decoding infers type from the next token.

Example usage::

    import onecode

    assert onecode.encode({'a': [1, -2, 'x']}) == 'd1:ali1ei-2e1:xee'
    assert onecode.decode('d1:ali1ei-2e1:xee') == {'a': [1, -2, 'x']}

    t = onecode.StructType([onecode.Field('int', onecode.IntegerType())])
    assert onecode.decode('d3:inti1ee', t) == {'int': 1}

"""

from onecode.common import (Ref,
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
                            Field,
                            StructType,
                            UnitVariant,
                            NewtypeVariant,
                            TupleVariant,
                            StructVariant,
                            Variant,
                            EnumType,
                            Type,
                            Data,
                            ErrorKind,
                            DecodeError,
                            EncodeError)
from onecode.decoder import (decode,
                             Decoder)
from onecode.encoder import (encode,
                             Encoder)
from onecode.repository import Repository


__all__ = ['Ref',
           'AnyType',
           'BooleanType',
           'IntegerType',
           'FloatType',
           'StringType',
           'CharType',
           'BytesType',
           'UnitType',
           'OptionalType',
           'ListType',
           'TupleType',
           'MapType',
           'Field',
           'StructType',
           'UnitVariant',
           'NewtypeVariant',
           'TupleVariant',
           'StructVariant',
           'Variant',
           'EnumType',
           'Type',
           'Data',
           'ErrorKind',
           'DecodeError',
           'EncodeError',
           'decode',
           'Decoder',
           'encode',
           'Encoder',
           'Repository']
