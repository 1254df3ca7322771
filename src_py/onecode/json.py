"""Type definition documents stored as JSON or YAML"""

import json
import pathlib
import typing

import jsonschema
import yaml


Array: typing.Type = typing.List['Data']
Object: typing.Type = typing.Dict[str, 'Data']
Data: typing.Type = typing.Union[None, bool, int, float, str, Array, Object]
"""JSON data type identifier."""

suffixes = {'.json', '.yaml', '.yml'}
"""Suffixes of files containing definition documents"""


def decode_file(path: pathlib.PurePath) -> Data:
    """Decode JSON or YAML file selected by path suffix"""
    if path.suffix not in suffixes:
        raise ValueError(f'unsupported file suffix {path.suffix!r}')

    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix == '.json':
            return json.load(f)

        loader = (yaml.CSafeLoader if hasattr(yaml, 'CSafeLoader')
                  else yaml.SafeLoader)
        return yaml.load(f, Loader=loader)


def validate(schema: Data,
             data: Data):
    """Validate data against JSON schema.

    Raises:
        jsonschema.ValidationError

    """
    jsonschema.validate(instance=data, schema=schema)
