# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#

# pylint:  disable=C0301

'''
Conversion between Node trees and Python values.

Decoding follows aliases, so anchored data that is referenced more than once
becomes a single shared Python object.  Encoding produces canonical Nodes:
no comments or anchors, and scalar styles chosen so that each scalar encodes
with the least markup that still round-trips.
'''


import base64
import collections.abc
import dataclasses
import datetime
import enum
import logging
import typing

from . import erring
from . import resolve
from .encoding import YAMLNodeEncoder
from .nodes import (Node, DOCUMENT_NODE, SEQUENCE_NODE, MAPPING_NODE,
                    SCALAR_NODE, ALIAS_NODE, deep_copy)


logger = logging.getLogger(__name__)


_NONE_TYPE = type(None)

# Picks the styles of canonical string scalars
_STYLE_ENCODER = YAMLNodeEncoder()




def to_value(node, target=None, strict=False, string_keys=False):
    '''
    Convert a Node subtree into Python data.  `target` may be None or `object`
    for generic data, a builtin scalar or container type, a `typing` generic
    such as `List[int]` or `Optional[str]`, a dataclass, or `Node`.

    In strict mode, duplicate mapping keys and mapping keys without a
    matching dataclass field are errors.

    With `string_keys`, the keys of generic mappings are converted into their
    YAML text (`1`, `true`, `null`) before duplicates are looked for, as
    required for JSON objects.
    '''
    return _ValueDecoder(strict, string_keys).decode(node, target)


def from_value(value, strict=False):
    '''
    Convert Python data into a canonical Node tree.  In strict mode, only
    types with an exact YAML representation are accepted, and mapping keys
    must be strings.
    '''
    return _ValueEncoder(strict).encode(value)




def key_text(key):
    '''
    Text of a generic scalar mapping key, as it would be written in YAML.
    '''
    if key is None:
        return 'null'
    if key is True:
        return 'true'
    if key is False:
        return 'false'
    if isinstance(key, float):
        if key != key:
            return '.nan'
        if key in (float('inf'), float('-inf')):
            return '.inf' if key > 0 else '-.inf'
        return repr(key)
    if isinstance(key, (int, str)):
        return str(key)
    if isinstance(key, bytes):
        return base64.b64encode(key).decode('ascii')
    raise TypeError('Mapping key of type {0} cannot be converted into a string'.format(type(key).__name__))




class _ValueDecoder(object):
    '''
    Decode one Node tree.  Collections decoded into generic containers are
    memoized, so that every alias of a collection gives the same object.
    '''
    __slots__ = ['strict', 'string_keys', 'memo', 'active']

    def __init__(self, strict, string_keys=False):
        self.strict = strict
        self.string_keys = string_keys
        self.memo = {}
        self.active = set()

    def decode(self, node, target=None):
        if target is Node:
            return deep_copy(node)
        if node.kind == 0:
            if node.is_zero():
                return None
            raise erring.UnknownNodeKindError(node, action='decode')
        if node.kind == DOCUMENT_NODE:
            if not node.content:
                return None
            return self.decode(node.content[0], target)
        if node.kind == ALIAS_NODE:
            return self._decode_alias(node, target)

        if target is None or target is object or target is typing.Any:
            return self._decode_generic(node)
        origin = getattr(target, '__origin__', None)
        if origin is typing.Union:
            return self._decode_union(node, target)
        if self._is_null(node):
            return None
        if origin is not None:
            if origin in (list, collections.abc.Sequence, collections.abc.MutableSequence):
                args = getattr(target, '__args__', None) or (None,)
                return self._decode_list(node, target, args[0])
            if origin in (dict, collections.abc.Mapping, collections.abc.MutableMapping):
                args = getattr(target, '__args__', None) or (None, None)
                return self._decode_dict(node, target, args[0], args[1])
            raise TypeError('Unsupported target type {0}'.format(target))
        if dataclasses.is_dataclass(target) and isinstance(target, type):
            return self._decode_dataclass(node, target)
        if target is list:
            return self._decode_list(node, target, None)
        if target is dict:
            return self._decode_dict(node, target, None, None)
        if node.kind != SCALAR_NODE:
            raise erring.TypeMismatchError(node, target)
        return self._decode_scalar_into(node, target)

    def _decode_alias(self, node, target):
        alias = node.alias
        if alias is None:
            raise erring.UndefinedAnchorError(node.value, node=node)
        generic = target is None or target is object or target is typing.Any
        if id(alias) in self.active and not (generic and (id(alias), None) in self.memo):
            raise erring.DecodingException('Alias "{0}" refers to a node that contains it'.format(alias.anchor), node=node)
        return self.decode(alias, target)

    @staticmethod
    def _is_null(node):
        return node.kind == SCALAR_NODE and node.short_tag() == resolve.NULL_TAG

    def _decode_union(self, node, target):
        args = target.__args__
        if _NONE_TYPE in args and self._is_null(node):
            return None
        for arg in args:
            if arg is _NONE_TYPE:
                continue
            try:
                return self.decode(node, arg)
            except erring.TypeMismatchError:
                continue
        raise erring.TypeMismatchError(node, target)

    def _decode_generic(self, node):
        if node.kind == SCALAR_NODE:
            return self._decode_scalar(node)
        memo = self.memo
        key = (id(node), None)
        if key in memo:
            return memo[key]
        if node.kind == SEQUENCE_NODE:
            result = memo[key] = []
            self.active.add(id(node))
            result.extend(self.decode(item) for item in node.content)
            self.active.discard(id(node))
            return result
        if node.kind == MAPPING_NODE:
            result = memo[key] = {}
            self.active.add(id(node))
            self._fill_dict(node, result, None, None)
            self.active.discard(id(node))
            return result
        raise erring.Bug('Unexpected node kind {0}'.format(node.kind), node=node)

    def _decode_scalar(self, node):
        tag = node.short_tag()
        value = node.value
        try:
            if tag == resolve.NULL_TAG:
                return None
            if tag == resolve.BOOL_TAG:
                return resolve.parse_bool(value)
            if tag == resolve.INT_TAG:
                return resolve.parse_int(value)
            if tag == resolve.FLOAT_TAG:
                return resolve.parse_float(value)
        except (KeyError, ValueError):
            raise erring.TypeMismatchError(node, tag, 'Invalid {0} value `{1}`'.format(tag, value))
        if tag == resolve.BINARY_TAG:
            return value.encode('utf-8', 'surrogateescape')
        # Strings, timestamps, and custom tags keep their text
        return value

    def _decode_scalar_into(self, node, target):
        tag = node.short_tag()
        if target is str:
            # Any scalar can be held as its text
            if tag == resolve.BINARY_TAG and resolve.needs_binary(node.value):
                raise erring.TypeMismatchError(node, target)
            return node.value
        value = self._decode_scalar(node)
        if target is bool:
            if isinstance(value, bool):
                return value
        elif target is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
        elif target is float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        elif target in (bytes, bytearray):
            if isinstance(value, bytes):
                return target(value)
            if tag == resolve.STR_TAG:
                return target(value.encode('utf-8'))
        elif target is datetime.datetime or target is datetime.date:
            if tag in (resolve.TIMESTAMP_TAG, resolve.STR_TAG):
                return self._parse_timestamp(node, target)
        elif isinstance(target, type) and issubclass(target, enum.Enum):
            try:
                return target(value)
            except ValueError:
                pass
        elif isinstance(target, type) and isinstance(value, target):
            return value
        raise erring.TypeMismatchError(node, target)

    @staticmethod
    def _parse_timestamp(node, target):
        text = node.value.strip()
        try:
            if len(text) == 10:
                date = datetime.date.fromisoformat(text)
                if target is datetime.date:
                    return date
                return datetime.datetime(date.year, date.month, date.day)
            if text.endswith(('Z', 'z')):
                text = text[:-1] + '+00:00'
            result = datetime.datetime.fromisoformat(' '.join(text.split()).replace(' +', '+').replace(' -', '-'))
        except ValueError:
            raise erring.TypeMismatchError(node, target)
        if target is datetime.date:
            return result.date()
        return result

    def _decode_list(self, node, target, item_target):
        if node.kind != SEQUENCE_NODE:
            raise erring.TypeMismatchError(node, target)
        if item_target is None:
            return self._decode_generic(node)
        self.active.add(id(node))
        result = [self.decode(item, item_target) for item in node.content]
        self.active.discard(id(node))
        return result

    def _decode_dict(self, node, target, key_target, value_target):
        if node.kind != MAPPING_NODE:
            raise erring.TypeMismatchError(node, target)
        if key_target is None and value_target is None:
            return self._decode_generic(node)
        result = {}
        self.active.add(id(node))
        self._fill_dict(node, result, key_target, value_target)
        self.active.discard(id(node))
        return result

    def _hashable_key(self, key_node, key_target):
        key = self.decode(key_node, key_target)
        if isinstance(key, list):
            key = tuple(key)
        try:
            hash(key)
        except TypeError:
            raise erring.TypeMismatchError(key_node, 'mapping key', 'Mapping key `{0}` cannot be used as a key in Python'.format(key_node.indicated_value()))
        return key

    def _fill_dict(self, node, result, key_target, value_target):
        first_keys = {}
        for key_node, value_node in node.pairs():
            if self.string_keys and key_target is None:
                key = key_text(self.decode(key_node))
                identity = key
            else:
                key = self._hashable_key(key_node, key_target)
                # Equal keys of different types (`1` and `true`) are distinct in YAML
                identity = (type(key), key)
            if identity in first_keys:
                if self.strict:
                    logger.debug('Rejecting duplicate key %r at line %d', key, key_node.line)
                    raise erring.DuplicateKeyError(key, node=key_node, other_node=first_keys[identity])
                # Last occurrence wins
            elif key in result:
                raise erring.TypeMismatchError(key_node, 'mapping key', 'Mapping key `{0}` is equal in Python to an earlier key of another type'.format(key_node.indicated_value()))
            else:
                first_keys[identity] = key_node
            result[key] = self.decode(value_node, value_target)

    def _decode_dataclass(self, node, target):
        if node.kind != MAPPING_NODE:
            raise erring.TypeMismatchError(node, target)
        if id(node) in self.active:
            raise erring.DecodingException('Cannot decode a recursive mapping into {0}'.format(target.__name__), node=node)
        self.active.add(id(node))
        hints = typing.get_type_hints(target)
        fields = {f.name: f for f in dataclasses.fields(target) if f.init}
        kwargs = {}
        first_keys = {}
        for key_node, value_node in node.pairs():
            name = self.decode(key_node, str)
            if name in first_keys:
                if self.strict:
                    logger.debug('Rejecting duplicate field %r at line %d', name, key_node.line)
                    raise erring.DuplicateKeyError(name, node=key_node, other_node=first_keys[name])
            else:
                first_keys[name] = key_node
            field = fields.get(name)
            if field is None:
                if self.strict:
                    logger.debug('Rejecting unknown field %r at line %d', name, key_node.line)
                    raise erring.UnknownFieldError(name, target, node=key_node)
                continue
            kwargs[name] = self.decode(value_node, hints.get(name))
        self.active.discard(id(node))
        missing = [name for name, f in fields.items()
                   if name not in kwargs and f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING]
        if missing:
            raise erring.TypeMismatchError(node, target, 'Missing field(s) {0} for type {1}'.format(', '.join('"{0}"'.format(x) for x in missing), target.__name__))
        return target(**kwargs)




class _ValueEncoder(object):
    __slots__ = ['strict', 'active']

    def __init__(self, strict):
        self.strict = strict
        self.active = set()

    def encode(self, value):
        if isinstance(value, Node):
            return deep_copy(value)
        if value is None:
            return Node(SCALAR_NODE, value='null', tag=resolve.NULL_TAG)
        if isinstance(value, bool):
            return Node(SCALAR_NODE, value='true' if value else 'false', tag=resolve.BOOL_TAG)
        if isinstance(value, enum.Enum):
            if self.strict:
                raise TypeError('Unsupported type {0} (strict)'.format(type(value)))
            return self.encode(value.value)
        if isinstance(value, int):
            return Node(SCALAR_NODE, value=str(value), tag=resolve.INT_TAG)
        if isinstance(value, float):
            return Node(SCALAR_NODE, value=self._float_text(value), tag=resolve.FLOAT_TAG)
        if isinstance(value, str):
            node = Node()
            node.set_string(value)
            if node.tag == resolve.STR_TAG:
                node.style = _STYLE_ENCODER.preferred_style(value)
            return node
        if isinstance(value, (bytes, bytearray)):
            return Node(SCALAR_NODE, value=bytes(value).decode('utf-8', 'surrogateescape'), tag=resolve.BINARY_TAG)
        if isinstance(value, (datetime.date, datetime.datetime)):
            return Node(SCALAR_NODE, value=value.isoformat(), tag=resolve.TIMESTAMP_TAG)

        if id(value) in self.active:
            raise erring.EncodingException('Circular reference to object of type {0}'.format(type(value).__name__))
        self.active.add(id(value))
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            node = self._mapping((f.name, getattr(value, f.name)) for f in dataclasses.fields(value))
        elif isinstance(value, collections.abc.Mapping):
            node = self._mapping(value.items())
        elif isinstance(value, (list, tuple)):
            node = Node(SEQUENCE_NODE, tag=resolve.SEQ_TAG, content=[self.encode(x) for x in value])
        elif isinstance(value, (set, frozenset)) and not self.strict:
            node = Node(SEQUENCE_NODE, tag=resolve.SEQ_TAG, content=[self.encode(x) for x in value])
        else:
            raise TypeError('Unsupported type {0}{1}'.format(type(value), ' (strict)' if self.strict else ''))
        self.active.discard(id(value))
        return node

    def _mapping(self, items):
        content = []
        for k, v in items:
            if self.strict and not isinstance(k, str):
                raise TypeError('Mapping keys must be strings (strict), but got {0}'.format(type(k)))
            content.append(self.encode(k))
            content.append(self.encode(v))
        return Node(MAPPING_NODE, tag=resolve.MAP_TAG, content=content)

    @staticmethod
    def _float_text(value):
        if value != value:
            return '.nan'
        if value == float('inf'):
            return '.inf'
        if value == float('-inf'):
            return '-.inf'
        return repr(value)

