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
Conversion between YAML and JSON, and between YAML and Python data.

The strict variants of each operation reject duplicate mapping keys (and,
for typed decoding, mapping keys without a matching field) instead of letting
the last occurrence win.
'''


import base64
import json
import logging

from . import erring
from . import typed
from .dumping import dumps
from .loading import loads


logger = logging.getLogger(__name__)




def unmarshal(data, target=None):
    '''
    Decode the first YAML document in a string or byte string into Python
    data, or into an instance of `target`.
    '''
    return typed.to_value(loads(data), target)


def unmarshal_strict(data, target=None):
    '''
    Like `unmarshal()`, but duplicate keys and unknown fields are errors.
    '''
    return typed.to_value(loads(data), target, strict=True)


def marshal(value):
    '''
    Encode Python data as a YAML document.
    '''
    return dumps(typed.from_value(value))


def marshal_strict(value):
    '''
    Like `marshal()`, but only types with an exact YAML representation are
    accepted, and mapping keys must be strings.
    '''
    return dumps(typed.from_value(value, strict=True))




def convert_to_string_keys(value, strict=False):
    '''
    Recursively copy generic data so that every mapping key is a string.
    Scalar keys are converted into their YAML text (`1`, `true`, `null`).
    When two keys convert into the same string, the last one wins, unless
    `strict` is set.
    '''
    active = set()

    def convert(obj):
        if isinstance(obj, (dict, list)):
            if id(obj) in active:
                raise erring.EncodingException('Circular reference cannot be converted into JSON')
            active.add(id(obj))
            if isinstance(obj, list):
                result = [convert(x) for x in obj]
            else:
                result = {}
                for k, v in obj.items():
                    k = typed.key_text(k)
                    if strict and k in result:
                        logger.debug('Rejecting duplicate key %r after conversion into a string', k)
                        raise erring.DuplicateKeyError(k)
                    result[k] = convert(v)
            active.discard(id(obj))
            return result
        return obj

    return convert(value)


def _json_default(obj):
    if isinstance(obj, bytes):
        return base64.b64encode(obj).decode('ascii')
    raise TypeError('Object of type {0} is not JSON serializable'.format(type(obj).__name__))


def _yaml_to_json(data, strict):
    value = typed.to_value(loads(data), strict=strict, string_keys=True)
    try:
        return json.dumps(value, ensure_ascii=False, separators=(',', ':'),
                          allow_nan=False, default=_json_default)
    except ValueError as e:
        raise erring.EncodingException('Cannot convert into JSON: {0}'.format(e))


def yaml_to_json(data):
    '''
    Convert the first YAML document in a string or byte string into compact
    JSON.  Duplicate keys resolve to the last occurrence.
    '''
    return _yaml_to_json(data, False)


def yaml_to_json_strict(data):
    '''
    Convert YAML into compact JSON, rejecting duplicate keys.
    '''
    return _yaml_to_json(data, True)




def _strict_object_pairs(pairs):
    result = {}
    for k, v in pairs:
        if k in result:
            logger.debug('Rejecting duplicate JSON object key %r', k)
            raise erring.DuplicateKeyError(k)
        result[k] = v
    return result


def _reject_constant(name):
    raise erring.SyntaxError('Invalid JSON constant {0}'.format(name))


def _json_to_yaml(data, strict):
    if not isinstance(data, str):
        try:
            data = bytes(data).decode('utf8')
        except Exception as e:
            raise erring.SourceDecodeError(e)
    kwargs = {'object_pairs_hook': _strict_object_pairs if strict else dict}
    if strict:
        kwargs['parse_constant'] = _reject_constant
    try:
        value = json.loads(data, **kwargs)
    except json.JSONDecodeError as e:
        raise erring.SyntaxError(e.msg, line=e.lineno, column=e.colno)
    return dumps(typed.from_value(value))


def json_to_yaml(data):
    '''
    Convert JSON in a string or byte string into a YAML document.  Object key
    order is kept, and duplicate keys resolve to the last occurrence.
    '''
    return _json_to_yaml(data, False)


def json_to_yaml_strict(data):
    '''
    Convert JSON into a YAML document, rejecting duplicate object keys and
    the non-standard `NaN` and `Infinity` constants.
    '''
    return _json_to_yaml(data, True)
