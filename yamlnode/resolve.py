# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#

'''
Implicit tag resolution for scalars, following the YAML core schema.
'''


import re
import base64
import binascii


NULL_TAG = '!!null'
BOOL_TAG = '!!bool'
INT_TAG = '!!int'
FLOAT_TAG = '!!float'
STR_TAG = '!!str'
TIMESTAMP_TAG = '!!timestamp'
BINARY_TAG = '!!binary'
SEQ_TAG = '!!seq'
MAP_TAG = '!!map'
MERGE_TAG = '!!merge'

LONG_TAG_PREFIX = 'tag:yaml.org,2002:'

CORE_TAGS = frozenset([NULL_TAG, BOOL_TAG, INT_TAG, FLOAT_TAG, STR_TAG,
                       TIMESTAMP_TAG, BINARY_TAG, SEQ_TAG, MAP_TAG, MERGE_TAG])


NULL_RE = re.compile(r'(?:~|null|Null|NULL)?\Z')
BOOL_RE = re.compile(r'(?:true|True|TRUE|false|False|FALSE)\Z')
INT_RE = re.compile(r'(?:[-+]?(?:0|[1-9][0-9]*)|0o[0-7]+|0x[0-9a-fA-F]+)\Z')
FLOAT_RE = re.compile(r'''(?:[-+]?(?:\.[0-9]+|[0-9]+\.[0-9]*)(?:[eE][-+]?[0-9]+)?
                            |[-+]?[0-9]+[eE][-+]?[0-9]+
                            |[-+]?\.(?:inf|Inf|INF)
                            |\.(?:nan|NaN|NAN))\Z''', re.VERBOSE)
TIMESTAMP_RE = re.compile(r'''[0-9][0-9][0-9][0-9]-[0-9][0-9]-[0-9][0-9]\Z
                              |[0-9][0-9][0-9][0-9]-[0-9][0-9]?-[0-9][0-9]?
                               (?:[Tt]|[\x20\t]+)[0-9][0-9]?:[0-9][0-9]:[0-9][0-9](?:\.[0-9]*)?
                               (?:[\x20\t]*(?:Z|[-+][0-9][0-9]?(?::[0-9][0-9])?))?\Z''', re.VERBOSE)

# Ordered list of (tag, regex), checked in turn; first match wins
IMPLICIT_RESOLVERS = [(NULL_TAG, NULL_RE),
                      (BOOL_TAG, BOOL_RE),
                      (INT_TAG, INT_RE),
                      (FLOAT_TAG, FLOAT_RE),
                      (TIMESTAMP_TAG, TIMESTAMP_RE)]

BOOL_VALUES = {'true': True, 'True': True, 'TRUE': True,
               'false': False, 'False': False, 'FALSE': False}


def short_tag(tag):
    '''
    Convert a long `tag:yaml.org,2002:` tag into its `!!` shorthand.
    '''
    if tag.startswith(LONG_TAG_PREFIX):
        return '!!' + tag[len(LONG_TAG_PREFIX):]
    return tag


def long_tag(tag):
    '''
    Convert a `!!` tag into its long `tag:yaml.org,2002:` form.
    '''
    if tag.startswith('!!'):
        return LONG_TAG_PREFIX + tag[2:]
    return tag


def resolve_plain(text, implicit_resolvers=IMPLICIT_RESOLVERS):
    '''
    Return the core schema tag of a plain (unquoted) scalar.
    '''
    for tag, regex in implicit_resolvers:
        if regex.match(text):
            return tag
    return STR_TAG


def needs_binary(text):
    '''
    Whether a value can only round-trip through `!!binary`.  Raw bytes that
    are not valid UTF-8 are carried in `str` as lone surrogates (the
    `surrogateescape` error handler), which cannot appear in YAML text.
    '''
    try:
        text.encode('utf-8')
    except UnicodeEncodeError:
        return True
    return False


def resolve(tag, text, plain=True):
    '''
    Resolve the tag of a decoded scalar.  An explicit, non-specific `!` tag
    behaves as if quoted.
    '''
    if tag and tag != '!':
        return short_tag(tag)
    if plain and not tag:
        return resolve_plain(text)
    if needs_binary(text):
        return BINARY_TAG
    return STR_TAG


def encode_binary(text):
    '''
    Base64-encode a value that is carried as surrogate-escaped text.
    '''
    return base64.b64encode(text.encode('utf-8', 'surrogateescape')).decode('ascii')


def decode_binary(payload):
    '''
    Decode a base64 `!!binary` payload into surrogate-escaped text.
    '''
    try:
        raw = base64.b64decode(''.join(payload.split()).encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError('Invalid base64 data in !!binary value: {0}'.format(e))
    return raw.decode('utf-8', 'surrogateescape')


def parse_int(text):
    '''
    Convert the text of an `!!int` scalar into an int.
    '''
    plain = text.replace('_', '')
    sign = 1
    if plain[:1] in ('-', '+'):
        if plain[0] == '-':
            sign = -1
        plain = plain[1:]
    if plain[:2] in ('0x', '0X'):
        return sign * int(plain[2:], 16)
    if plain[:2] in ('0o', '0O'):
        return sign * int(plain[2:], 8)
    if plain[:2] in ('0b', '0B'):
        return sign * int(plain[2:], 2)
    return sign * int(plain, 10)


def parse_float(text):
    '''
    Convert the text of a `!!float` scalar into a float.
    '''
    plain = text.replace('_', '').lower()
    if plain in ('.inf', '+.inf'):
        return float('inf')
    if plain == '-.inf':
        return float('-inf')
    if plain == '.nan':
        return float('nan')
    return float(plain)


def parse_bool(text):
    '''
    Convert the text of a `!!bool` scalar into a bool.
    '''
    return BOOL_VALUES[text]
