# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#


import sys
import os
import io
import concurrent.futures

if all(os.path.isdir(x) for x in ('yamlnode', 'test')):
    sys.path.insert(0, '.')

import yamlnode.encoding as mdl
import yamlnode.erring as err
from yamlnode import loads, dumps, dump, dumps_all
from yamlnode.nodes import (Node, DOCUMENT_NODE, SEQUENCE_NODE, MAPPING_NODE,
                            SCALAR_NODE, TAGGED_STYLE, DOUBLE_QUOTED_STYLE,
                            SINGLE_QUOTED_STYLE, LITERAL_STYLE, FOLDED_STYLE)

import pytest


en = mdl.YAMLNodeEncoder()


def scalar(value, tag='', style=0):
    return Node(SCALAR_NODE, value=value, tag=tag, style=style)


def mapping(*content):
    return Node(MAPPING_NODE, tag='!!map', content=list(content))




ROUND_TRIPS = [
    'a: 1\nb: "x"\nc: \'y\'\nd:\n',
    'a:\n  - b\n  - c: d\n    e: f\n',
    '- - a\n  - b\n- c\n',
    '- a: 1\n  b: 2\n- c: 3\n',
    'a: &x 1\nb: *x\n',
    'a: &x\n  b: 1\nc: *x\n',
    '&r\na: 1\n',
    'a: []\nb: {}\n',
    '{a: 1, b: [x, y]}\n',
    'k: [a, b]\n',
    "['a,b', c]\n",
    'a: !custom x\nb: !!str 1\n',
    'a: !!binary gIGC\n',
    'text: |\n  one\n  two\nfolded: >-\n  one\n\n  two\n',
    'keep: |+\n  a\n\nnext: x\n',
    'a: |2\n    indented\n  text\n',
    '# One\n# Two\ntrue # Three\n# Four\n# Five\n',
    '# \u0161\ntrue # \u0161\n',
    '#   One\n#   Two\ntrue #   Three\n#   Four\n#   Five\n',
    '# DH1\n\n# DH2\n\n# H1\n# H2\ntrue # I\n# F1\n# F2\n\n# DF1\n\n# DF2\n',
    '# DH1\n\n# DH2\n\n# HA1\n# HA2\nka: va # IA\n# FA1\n# FA2\n\n# HB1\n# HB2\nkb: vb # IB\n# FB1\n# FB2\n\n# DF1\n\n# DF2\n',
    '# DH1\n\n# DH2\n\n# HA1\n# HA2\n- la # IA\n# FA1\n# FA2\n\n# HB1\n# HB2\n- lb # IB\n# FB1\n# FB2\n\n# DF1\n\n# DF2\n',
    '# DH1\n\n- la # IA\n# HB1\n- lb\n',
    '# DH1\n\n# HL1\n- - la\n  # HB1\n  - lb\n',
    '# DH1\n\n# HL1\n- # HA1\n  - la\n  # HB1\n  - lb\n',
    '# DH1\n\n# HA1\nka:\n  # HB1\n  kb:\n    # HC1\n    # HC2\n    - lc # IC\n    # FC1\n    # FC2\n\n'
    '    # HD1\n    - ld # ID\n    # FD1\n\n# DF1\n',
    '# DH1\n\n# HA1\nka:\n  # HB1\n  kb:\n    # HC1\n    # HC2\n    - lc # IC\n    # FC1\n    # FC2\n\n'
    '    # HD1\n    - ld # ID\n    # FD1\nke: ve\n\n# DF1\n',
    '# DH1\n\n# DH2\n\n# HA1\n# HA2\nka:\n  # HB1\n  # HB2\n  kb:\n'
    '    # HC1\n    # HC2\n    kc:\n      # HD1\n      # HD2\n      kd: vd\n      # FD1\n      # FD2\n'
    '    # FC1\n    # FC2\n  # FB1\n  # FB2\n# FA1\n# FA2\n\n# HE1\n# HE2\nke: ve\n# FE1\n# FE2\n\n# DF1\n\n# DF2\n',
    '# DH1\n\n# DH2\n\n# HA1\n# HA2\nka:\n  # HB1\n  # HB2\n  kb:\n'
    '    # HC1\n    # HC2\n    kc:\n      # HD1\n      # HD2\n      kd: vd\n      # FD1\n      # FD2\n'
    '    # FC1\n    # FC2\n  # FB1\n  # FB2\n\n  # HE1\n  # HE2\n  ke: ve\n  # FE1\n  # FE2\n# FA1\n# FA2\n\n# DF1\n\n# DF2\n',
    '# HA1\nka:\n  # HB1\n  kb: vb\n  # FB1\n# FA1\n',
    'ka:\n  kb: vb\n# FA1\n\nkc: vc\n',
    'ka:\n  kb: vb\n# HC1\nkc: vc\n',
    'ka: # IA\n  kb: # IB\n',
    '#foo\na: 1 #bar\n',
    '#  two\n- a #no space\n- # empty item\n- b\n',
    '# HA1\nka:\n  # HB1\n  kb: vb\n  # FB1\n# HC1\n# HC2\nkc: vc\n# FC1\n# FC2\n',
    'a: # AI\n  - b\nc:\n  - d\n',
    'a: | # IA\n  str\nb: >- # IB\n  str\nc: # IC\n  - str\nd: # ID\n  str:\n',
    '# H1\n[la, lb] # I\n# F1\n',
    '# DH1\n\n# SH1\n[\n  # HA1\n  la, # IA\n  # FA1\n\n  # HB1\n  lb, # IB\n  # FB1\n]\n# SF1\n\n# DF1\n',
    '# DH1\n\n# MH1\n{\n  # HA1\n  ka: va, # IA\n  # FA1\n\n  # HB1\n  kb: vb, # IB\n  # FB1\n}\n# MF1\n\n# DF1\n',
    '# DH1\n\n# DH2\n\n# HA1\n# HA2\n- &x la # IA\n# FA1\n# FA2\n\n# HB1\n# HB2\n- *x # IB\n# FB1\n# FB2\n\n# DF1\n\n# DF2\n',
]


@pytest.mark.parametrize('text', ROUND_TRIPS)
def test_round_trip(text):
    assert(dumps(loads(text)) == text)




def test_encoder_kwargs():
    with pytest.raises(TypeError):
        mdl.YAMLNodeEncoder(2)
    with pytest.raises(TypeError):
        mdl.YAMLNodeEncoder(unknown=True)
    with pytest.raises(TypeError):
        mdl.YAMLNodeEncoder(only_ascii=1)
    with pytest.raises(TypeError):
        mdl.YAMLNodeEncoder(indent='4')
    for indent in (0, 1, 10):
        with pytest.raises(ValueError):
            mdl.YAMLNodeEncoder(indent=indent)


def test_minimal_tags():
    assert(en.encode(scalar('123')) == '"123"\n')
    assert(en.encode(scalar('123', '!!int')) == '123\n')
    assert(en.encode(scalar('123', '!!str')) == '"123"\n')
    assert(en.encode(scalar('123', '!!str', TAGGED_STYLE)) == '!!str 123\n')
    assert(en.encode(scalar('123', '!!float')) == '!!float 123\n')
    assert(en.encode(scalar('1.5', '!!float')) == '1.5\n')
    assert(en.encode(scalar('text', '!!str')) == 'text\n')
    assert(en.encode(scalar('x', '!foo')) == '!foo x\n')
    assert(en.encode(scalar('x', 'tag:example.com,2000:x')) == '!<tag:example.com,2000:x> x\n')
    assert(en.encode(Node(SEQUENCE_NODE, tag='!items', content=[scalar('a', '!!str')])) == '!items\n- a\n')


def test_string_quoting():
    value = lambda s: en.encode(mapping(scalar('k', '!!str'), scalar(s, '!!str')))
    assert(value('') == "k: ''\n")
    assert(value('a: b') == "k: 'a: b'\n")
    assert(value('true') == 'k: "true"\n')
    assert(value('null') == 'k: "null"\n')
    assert(value('- x') == "k: '- x'\n")
    assert(value(' lead') == "k: ' lead'\n")
    assert(value('it\'s') == 'k: it\'s\n')
    assert(value('#x') == "k: '#x'\n")
    assert(value('line\ttab') == 'k: "line\\ttab"\n')
    assert(value('bell\x07') == 'k: "bell\\a"\n')
    assert(en.encode(mapping(scalar('k', '!!str'), scalar('x', '!!str', SINGLE_QUOTED_STYLE))) == "k: 'x'\n")
    assert(en.encode(mapping(scalar('k', '!!str'), scalar('x', '!!str', DOUBLE_QUOTED_STYLE))) == 'k: "x"\n')
    # Requested styles that cannot hold the value fall back
    assert(en.encode(mapping(scalar('k', '!!str'), scalar('a\tb', '!!str', SINGLE_QUOTED_STYLE))) == 'k: "a\\tb"\n')


def test_block_scalars():
    value = lambda s, style: en.encode(mapping(scalar('k', '!!str'), scalar(s, '!!str', style)))
    assert(value('a\nb\n', LITERAL_STYLE) == 'k: |\n  a\n  b\n')
    assert(value('a\nb', LITERAL_STYLE) == 'k: |-\n  a\n  b\n')
    assert(value('a\n\n', LITERAL_STYLE) == 'k: |+\n  a\n\n')
    assert(value(' a\nb\n', LITERAL_STYLE) == 'k: |2\n   a\n  b\n')
    assert(value('one two\nthree', FOLDED_STYLE) == 'k: >-\n  one two\n\n  three\n')
    # Multi-line strings without a requested style are literal
    assert(value('a\nb\n', 0) == 'k: |\n  a\n  b\n')
    # Block scalars are not possible in flow collections
    flow = loads('[x]').content[0]
    flow.content[0] = scalar('a\nb', '!!str', LITERAL_STYLE)
    assert(en.encode(flow) == '["a\\nb"]\n')
    assert(en.encode(scalar('a\nb\n', '!!str', LITERAL_STYLE)) == '|\n  a\n  b\n')


def test_binary():
    raw = b'\x80\x81\x82'.decode('utf-8', 'surrogateescape')
    assert(en.encode(scalar(raw)) == '!!binary gIGC\n')
    assert(en.encode(scalar('', '!!binary')) == "!!binary ''\n")
    raw = bytes(range(128, 256)).decode('utf-8', 'surrogateescape')
    text = en.encode(mapping(scalar('k', '!!str'), scalar(raw, '!!binary')))
    lines = text.split('\n')
    assert(lines[0] == 'k: !!binary |')
    assert(all(len(line) <= 78 for line in lines))
    assert(loads(text).content[0].content[1].value == raw)


def test_empty_documents():
    assert(en.encode(Node(DOCUMENT_NODE)) == 'null\n')
    assert(en.encode(loads('# only a comment\n')) == '# only a comment\n')
    assert(en.encode(scalar('', '!!null')) == 'null\n')
    assert(en.encode(Node(SEQUENCE_NODE, content=[scalar('', '!!null')])) == '-\n')
    assert(en.encode(Node(MAPPING_NODE)) == '{}\n')


def test_unknown_kind():
    with pytest.raises(err.UnknownNodeKindError) as e:
        en.encode(Node())
    assert(str(e.value) == 'cannot encode node with unknown kind 0')
    with pytest.raises(err.UnknownNodeKindError):
        en.encode(Node(SEQUENCE_NODE, content=[Node(value='x')]))
    with pytest.raises(err.EncodingException):
        en.encode(Node(SEQUENCE_NODE, content=[Node(DOCUMENT_NODE)]))


def test_indent():
    doc = loads('a:\n  b: 1\n  c:\n    - x\n    - |\n      text\n')
    assert(mdl.YAMLNodeEncoder(indent=4).encode(doc) == 'a:\n    b: 1\n    c:\n        - x\n        - |\n            text\n')


def test_indentless_sequences():
    doc = loads('a:\n- 1\n- b: 2\nc: 3\n')
    assert(doc.content[0].content[1].kind == SEQUENCE_NODE)
    assert(en.encode(doc) == 'a:\n  - 1\n  - b: 2\nc: 3\n')


def test_only_ascii():
    node = mapping(scalar('k', '!!str'), scalar('caf\xe9 \U0001F600', '!!str'))
    assert(en.encode(node) == 'k: caf\xe9 \U0001F600\n')
    assert(mdl.YAMLNodeEncoder(only_ascii=True).encode(node) == 'k: "caf\\xe9 \\U0001f600"\n')


def test_nesting_depth():
    encoder = mdl.YAMLNodeEncoder(max_nesting_depth=1)
    assert(encoder.encode(loads('[1]')) == '[1]\n')
    with pytest.raises(err.EncodingException):
        encoder.encode(loads('[[1]]'))
    with pytest.raises(err.EncodingException):
        encoder.encode(loads('a:\n  b: 1\n'))


def test_preferred_style():
    assert(en.preferred_style('plain') == 0)
    assert(en.preferred_style('"quoted value"') == SINGLE_QUOTED_STYLE)
    assert(en.preferred_style('123') == DOUBLE_QUOTED_STYLE)
    assert(en.preferred_style('a\nb') == LITERAL_STYLE)


def test_multiple_documents_and_files():
    assert(dumps_all([loads('a: 1'), loads('- b')]) == 'a: 1\n---\n- b\n')
    assert(en.encode_all([]) == '')
    fp = io.StringIO()
    dump(loads('a: 1'), fp)
    assert(fp.getvalue() == 'a: 1\n')
    assert(dumps(loads('a: 1'), indent=4) == 'a: 1\n')


def test_shared_encoder_between_threads():
    docs = [loads('n: {0}\nitems: [{0}, x{0}]\ntext: |\n  line {0}\n'.format(n)) for n in range(16)]
    expected = [en.encode(doc) for doc in docs]

    def encode_repeatedly(n):
        return all(en.encode(docs[n]) == expected[n] and dumps(docs[n]) == expected[n] for _ in range(100))

    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as pool:
        assert(all(pool.map(encode_repeatedly, range(16))))
    # A failed run leaves nothing behind for the next one
    encoder = mdl.YAMLNodeEncoder(max_nesting_depth=1)
    with pytest.raises(err.EncodingException):
        encoder.encode(loads('[[1]]'))
    assert(encoder.encode(loads('[1]')) == '[1]\n')
