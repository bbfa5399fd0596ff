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

if all(os.path.isdir(x) for x in ('yamlnode', 'test')):
    sys.path.insert(0, '.')

import yamlnode.comments as mdl
from yamlnode import loads, loads_all

import pytest




def comments(node):
    return (node.head_comment, node.line_comment, node.foot_comment)


def test_comment_text():
    assert(mdl.comment_text('# text') == ' text')
    assert(mdl.comment_text('#text') == 'text')
    assert(mdl.comment_text('#   text') == '   text')
    assert(mdl.comment_text('#') == '')


def test_scalar_document():
    doc = loads('# One\n# Two\ntrue # Three\n# Four\n# Five\n')
    assert(comments(doc) == ('', '', ''))
    assert(comments(doc.content[0]) == (' One\n Two', ' Three', ' Four\n Five'))
    assert((doc.line, doc.column) == (3, 1))

    doc = loads('# DH1\n\n# DH2\n\n# H1\n# H2\ntrue # I\n# F1\n# F2\n\n# DF1\n\n# DF2\n')
    assert(comments(doc) == (' DH1\n\n DH2', '', ' DF1\n\n DF2'))
    assert(comments(doc.content[0]) == (' H1\n H2', ' I', ' F1\n F2'))

    doc = loads('# One\n\n# Two\n\n# Three\ntrue # Four\n# Five\n\n# Six\n\n# Seven\n')
    assert(comments(doc) == (' One\n\n Two', '', ' Six\n\n Seven'))
    assert(comments(doc.content[0]) == (' Three', ' Four', ' Five'))


def test_non_ascii_and_spacing():
    doc = loads('# \u0161\ntrue # \u0161\n')
    assert(comments(doc.content[0]) == (' \u0161', ' \u0161', ''))
    doc = loads('#   One\ntrue #   Two\n')
    assert(comments(doc.content[0]) == ('   One', '   Two', ''))


def test_mapping_pairs():
    doc = loads('# DH1\n\n# DH2\n\n# HA1\n# HA2\nka: va # IA\n# FA1\n# FA2\n\n'
                '# HB1\n# HB2\nkb: vb # IB\n# FB1\n# FB2\n\n# DF1\n\n# DF2\n')
    assert(comments(doc) == (' DH1\n\n DH2', '', ' DF1\n\n DF2'))
    ka, va, kb, vb = doc.content[0].content
    assert(comments(ka) == (' HA1\n HA2', '', ' FA1\n FA2'))
    assert(comments(va) == ('', ' IA', ''))
    assert(comments(kb) == (' HB1\n HB2', '', ' FB1\n FB2'))
    assert(comments(vb) == ('', ' IB', ''))


def test_nested_sequence_in_mapping():
    doc = loads('# DH1\n\n# HA1\nka:\n  # HB1\n  kb:\n    # HC1\n    # HC2\n    - lc # IC\n'
                '    # FC1\n    # FC2\n\n    # HD1\n    - ld # ID\n    # FD1\n\n# DF1\n')
    assert(comments(doc) == (' DH1', '', ' DF1'))
    ka, inner = doc.content[0].content
    assert(comments(ka) == (' HA1', '', ''))
    kb, seq = inner.content
    assert(comments(kb) == (' HB1', '', ''))
    lc, ld = seq.content
    assert(comments(lc) == (' HC1\n HC2', ' IC', ' FC1\n FC2'))
    assert(comments(ld) == (' HD1', ' ID', ' FD1'))
    assert((ld.line, ld.column) == (14, 7))


def test_foot_versus_head():
    # A trailing block followed by a blank line is a foot
    ka = loads('ka:\n  kb: vb\n# FA1\n\nkc: vc\n').content[0].content[0]
    assert(comments(ka) == ('', '', ' FA1'))
    # A block directly above a node is its head
    root = loads('ka:\n  kb: vb\n# HC1\nkc: vc\n').content[0]
    assert(comments(root.content[0]) == ('', '', ''))
    assert(comments(root.content[2]) == (' HC1', '', ''))
    # The indentation of a trailing block selects its owner
    root = loads('# HA1\nka:\n  # HB1\n  kb: vb\n  # FB1\n# FA1\n').content[0]
    ka, inner = root.content
    assert(comments(ka) == (' HA1', '', ' FA1'))
    assert(comments(inner.content[0]) == (' HB1', '', ' FB1'))
    root = loads('# HA1\nka:\n  # HB1\n  kb: vb\n  # FB1\n# HC1\n# HC2\nkc: vc\n# FC1\n# FC2\n').content[0]
    ka, inner, kc, vc = root.content
    assert(comments(inner.content[0]) == (' HB1', '', ' FB1'))
    assert(comments(kc) == (' HC1\n HC2', '', ' FC1\n FC2'))


def test_key_line_comments():
    root = loads('a: # AI\n  - b\nc:\n  - d\n').content[0]
    assert(comments(root.content[0]) == ('', ' AI', ''))
    assert(root.content[1].content[0].line_comment == '')
    root = loads('ka: # IA\n  kb: # IB\n').content[0]
    assert(root.content[0].line_comment == ' IA')
    assert(root.content[1].content[0].line_comment == ' IB')
    # The key of an empty value owns the comment after it
    assert(root.content[1].content[1].line_comment == '')
    root = loads('- # IA\n- b # IB\n').content[0]
    assert(root.content[0].value == '' and root.content[0].line_comment == ' IA')
    assert(root.content[1].line_comment == ' IB')


def test_block_scalar_header_comments():
    root = loads('a: | # IA\n  str\nb: >- # IB\n  str\nc: # IC\n  - str\nd: # ID\n  str:\n').content[0]
    a, va, b, vb, c, vc, d, vd = root.content
    assert(va.value == 'str\n' and va.line_comment == ' IA')
    assert(vb.value == 'str' and vb.line_comment == ' IB')
    assert(c.line_comment == ' IC' and d.line_comment == ' ID')
    assert(a.line_comment == '' and b.line_comment == '')


def test_sequences():
    doc = loads('# DH1\n\n- la # IA\n# HB1\n- lb\n')
    assert(comments(doc) == (' DH1', '', ''))
    la, lb = doc.content[0].content
    assert(comments(la) == ('', ' IA', ''))
    assert(comments(lb) == (' HB1', '', ''))

    doc = loads('# DH1\n\n# HL1\n- # HA1\n  - la\n  # HB1\n  - lb\n')
    inner = doc.content[0].content[0]
    assert(comments(inner) == (' HL1', '', ''))
    assert(comments(inner.content[0]) == (' HA1', '', ''))
    assert(comments(inner.content[1]) == (' HB1', '', ''))


def test_anchors_and_aliases():
    doc = loads('# DH1\n\n# DH2\n\n# HA1\n# HA2\n- &x la # IA\n# FA1\n# FA2\n\n'
                '# HB1\n# HB2\n- *x # IB\n# FB1\n# FB2\n\n# DF1\n\n# DF2\n')
    assert(comments(doc) == (' DH1\n\n DH2', '', ' DF1\n\n DF2'))
    la, alias = doc.content[0].content
    assert(comments(la) == (' HA1\n HA2', ' IA', ' FA1\n FA2'))
    assert(comments(alias) == (' HB1\n HB2', ' IB', ' FB1\n FB2'))
    assert(alias.alias is la)


def test_flow_collections():
    seq = loads('# H1\n[la, lb] # I\n# F1\n').content[0]
    assert(comments(seq) == (' H1', ' I', ' F1'))

    doc = loads('# DH1\n\n# SH1\n[\n  # HA1\n  la, # IA\n  # FA1\n\n  # HB1\n  lb, # IB\n  # FB1\n]\n# SF1\n\n# DF1\n')
    assert(comments(doc) == (' DH1', '', ' DF1'))
    seq = doc.content[0]
    assert(comments(seq) == (' SH1', '', ' SF1'))
    assert([comments(n) for n in seq.content] == [('HA1', 'IA', 'FA1'), ('HB1', 'IB', 'FB1')])

    doc = loads('# DH1\n\n# MH1\n{\n  # HA1\n  ka: va, # IA\n  # FA1\n\n  # HB1\n  kb: vb, # IB\n  # FB1\n}\n# MF1\n\n# DF1\n')
    mapping = doc.content[0]
    assert(comments(mapping) == (' MH1', '', ' MF1'))
    ka, va, kb, vb = mapping.content
    assert(comments(ka) == (' HA1', '', ' FA1'))
    assert(comments(va) == ('', ' IA', ''))
    assert(comments(kb) == (' HB1', '', ' FB1'))
    assert(comments(vb) == ('', ' IB', ''))


def test_comments_per_document():
    docs = loads_all('# A\na: 1\n# B\n---\n# C\nb: 2 # D\n')
    assert(len(docs) == 2)
    assert(docs[0].content[0].content[0].head_comment == ' A')
    assert(docs[0].content[0].content[0].foot_comment == ' B')
    assert(docs[1].content[0].content[0].head_comment == ' C')
    assert(docs[1].content[0].content[1].line_comment == ' D')


def test_spacing_after_marker():
    doc = loads('#foo\na: 1 #bar\n#  baz\n')
    key, value = doc.content[0].content
    assert(comments(key) == ('foo', '', '  baz'))
    assert(value.line_comment == 'bar')
