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
The Node document model.

A single `Node` class represents every YAML construct.  The construct is
identified by `kind`, and code that handles nodes dispatches on it rather
than on subclasses.  Nodes preserve everything that a plain data tree loses:
comments, anchors and aliases, scalar and collection styles, explicit tags,
and source position.
'''


import copy

from . import resolve


DOCUMENT_NODE = 1
SEQUENCE_NODE = 2
MAPPING_NODE = 3
SCALAR_NODE = 4
ALIAS_NODE = 5

KIND_NAMES = {DOCUMENT_NODE: 'document',
              SEQUENCE_NODE: 'sequence',
              MAPPING_NODE: 'mapping',
              SCALAR_NODE: 'scalar',
              ALIAS_NODE: 'alias'}

TAGGED_STYLE = 1 << 0
DOUBLE_QUOTED_STYLE = 1 << 1
SINGLE_QUOTED_STYLE = 1 << 2
LITERAL_STYLE = 1 << 3
FOLDED_STYLE = 1 << 4
FLOW_STYLE = 1 << 5

QUOTED_STYLES = DOUBLE_QUOTED_STYLE | SINGLE_QUOTED_STYLE
BLOCK_SCALAR_STYLES = LITERAL_STYLE | FOLDED_STYLE
NON_PLAIN_STYLES = QUOTED_STYLES | BLOCK_SCALAR_STYLES


class Node(object):
    '''
    A node of a YAML document tree.

    Mapping `content` is the flat list `[key1, value1, key2, value2, ...]`.
    Alias nodes refer to the anchored node itself through `alias`; the target
    is shared, never copied, so the graph may contain cycles.  Comment text
    is stored without the `#` marker, keeping any space after it, and without a
    trailing newline.  `line`
    and `column` are 1-based, or 0 for nodes that were not decoded.
    '''
    __slots__ = ['_kind', 'style', 'tag', 'value', 'anchor', 'alias', 'content',
                 'head_comment', 'line_comment', 'foot_comment',
                 'line', 'column']

    def __init__(self, kind=0, value='', tag='', style=0, content=None,
                 anchor='', alias=None,
                 head_comment='', line_comment='', foot_comment='',
                 line=0, column=0):
        if kind != 0 and kind not in KIND_NAMES:
            raise ValueError('Invalid node kind {0}'.format(kind))
        if content is None:
            content = []
        elif not isinstance(content, list):
            content = list(content)
        if kind == MAPPING_NODE and len(content) % 2 != 0:
            raise ValueError('Mapping content must alternate keys and values, but has odd length {0}'.format(len(content)))
        if kind == DOCUMENT_NODE and len(content) > 1:
            raise ValueError('Document content may hold at most one node, but has {0}'.format(len(content)))
        if alias is not None and kind != ALIAS_NODE:
            raise ValueError('Only alias nodes may refer to an alias target')
        self._kind = kind
        self.value = value
        self.tag = tag
        self.style = style
        self.content = content
        self.anchor = anchor
        self.alias = alias
        self.head_comment = head_comment
        self.line_comment = line_comment
        self.foot_comment = foot_comment
        self.line = line
        self.column = column

    @property
    def kind(self):
        return self._kind

    def __repr__(self):
        if self._kind == SCALAR_NODE:
            desc = repr(self.value)
        elif self._kind == ALIAS_NODE:
            desc = '*{0}'.format(self.alias.anchor if self.alias is not None else '')
        else:
            desc = '{0} children'.format(len(self.content))
        return '<Node {0} {1} {2} at {3}:{4}>'.format(KIND_NAMES.get(self._kind, 'unknown'),
                                                       self.tag or '-', desc, self.line, self.column)

    def __deepcopy__(self, memo):
        # Registering the copy before copying children keeps shared alias
        # targets shared, and terminates on cycles.
        dup = memo.get(id(self))
        if dup is not None:
            return dup
        dup = Node.__new__(Node)
        memo[id(self)] = dup
        for slot in ('_kind', 'style', 'tag', 'value', 'anchor',
                     'head_comment', 'line_comment', 'foot_comment',
                     'line', 'column'):
            setattr(dup, slot, getattr(self, slot))
        dup.content = [child.__deepcopy__(memo) for child in self.content]
        dup.alias = None if self.alias is None else self.alias.__deepcopy__(memo)
        return dup

    def _become(self, kind):
        if self._kind != 0 and self._kind != kind:
            raise ValueError('Cannot change a {0} node into a {1} node'.format(KIND_NAMES[self._kind], KIND_NAMES[kind]))
        self._kind = kind

    def is_zero(self):
        '''
        Whether the node is entirely unset.
        '''
        return (self._kind == 0 and not self.style and not self.tag and not self.value and
                not self.content and not self.anchor and self.alias is None and
                not self.head_comment and not self.line_comment and not self.foot_comment and
                not self.line and not self.column)

    def indicated_string(self):
        '''
        Whether the node is a scalar that is a string by tag or by style.
        '''
        return (self._kind == SCALAR_NODE and
                (resolve.short_tag(self.tag) == resolve.STR_TAG or
                 (self.tag in ('', '!') and self.style & NON_PLAIN_STYLES and
                  not resolve.needs_binary(self.value))))

    def short_tag(self):
        '''
        Tag in `!!` shorthand.  Nodes without a tag report the tag they
        resolve to implicitly.
        '''
        if self.indicated_string():
            return resolve.STR_TAG
        if self.tag in ('', '!'):
            kind = self._kind
            if kind == MAPPING_NODE:
                return resolve.MAP_TAG
            if kind == SEQUENCE_NODE:
                return resolve.SEQ_TAG
            if kind == ALIAS_NODE:
                if self.alias is not None:
                    return self.alias.short_tag()
            elif kind == SCALAR_NODE:
                if resolve.needs_binary(self.value):
                    return resolve.BINARY_TAG
                return resolve.resolve_plain(self.value)
            elif kind == 0 and self.is_zero():
                return resolve.NULL_TAG
            return ''
        return resolve.short_tag(self.tag)

    def long_tag(self):
        '''
        Tag in long `tag:yaml.org,2002:` form.
        '''
        return resolve.long_tag(self.short_tag())

    def indicated_value(self):
        if self._kind == SCALAR_NODE:
            return self.value
        return KIND_NAMES.get(self._kind, 'unknown')

    def pairs(self):
        '''
        Iterate over the (key, value) node pairs of a mapping.
        '''
        if self._kind != MAPPING_NODE:
            raise TypeError('pairs() requires a mapping node')
        content = self.content
        for n in range(0, len(content) - 1, 2):
            yield content[n], content[n+1]

    def set_string(self, s):
        '''
        Make the node a string scalar holding `s`.  Multi-line text uses
        literal style.  Text that is not valid Unicode is tagged `!!binary`.
        '''
        self._become(SCALAR_NODE)
        self.value = s
        if resolve.needs_binary(s):
            self.tag = resolve.BINARY_TAG
            self.style = 0
        else:
            self.tag = resolve.STR_TAG
            self.style = LITERAL_STYLE if '\n' in s else 0

    def decode(self, target=None, strict=False):
        '''
        Convert the node into Python data, or into an instance of `target`.
        '''
        from . import typed
        return typed.to_value(self, target, strict=strict)

    def encode(self, value):
        '''
        Replace the contents of the node with a canonical representation of
        `value`.
        '''
        from . import typed
        other = typed.from_value(value)
        self._become(other.kind)
        for slot in ('style', 'tag', 'value', 'anchor', 'alias', 'content',
                     'head_comment', 'line_comment', 'foot_comment'):
            setattr(self, slot, getattr(other, slot))


def deep_copy(node):
    '''
    Copy a node tree.  Aliases that share a target in the original share the
    corresponding copied target.
    '''
    return copy.deepcopy(node)


def walk(node, follow_aliases=False):
    '''
    Iterate over a node tree in pre-order.  Every node is visited at most
    once, so cyclic graphs terminate.
    '''
    visited = set()
    stack = [node]
    while stack:
        n = stack.pop()
        if id(n) in visited:
            continue
        visited.add(id(n))
        yield n
        if follow_aliases and n.alias is not None:
            stack.append(n.alias)
        stack.extend(reversed(n.content))


def nodes_equal(a, b, positions=False):
    '''
    Structural comparison of two node trees.  Alias nodes compare equal when
    their targets do.
    '''
    seen = set()
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        if x is None or y is None:
            if x is not y:
                return False
            continue
        pair = (id(x), id(y))
        if pair in seen:
            continue
        seen.add(pair)
        if (x.kind != y.kind or x.style != y.style or x.tag != y.tag or
                x.value != y.value or x.anchor != y.anchor or
                x.head_comment != y.head_comment or
                x.line_comment != y.line_comment or
                x.foot_comment != y.foot_comment or
                len(x.content) != len(y.content)):
            return False
        if positions and (x.line != y.line or x.column != y.column):
            return False
        stack.append((x.alias, y.alias))
        stack.extend(zip(x.content, y.content))
    return True
