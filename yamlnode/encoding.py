# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#


# pylint:  disable = C0301


import copy
import re

from . import erring
from . import escape
from . import resolve
from . import tooling
from .nodes import (DOCUMENT_NODE, SEQUENCE_NODE, MAPPING_NODE, SCALAR_NODE,
                    ALIAS_NODE,
                    TAGGED_STYLE, DOUBLE_QUOTED_STYLE, SINGLE_QUOTED_STYLE,
                    LITERAL_STYLE, FOLDED_STYLE, FLOW_STYLE)


MAX_NESTING_DEPTH = 100
BINARY_LINE_LENGTH = 76

# Positions a node can be written in
ROOT = 'root'
VALUE = 'value'
ITEM = 'item'
KEY = 'key'
FLOW = 'flow'
FLOW_KEY = 'flow_key'

PLAIN_STYLE = 0

PLAIN_START_INDICATORS = frozenset('[]{},#&*!|>\'"%@`')
FLOW_INDICATORS = frozenset(',[]{}')

FOLDABLE_NEWLINES_RE = re.compile('\n+')




class YAMLNodeEncoder(object):
    '''
    Encode Node trees as YAML text.

    Scalar styles, flow and block collection styles, tags, anchors, and
    comments are taken from the nodes.  A requested scalar style is used when
    it can represent the value in the position where the scalar is written;
    otherwise the encoder falls back to a style that can.

    The output of a run is collected on a copy of the encoder made for that
    run, so an encoder instance is static once created and may be shared,
    including between threads.
    '''
    def __init__(self, *args, **kwargs):
        if args:
            raise TypeError('Explicit keyword arguments are required')

        self.only_ascii = tooling.pop_bool_option(kwargs, 'only_ascii', False)
        # The block scalar indentation indicator is a single digit
        self.indent = tooling.pop_int_option(kwargs, 'indent', 2, 2, 9)
        self.max_nesting_depth = tooling.pop_int_option(kwargs, 'max_nesting_depth', MAX_NESTING_DEPTH)
        tooling.check_no_kwargs(kwargs)

        self._escape = escape.Escape(only_ascii=self.only_ascii)
        self._buffer = None
        self._nesting_depth = 0


    def _new_run(self):
        '''
        Copy of the encoder with an empty output buffer, for a single run.
        '''
        run = copy.copy(self)
        run._buffer = []
        run._nesting_depth = 0
        return run


    def encode(self, node):
        '''
        Encode a document Node, or any other Node as the root of a document,
        as a string.
        '''
        run = self._new_run()
        run._encode_document(node)
        return ''.join(run._buffer)


    def encode_all(self, nodes):
        '''
        Encode a sequence of Nodes as a multi-document stream.
        '''
        run = self._new_run()
        for n, node in enumerate(nodes):
            if n > 0:
                run._buffer.append('---\n')
            run._encode_document(node)
        return ''.join(run._buffer)


    def _emit(self, line, comment=''):
        if comment:
            line = line + ' #' + comment if line else '#' + comment
        self._buffer.append(line + '\n')


    def _emit_comment(self, lead, text, indent):
        '''
        Write comment lines.  The first line starts with `lead`, which may
        hold a pending sequence indicator; the rest are indented.  Returns the
        lead for the line after the comment.
        '''
        margin = ' ' * indent
        for line in text.split('\n'):
            if line:
                self._buffer.append(lead + '#' + line + '\n')
            elif lead.strip():
                self._buffer.append(lead + '#\n')
            else:
                self._buffer.append('\n')
            lead = margin
        return margin


    def _check_kind(self, node):
        if node.kind == 0:
            raise erring.UnknownNodeKindError(node)
        if node.kind == DOCUMENT_NODE:
            raise erring.EncodingException('A document node can only appear at the top level')


    def _enter(self):
        self._nesting_depth += 1
        if self._nesting_depth > self.max_nesting_depth:
            raise erring.EncodingException('Max nesting depth {0} exceeded'.format(self.max_nesting_depth))


    def _encode_document(self, node):
        if node.kind == 0:
            raise erring.UnknownNodeKindError(node)
        if node.kind != DOCUMENT_NODE:
            self._encode_root(node)
            return
        root = node.content[0] if node.content else None
        if root is None:
            if node.head_comment:
                self._emit_comment('', node.head_comment, 0)
            if node.foot_comment:
                if node.head_comment:
                    self._emit('')
                self._emit_comment('', node.foot_comment, 0)
            if not node.head_comment and not node.foot_comment:
                self._emit('null')
            return
        if node.head_comment:
            self._emit_comment('', node.head_comment, 0)
            self._emit('')
        self._encode_root(root)
        if node.foot_comment:
            self._emit('')
            self._emit_comment('', node.foot_comment, 0)


    def _encode_root(self, node):
        self._check_kind(node)
        if node.head_comment:
            self._emit_comment('', node.head_comment, 0)
        if self._is_block_collection(node):
            props = self._collection_props(node)
            if props or node.line_comment:
                self._emit(props, node.line_comment)
            self._encode_block_collection(node, 0, '')
        else:
            self._emit_lines('', self._lines(node, 0, ROOT), node)
        if node.foot_comment:
            self._emit_comment('', node.foot_comment, 0)


    @staticmethod
    def _is_block_collection(node):
        return (node.kind in (MAPPING_NODE, SEQUENCE_NODE) and
                not node.style & FLOW_STYLE and bool(node.content))


    def _emit_lines(self, lead, lines, node):
        '''
        Write the rendered lines of a node after `lead`.  The line comment
        goes on the header line of a block scalar, and otherwise after the
        last line.
        '''
        comment = node.line_comment
        first = lines[0]
        if len(lines) == 1:
            self._emit(lead + first if first else lead.rstrip(), comment)
            return
        if node.kind == SCALAR_NODE:
            self._emit(lead + first, comment)
            for line in lines[1:]:
                self._emit(line)
            return
        self._emit(lead + first)
        for line in lines[1:-1]:
            self._emit(line)
        self._emit(lines[-1], comment)


    def _encode_block_collection(self, node, indent, first_prefix):
        self._enter()
        if node.kind == MAPPING_NODE:
            self._encode_block_mapping(node, indent, first_prefix)
        else:
            self._encode_block_sequence(node, indent, first_prefix)
        self._nesting_depth -= 1


    def _encode_block_mapping(self, node, indent, first_prefix):
        content = node.content
        last = len(content) - 2
        margin = ' ' * indent
        for n in range(0, len(content), 2):
            key = content[n]
            value = content[n+1]
            self._check_kind(key)
            self._check_kind(value)
            lead = first_prefix if n == 0 else margin
            if key.head_comment:
                lead = self._emit_comment(lead, key.head_comment, indent)
            self._encode_pair(key, value, indent, lead)
            foot = '\n'.join(x for x in (key.foot_comment, value.foot_comment) if x)
            if foot:
                self._emit_comment(margin, foot, indent)
                if n < last:
                    self._emit('')


    def _encode_pair(self, key, value, indent, lead):
        key_text = self._key_text(key, KEY)
        child = indent + self.indent
        if self._is_block_collection(value):
            line = lead + key_text + ':'
            props = self._collection_props(value)
            if props:
                line += ' ' + props
            self._emit(line, key.line_comment or value.line_comment)
            if value.head_comment:
                self._emit_comment(' ' * child, value.head_comment, child)
            self._encode_block_collection(value, child, ' ' * child)
            return
        lines = self._lines(value, indent, VALUE)
        if key.line_comment or value.head_comment:
            self._emit(lead + key_text + ':', key.line_comment)
            if value.head_comment:
                self._emit_comment(' ' * child, value.head_comment, child)
            if lines[0] or len(lines) > 1:
                self._emit_lines(' ' * child, lines, value)
            return
        if lines[0]:
            self._emit_lines(lead + key_text + ': ', lines, value)
        else:
            self._emit_lines(lead + key_text + ':', lines, value)


    def _encode_block_sequence(self, node, indent, first_prefix):
        items = node.content
        last = len(items) - 1
        margin = ' ' * indent
        child = indent + 2
        for n, item in enumerate(items):
            self._check_kind(item)
            lead = first_prefix if n == 0 else margin
            if item.head_comment:
                lead = self._emit_comment(lead, item.head_comment, indent)
            if self._is_block_collection(item):
                props = self._collection_props(item)
                if props or item.line_comment:
                    self._emit(lead + '-' + (' ' + props if props else ''), item.line_comment)
                    self._encode_block_collection(item, child, ' ' * child)
                else:
                    self._encode_block_collection(item, child, lead + '- ')
            else:
                lines = self._lines(item, indent, ITEM)
                if lines[0]:
                    self._emit_lines(lead + '- ', lines, item)
                else:
                    self._emit_lines(lead + '-', lines, item)
            if item.foot_comment:
                self._emit_comment(margin, item.foot_comment, indent)
                if n < last:
                    self._emit('')


    def _key_text(self, key, context):
        '''
        Render a mapping key on a single line.
        '''
        self._check_kind(key)
        if key.kind == ALIAS_NODE:
            # The space keeps the colon out of the alias name
            return self._alias_text(key) + ' '
        if key.kind == SCALAR_NODE:
            return self._scalar_lines(key, 0, context)[0]
        return self._flow_lines(key, 0, compact=True)[0]


    def _lines(self, node, level, context):
        '''
        Render a node that is not a block collection.  The first line is a
        fragment that follows whatever precedes the node on its line; the
        remaining lines are complete, including indentation.

        `level` is the indentation of the enclosing block collection, which
        determines the indentation of block scalar content.
        '''
        self._check_kind(node)
        if node.kind == ALIAS_NODE:
            return [self._alias_text(node)]
        if node.kind == SCALAR_NODE:
            return self._scalar_lines(node, level, context)
        return self._flow_lines(node, level)


    @staticmethod
    def _alias_text(node):
        if node.alias is not None and node.alias.anchor:
            return '*' + node.alias.anchor
        if node.value:
            return '*' + node.value
        raise erring.EncodingException('Alias node without an anchor name')


    @staticmethod
    def _tag_text(tag):
        if tag.startswith('!'):
            return tag
        return '!<{0}>'.format(tag)


    def _collection_props(self, node):
        props = []
        if node.anchor:
            props.append('&' + node.anchor)
        default_tag = resolve.MAP_TAG if node.kind == MAPPING_NODE else resolve.SEQ_TAG
        tag = node.tag
        if tag in ('', '!'):
            tag = default_tag
        else:
            tag = resolve.short_tag(tag)
        if node.style & TAGGED_STYLE or tag != default_tag:
            props.append(self._tag_text(tag))
        return ' '.join(props)


    def _has_comments(self, node):
        '''
        Whether any node in a collection, other than the collection itself,
        carries a comment.
        '''
        seen = set()
        stack = list(node.content)
        while stack:
            n = stack.pop()
            if id(n) in seen:
                continue
            seen.add(id(n))
            if n.head_comment or n.line_comment or n.foot_comment:
                return True
            stack.extend(n.content)
        return False


    def _flow_lines(self, node, level, compact=False):
        self._enter()
        props = self._collection_props(node)
        prefix = props + ' ' if props else ''
        if node.kind == MAPPING_NODE:
            open_delim, close_delim = '{', '}'
        else:
            open_delim, close_delim = '[', ']'
        if not node.content:
            self._nesting_depth -= 1
            return [prefix + open_delim + close_delim]
        if compact or not self._has_comments(node):
            parts = []
            if node.kind == MAPPING_NODE:
                for key, value in node.pairs():
                    self._check_kind(value)
                    parts.append(self._key_text(key, FLOW_KEY) + ': ' + self._flow_item_text(value, level, compact))
            else:
                for item in node.content:
                    self._check_kind(item)
                    parts.append(self._flow_item_text(item, level, compact))
            self._nesting_depth -= 1
            return [prefix + open_delim + ', '.join(parts) + close_delim]

        child = level + self.indent
        margin = ' ' * child
        lines = [prefix + open_delim]
        if node.kind == MAPPING_NODE:
            entries = [(key, value) for key, value in node.pairs()]
        else:
            entries = [(None, item) for item in node.content]
        last = len(entries) - 1
        for n, (key, value) in enumerate(entries):
            self._check_kind(value)
            head = key.head_comment if key is not None else value.head_comment
            if head:
                lines.extend(margin + ('#' + x if x else '') for x in head.split('\n'))
            value_lines = self._lines(value, child, FLOW)
            if key is not None:
                value_lines[0] = self._key_text(key, FLOW_KEY) + ': ' + value_lines[0]
            value_lines[0] = margin + value_lines[0]
            value_lines[-1] += ','
            comment = value.line_comment or (key.line_comment if key is not None else '')
            if comment:
                value_lines[-1] += ' #' + comment
            lines.extend(value_lines)
            foot = '\n'.join(x.foot_comment for x in (key, value) if x is not None and x.foot_comment)
            if foot:
                lines.extend(margin + ('#' + x if x else '') for x in foot.split('\n'))
                if n < last:
                    lines.append('')
        lines.append(' ' * level + close_delim)
        self._nesting_depth -= 1
        return lines


    def _flow_item_text(self, node, level, compact):
        if node.kind in (MAPPING_NODE, SEQUENCE_NODE):
            return self._flow_lines(node, level, compact)[0]
        return self._lines(node, level, FLOW)[0]


    def _scalar_lines(self, node, level, context):
        value = node.value
        if node.tag in ('', '!'):
            # Untagged scalars are strings; the chosen style must keep them so
            tag = resolve.BINARY_TAG if resolve.needs_binary(value) else resolve.STR_TAG
        else:
            tag = resolve.short_tag(node.tag)
        in_flow = context in (FLOW, FLOW_KEY)
        block_ok = context in (ROOT, VALUE, ITEM)
        props = ['&' + node.anchor] if node.anchor else []

        if tag == resolve.BINARY_TAG:
            return self._binary_lines(node, level, block_ok, props)

        if value == '' and tag == resolve.NULL_TAG and not node.style & (DOUBLE_QUOTED_STYLE | SINGLE_QUOTED_STYLE):
            if node.style & TAGGED_STYLE:
                props.append(self._tag_text(tag))
            if context in (VALUE, ITEM):
                return [' '.join(props)]
            return [' '.join(props + ['null'])]

        explicit = bool(node.style & TAGGED_STYLE) or tag not in resolve.CORE_TAGS
        style = self._choose_style(node.style, value, tag, in_flow, block_ok, explicit)
        implicit = resolve.resolve_plain(value) if style == PLAIN_STYLE else resolve.STR_TAG
        if explicit or implicit != tag:
            props.append(self._tag_text(tag))
        if style & (LITERAL_STYLE | FOLDED_STYLE):
            lines = self._block_scalar_lines(value, level, style)
            if props:
                lines[0] = ' '.join(props) + ' ' + lines[0]
            return lines
        if style == PLAIN_STYLE:
            text = value
        elif style == SINGLE_QUOTED_STYLE:
            text = "'" + self._escape.escape_singlequoted(value) + "'"
        else:
            text = '"' + self._escape.escape_doublequoted(value) + '"'
        props.append(text)
        return [' '.join(props)]


    def preferred_style(self, value):
        '''
        Style used for a `!!str` scalar holding `value` when no style is
        requested, in the value position of a block mapping.
        '''
        return self._choose_style(0, value, resolve.STR_TAG, False, True)


    def _choose_style(self, requested, value, tag, in_flow, block_ok, explicit=False):
        if requested & (LITERAL_STYLE | FOLDED_STYLE) and block_ok and self._block_scalar_ok(value):
            if requested & FOLDED_STYLE and not any(line[:1] == ' ' for line in value.split('\n')):
                return FOLDED_STYLE
            return LITERAL_STYLE
        if requested & SINGLE_QUOTED_STYLE and self._single_quoted_ok(value):
            return SINGLE_QUOTED_STYLE
        if requested & DOUBLE_QUOTED_STYLE:
            return DOUBLE_QUOTED_STYLE
        if self._plain_ok(value, in_flow):
            # An explicit tag keeps a plain scalar from resolving implicitly
            if explicit or tag != resolve.STR_TAG or resolve.resolve_plain(value) == tag:
                return PLAIN_STYLE
            return DOUBLE_QUOTED_STYLE
        if tag == resolve.STR_TAG and '\n' in value and block_ok and self._block_scalar_ok(value):
            return LITERAL_STYLE
        if self._single_quoted_ok(value):
            return SINGLE_QUOTED_STYLE
        return DOUBLE_QUOTED_STYLE


    def _single_quoted_ok(self, value):
        return '\n' not in value and '\t' not in value and self._escape.is_literal_safe(value)


    def _block_scalar_ok(self, value):
        if not value.strip('\n') or '\t' in value:
            return False
        if not self._escape.is_literal_safe(value):
            return False
        for line in value.split('\n'):
            if line.endswith(' '):
                return False
        return True


    def _plain_ok(self, value, in_flow):
        if not value or value[0] in ' \t' or value[-1] in ' \t':
            return False
        if '\n' in value or '\t' in value or not self._escape.is_literal_safe(value):
            return False
        first = value[0]
        if first in PLAIN_START_INDICATORS:
            return False
        if first in '-?:' and (len(value) == 1 or value[1] == ' '):
            return False
        if ': ' in value or ' #' in value or value.endswith(':'):
            return False
        if in_flow and any(c in FLOW_INDICATORS for c in value):
            return False
        if value.startswith(('---', '...')):
            return False
        return True


    def _block_scalar_lines(self, value, level, style):
        '''
        Header and content lines of a literal or folded scalar.
        '''
        if value.endswith('\n\n'):
            chomping = '+'
        elif value.endswith('\n'):
            chomping = ''
        else:
            chomping = '-'
        body = value[:-1] if value.endswith('\n') else value
        if style == FOLDED_STYLE:
            stripped = body.rstrip('\n')
            # Within folded content, a single line break is read as a space
            body = FOLDABLE_NEWLINES_RE.sub(lambda m: m.group(0) + '\n', stripped) + body[len(stripped):]
        header = '>' if style == FOLDED_STYLE else '|'
        if body[:1] in (' ', '\n'):
            header += str(self.indent)
        header += chomping
        margin = ' ' * (level + self.indent)
        return [header] + [margin + line if line else '' for line in body.split('\n')]


    def _binary_lines(self, node, level, block_ok, props):
        payload = resolve.encode_binary(node.value)
        props.append(self._tag_text(resolve.BINARY_TAG))
        if block_ok and payload and (node.style & LITERAL_STYLE or len(payload) > BINARY_LINE_LENGTH):
            margin = ' ' * (level + self.indent)
            lines = [' '.join(props + ['|'])]
            lines.extend(margin + payload[n:n+BINARY_LINE_LENGTH] for n in range(0, len(payload), BINARY_LINE_LENGTH))
            return lines
        return [' '.join(props + [payload or "''"])]
