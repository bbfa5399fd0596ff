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
Comment attachment.

Comments are attached after the node tree of a document has been built, using
the source positions of nodes and comments together with the pattern of blank
lines around them.

A comment that follows a token on the same line is a line comment of the node
that ends there.  All other comments are grouped into blocks of consecutive
lines that start in the same column.  A block directly above a node is the
node's head comment.  A block that trails a node is the foot comment of the
deepest preceding node that is not indented more than the comment.  Blocks
before the first node or after the last node of a document, that do not bind
to a node, belong to the document itself.
'''


import bisect
import logging

from .nodes import (MAPPING_NODE, SEQUENCE_NODE, SCALAR_NODE, ALIAS_NODE,
                    FLOW_STYLE, BLOCK_SCALAR_STYLES)


logger = logging.getLogger(__name__)


BLANK = 0
COMMENT = 1
CONTENT = 2


def comment_text(raw):
    '''
    Strip the `#` marker from raw comment text.  Any space after it is kept,
    so that `#text` and `# text` encode back as written.
    '''
    return raw[1:]


class Entry(object):
    '''
    A place where a comment can bind.  Mapping pairs are entered under their
    key, sequence items under their item (at the `-` indicator in block
    sequences), and the root under itself.  Mapping values get entries that
    can only receive head comments.
    '''
    __slots__ = ['node', 'line', 'column', 'end_line', 'parent', 'depth', 'is_value']

    def __init__(self, node, line, column, end_line, parent, is_value):
        self.node = node
        self.line = line
        self.column = column
        self.end_line = end_line
        self.parent = parent
        self.depth = 0 if parent is None else parent.depth + 1
        self.is_value = is_value


class CommentAttacher(object):
    '''
    Attach the comments of one document.  `spans` maps node ids to 0-based
    (start_line, start_column, end_line, end_column), `dash_marks` is the
    sorted list of block sequence `-` positions, and `first_line` and
    `stop_line` delimit the source lines that belong to the document.
    '''
    def __init__(self, doc, spans, dash_marks, lines, first_line, stop_line):
        self.doc = doc
        self.root = doc.content[0] if doc.content else None
        self.spans = spans
        self.dash_marks = dash_marks
        self.lines = lines
        self.first_line = first_line
        self.stop_line = min(stop_line, len(lines))
        self._end_lines = {}
        self._entries = []
        self._entry_at = {}
        self._assigned = {}

    def attach(self, comments):
        if not comments:
            return
        standalone = self._attach_line_comments(comments)
        if not standalone:
            return
        self._classify_lines(standalone)
        blocks = self._group_blocks(standalone)
        if self.root is None:
            for block in blocks:
                self._assign(self.doc, 'head_comment', block)
        else:
            start_line, start_column = self.spans[id(self.root)][:2]
            self._root_line = start_line
            self._add_entries(self.root, start_line, start_column, None, False)
            for block in blocks:
                self._place_block(block)
        self._finalize()
        logger.debug('Attached %d comments in %d blocks', len(comments), len(blocks))

    def _end_line(self, node):
        end_line = self._end_lines.get(id(node))
        if end_line is not None:
            return end_line
        if (node.kind in (MAPPING_NODE, SEQUENCE_NODE) and not node.style & FLOW_STYLE and
                node.content):
            end_line = self._end_line(node.content[-1])
        else:
            start_line, _, end_line, end_column = self.spans[id(node)]
            if node.kind == SCALAR_NODE and node.style & BLOCK_SCALAR_STYLES:
                # Block scalars end after their trailing line breaks
                if end_column == 0 and end_line > start_line:
                    end_line -= 1
                while end_line > start_line and not self.lines[end_line].strip():
                    end_line -= 1
        self._end_lines[id(node)] = end_line
        return end_line

    def _walk(self, node):
        # Alias nodes are leaves, so the tree of a decoded document is acyclic
        stack = [node]
        while stack:
            n = stack.pop()
            yield n
            stack.extend(reversed(n.content))

    def _attach_line_comments(self, comments):
        block_scalar_at = {}
        ends_on_line = {}
        if self.root is not None:
            for node in self._walk(self.root):
                kind = node.kind
                if kind == SCALAR_NODE and node.style & BLOCK_SCALAR_STYLES:
                    block_scalar_at[self.spans[id(node)][0]] = node
                elif kind in (SCALAR_NODE, ALIAS_NODE) or node.style & FLOW_STYLE:
                    start_line, start_column, end_line, end_column = self.spans[id(node)]
                    # An empty value has no text of its own, so anything else
                    # ending on the line (its key, a `-` item) takes the comment
                    empty = (start_line, start_column) == (end_line, end_column)
                    ends_on_line.setdefault(end_line, []).append((not empty, end_column, node))
        standalone = []
        for comment in comments:
            if self.lines[comment.line][:comment.column].strip():
                target = block_scalar_at.get(comment.line)
                if target is None:
                    best = None
                    for has_text, end_column, node in ends_on_line.get(comment.line, ()):
                        if end_column <= comment.column and (best is None or (has_text, end_column) > best):
                            best = (has_text, end_column)
                            target = node
                if target is not None:
                    text = comment_text(comment.text)
                    if target.line_comment:
                        target.line_comment += '\n' + text
                    else:
                        target.line_comment = text
                    continue
            standalone.append(comment)
        return standalone

    def _classify_lines(self, standalone):
        lines = self.lines
        classes = {}
        for n in range(self.first_line, self.stop_line):
            classes[n] = BLANK if not lines[n].strip() else CONTENT
        for comment in standalone:
            line = lines[comment.line]
            if len(line) - len(line.lstrip()) == comment.column:
                classes[comment.line] = COMMENT
        self._classes = classes

    @staticmethod
    def _group_blocks(standalone):
        blocks = []
        block = None
        for comment in standalone:
            if (block is not None and comment.line == block[-1].line + 1 and
                    comment.column == block[-1].column):
                block.append(comment)
            else:
                block = [comment]
                blocks.append(block)
        return blocks

    def _add_entry(self, node, line, column, end_line, parent, is_value):
        entry = Entry(node, line, column, end_line, parent, is_value)
        self._entries.append(entry)
        # Later (deeper) entries take precedence at a shared position
        self._entry_at[(line, column)] = entry
        return entry

    def _add_entries(self, node, line, column, parent, is_value):
        entry = self._add_entry(node, line, column, self._end_line(node), parent, is_value)
        if node.kind == MAPPING_NODE:
            for key, value in node.pairs():
                key_line, key_column = self.spans[id(key)][:2]
                pair = self._add_entry(key, key_line, key_column, self._end_line(value), entry, False)
                value_line, value_column = self.spans[id(value)][:2]
                self._add_entries(value, value_line, value_column, pair, True)
        elif node.kind == SEQUENCE_NODE:
            flow = node.style & FLOW_STYLE
            for item in node.content:
                item_line, item_column = self.spans[id(item)][:2]
                if not flow:
                    item_line, item_column = self._dash_before(item_line, item_column)
                self._add_entries(item, item_line, item_column, entry, False)

    def _dash_before(self, line, column):
        n = bisect.bisect_left(self.dash_marks, (line, column))
        if n == 0:
            return line, column
        return self.dash_marks[n-1]

    def _next_content_line(self, after):
        classes = self._classes
        for n in range(after + 1, self.stop_line):
            if classes[n] == CONTENT:
                return n
        return None

    def _prev_content_line(self, at):
        classes = self._classes
        for n in range(at, self.first_line - 1, -1):
            if classes[n] == CONTENT:
                return n
        return None

    def _entry_containing(self, line):
        found = None
        for entry in self._entries:
            if (not entry.is_value and entry.line <= line <= entry.end_line and
                    (found is None or entry.depth >= found.depth)):
                found = entry
        return found

    def _preceding_entry(self, first_line, column, next_entry, prev_line):
        '''
        Deepest entry above a comment block that can own it as a foot
        comment.  Entries that enclose the next entry, or that continue
        after the block (open flow collections), are not candidates.
        '''
        if prev_line is None or prev_line < self._root_line:
            return None
        entry = self._entry_containing(prev_line)
        enclosing = set()
        e = next_entry
        while e is not None:
            enclosing.add(id(e))
            e = e.parent
        chain = []
        inside_flow = False
        while entry is not None:
            if not entry.is_value and id(entry) not in enclosing:
                if entry.end_line >= first_line:
                    inside_flow = True
                else:
                    chain.append(entry)
            entry = entry.parent
        for entry in chain:
            if entry.column <= column:
                return entry
        if inside_flow and chain:
            return chain[-1]
        return None

    def _place_block(self, block):
        first_line = block[0].line
        last_line = block[-1].line
        column = block[0].column
        classes = self._classes

        next_line = self._next_content_line(last_line)
        next_entry = None
        if next_line is not None:
            line = self.lines[next_line]
            next_entry = self._entry_at.get((next_line, len(line) - len(line.lstrip())))
        prev_line = self._prev_content_line(first_line)
        prev_entry = self._preceding_entry(first_line, column, next_entry, prev_line)
        follows_directly = (classes[first_line] == CONTENT or
                            (first_line > self.first_line and classes[first_line-1] != BLANK))

        if (next_entry is not None and next_line == last_line + 1 and
                (prev_entry is None or column <= next_entry.column)):
            self._assign(next_entry.node, 'head_comment', block, next_entry.line)
        elif prev_entry is not None and follows_directly:
            self._assign(prev_entry.node, 'foot_comment', block)
        elif next_entry is not None and prev_entry is not None:
            self._assign(prev_entry.node, 'foot_comment', block)
        elif next_entry is not None:
            if prev_line is None or prev_line < self._root_line:
                self._assign(self.doc, 'head_comment', block)
            else:
                self._assign(next_entry.node, 'head_comment', block, next_entry.line)
        elif prev_entry is not None and next_line is not None:
            self._assign(prev_entry.node, 'foot_comment', block)
        elif prev_line is None or prev_line < self._root_line:
            self._assign(self.doc, 'head_comment', block)
        else:
            self._assign(self.doc, 'foot_comment', block)

    def _assign(self, node, field, block, before_line=None):
        key = (id(node), field)
        assigned = self._assigned.get(key)
        if assigned is None:
            assigned = self._assigned[key] = [node, field, [], None]
        assigned[2].append(block)
        if node is not self.doc:
            assigned[3] = before_line

    def _blank_lines_between(self, after, before):
        classes = self._classes
        return sum(1 for n in range(after + 1, before) if classes[n] == BLANK)

    def _finalize(self):
        for node, field, blocks, before_line in self._assigned.values():
            parts = []
            last_line = None
            for block in blocks:
                if last_line is not None:
                    parts.extend([''] * self._blank_lines_between(last_line, block[0].line))
                parts.extend(comment_text(c.text) for c in block)
                last_line = block[-1].line
            if field == 'head_comment' and before_line is not None:
                # Blank lines between a head comment and its node are kept
                parts.extend([''] * self._blank_lines_between(last_line, before_line))
            setattr(node, field, '\n'.join(parts))
