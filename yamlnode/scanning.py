# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#

'''
Tokenizer front end.  PyYAML's pure-Python scanner and parser produce the
event stream; the scanner is extended to keep the comments and block sequence
entry indicators that it would otherwise throw away.
'''


import collections
import re

import yaml
from yaml.scanner import ScannerError


Comment = collections.namedtuple('Comment', ['line', 'column', 'text'])

LINE_BREAK_CHARS = '\0\r\n\x85\u2028\u2029'

# Same line breaks that the PyYAML reader counts
LINE_BREAK_RE = re.compile('\r\n|[\r\n\x85\u2028\u2029]')


def split_lines(text):
    '''
    Split source into lines, using the same line numbering as the scanner.
    '''
    return LINE_BREAK_RE.split(text)


class CommentLoader(yaml.SafeLoader):
    '''
    `SafeLoader` that records comments and `-` block entry positions.

    Positions are 0-based (line, column) pairs, as in PyYAML marks.  Comment
    text includes the leading `#`.
    '''
    def __init__(self, stream):
        yaml.SafeLoader.__init__(self, stream)
        self.comments = []
        self.dash_marks = []

    def _scan_comment(self, line_break_chars=LINE_BREAK_CHARS):
        line = self.line
        column = self.column
        length = 0
        while self.peek(length) not in line_break_chars:
            length += 1
        self.comments.append(Comment(line, column, self.prefix(length)))
        self.forward(length)

    def scan_to_next_token(self):
        if self.index == 0 and self.peek() == '\uFEFF':
            self.forward()
        found = False
        while not found:
            while self.peek() == ' ':
                self.forward()
            if self.peek() == '#':
                self._scan_comment()
            if self.scan_line_break():
                if not self.flow_level:
                    self.allow_simple_key = True
            else:
                found = True

    def scan_block_scalar_ignored_line(self, start_mark):
        while self.peek() == ' ':
            self.forward()
        if self.peek() == '#':
            self._scan_comment()
        ch = self.peek()
        if ch not in LINE_BREAK_CHARS:
            raise ScannerError('while scanning a block scalar', start_mark,
                               'expected a comment or a line break, but found {0!r}'.format(ch),
                               self.get_mark())
        self.scan_line_break()

    def fetch_block_entry(self):
        self.dash_marks.append((self.line, self.column))
        yaml.SafeLoader.fetch_block_entry(self)
