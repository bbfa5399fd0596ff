# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#


# pylint:  disable=C0103, C0301


import re

from . import tooling


# Code points that may never appear literally in YAML output:  C0 and C1
# controls other than tab and line feed, surrogates, and non-characters.  NEL,
# the Unicode line and paragraph separators, and the BOM are allowed by the
# YAML grammar, but are line breaks (or invisible), so they are escaped too.
ALWAYS_ESCAPED_UNICODE = r'[\x00-\x08\x0B\x0C\x0D\x0E-\x1F\x7F-\x9F\uD800-\uDFFF\uFEFF\uFFFE\uFFFF\u2028\u2029]'
ALWAYS_ESCAPED_ASCII = r'[^\x09\x0A\x20-\x7E]'

SHORT_BACKSLASH_ESCAPES = {'\\': '\\\\',
                           '"': '\\"',
                           '\x00': '\\0',
                           '\x07': '\\a',
                           '\x08': '\\b',
                           '\t': '\\t',
                           '\n': '\\n',
                           '\x0B': '\\v',
                           '\x0C': '\\f',
                           '\r': '\\r',
                           '\x1B': '\\e',
                           '\x85': '\\N',
                           '\xA0': '\\_',
                           '\u2028': '\\L',
                           '\u2029': '\\P'}




class Escape(object):
    '''
    Replace code points in Unicode strings with their escaped equivalents when
    they cannot be represented literally in a double-quoted scalar, and check
    whether text may appear literally in other scalar styles.
    '''
    def __init__(self, only_ascii=False):
        if not isinstance(only_ascii, bool):
            raise TypeError('only_ascii must be a boolean')
        self.only_ascii = only_ascii

        # Dict for escaping code points that may not appear literally.  Code
        # points are detected with a regex, and their escaped replacements
        # are then looked up in the dict.  The dict serves to memoize the
        # escape function.
        self._escape_unicode_dict = tooling.keydefaultdict(self._escape_unicode_char_xuU)
        self._escape_unicode_dict.update(SHORT_BACKSLASH_ESCAPES)

        always_escaped = ALWAYS_ESCAPED_ASCII if only_ascii else ALWAYS_ESCAPED_UNICODE
        self.invalid_literal_unicode_re = re.compile(always_escaped)
        # Tabs and newlines are literal in block scalars, but not in
        # double-quoted scalars, where they would be folded
        self._invalid_literal_or_backslash_doublequote_whitespace_unicode_re = re.compile(r'\\|"|\t|\n|{0}'.format(always_escaped))


    @staticmethod
    def _escape_unicode_char_xuU(c, ord=ord):
        '''
        Escape a Unicode code point using `\\xHH` (8-bit), `\\uHHHH` (16-bit),
        or `\\UHHHHHHHH` (32-bit) notation.
        '''
        n = ord(c)
        if n < 256:
            return '\\x{0:02x}'.format(n)
        elif n < 65536:
            return '\\u{0:04x}'.format(n)
        return '\\U{0:08x}'.format(n)


    def escape_doublequoted(self, s):
        '''
        Escape a string for use within double quotes.
        '''
        d = self._escape_unicode_dict
        return self._invalid_literal_or_backslash_doublequote_whitespace_unicode_re.sub(lambda m: d[m.group(0)], s)


    @staticmethod
    def escape_singlequoted(s):
        '''
        Escape a string for use within single quotes.  Only the quote itself
        needs escaping, by doubling.
        '''
        return s.replace("'", "''")


    def is_literal_safe(self, s):
        '''
        Whether a string can appear literally (outside double quotes).
        '''
        return self.invalid_literal_unicode_re.search(s) is None
