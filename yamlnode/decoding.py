# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#

# pylint:  disable=C0301


import logging

import yaml

from . import erring
from . import resolve
from . import scanning
from . import tooling
from .comments import CommentAttacher
from .nodes import (Node, DOCUMENT_NODE, SEQUENCE_NODE, MAPPING_NODE,
                    SCALAR_NODE, ALIAS_NODE,
                    TAGGED_STYLE, DOUBLE_QUOTED_STYLE, SINGLE_QUOTED_STYLE,
                    LITERAL_STYLE, FOLDED_STYLE, FLOW_STYLE)


logger = logging.getLogger(__name__)


MAX_NESTING_DEPTH = 100

SCALAR_STYLES = {None: 0,
                 '': 0,
                 '"': DOUBLE_QUOTED_STYLE,
                 "'": SINGLE_QUOTED_STYLE,
                 '|': LITERAL_STYLE,
                 '>': FOLDED_STYLE}




class State(object):
    '''
    Keep track of everything that belongs to the decoding of a single
    document:  the anchor table, the source spans of nodes, and the current
    nesting depth.

    A new `State` is created for each document, so anchors never leak from one
    document into the next, and no anchor table is ever shared between
    decoding calls.
    '''
    __slots__ = ['doc_index', 'anchors', 'spans', 'nesting_depth']

    def __init__(self, doc_index=0):
        self.doc_index = doc_index
        self.anchors = {}
        self.spans = {}
        self.nesting_depth = 0




class YAMLNodeDecoder(object):
    '''
    Decode YAML in a string into Node trees.

    A `Decoder` instance is intended to be static once created.  All mutable
    state for a document lives in a `State` instance created for it, so a
    single decoder may be used for multiple data sources, including
    concurrently.
    '''
    __slots__ = ['max_nesting_depth']

    def __init__(self, *args, **kwargs):
        if args:
            raise TypeError('Explicit keyword arguments are required')
        self.max_nesting_depth = tooling.pop_int_option(kwargs, 'max_nesting_depth', MAX_NESTING_DEPTH)
        tooling.check_no_kwargs(kwargs)


    @staticmethod
    def _as_unicode_string(unicode_string_or_bytes):
        '''
        Take an object that may be a Unicode string or bytes, and return
        a Unicode string without a leading BOM.
        '''
        if isinstance(unicode_string_or_bytes, str):
            unicode_string = unicode_string_or_bytes
        else:
            try:
                unicode_string = bytes(unicode_string_or_bytes).decode('utf8')
            except Exception as e:
                raise erring.SourceDecodeError(e)
        if unicode_string[:1] == '\uFEFF':
            unicode_string = unicode_string[1:]
        return unicode_string


    def decode(self, unicode_string_or_bytes):
        '''
        Decode the first document of a string or byte string into a document
        Node.  A source without any document gives a document Node without
        content.
        '''
        documents = self._decode(unicode_string_or_bytes, first_only=True)
        if documents:
            return documents[0]
        return Node(DOCUMENT_NODE)


    def decode_all(self, unicode_string_or_bytes):
        '''
        Decode every document of a stream into a list of document Nodes.
        '''
        return self._decode(unicode_string_or_bytes)


    def _decode(self, unicode_string_or_bytes, first_only=False):
        source = self._as_unicode_string(unicode_string_or_bytes)
        lines = scanning.split_lines(source)
        loader = scanning.CommentLoader(source)
        documents = []
        try:
            self._parse_stream(loader, lines, documents, first_only)
        except yaml.MarkedYAMLError as e:
            err = self._syntax_error(e)
        except yaml.YAMLError as e:
            err = erring.SyntaxError(str(e), yaml_error=e)
        except erring.DecodingException as e:
            err = e
        else:
            return documents
        finally:
            loader.dispose()
        err.doc_index = len(documents)
        err.documents = documents
        raise err


    @staticmethod
    def _syntax_error(e):
        mark = e.problem_mark or e.context_mark
        msg = ', '.join(x for x in (e.context, e.problem) if x) or str(e)
        if mark is None:
            return erring.SyntaxError(msg, yaml_error=e)
        return erring.SyntaxError(msg, line=mark.line+1, column=mark.column+1, yaml_error=e)


    def _parse_stream(self, loader, lines, documents, first_only):
        loader.get_event()
        first_line = 0
        comment_index = 0
        comments = loader.comments
        while not loader.check_event(yaml.StreamEndEvent):
            state = State(len(documents))
            doc = self._parse_document(loader, state)
            # Comments before the start of the next document belong to this
            # one.  Peeking at the next document has scanned all of them.
            if loader.check_event(yaml.StreamEndEvent):
                stop_line = len(lines)
            else:
                stop_line = loader.peek_event().start_mark.line
            doc_comments = []
            while comment_index < len(comments) and comments[comment_index].line < stop_line:
                doc_comments.append(comments[comment_index])
                comment_index += 1
            CommentAttacher(doc, state.spans, loader.dash_marks, lines,
                            first_line, stop_line).attach(doc_comments)
            documents.append(doc)
            logger.debug('Decoded document %d (lines %d-%d)', state.doc_index, first_line+1, stop_line)
            first_line = stop_line
            if first_only:
                return
        if not documents and comments:
            doc = Node(DOCUMENT_NODE)
            CommentAttacher(doc, {}, loader.dash_marks, lines, 0, len(lines)).attach(comments)
            documents.append(doc)


    def _parse_document(self, loader, state):
        '''
        Build the tree of one document from events, with an explicit stack of
        the collections that are still open.
        '''
        loader.get_event()
        doc = Node(DOCUMENT_NODE)
        stack = []
        while not loader.check_event(yaml.DocumentEndEvent):
            event = loader.get_event()
            if isinstance(event, yaml.CollectionEndEvent):
                node = stack.pop()
                span = state.spans[id(node)]
                span[2] = event.end_mark.line
                span[3] = event.end_mark.column
                state.nesting_depth -= 1
                continue
            node = self._node_from_event(event, state)
            if stack:
                stack[-1].content.append(node)
            else:
                doc.content.append(node)
                doc.line = node.line
                doc.column = node.column
            if isinstance(event, yaml.CollectionStartEvent):
                state.nesting_depth += 1
                if state.nesting_depth > self.max_nesting_depth:
                    raise erring.DecodingException('Max nesting depth {0} exceeded'.format(self.max_nesting_depth), node=node)
                stack.append(node)
        loader.get_event()
        return doc


    def _node_from_event(self, event, state):
        start_mark = event.start_mark
        end_mark = event.end_mark
        line = start_mark.line + 1
        column = start_mark.column + 1
        if isinstance(event, yaml.ScalarEvent):
            node = self._scalar_node(event, line, column)
        elif isinstance(event, yaml.AliasEvent):
            target = state.anchors.get(event.anchor)
            if target is None:
                raise erring.UndefinedAnchorError(event.anchor, line=line, column=column)
            node = Node(ALIAS_NODE, value=event.anchor, alias=target, line=line, column=column)
        elif isinstance(event, yaml.MappingStartEvent):
            node = self._collection_node(MAPPING_NODE, resolve.MAP_TAG, event, line, column)
        elif isinstance(event, yaml.SequenceStartEvent):
            node = self._collection_node(SEQUENCE_NODE, resolve.SEQ_TAG, event, line, column)
        else:
            raise erring.Bug('Unexpected event {0}'.format(type(event).__name__), line=line, column=column)
        if node.kind != ALIAS_NODE and event.anchor is not None:
            if event.anchor in state.anchors:
                logger.debug('Anchor "%s" redefined at line %d', event.anchor, line)
            # Registered before any children, so aliases inside the node
            # itself resolve to it
            node.anchor = event.anchor
            state.anchors[event.anchor] = node
        state.spans[id(node)] = [start_mark.line, start_mark.column, end_mark.line, end_mark.column]
        return node


    @staticmethod
    def _scalar_node(event, line, column):
        style = SCALAR_STYLES[event.style]
        if event.tag is not None:
            style |= TAGGED_STYLE
        value = event.value
        tag = resolve.resolve(event.tag, value, plain=not event.style)
        if tag == resolve.BINARY_TAG and event.tag is not None:
            try:
                value = resolve.decode_binary(value)
            except ValueError as e:
                raise erring.DecodingException(str(e), line=line, column=column)
        return Node(SCALAR_NODE, value=value, tag=tag, style=style, line=line, column=column)


    @staticmethod
    def _collection_node(kind, default_tag, event, line, column):
        style = FLOW_STYLE if event.flow_style else 0
        if event.tag is not None:
            style |= TAGGED_STYLE
        if event.tag is None or event.tag == '!':
            tag = default_tag
        else:
            tag = resolve.short_tag(event.tag)
        return Node(kind, tag=tag, style=style, line=line, column=column)
