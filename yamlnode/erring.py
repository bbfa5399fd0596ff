# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#

# pylint:  disable=C0301, W0622


class YAMLNodeException(Exception):
    '''
    Base yamlnode exception.
    '''
    pass


class DecodingException(YAMLNodeException):
    '''
    Base decoding exception.

    Location information is 1-based.  Errors raised while decoding a stream
    get the index of the failing document in `doc_index`, and the documents
    that were decoded successfully before the failure in `documents`.
    '''
    doc_index = None
    documents = None

    def __init__(self, msg, node=None, line=0, column=0):
        self.msg = msg
        self.node = node
        if node is not None and not line:
            line = node.line
            column = node.column
        self.line = line
        self.column = column

    def fmt_msg_with_traceback(self, msg):
        if self.doc_index is None:
            where = ''
        else:
            where = ' in document {0}'.format(self.doc_index)
        if self.line:
            traceback = 'At line {0}:{1}{2}:'.format(self.line, self.column, where)
        elif where:
            traceback = 'In document {0}:'.format(self.doc_index)
        else:
            return msg
        return '\n  {0}\n    {1}'.format(traceback, msg)

    def __str__(self):
        return self.fmt_msg_with_traceback(self.msg)


class EncodingException(YAMLNodeException):
    '''
    Base encoding exception.
    '''
    pass


class Bug(DecodingException):
    '''
    There is a bug in the program, as opposed to invalid user data.

    This exception is used at the end of a sequence of if/elif/else as a
    fallthrough, so that a future bug produces an informative message with
    location information from the data.
    '''
    pass


class SourceDecodeError(DecodingException):
    '''
    Error during decoding of binary source.
    '''
    def __init__(self, err_msg):
        DecodingException.__init__(self, 'Could not decode binary source:\n    {0}'.format(err_msg))


class SyntaxError(DecodingException):
    '''
    Malformed YAML, as reported by the tokenizer.  The original PyYAML error
    is kept in `yaml_error`.
    '''
    def __init__(self, msg, line=0, column=0, yaml_error=None):
        DecodingException.__init__(self, msg, line=line, column=column)
        self.yaml_error = yaml_error


class UndefinedAnchorError(DecodingException):
    '''
    Alias referring to an anchor that has not been defined.
    '''
    def __init__(self, name, node=None, line=0, column=0):
        DecodingException.__init__(self, 'Unknown anchor "{0}" referenced'.format(name),
                                   node=node, line=line, column=column)
        self.name = name


class DuplicateKeyError(DecodingException):
    '''
    Duplicate mapping key, only raised by strict decoding.
    '''
    def __init__(self, key, node=None, other_node=None):
        if other_node is not None and other_node.line:
            msg = 'Mapping key "{0}" already defined at line {1}'.format(key, other_node.line)
        else:
            msg = 'Mapping key "{0}" already defined'.format(key)
        DecodingException.__init__(self, msg, node=node)
        self.key = key


class UnknownFieldError(DecodingException):
    '''
    Mapping key with no matching field in the target type, only raised by
    strict decoding.
    '''
    def __init__(self, field, target, node=None):
        DecodingException.__init__(self, 'Field "{0}" not found in type {1}'.format(field, target.__name__),
                                   node=node)
        self.field = field
        self.target = target


class TypeMismatchError(DecodingException):
    '''
    A node cannot be decoded into the requested type.
    '''
    def __init__(self, node, target, msg=None):
        if msg is None:
            msg = 'Cannot decode {0} `{1}` into {2}'.format(node.short_tag(), node.indicated_value(),
                                                             getattr(target, '__name__', target))
        DecodingException.__init__(self, msg, node=node)
        self.target = target


class UnknownNodeKindError(YAMLNodeException):
    '''
    Attempt to encode or decode a node whose kind was never set.
    '''
    def __init__(self, node, action='encode'):
        self.node = node
        self.action = action

    def __str__(self):
        return 'cannot {0} node with unknown kind {1}'.format(self.action, self.node.kind)
