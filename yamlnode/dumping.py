# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#


from .encoding import YAMLNodeEncoder


_DEFAULT_ENCODER = YAMLNodeEncoder()


def _encoder(cls, kwargs):
    if cls is None:
        if not kwargs:
            return _DEFAULT_ENCODER
        return YAMLNodeEncoder(**kwargs)
    return cls(**kwargs)


def dump(node, fp, cls=None, **kwargs):
    '''
    Dump a Node to a file-like object.
    '''
    fp.write(_encoder(cls, kwargs).encode(node))


def dumps(node, cls=None, **kwargs):
    '''
    Dump a Node to a Unicode string.
    '''
    return _encoder(cls, kwargs).encode(node)


def dump_all(nodes, fp, cls=None, **kwargs):
    '''
    Dump a sequence of Nodes to a file-like object, as a multi-document
    stream.
    '''
    fp.write(_encoder(cls, kwargs).encode_all(nodes))


def dumps_all(nodes, cls=None, **kwargs):
    '''
    Dump a sequence of Nodes to a Unicode string, as a multi-document stream.
    '''
    return _encoder(cls, kwargs).encode_all(nodes)
