# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#


from .decoding import YAMLNodeDecoder


_DEFAULT_DECODER = YAMLNodeDecoder()


def _decoder(cls, kwargs):
    if cls is None:
        if not kwargs:
            return _DEFAULT_DECODER
        return YAMLNodeDecoder(**kwargs)
    return cls(**kwargs)


def load(fp, cls=None, **kwargs):
    '''
    Load the first document from a file-like object, as a document Node.
    '''
    # The scanner needs the whole source for line numbering and comment
    # attachment, so the file is read at once
    return _decoder(cls, kwargs).decode(fp.read())


def loads(s, cls=None, **kwargs):
    '''
    Load the first document from a Unicode or byte string, as a document
    Node.
    '''
    return _decoder(cls, kwargs).decode(s)


def load_all(fp, cls=None, **kwargs):
    '''
    Load all documents from a file-like object, as a list of document Nodes.
    '''
    return _decoder(cls, kwargs).decode_all(fp.read())


def loads_all(s, cls=None, **kwargs):
    '''
    Load all documents from a Unicode or byte string, as a list of document
    Nodes.
    '''
    return _decoder(cls, kwargs).decode_all(s)
