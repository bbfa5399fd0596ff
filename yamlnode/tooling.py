# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#


import collections


class keydefaultdict(collections.defaultdict):
    '''
    Default dict that passes missing keys to the factory function, rather than
    calling the factory function with no arguments.
    '''
    def __missing__(self, k):
        if self.default_factory is None:
            raise KeyError(k)
        value = self[k] = self.default_factory(k)
        return value


def pop_int_option(kwargs, name, default, minimum=0, maximum=None):
    '''
    Pop an integer keyword option, checking its type and range.
    '''
    value = kwargs.pop(name, default)
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError('{0} must be an integer'.format(name))
    if maximum is None:
        if value < minimum:
            raise ValueError('{0} must be >= {1}'.format(name, minimum))
    elif not minimum <= value <= maximum:
        raise ValueError('{0} must be between {1} and {2}'.format(name, minimum, maximum))
    return value


def pop_bool_option(kwargs, name, default):
    '''
    Pop a boolean keyword option.
    '''
    value = kwargs.pop(name, default)
    if not isinstance(value, bool):
        raise TypeError('{0} must be a boolean'.format(name))
    return value


def check_no_kwargs(kwargs):
    '''
    Reject keyword arguments that remain after all options have been popped.
    '''
    if kwargs:
        raise TypeError('Unexpected keyword argument(s) {0}'.format(', '.join('"{0}"'.format(k) for k in kwargs)))
