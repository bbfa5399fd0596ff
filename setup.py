# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#


import sys
import os


if sys.version_info < (3, 7):
    sys.exit('yamlnode requires Python 3.7+')

from setuptools import setup


# Extract the version from version.py
fname = os.path.join(os.path.dirname(__file__), 'yamlnode', 'version.py')
with open(fname, 'r', encoding='utf8') as f:
    t = ''.join([line for line in f.readlines() if line.startswith('__version__')])
    if not t:
        raise RuntimeError('Failed to extract version from "version.py"')
    c = compile(t, 'yamlnode/version.py', 'exec')
    exec(c)
version = __version__


setup(name = 'yamlnode',
      version = version,
      py_modules = [],
      packages = ['yamlnode'],
      description = 'Comment-preserving YAML document model, with a YAML/JSON bridge',
      long_description = 'Decode YAML into Node trees that keep comments, anchors, styles, '
                         'and tags, encode them back, and convert between YAML, JSON, and '
                         'Python data.',
      author = 'Geoffrey M. Poore',
      author_email = 'gpoore@gmail.com',
      license = 'BSD',
      keywords = ['yaml', 'json', 'comments', 'roundtrip', 'serialization'],
      python_requires = '>=3.7',
      install_requires = ['PyYAML>=5.1'],
      extras_require = {'test': ['pytest']},
      # https://pypi.python.org/pypi?:action=list_classifiers
      classifiers = [
          'Development Status :: 4 - Beta',
          'Intended Audience :: Developers',
          'License :: OSI Approved :: BSD License',
          'Operating System :: OS Independent',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
          'Topic :: Text Processing :: Markup',
          'Topic :: Utilities',
      ]
)
