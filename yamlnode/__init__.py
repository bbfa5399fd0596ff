# -*- coding: utf-8 -*-
#
# Copyright (c) 2016-2017, Geoffrey M. Poore
# All rights reserved.
#
# Licensed under the BSD 3-Clause License:
# http://opensource.org/licenses/BSD-3-Clause
#


from .version import __version__, __version_info__


from .loading import load, loads, load_all, loads_all
from .dumping import dump, dumps, dump_all, dumps_all
from .bridge import (unmarshal, unmarshal_strict, marshal, marshal_strict,
                     yaml_to_json, yaml_to_json_strict,
                     json_to_yaml, json_to_yaml_strict,
                     convert_to_string_keys)
from .nodes import (Node, deep_copy, walk, nodes_equal,
                    DOCUMENT_NODE, SEQUENCE_NODE, MAPPING_NODE, SCALAR_NODE,
                    ALIAS_NODE,
                    TAGGED_STYLE, DOUBLE_QUOTED_STYLE, SINGLE_QUOTED_STYLE,
                    LITERAL_STYLE, FOLDED_STYLE, FLOW_STYLE)
from .decoding import YAMLNodeDecoder
from .encoding import YAMLNodeEncoder
