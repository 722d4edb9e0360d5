"""kv-tree - nested sub-tree lookups over flat configuration stores"""

from ._version import version as __version__
from .decoding import DecoderConfig, add_decode_hook, decode, decode_hook, error_unused, strict_input
from .key_mapping import KeyCollisionError, KeyMapper, build_tree
from .stores import FlatStore, LayeredStore, Source
from .subtree import TreeReconstructor, get_key_delimiter, get_string_map, key_delimiter, sub, unmarshal_key


__all__ = [
    "DecoderConfig",
    "FlatStore",
    "KeyCollisionError",
    "KeyMapper",
    "LayeredStore",
    "Source",
    "TreeReconstructor",
    "__version__",
    "add_decode_hook",
    "build_tree",
    "decode",
    "decode_hook",
    "error_unused",
    "get_key_delimiter",
    "get_string_map",
    "key_delimiter",
    "strict_input",
    "sub",
    "unmarshal_key",
]
