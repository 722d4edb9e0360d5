"""Key mapping and nested reconstruction utilities."""

from .mapper import KeyMapper
from .nested import KeyCollisionError, build_tree


__all__ = ["KeyCollisionError", "KeyMapper", "build_tree"]
