"""Nested structure reconstruction from flattened key paths."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Iterable


class KeyCollisionError(ValueError):
    """A path segment is required to be both a leaf and a nested mapping."""

    def __init__(self, path: tuple[str, ...], sep: str = ".") -> None:
        self.path = path
        msg = f"key path collides with another key: {sep.join(path)}"
        super().__init__(msg)


def build_tree(items: Iterable[tuple[tuple[str, ...], Any]], sep: str = ".") -> dict[str, Any]:
    """Build a nested mapping from path/value pairs.

    Intermediate mappings are created on first use and looked up by identity
    afterwards, so siblings accumulate regardless of item order. A path that
    ends where another path continues, or a path given twice, raises
    ``KeyCollisionError`` no matter which item arrives first.
    """
    tree: dict[str, Any] = {}
    nodes = {id(tree)}

    for path, value in items:
        if not path:
            msg = "key path must not be empty"
            raise ValueError(msg)

        current = tree
        for depth, segment in enumerate(path[:-1], start=1):
            if segment not in current:
                child: dict[str, Any] = {}
                nodes.add(id(child))
                current[segment] = child
            elif id(current[segment]) not in nodes:
                raise KeyCollisionError(path[:depth], sep)
            current = current[segment]

        last = path[-1]
        if last in current:
            raise KeyCollisionError(path, sep)
        current[last] = value

    return tree
