"""Hierarchical lookups over flat configuration stores.

A :class:`~kv_tree.stores.FlatStore` only exposes leaf keys such as
``log.max.size``. The functions here rebuild the nested sub-tree below a key
prefix, project it into a new store, or decode it into a structured type.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from kv_tree.decoding import decode, new_decoder_config
from kv_tree.key_mapping import KeyMapper, build_tree
from kv_tree.stores import LayeredStore


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from kv_tree.decoding import DecoderOption
    from kv_tree.stores import FlatStore


logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Process-wide delimiter; set it before reconstructing from several threads.
_delimiter = "."


def key_delimiter(delimiter: str) -> None:
    """Set the process-wide delimiter used by reconstructors without their own."""
    global _delimiter  # noqa: PLW0603
    if not delimiter:
        msg = "delimiter must not be empty"
        raise ValueError(msg)
    _delimiter = delimiter


def get_key_delimiter() -> str:
    """Return the process-wide delimiter."""
    return _delimiter


class TreeReconstructor:
    """Rebuild nested sub-trees from the flat keys of a store.

    Parameters
    ----------
    delimiter
        Segment separator for prefix matching and splitting. When omitted,
        the process-wide value from :func:`key_delimiter` is read on every call.
    """

    def __init__(self, delimiter: str | None = None) -> None:
        super().__init__()
        if delimiter is not None and not delimiter:
            msg = "delimiter must not be empty"
            raise ValueError(msg)
        self._delimiter = delimiter

    @property
    def delimiter(self) -> str:
        return self._delimiter if self._delimiter is not None else _delimiter

    def _matching_paths(self, store: FlatStore, mapper: KeyMapper) -> Iterator[tuple[tuple[str, ...], Any]]:
        for flat_key in store.all_keys():
            if mapper.matches(flat_key):
                yield mapper.relative_parts(flat_key), copy.deepcopy(store.get(flat_key))

    def get_string_map(self, store: FlatStore, key: str) -> dict[str, Any] | None:
        """Return the nested mapping below key, or None when no flat key lies below it.

        Leaves are copies of the store's values. A value bound directly at key
        is not part of the result. Raises ``KeyCollisionError`` when one
        segment is both a leaf and a parent.
        """
        mapper = KeyMapper(root=key, sep=self.delimiter)
        tree = build_tree(self._matching_paths(store, mapper), sep=self.delimiter)
        if not tree:
            logger.debug("no keys found below %r", key)
            return None
        logger.debug("rebuilt %d top-level entries below %r", len(tree), key)
        return tree

    def sub(
        self,
        store: FlatStore,
        key: str,
        factory: Callable[[], FlatStore] | None = None,
    ) -> FlatStore | None:
        """Return a new store holding a snapshot of the sub-tree below key.

        The store comes from ``factory`` (default: an empty ``LayeredStore``
        sharing this reconstructor's delimiter) and is loaded with
        ``merge_config_map``. Returns None when nothing lies below key.
        """
        data = self.get_string_map(store, key)
        if data is None:
            return None

        substore = factory() if factory is not None else LayeredStore(key_delimiter=self.delimiter)
        substore.merge_config_map(data)
        return substore

    def unmarshal_key(self, store: FlatStore, key: str, target: type[_T], *options: DecoderOption) -> _T:
        """Decode the sub-tree below key into an instance of target.

        A missing sub-tree decodes as an empty mapping, which yields target's
        defaults. Options are applied after the built-in decoder settings.
        """
        data = self.get_string_map(store, key) or {}
        return decode(data, target, new_decoder_config(*options))


def get_string_map(store: FlatStore, key: str) -> dict[str, Any] | None:
    """Return the nested mapping below key using the process-wide delimiter."""
    return TreeReconstructor().get_string_map(store, key)


def sub(store: FlatStore, key: str, factory: Callable[[], FlatStore] | None = None) -> FlatStore | None:
    """Return a new store for the sub-tree below key using the process-wide delimiter."""
    return TreeReconstructor().sub(store, key, factory)


def unmarshal_key(store: FlatStore, key: str, target: type[_T], *options: DecoderOption) -> _T:
    """Decode the sub-tree below key using the process-wide delimiter."""
    return TreeReconstructor().unmarshal_key(store, key, target, *options)
