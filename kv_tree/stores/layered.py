"""In-memory flat store merging values from prioritized sources."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, override

from .protocol import FlatStore


if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


logger = logging.getLogger(__name__)


class Source(Enum):
    """Origin of a bound value."""

    DEFAULT = "default"
    CONFIG = "config"
    ENV = "env"
    OVERRIDE = "override"


# Highest precedence first.
DEFAULT_PRECEDENCE: tuple[Source, ...] = (Source.OVERRIDE, Source.ENV, Source.CONFIG, Source.DEFAULT)


class LayeredStore(FlatStore):
    """Flat store keeping one layer per source and resolving keys by precedence.

    Keys are case-insensitive: they are lowercased on write and on read.
    Mapping values are flattened into leaf keys joined by ``key_delimiter``,
    except for empty mappings, which are stored as leaves.

    The store only holds values handed to it. Reading files, the process
    environment or command-line flags is left to the caller, who binds the
    results with :meth:`bind` or the convenience setters.
    """

    def __init__(self, key_delimiter: str = ".", precedence: Sequence[Source] = DEFAULT_PRECEDENCE) -> None:
        """Create an empty store.

        Parameters
        ----------
        key_delimiter
            Separator joining path segments in flat keys.
        precedence
            Sources ordered from highest to lowest precedence. Every source
            must appear exactly once.
        """
        super().__init__()
        if not key_delimiter:
            msg = "key_delimiter must not be empty"
            raise ValueError(msg)
        if sorted(precedence, key=lambda source: source.value) != sorted(Source, key=lambda source: source.value):
            msg = "precedence must list every source exactly once"
            raise ValueError(msg)

        self.key_delimiter = key_delimiter
        self.precedence = tuple(precedence)
        self._layers: dict[Source, dict[str, Any]] = {source: {} for source in Source}

    def _flatten(self, key: str, value: Any) -> Iterator[tuple[str, Any]]:
        if isinstance(value, Mapping) and value:
            for child_key, child_value in value.items():
                yield from self._flatten(f"{key}{self.key_delimiter}{child_key}", child_value)
        else:
            yield key.lower(), copy.deepcopy(value)

    def bind(self, source: Source, key: str, value: Any) -> None:
        """Bind a value for key in the given source layer."""
        if not key:
            msg = "key must not be empty"
            raise ValueError(msg)
        layer = self._layers[source]
        for flat_key, leaf in self._flatten(key, value):
            layer[flat_key] = leaf

    def set_default(self, key: str, value: Any) -> None:
        """Bind a default value for key."""
        self.bind(Source.DEFAULT, key, value)

    def set(self, key: str, value: Any) -> None:
        """Bind an explicit override for key."""
        self.bind(Source.OVERRIDE, key, value)

    @override
    def merge_config_map(self, data: Mapping[str, Any]) -> None:
        """Merge a nested mapping into the config layer."""
        for key, value in data.items():
            self.bind(Source.CONFIG, key, value)
        logger.debug("merged config map with %d top-level keys", len(data))

    @override
    def all_keys(self) -> list[str]:
        """Return the sorted union of keys over all layers."""
        keys: set[str] = set()
        for layer in self._layers.values():
            keys.update(layer)
        return sorted(keys)

    @override
    def get(self, key: str) -> Any:
        """Return the highest-precedence value bound to key, or None."""
        lowered = key.lower()
        for source in self.precedence:
            layer = self._layers[source]
            if lowered in layer:
                return layer[lowered]
        return None

    def source_of(self, key: str) -> Source | None:
        """Return the source that currently provides key, or None."""
        lowered = key.lower()
        for source in self.precedence:
            if lowered in self._layers[source]:
                return source
        return None

    def is_set(self, key: str) -> bool:
        """Return True when any layer binds key."""
        return self.source_of(key) is not None

    def reset(self) -> None:
        """Drop every bound value."""
        for layer in self._layers.values():
            layer.clear()
