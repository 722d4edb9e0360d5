"""Flat store interface definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from kv_tree.key_mapping import build_tree


if TYPE_CHECKING:
    from collections.abc import Mapping


class FlatStore(ABC):
    """Configuration store exposing merged values under flat, delimiter-joined keys."""

    key_delimiter: str = "."

    @abstractmethod
    def all_keys(self) -> list[str]:
        """Return every known flat key across all bound sources."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the source-merged value for one exact flat key, or None."""

    @abstractmethod
    def merge_config_map(self, data: Mapping[str, Any]) -> None:
        """Load a nested mapping into the store as a configuration layer."""

    def all_settings(self) -> dict[str, Any]:
        """Return all merged settings as a nested mapping."""
        sep = self.key_delimiter
        return build_tree(((tuple(key.split(sep)), self.get(key)) for key in self.all_keys()), sep)
