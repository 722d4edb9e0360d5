"""Key mapping utilities for prefix-rooted flat configuration keys."""

from __future__ import annotations


class KeyMapper:
    """Map between flat store keys and path segments below a root key."""

    def __init__(self, root: str, sep: str = ".") -> None:
        super().__init__()
        if not root:
            msg = "root key must not be empty"
            raise ValueError(msg)
        if not sep:
            msg = "sep must not be empty"
            raise ValueError(msg)

        self.root = root
        self.sep = sep
        self.prefix = f"{root}{sep}"

    def matches(self, flat_key: str) -> bool:
        """Return True when a flat key lies strictly below the root."""
        return flat_key.startswith(self.prefix)

    def relative_parts(self, flat_key: str) -> tuple[str, ...]:
        """Convert a flat key into path segments relative to the root."""
        if not self.matches(flat_key):
            msg = f"key does not match root prefix: {flat_key}"
            raise ValueError(msg)

        return tuple(flat_key.removeprefix(self.prefix).split(self.sep))
