"""Decode hooks converting raw configuration values toward declared field types.

A hook is called as ``hook(value, target)`` where ``target`` is the declared
type of the field being decoded (possibly a parametrized generic such as
``list[str]``). It returns either a converted value or ``value`` unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import timedelta
from typing import Any, get_origin


DecodeHook = Callable[[Any, Any], Any]

_SEQUENCE_TYPES = (list, tuple, set, frozenset)

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_MICROSECONDS_PER_UNIT = {
    "ns": 1e-3,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1e3,
    "s": 1e6,
    "m": 60e6,
    "h": 3600e6,
}


def parse_duration(text: str) -> timedelta:
    """Parse a duration literal such as ``"300ms"``, ``"-1.5h"`` or ``"2h45m"``.

    Each component is a decimal number followed by one of the units
    ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``. The bare
    literal ``"0"`` is also accepted. Sub-microsecond remainders are rounded.
    """
    body = text
    negative = False
    if body[:1] in {"+", "-"}:
        negative = body[0] == "-"
        body = body[1:]

    if body == "0":
        return timedelta(0)
    if not body:
        msg = f"invalid duration: {text!r}"
        raise ValueError(msg)

    total = 0.0
    position = 0
    while position < len(body):
        match = _DURATION_PART.match(body, position)
        if match is None:
            msg = f"invalid duration: {text!r}"
            raise ValueError(msg)
        total += float(match[1]) * _MICROSECONDS_PER_UNIT[match[2]]
        position = match.end()

    return timedelta(microseconds=-total if negative else total)


def is_sequence_type(target: Any) -> bool:
    """Return True when target is a list, tuple, set or frozenset type."""
    origin = get_origin(target) or target
    return isinstance(origin, type) and issubclass(origin, _SEQUENCE_TYPES)


def string_to_timedelta_hook(value: Any, target: Any) -> Any:
    """Convert duration strings for ``timedelta`` fields."""
    if target is timedelta and isinstance(value, str):
        return parse_duration(value)
    return value


def string_to_list_hook(sep: str = ",") -> DecodeHook:
    """Return a hook splitting strings on sep for sequence-typed fields."""
    if not sep:
        msg = "sep must not be empty"
        raise ValueError(msg)

    def hook(value: Any, target: Any) -> Any:
        if isinstance(value, str) and is_sequence_type(target):
            return value.split(sep) if value else []
        return value

    return hook


def compose_hooks(*hooks: DecodeHook) -> DecodeHook:
    """Chain hooks so each one receives the previous hook's output."""

    def composed(value: Any, target: Any) -> Any:
        for hook in hooks:
            value = hook(value, target)
        return value

    return composed
