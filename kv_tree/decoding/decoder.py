"""Weakly typed decoding of nested mappings into structured types."""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin, get_type_hints, is_typeddict

from pydantic import BaseModel, TypeAdapter

from .hooks import DecodeHook, compose_hooks, is_sequence_type, string_to_list_hook, string_to_timedelta_hook


_T = TypeVar("_T")

_CONTAINERS = (list, tuple, set, frozenset)

# Leaf types accepted per declared type when weak typing is off.
_EXACT_TYPES: dict[Any, type | tuple[type, ...]] = {
    str: str,
    bool: bool,
    int: int,
    float: (int, float),
    timedelta: timedelta,
}


def default_hooks() -> list[DecodeHook]:
    """Return the hooks every decoder starts with."""
    return [string_to_timedelta_hook, string_to_list_hook(",")]


@dataclass
class DecoderConfig:
    """Settings controlling how a nested mapping is decoded.

    Attributes
    ----------
    hooks
        Conversions applied, in order, to every value before validation.
    weakly_typed_input
        Allow lax conversions such as ``"50"`` to ``int`` and ``True`` to ``"1"``.
        When off, scalar leaves must already match the declared type.
    error_unused
        Reject input keys that match no declared field.
    """

    hooks: list[DecodeHook] = field(default_factory=default_hooks)
    weakly_typed_input: bool = True
    error_unused: bool = False


DecoderOption = Callable[[DecoderConfig], None]


def decode_hook(*hooks: DecodeHook) -> DecoderOption:
    """Replace the hook chain, built-in hooks included."""

    def option(config: DecoderConfig) -> None:
        config.hooks = list(hooks)

    return option


def add_decode_hook(hook: DecodeHook) -> DecoderOption:
    """Append a hook after the ones already configured."""

    def option(config: DecoderConfig) -> None:
        config.hooks.append(hook)

    return option


def strict_input() -> DecoderOption:
    """Disable weak type conversions; hooks still run."""

    def option(config: DecoderConfig) -> None:
        config.weakly_typed_input = False

    return option


def error_unused() -> DecoderOption:
    """Fail when the input holds keys no field consumes."""

    def option(config: DecoderConfig) -> None:
        config.error_unused = True

    return option


def new_decoder_config(*options: DecoderOption) -> DecoderConfig:
    """Build a config from the defaults, then apply options in order."""
    config = DecoderConfig()
    for option in options:
        option(config)
    return config


def decode(data: Mapping[str, Any], target: type[_T], config: DecoderConfig | None = None) -> _T:
    """Decode a nested mapping into an instance of target.

    Hooks, then weak conversions (or, with weak typing off, scalar type
    checks) are applied per field according to the field's declared type.
    The result is validated by pydantic. Validation and hook errors propagate
    unchanged.
    """
    if config is None:
        config = DecoderConfig()
    adapter = TypeAdapter(target)
    prepared = _prepare(data, target, config, compose_hooks(*config.hooks), ())
    return adapter.validate_python(prepared)


def _unwrap(target: Any) -> Any:
    origin = get_origin(target)
    if origin is Annotated:
        return _unwrap(get_args(target)[0])
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(target) if arg is not type(None)]
        if len(members) == 1:
            return _unwrap(members[0])
    return target


def _declared_fields(target: Any) -> dict[str, tuple[str, Any]] | None:
    """Map field names to the input key pydantic expects and the declared type."""
    if isinstance(target, type) and issubclass(target, BaseModel):
        return {name: (info.alias or name, info.annotation) for name, info in target.model_fields.items()}
    if isinstance(target, type) and dataclasses.is_dataclass(target):
        hints = get_type_hints(target, include_extras=True)
        return {item.name: (item.name, hints.get(item.name, Any)) for item in dataclasses.fields(target) if item.init}
    if is_typeddict(target):
        hints = get_type_hints(target, include_extras=True)
        return {name: (name, hint) for name, hint in hints.items()}
    return None


def _weaken(value: Any, target: Any) -> Any:
    is_number = isinstance(value, int | float) and not isinstance(value, bool)
    if target is str:
        if isinstance(value, bool):
            return "1" if value else "0"
        if is_number:
            return str(value)
    elif target is bool:
        if isinstance(value, str) and not value:
            return False
        if is_number:
            return value != 0
    elif target is int or target is float:
        if isinstance(value, str) and not value:
            return target()
        if target is int and isinstance(value, float):
            return int(value)
    elif target is timedelta:
        # Bare numbers count nanoseconds.
        if is_number:
            return timedelta(microseconds=value / 1000)
    elif is_sequence_type(target) and value is not None and not isinstance(value, (*_CONTAINERS, Mapping)):
        return [value]
    return value


def _check_exact(value: Any, target: Any, path: tuple[str, ...]) -> None:
    accepted = _EXACT_TYPES.get(target)
    if accepted is None or value is None:
        return
    if isinstance(value, accepted) and not (isinstance(value, bool) and target is not bool):
        return
    location = ".".join(path) or "<root>"
    msg = f"'{location}' expected type '{target.__name__}', got '{type(value).__name__}'"
    raise TypeError(msg)


def _prepare(value: Any, target: Any, config: DecoderConfig, hook: DecodeHook, path: tuple[str, ...]) -> Any:
    target = _unwrap(target)
    if target is Any:
        return value

    value = hook(value, target)
    if config.weakly_typed_input:
        value = _weaken(value, target)
    else:
        _check_exact(value, target, path)

    if isinstance(value, Mapping):
        fields = _declared_fields(target)
        if fields is not None:
            return _prepare_fields(value, fields, config, hook, path)

        origin = get_origin(target) or target
        if isinstance(origin, type) and issubclass(origin, Mapping):
            args = get_args(target)
            value_type = args[1] if len(args) == 2 else Any  # noqa: PLR2004
            return {key: _prepare(item, value_type, config, hook, (*path, str(key))) for key, item in value.items()}
        return value

    if isinstance(value, _CONTAINERS) and is_sequence_type(target):
        args = get_args(target)
        origin = get_origin(target) or target
        if origin is tuple and args and args[-1] is not Ellipsis:
            item_types = [args[index] if index < len(args) else Any for index in range(len(value))]
        else:
            item_types = [args[0] if args else Any] * len(value)
        items = [
            _prepare(item, item_type, config, hook, (*path, str(index)))
            for index, (item, item_type) in enumerate(zip(value, item_types, strict=True))
        ]
        return type(value)(items)

    return value


def _prepare_fields(
    value: Mapping[str, Any],
    fields: dict[str, tuple[str, Any]],
    config: DecoderConfig,
    hook: DecodeHook,
    path: tuple[str, ...],
) -> dict[str, Any]:
    lookup: dict[str, str] = {}
    for name, (input_key, _) in fields.items():
        lookup[name.lower()] = name
        lookup[input_key.lower()] = name

    prepared: dict[str, Any] = {}
    unused: list[str] = []
    for key, item in value.items():
        name = key if key in fields else lookup.get(str(key).lower())
        if name is None:
            unused.append(str(key))
            prepared[key] = item
            continue
        input_key, annotation = fields[name]
        prepared[input_key] = _prepare(item, annotation, config, hook, (*path, name))

    if unused and config.error_unused:
        location = ".".join(path) or "<root>"
        msg = f"{location} has invalid keys: {', '.join(sorted(unused))}"
        raise ValueError(msg)
    return prepared
