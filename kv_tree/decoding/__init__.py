"""Decoding of reconstructed configuration trees into structured types."""

from .decoder import (
    DecoderConfig,
    DecoderOption,
    add_decode_hook,
    decode,
    decode_hook,
    default_hooks,
    error_unused,
    new_decoder_config,
    strict_input,
)
from .hooks import DecodeHook, compose_hooks, parse_duration, string_to_list_hook, string_to_timedelta_hook


__all__ = [
    "DecodeHook",
    "DecoderConfig",
    "DecoderOption",
    "add_decode_hook",
    "compose_hooks",
    "decode",
    "decode_hook",
    "default_hooks",
    "error_unused",
    "new_decoder_config",
    "parse_duration",
    "strict_input",
    "string_to_list_hook",
    "string_to_timedelta_hook",
]
