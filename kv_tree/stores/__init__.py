"""Flat store contract and implementations."""

from .layered import DEFAULT_PRECEDENCE, LayeredStore, Source
from .protocol import FlatStore


__all__ = ["DEFAULT_PRECEDENCE", "FlatStore", "LayeredStore", "Source"]
