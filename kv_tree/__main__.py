"""Interface for ``python -m kv_tree``."""

from __future__ import annotations

import json
import logging
from argparse import ArgumentParser, ArgumentTypeError
from typing import TYPE_CHECKING, Any

from ._version import version
from .key_mapping import KeyCollisionError
from .stores import LayeredStore
from .subtree import TreeReconstructor


if TYPE_CHECKING:
    from collections.abc import Sequence


__all__ = ["main"]


def _assignment(text: str) -> tuple[str, Any]:
    key, sep, raw = text.partition("=")
    if not sep or not key:
        msg = f"expected KEY=VALUE, got {text!r}"
        raise ArgumentTypeError(msg)
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


def main(args: Sequence[str] | None = None) -> None:
    """Print the sub-tree below PREFIX of a store built from --set pairs."""
    parser = ArgumentParser(prog="kv_tree", description=main.__doc__)
    _ = parser.add_argument("-v", "--version", action="version", version=version)
    _ = parser.add_argument("-d", "--delimiter", default=".", help="key segment delimiter (default: %(default)s)")
    _ = parser.add_argument(
        "-s",
        "--set",
        dest="assignments",
        action="append",
        type=_assignment,
        default=[],
        metavar="KEY=VALUE",
        help="bind a value; VALUE is parsed as JSON when possible",
    )
    _ = parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    _ = parser.add_argument("prefix", help="key whose sub-tree is printed")
    options = parser.parse_args(args)

    if options.verbose:
        logging.basicConfig(level=logging.DEBUG)

    store = LayeredStore(key_delimiter=options.delimiter)
    for key, value in options.assignments:
        store.set(key, value)

    try:
        tree = TreeReconstructor(delimiter=options.delimiter).get_string_map(store, options.prefix)
    except KeyCollisionError as error:
        parser.exit(1, f"{parser.prog}: {error}\n")
    if tree is None:
        parser.exit(1, f"{parser.prog}: no keys found below {options.prefix!r}\n")

    print(json.dumps(tree, indent=2, sort_keys=True))  # noqa: T201


if __name__ == "__main__":
    main()
