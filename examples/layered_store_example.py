"""Minimal example rebuilding a sub-tree from a layered flat store."""

from dataclasses import dataclass, field
from datetime import timedelta

from kv_tree.stores import LayeredStore, Source
from kv_tree.subtree import get_string_map, sub, unmarshal_key


@dataclass
class Limits:
    size: int = 0
    backups: int = 0


@dataclass
class LogConfig:
    filename: str = ""
    level: str = ""
    rotate: timedelta = timedelta(0)
    outputs: list[str] = field(default_factory=list)
    max: Limits = field(default_factory=Limits)


def main() -> None:
    """Bind values from several sources and read them back as a tree."""
    store = LayeredStore()
    store.set_default("log.level", "info")
    store.set_default("log.max.backups", 5)
    store.merge_config_map({"log": {"filename": "logs/latest.log", "max": {"size": 50}}})
    store.bind(Source.ENV, "log.level", "debug")
    store.bind(Source.ENV, "log.outputs", "file,stderr")
    store.set("log.rotate", "24h")

    print("tree:", get_string_map(store, "log"))

    log_store = sub(store, "log")
    if log_store is not None:
        print("sub keys:", log_store.all_keys())

    print("decoded:", unmarshal_key(store, "log", LogConfig))


if __name__ == "__main__":
    main()
