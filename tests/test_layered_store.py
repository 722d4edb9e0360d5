import pytest

from kv_tree.stores.layered import LayeredStore, Source


def test_get_missing_returns_none() -> None:
    store = LayeredStore()
    assert store.get("missing") is None
    assert not store.is_set("missing")


def test_precedence_override_env_config_default() -> None:
    store = LayeredStore()
    store.set_default("log.level", "info")
    assert store.get("log.level") == "info"

    store.merge_config_map({"log": {"level": "warning"}})
    assert store.get("log.level") == "warning"

    store.bind(Source.ENV, "log.level", "debug")
    assert store.get("log.level") == "debug"

    store.set("log.level", "error")
    assert store.get("log.level") == "error"
    assert store.source_of("log.level") is Source.OVERRIDE


def test_custom_precedence_order() -> None:
    store = LayeredStore(precedence=(Source.DEFAULT, Source.CONFIG, Source.ENV, Source.OVERRIDE))
    store.set("port", 1)
    store.set_default("port", 2)
    assert store.get("port") == 2
    assert store.source_of("port") is Source.DEFAULT


@pytest.mark.parametrize(
    "precedence",
    [
        (Source.OVERRIDE, Source.ENV, Source.CONFIG),
        (Source.OVERRIDE, Source.ENV, Source.CONFIG, Source.DEFAULT, Source.DEFAULT),
    ],
)
def test_invalid_precedence_rejected(precedence: tuple[Source, ...]) -> None:
    with pytest.raises(ValueError, match="precedence must list every source exactly once"):
        _ = LayeredStore(precedence=precedence)


def test_empty_key_delimiter_rejected() -> None:
    with pytest.raises(ValueError, match="key_delimiter must not be empty"):
        _ = LayeredStore(key_delimiter="")


def test_empty_key_rejected() -> None:
    store = LayeredStore()
    with pytest.raises(ValueError, match="key must not be empty"):
        store.set("", 1)


def test_keys_are_case_insensitive() -> None:
    store = LayeredStore()
    store.set_default("Log.MaxSize", 50)
    assert store.all_keys() == ["log.maxsize"]
    assert store.get("LOG.MAXSIZE") == 50
    assert store.is_set("log.maxsize")


def test_nested_values_are_flattened_with_store_delimiter() -> None:
    store = LayeredStore(key_delimiter="/")
    store.merge_config_map({"log": {"max": {"size": 50}, "level": "info"}, "labels": {}})
    assert store.all_keys() == ["labels", "log/level", "log/max/size"]
    assert store.get("labels") == {}


def test_all_keys_is_sorted_union_of_layers() -> None:
    store = LayeredStore()
    store.set_default("b", 1)
    store.merge_config_map({"a": 2})
    store.set("b", 3)
    assert store.all_keys() == ["a", "b"]


def test_all_settings_returns_merged_nested_mapping() -> None:
    store = LayeredStore()
    store.set_default("log.max.backups", 5)
    store.merge_config_map({"log": {"max": {"size": 50}}})
    store.set("log.max.backups", 3)
    assert store.all_settings() == {"log": {"max": {"backups": 3, "size": 50}}}


def test_bound_values_are_copied() -> None:
    tags = ["a", "b"]
    store = LayeredStore()
    store.merge_config_map({"app": {"tags": tags}})
    tags.append("c")
    assert store.get("app.tags") == ["a", "b"]


def test_reset_drops_every_layer() -> None:
    store = LayeredStore()
    store.set_default("a", 1)
    store.set("b", 2)
    store.reset()
    assert store.all_keys() == []
