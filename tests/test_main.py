import json

import pytest

from kv_tree.__main__ import main
from kv_tree._version import version


def test_main_prints_reconstructed_subtree(capsys: pytest.CaptureFixture[str]) -> None:
    main(["-s", "log.level=info", "-s", "log.max.size=50", "-s", "log.compress=true", "-s", "other=1", "log"])

    output = json.loads(capsys.readouterr().out)
    assert output == {"compress": True, "level": "info", "max": {"size": 50}}


def test_main_parses_json_objects_and_custom_delimiter(capsys: pytest.CaptureFixture[str]) -> None:
    main(["-d", "/", "--set", 'log={"max": {"size": 50}}', "log/max"])

    assert json.loads(capsys.readouterr().out) == {"size": 50}


def test_main_missing_prefix_exits_with_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["-s", "log=fail", "log"])

    assert excinfo.value.code == 1
    assert "no keys found below 'log'" in capsys.readouterr().err


def test_main_collision_exits_with_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["-s", "log.max=1", "-s", "log.max.size=50", "log"])

    assert excinfo.value.code == 1
    assert "collides" in capsys.readouterr().err


def test_main_rejects_malformed_assignment() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["-s", "novalue", "log"])

    assert excinfo.value.code == 2


@pytest.mark.parametrize("flag", ["-v", "--version"])
def test_main_version(flag: str, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([flag])

    assert excinfo.value.code == 0
    assert version in capsys.readouterr().out


def test_main_verbose_still_prints_subtree(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--verbose", "-s", "log.level=info", "log"])

    assert json.loads(capsys.readouterr().out) == {"level": "info"}
