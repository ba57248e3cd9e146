import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from stagechain.config.loader import (
    camel_to_snake,
    convert_keys,
    convert_to_camel,
    get_config_path,
    load_config,
    save_config,
)
from stagechain.config.schema import ChainConfig, Config, StageConfig


def test_default_config_has_post_process_chain() -> None:
    config = Config()

    assert list(config.chains) == ["post_process"]
    assert config.chains["post_process"].stages == []
    assert config.chains["post_process"].relocation == "keep"


def test_config_path_respects_home_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STAGECHAIN_HOME", str(tmp_path / "home"))

    assert get_config_path() == tmp_path / "home" / "config.json"


def test_load_config_reads_camel_case_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "configVersion": 1,
                "chains": {
                    "postProcess": {
                        "relocation": "replace",
                        "stages": [
                            {
                                "stage": "chain_stages:Outer",
                                "args": [1, 3],
                                "kwargs": {"someKey": 1},
                            },
                            {"stage": "chain_stages.Inner", "before": "chain_stages:Outer"},
                        ],
                    }
                },
            }
        )
    )

    config = load_config(path)

    chain = config.chains["postProcess"]
    assert chain.relocation == "replace"
    assert chain.stages[0].args == [1, 3]
    assert chain.stages[0].kwargs == {"someKey": 1}
    assert chain.stages[1].before == "chain_stages:Outer"


def test_load_config_falls_back_to_defaults_on_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")

    config = load_config(path)

    assert list(config.chains) == ["post_process"]


def test_load_config_strict_raises(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"chains": {"x": {"relocation": "merge"}}}))

    with pytest.raises(ValidationError):
        load_config(path, strict=True)


def test_load_missing_file_returns_default(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.json")

    assert isinstance(config, Config)


def test_save_then_load_preserves_user_keys(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = Config(
        chains={
            "post_process": ChainConfig(
                stages=[StageConfig(stage="chain_stages:Outer", kwargs={"max_items": 2})]
            )
        }
    )

    save_config(config, path)
    raw = json.loads(path.read_text())
    loaded = load_config(path)

    assert "configVersion" in raw
    assert "post_process" in raw["chains"]
    assert raw["chains"]["post_process"]["stages"][0]["kwargs"] == {"max_items": 2}
    assert loaded.chains["post_process"].stages[0].kwargs == {"max_items": 2}


def test_stage_config_rejects_before_and_after() -> None:
    with pytest.raises(ValidationError):
        StageConfig(stage="a.B", before="a.C", after="a.D")


def test_stage_config_rejects_blank_path() -> None:
    with pytest.raises(ValidationError):
        StageConfig(stage="  ")


def test_key_conversion_helpers() -> None:
    assert camel_to_snake("configVersion") == "config_version"
    assert convert_keys({"configVersion": 1, "args": [{"keepMe": 1}]}) == {
        "config_version": 1,
        "args": [{"keepMe": 1}],
    }
    assert convert_to_camel({"config_version": 1}) == {"configVersion": 1}
