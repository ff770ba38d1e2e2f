from pathlib import Path
import sys

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.config_loader import build_assistant, load_profile, merge_configs
from core.dispatcher import SkillDispatcher


@pytest.fixture(autouse=True)
def clear_environment(monkeypatch):
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
    yield


def test_default_profile_inherits_base_values():
    config = load_profile("default")

    assert config["profile"] == "default"
    assert config["skills"]["enabled"] == ["weather", "calc", "define"]
    assert config["skills"]["weather"]["units"] == "metric"
    assert config["skills"]["weather"]["api_key"] == ""


def test_offline_profile_overrides_only_what_it_names():
    config = load_profile("offline")

    assert config["skills"]["weather"]["live"] is False
    assert config["skills"]["weather"]["base_url"] == "https://api.openweathermap.org/data/2.5"
    assert config["skills"]["define"]["live"] is False
    assert config["fallback"]["greetings"] == ["hello", "hi"]


def test_api_key_resolves_environment_variable(monkeypatch):
    monkeypatch.setenv("OPENWEATHER_API_KEY", "env-secret")

    config = load_profile("default")

    assert config["skills"]["weather"]["api_key"] == "env-secret"


def test_missing_profile_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_profile("absent", config_dir=tmp_path)


def test_circular_inheritance_is_rejected(tmp_path):
    (tmp_path / "first.yaml").write_text("inherits: second\n", encoding="utf-8")
    (tmp_path / "second.yaml").write_text("inherits: first\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Circular profile inheritance"):
        load_profile("first", config_dir=tmp_path)


def test_json_profiles_and_multiple_parents(tmp_path):
    (tmp_path / "a.yaml").write_text("http:\n  timeout: 3\nvalue: a\n", encoding="utf-8")
    (tmp_path / "b.json").write_text('{"value": "b", "extra": "${MISSING_VAR:fallback}"}', encoding="utf-8")
    (tmp_path / "child.yaml").write_text("inherits: [a, b]\n", encoding="utf-8")

    config = load_profile("child", config_dir=tmp_path)

    assert config["http"]["timeout"] == 3
    assert config["value"] == "b"
    assert config["extra"] == "fallback"


def test_non_mapping_profile_is_rejected(tmp_path):
    (tmp_path / "list.yaml").write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a mapping"):
        load_profile("list", config_dir=tmp_path)


def test_merge_configs_is_recursive_and_non_destructive():
    base = {"skills": {"weather": {"units": "metric", "live": True}}, "app": {"name": "x"}}
    overrides = {"skills": {"weather": {"live": False}}}

    merged = merge_configs(base, overrides)

    assert merged == {"skills": {"weather": {"units": "metric", "live": False}}, "app": {"name": "x"}}
    assert base["skills"]["weather"]["live"] is True


def test_build_assistant_wires_skills_in_configured_order():
    config = load_profile("offline")
    dispatcher = build_assistant(config)

    assert isinstance(dispatcher, SkillDispatcher)
    assert [skill.name for skill in dispatcher.skills] == ["weather", "calc", "define"]
    weather, _, define = dispatcher.skills
    assert weather.live_enabled is False
    assert define.live_enabled is False
    assert define.base_url == "https://api.dictionaryapi.dev"


def test_build_assistant_honours_enabled_list_and_fallback_settings():
    config = merge_configs(
        load_profile("offline"),
        {
            "skills": {"enabled": ["calc"]},
            "fallback": {"greetings": ["привет"], "messages": {"unknown": "Не понял."}},
        },
    )
    dispatcher = build_assistant(config)

    assert [skill.name for skill in dispatcher.skills] == ["calc"]
    assert dispatcher.route("/weather Paris").response == "Не понял."
    assert dispatcher.route("Привет!").response.startswith("Hello!")
    assert dispatcher.route("what is 2*21").response == "2*21 = 42"


def test_circular_inheritance_names_the_chain(tmp_path):
    (tmp_path / "loop.yaml").write_text("inherits: loop\n", encoding="utf-8")

    with pytest.raises(ValueError, match="loop -> loop"):
        load_profile("loop", config_dir=tmp_path)


def test_inherits_must_be_name_or_list(tmp_path):
    (tmp_path / "odd.yaml").write_text("inherits:\n  base: true\n", encoding="utf-8")

    with pytest.raises(TypeError, match="'inherits'"):
        load_profile("odd", config_dir=tmp_path)


def test_dispatcher_owns_and_closes_http_client():
    dispatcher = build_assistant(load_profile("offline"))
    http_client = dispatcher.resources[0]

    assert http_client.closed is False
    dispatcher.close()
    assert http_client.closed is True
