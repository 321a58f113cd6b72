import pytest
from pydantic import ValidationError

from transcriptor_fixture.config import FilterConfig, RangeConfig, Settings, get_settings


def test_default_settings_have_sane_defaults():
    settings = Settings(_env_file=None)
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.filter.path is None
    assert settings.filter.ignored_spell_ids == []
    assert settings.range.boss_kill_window == 50


def test_env_override(monkeypatch):
    monkeypatch.setenv("RANGE__BOSS_KILL_WINDOW", "10")
    monkeypatch.setenv("FILTER__PATH", "/tmp/Transcriptor-Filter.lua")
    settings = Settings(_env_file=None)
    assert settings.range.boss_kill_window == 10
    assert settings.filter.path == "/tmp/Transcriptor-Filter.lua"


def test_env_list_override(monkeypatch):
    monkeypatch.setenv("FILTER__IGNORED_CREATURE_IDS", "[12557, 14456]")
    settings = Settings(_env_file=None)
    assert settings.filter.ignored_creature_ids == [12557, 14456]


def test_debug_forces_debug_log_level(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    settings = Settings(_env_file=None)
    assert settings.log_level == "DEBUG"


def test_negative_window_rejected():
    with pytest.raises(ValidationError, match="BOSS_KILL_WINDOW"):
        Settings(_env_file=None, range={"boss_kill_window": -1})


def test_env_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("LOG_LEVEL=WARNING\n", encoding="utf-8")
    assert Settings().log_level == "WARNING"


def test_get_settings_returns_same_instance():
    get_settings.cache_clear()
    s1 = get_settings()
    s2 = get_settings()
    assert s1 is s2
    get_settings.cache_clear()


def test_filter_config_defaults():
    cfg = FilterConfig()
    assert cfg.ignored_creature_ids == []


def test_range_config_default():
    assert RangeConfig().boss_kill_window == 50


def test_log_level_is_normalised(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert Settings(_env_file=None).log_level == "WARNING"


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError, match="LOG_LEVEL"):
        Settings(_env_file=None)
