"""Tests for Config loading."""

import pytest

from boardsync.config import Config, ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("BOARDSYNC_SERVER_URL", raising=False)
    monkeypatch.delenv("BOARDSYNC_DB", raising=False)


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.setattr("boardsync.config.CONFIG_PATH", tmp_path / "absent.yaml")
    cfg = Config.load()
    assert cfg.server_url == "http://localhost:3000/"
    assert cfg.request_timeout is None
    assert not cfg.db_path.startswith("~")


def test_yaml_values_and_unknown_keys(tmp_path):
    path = tmp_path / "boardsync.yaml"
    path.write_text("server_url: http://board.test\ncard_height: 80\nshiny: true\n")
    cfg = Config.load(str(path))
    assert cfg.server_url == "http://board.test/"
    assert cfg.card_height == 80


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "boardsync.yaml"
    path.write_text("server_url: http://board.test/\n")
    monkeypatch.setenv("BOARDSYNC_SERVER_URL", "http://override.test")
    monkeypatch.setenv("BOARDSYNC_DB", str(tmp_path / "x.db"))
    cfg = Config.load(str(path))
    assert cfg.server_url == "http://override.test/"
    assert cfg.db_path == str(tmp_path / "x.db")


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        Config.load(str(tmp_path / "nope.yaml"))


def test_invalid_yaml(tmp_path):
    path = tmp_path / "boardsync.yaml"
    path.write_text("server_url: [unclosed\n")
    with pytest.raises(ConfigError):
        Config.load(str(path))


def test_non_mapping(tmp_path):
    path = tmp_path / "boardsync.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        Config.load(str(path))
