"""Tests for the per-user config file."""

import json

from gitguide.config import Config, config_path, get_token, load_config, save_config, set_token


class TestConfig:
    def test_path_honours_env(self, isolated_config):
        assert config_path() == isolated_config / "config.json"

    def test_path_defaults_to_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("GITGUIDE_CONFIG_DIR")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert config_path() == tmp_path / ".gitguide" / "config.json"

    def test_missing_file(self):
        assert load_config() == Config()
        assert get_token() is None

    def test_save_and_load(self, isolated_config):
        path = save_config(Config(api_key="ghp_" + "a" * 36, model="llama3"))
        assert path.parent == isolated_config
        assert json.loads(path.read_text()) == {"apiKey": "ghp_" + "a" * 36, "model": "llama3"}
        assert load_config() == Config(api_key="ghp_" + "a" * 36, model="llama3")

    def test_malformed_file_gives_empty_config(self, isolated_config):
        isolated_config.mkdir()
        (isolated_config / "config.json").write_text("{oops")
        assert load_config() == Config()

    def test_non_object_file(self, isolated_config):
        isolated_config.mkdir()
        (isolated_config / "config.json").write_text('["token"]')
        assert load_config() == Config()

    def test_set_token_keeps_model(self):
        save_config(Config(model="llama3"))
        set_token("  ghp_token_value_long_enough  ")
        assert get_token() == "ghp_token_value_long_enough"
        assert load_config().model == "llama3"

    def test_clear_token(self):
        set_token("ghp_token_value_long_enough")
        set_token(None)
        assert get_token() is None

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "elsewhere" / "settings.json"
        set_token("ghp_token_value_long_enough", path)
        assert get_token(path) == "ghp_token_value_long_enough"
        assert get_token() is None
