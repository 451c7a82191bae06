"""YAML configuration handling."""

import io

import pytest

from upis import config
from upis.config import ConfigError, load_config, resolve


class TestLoadConfig:

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", tmp_path / "missing.yml")
        assert load_config() == {"bus": 1, "force": True}

    def test_default_path(self, tmp_path, monkeypatch):
        path = tmp_path / "upis.yml"
        path.write_text("bus: 0\n")
        monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", path)
        assert load_config() == {"bus": 0, "force": True}

    def test_file(self):
        assert load_config(io.StringIO("bus: 2\nforce: false\n")) == {"bus": 2, "force": False}

    def test_empty_file(self):
        assert load_config(io.StringIO("")) == {"bus": 1, "force": True}

    def test_unknown_key_ignored(self, caplog):
        assert load_config(io.StringIO("address: 0x70\n")) == {"bus": 1, "force": True}
        assert "unknown configuration key 'address'" in caplog.text

    @pytest.mark.parametrize("text", ["bus: one\n", "bus: true\n", "force: 1\n", "- bus\n", "bus: [1\n"])
    def test_invalid(self, text):
        with pytest.raises(ConfigError):
            load_config(io.StringIO(text))


class TestResolve:

    def test_overrides_win(self):
        assert resolve({"bus": 1, "force": True}, bus=3, force=False) == {"bus": 3, "force": False}

    def test_unset_overrides_ignored(self):
        assert resolve({"bus": 2, "force": False}, bus=None, force=None) == {"bus": 2, "force": False}
