"""Tests for gazer.config_loader — file config merged with overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from gazer._errors import ConfigError
from gazer.config import DYNAMIC_PORT_MAX, DYNAMIC_PORT_MIN
from gazer.config_loader import load_config, pick_port


class TestLoadConfig:
    """load_config — yaml/toml discovery and override precedence."""

    def test_no_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.root == tmp_path
        assert config.editor == "cursor"

    def test_random_port_when_unset(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert DYNAMIC_PORT_MIN <= config.port < DYNAMIC_PORT_MAX
        assert config.websocket_port == config.port + 1

    def test_yaml_top_level(self, tmp_path: Path) -> None:
        (tmp_path / "gazer.yaml").write_text("port: 8100\neditor: code\n")
        config = load_config(tmp_path)
        assert config.port == 8100
        assert config.editor == "code"

    def test_yaml_gazer_section(self, tmp_path: Path) -> None:
        (tmp_path / "gazer.yml").write_text("gazer:\n  host: 0.0.0.0\n  debounce_ms: 200\n")
        config = load_config(tmp_path)
        assert config.host == "0.0.0.0"
        assert config.debounce_ms == 200

    def test_toml(self, tmp_path: Path) -> None:
        (tmp_path / "gazer.toml").write_text('[gazer]\nport = 8200\nlanguage = "ja"\n')
        config = load_config(tmp_path)
        assert config.port == 8200
        assert config.language == "ja"

    def test_yaml_preferred_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "gazer.yaml").write_text("port: 8100\n")
        (tmp_path / "gazer.toml").write_text("port = 8200\n")
        assert load_config(tmp_path).port == 8100

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "gazer.yaml").write_text("port: 8100\ntheme: dark\n")
        assert load_config(tmp_path).port == 8100

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "gazer.yaml").write_text("port: 8100\neditor: code\n")
        config = load_config(tmp_path, port=9100, editor=None)
        assert config.port == 9100
        assert config.editor == "code"

    def test_invalid_file_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "gazer.yaml").write_text("port: [unclosed\n")
        config = load_config(tmp_path, port=8100)
        assert config.port == 8100

    def test_wrong_type_raises(self, tmp_path: Path) -> None:
        (tmp_path / "gazer.yaml").write_text("port: eighty\n")
        with pytest.raises(ConfigError, match="port"):
            load_config(tmp_path)


class TestPickPort:
    def test_within_dynamic_range(self) -> None:
        for _ in range(50):
            port = pick_port()
            assert DYNAMIC_PORT_MIN <= port < DYNAMIC_PORT_MAX
