"""
Tests for connection options resolution (CLI > env > config.yaml > defaults).
"""

import dataclasses
from pathlib import Path

import pytest

from mcpr.configs import load_yaml_config
from mcpr.controllers.bridge import ConnectionOptions, resolve_options
from mcpr.exceptions import ConfigurationError


def write_config(data_dir: Path, content: str) -> None:
    (data_dir / "config.yaml").write_text(content)


class TestConnectionOptions:
    def test_defaults(self):
        options = ConnectionOptions()

        assert options.host == "localhost"
        assert options.port == 3282
        assert options.token is None
        assert options.base_url == "http://localhost:3282"

    def test_immutable(self):
        options = ConnectionOptions()

        with pytest.raises(dataclasses.FrozenInstanceError):
            options.port = 1234


class TestResolveOptions:
    def test_defaults_without_config(self):
        assert resolve_options() == ConnectionOptions()

    def test_cli_values_win(self, isolated_data_dir, monkeypatch):
        write_config(isolated_data_dir, "host: yaml-host\nport: 1111\ntoken: yaml-token\n")
        monkeypatch.setenv("MCPR_HOST", "env-host")
        monkeypatch.setenv("MCPR_PORT", "2222")
        monkeypatch.setenv("MCPR_TOKEN", "env-token")

        options = resolve_options(host="cli-host", port=3333, token="cli-token")

        assert options == ConnectionOptions("cli-host", 3333, "cli-token")

    def test_env_over_yaml(self, isolated_data_dir, monkeypatch):
        write_config(isolated_data_dir, "host: yaml-host\nport: 1111\ntoken: yaml-token\n")
        monkeypatch.setenv("MCPR_PORT", "2222")

        options = resolve_options()

        assert options.host == "yaml-host"
        assert options.port == 2222
        assert options.token == "yaml-token"

    def test_yaml_empty_token_means_none(self, isolated_data_dir):
        write_config(isolated_data_dir, "port: 8080\ntoken:\n")

        options = resolve_options()

        assert options.port == 8080
        assert options.token is None

    def test_invalid_env_port(self, monkeypatch):
        monkeypatch.setenv("MCPR_PORT", "not-a-port")

        with pytest.raises(ConfigurationError, match="MCPR_PORT"):
            resolve_options()

    def test_port_out_of_range(self):
        with pytest.raises(ConfigurationError, match="out of range"):
            resolve_options(port=70000)


class TestYamlConfig:
    def test_missing_file_is_empty(self):
        assert load_yaml_config() == {}

    def test_empty_file_is_empty(self, isolated_data_dir):
        write_config(isolated_data_dir, "")

        assert load_yaml_config() == {}

    def test_not_a_mapping(self, isolated_data_dir):
        write_config(isolated_data_dir, "- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_config()

    def test_invalid_yaml(self, isolated_data_dir):
        write_config(isolated_data_dir, "host: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_config()
