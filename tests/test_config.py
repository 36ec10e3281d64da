"""Tests for ServerConfig and the YAML loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from pprof_mcp.config import ConfigError, ConfigLoader, ServerConfig, build_config


class TestBuildConfig:
    def test_defaults(self) -> None:
        config = build_config()
        assert config == ServerConfig()
        assert config.transport == "stdio"
        assert config.port == 8080
        assert config.pprof_timeout == 120.0

    def test_none_overrides_ignored(self) -> None:
        config = build_config({"port": 9000}, port=None, transport="http")
        assert config.port == 9000
        assert config.transport == "http"

    def test_invalid_transport(self) -> None:
        with pytest.raises(ConfigError, match="transport"):
            build_config(transport="carrier-pigeon")

    def test_invalid_port(self) -> None:
        with pytest.raises(ConfigError):
            build_config(port=70000)


class TestConfigLoader:
    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("transport: http\nport: 9090\npprof_timeout: 30\n")
        config = ConfigLoader(path).load()
        assert config.transport == "http"
        assert config.port == 9090
        assert config.pprof_timeout == 30.0

    def test_overrides_win(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("port: 9090\n")
        assert ConfigLoader(path).load(port=7000).port == 7000

    def test_env_interpolation(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PPROF_GO", "/opt/go/bin/go")
        path = tmp_path / "server.yaml"
        path.write_text("go_binary: ${PPROF_GO}\n")
        assert ConfigLoader(path).load().go_binary == "/opt/go/bin/go"

    def test_null_timeout_disables_deadline(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("pprof_timeout: null\n")
        assert ConfigLoader(path).load().pprof_timeout is None

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("")
        assert ConfigLoader(path).load() == ServerConfig()

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader(path).load()

    def test_bad_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("port: [unclosed\n")
        with pytest.raises(ConfigError, match="YAML parse error"):
            ConfigLoader(path).load()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            ConfigLoader(tmp_path / "absent.yaml").load()
