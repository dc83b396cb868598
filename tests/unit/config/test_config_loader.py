"""Tests for configuration file loading and precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from dashenc.config.env import EnvReader
from dashenc.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_config,
    get_default_config_path,
    load_config_file,
)
from dashenc.exceptions import ConfigError


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[tools]
ffmpeg = "/file/ffmpeg"

[encoder]
crush_tolerance = 0.9
probe_timeout = 20

[logging]
level = "debug"
"""
    )
    return path


class TestDefaultConfigPath:
    def test_env_override(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("DASHENC_CONFIG_PATH", str(tmp_path / "custom.toml"))
        assert get_default_config_path() == tmp_path / "custom.toml"

    def test_default_location(self, monkeypatch) -> None:
        monkeypatch.delenv("DASHENC_CONFIG_PATH", raising=False)
        assert get_default_config_path() == DEFAULT_CONFIG_FILE


class TestLoadConfigFile:
    def test_missing_file_returns_empty(self, tmp_path: Path) -> None:
        assert load_config_file(tmp_path / "missing.toml") == {}

    def test_parses_toml(self, config_file: Path) -> None:
        data = load_config_file(config_file)
        assert data["tools"]["ffmpeg"] == "/file/ffmpeg"
        assert data["encoder"]["crush_tolerance"] == 0.9

    def test_invalid_toml_lenient(self, tmp_path: Path, caplog) -> None:
        path = tmp_path / "broken.toml"
        path.write_text("[tools\nffmpeg = ")

        assert load_config_file(path) == {}
        assert "Ignoring unparseable config file" in caplog.text

    def test_invalid_toml_strict(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.toml"
        path.write_text("[tools\nffmpeg = ")

        with pytest.raises(ConfigError, match="Could not parse config file"):
            load_config_file(path, strict=True)


class TestGetConfig:
    def test_defaults_without_sources(self, tmp_path: Path) -> None:
        config = get_config(tmp_path / "missing.toml", env_reader=EnvReader(env={}))
        assert config.tools.ffmpeg is None
        assert config.encoder.crush_tolerance == 0.95

    def test_file_values(self, config_file: Path) -> None:
        config = get_config(config_file, env_reader=EnvReader(env={}))

        assert config.tools.ffmpeg == Path("/file/ffmpeg")
        assert config.encoder.crush_tolerance == 0.9
        assert config.encoder.probe_timeout == 20
        assert config.logging.level == "debug"

    def test_env_overrides_file(self, config_file: Path) -> None:
        reader = EnvReader(
            env={"DASHENC_CRUSH_TOLERANCE": "0.8", "DASHENC_LOG_LEVEL": "error"}
        )
        config = get_config(config_file, env_reader=reader)

        assert config.encoder.crush_tolerance == 0.8
        assert config.logging.level == "error"
        assert config.encoder.probe_timeout == 20

    def test_cli_overrides_env(self, config_file: Path, tmp_path: Path) -> None:
        reader = EnvReader(env={"DASHENC_DISABLE_CRUSHING": "false"})
        config = get_config(
            config_file,
            ffmpeg_path=Path("/cli/ffmpeg"),
            working_directory=tmp_path,
            disable_quality_crushing=True,
            env_reader=reader,
        )

        assert config.tools.ffmpeg == Path("/cli/ffmpeg")
        assert config.encoder.working_directory == tmp_path
        assert config.encoder.disable_quality_crushing is True

    def test_invalid_values_lenient(self, tmp_path: Path, caplog) -> None:
        reader = EnvReader(env={"DASHENC_PROBE_TIMEOUT": "0"})
        config = get_config(tmp_path / "missing.toml", env_reader=reader)

        assert config.encoder.probe_timeout == 60
        assert "Invalid configuration, using defaults" in caplog.text

    def test_invalid_values_strict(self, tmp_path: Path) -> None:
        reader = EnvReader(env={"DASHENC_LOG_FORMAT": "xml"})
        with pytest.raises(ConfigError, match="Invalid configuration"):
            get_config(tmp_path / "missing.toml", env_reader=reader, strict=True)
