"""Tests for the transcoder config loader.

Validates that:
    - transcoder.yaml loads successfully with the current schema
    - Missing keys and out-of-range values raise ConfigError
    - options_for builds per-call options from configured defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from icon_transcoder.configs.loader import (
    ConfigError,
    TranscoderConfig,
    load_config,
)


def _write(tmp_path: Path, data: Any) -> Path:
    path = tmp_path / "transcoder.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def _valid() -> dict[str, Any]:
    return {
        "codegen": {"chunk_threshold_bytes": 2000, "template": "resizable", "indent": 4},
        "batch": {"extensions": [".scene.yaml"], "naming": "identifier"},
        "logging": {"level": "debug", "json": True},
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> TranscoderConfig:
    """Load the default transcoder.yaml shipped with the package."""
    return load_config()


# ---------------------------------------------------------------------------
# Default config
# ---------------------------------------------------------------------------


class TestDefaultConfig:
    def test_loads(self, config: TranscoderConfig) -> None:
        assert config.codegen.chunk_threshold_bytes == 3000
        assert config.codegen.template == "plain"
        assert not config.codegen.resizable

    def test_batch_extensions_are_suffixes(self, config: TranscoderConfig) -> None:
        assert config.batch.extensions
        assert all(ext.startswith(".") for ext in config.batch.extensions)
        assert config.batch.output_suffix == ".java"

    def test_options_for(self, config: TranscoderConfig) -> None:
        options = config.options_for("Close", "org.icons")
        assert options.class_name == "Close"
        assert options.package == "org.icons"
        assert options.chunk_threshold_bytes == config.codegen.chunk_threshold_bytes

    def test_options_for_invalid_name(self, config: TranscoderConfig) -> None:
        with pytest.raises(ConfigError, match="class_name"):
            config.options_for("close-icon")


# ---------------------------------------------------------------------------
# Custom files
# ---------------------------------------------------------------------------


class TestCustomConfig:
    def test_explicit_path(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, _valid()))
        assert config.codegen.resizable
        assert config.codegen.indent == 4
        assert config.batch.naming == "identifier"
        assert config.batch.output_suffix == ".java"
        assert config.logging.level == "DEBUG"
        assert config.logging.json

    def test_logging_section_optional(self, tmp_path: Path) -> None:
        data = _valid()
        del data["logging"]
        assert load_config(_write(tmp_path, data)).logging.level == "INFO"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="Empty"):
            load_config(path)

    def test_missing_section(self, tmp_path: Path) -> None:
        data = _valid()
        del data["batch"]
        with pytest.raises(ConfigError, match="Missing required"):
            load_config(_write(tmp_path, data))

    def test_non_numeric_threshold(self, tmp_path: Path) -> None:
        data = _valid()
        data["codegen"]["chunk_threshold_bytes"] = "lots"
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            load_config(_write(tmp_path, data))

    @pytest.mark.parametrize("section, key, value, match", [
        ("codegen", "chunk_threshold_bytes", 0, "must be positive"),
        ("codegen", "template", "fancy", "codegen.template"),
        ("codegen", "indent", -2, "indent"),
        ("batch", "naming", "snake", "batch.naming"),
        ("batch", "extensions", ["scene.yaml"], "must start with"),
        ("batch", "extensions", [], "at least one"),
        ("logging", "level", "LOUD", "logging.level"),
    ])
    def test_invalid_values(
        self, tmp_path: Path, section: str, key: str, value: Any, match: str,
    ) -> None:
        data = _valid()
        data[section][key] = value
        with pytest.raises(ConfigError, match=match):
            load_config(_write(tmp_path, data))
