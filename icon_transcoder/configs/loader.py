"""Configuration loader for the icon transcoder.

Loads and validates ``transcoder.yaml`` into typed, frozen dataclasses.
Chunk size, skeleton choice, batch discovery and logging defaults all
come from the config; per-call values (class and package name) do not.

Usage::

    from icon_transcoder.configs.loader import load_config
    cfg = load_config()                          # default path
    cfg = load_config("/custom/transcoder.yaml") # explicit path
    options = cfg.options_for("MyIcon", "org.example.icons")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from icon_transcoder.codegen.packager import TEMPLATE_NAMES
from icon_transcoder.codegen.transcoder import TranscodeOptions
from icon_transcoder.utils.fs import load_yaml

logger = logging.getLogger(__name__)

NAMING_STRATEGIES = ("pascal", "identifier")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CodegenConfig:
    """Code generation settings."""

    chunk_threshold_bytes: int
    template: str
    indent: int = 8

    @property
    def resizable(self) -> bool:
        return self.template == "resizable"


@dataclass(frozen=True)
class BatchConfig:
    """Directory conversion settings.

    ``extensions`` are matched against the end of the file name, so
    multi-part suffixes such as ``.scene.yaml.gz`` work.
    """

    extensions: tuple[str, ...]
    naming: str
    output_suffix: str = ".java"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    json: bool = False


@dataclass(frozen=True)
class TranscoderConfig:
    """Top-level configuration."""

    codegen: CodegenConfig
    batch: BatchConfig
    logging: LoggingConfig

    def options_for(
        self, class_name: str, package: str | None = None,
    ) -> TranscodeOptions:
        """Build per-call options from the configured defaults.

        Raises
        ------
        ConfigError
            If *class_name* or *package* is not a valid Java name.
        """
        try:
            return TranscodeOptions(
                class_name=class_name,
                package=package,
                resizable=self.codegen.resizable,
                chunk_threshold_bytes=self.codegen.chunk_threshold_bytes,
                indent=self.codegen.indent,
            )
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> TranscoderConfig:
    """Load and validate transcoder configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``transcoder.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    TranscoderConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "transcoder.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    data: dict[str, Any] = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")

    try:
        # -- codegen --------------------------------------------------------
        cg = data["codegen"]
        codegen = CodegenConfig(
            chunk_threshold_bytes=int(cg["chunk_threshold_bytes"]),
            template=str(cg.get("template", "plain")),
            indent=int(cg.get("indent", 8)),
        )

        # -- batch ----------------------------------------------------------
        bd = data["batch"]
        batch = BatchConfig(
            extensions=tuple(str(e) for e in bd["extensions"]),
            naming=str(bd.get("naming", "pascal")),
            output_suffix=str(bd.get("output_suffix", ".java")),
        )

        # -- logging (optional) ---------------------------------------------
        ld = data.get("logging") or {}
        logging_cfg = LoggingConfig(
            level=str(ld.get("level", "INFO")).upper(),
            json=bool(ld.get("json", False)),
        )

        config = TranscoderConfig(
            codegen=codegen, batch=batch, logging=logging_cfg,
        )

        _validate_config(config)
        logger.info("Configuration loaded successfully")
        return config

    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc


def _validate_config(cfg: TranscoderConfig) -> None:
    """Validate field ranges and enumerations.

    Raises
    ------
    ConfigError
        On any invalid value.
    """
    if cfg.codegen.chunk_threshold_bytes <= 0:
        raise ConfigError(
            f"codegen.chunk_threshold_bytes must be positive, "
            f"got {cfg.codegen.chunk_threshold_bytes}"
        )
    if cfg.codegen.template not in TEMPLATE_NAMES:
        raise ConfigError(
            f"codegen.template must be one of {TEMPLATE_NAMES}, "
            f"got '{cfg.codegen.template}'"
        )
    if cfg.codegen.indent < 0:
        raise ConfigError(f"codegen.indent must be >= 0, got {cfg.codegen.indent}")

    if not cfg.batch.extensions:
        raise ConfigError("batch.extensions must list at least one suffix")
    for ext in cfg.batch.extensions:
        if not ext.startswith("."):
            raise ConfigError(f"batch extension must start with '.', got '{ext}'")
    if cfg.batch.naming not in NAMING_STRATEGIES:
        raise ConfigError(
            f"batch.naming must be one of {NAMING_STRATEGIES}, "
            f"got '{cfg.batch.naming}'"
        )

    if cfg.logging.level not in LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {LOG_LEVELS}, got '{cfg.logging.level}'"
        )
