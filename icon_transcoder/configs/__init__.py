"""Transcoder configuration loading and validation."""

from icon_transcoder.configs.loader import (
    BatchConfig,
    CodegenConfig,
    ConfigError,
    LoggingConfig,
    TranscoderConfig,
    load_config,
)

__all__ = [
    "BatchConfig",
    "CodegenConfig",
    "ConfigError",
    "LoggingConfig",
    "TranscoderConfig",
    "load_config",
]
