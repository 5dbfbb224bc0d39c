"""Configuration system for biresamp.

Supports loading from YAML files, dicts, or programmatic construction
via Pydantic models. The config controls which channel is converted,
how out-of-range sums are narrowed, the output subtype and logging.

The filter design itself (80 dB, 5 zero-crossings, 512 phases) is fixed
and deliberately not configurable.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from biresamp.audio.resampler import DEFAULT_BLOCK_SIZE
from biresamp.core.models import OverflowMode


class ResampleConfig(BaseModel):
    """Resampling loop configuration."""

    channel: int = Field(default=0, ge=0)
    overflow: OverflowMode = OverflowMode.SATURATE
    block_size: int = Field(default=DEFAULT_BLOCK_SIZE, gt=0)


class OutputConfig(BaseModel):
    """Output file configuration."""

    # None picks PCM_16 where the container allows it
    subtype: str | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"


class ConverterConfig(BaseModel):
    """Top-level biresamp configuration.

    Examples:
        # Programmatic
        config = ConverterConfig(resample=ResampleConfig(channel=1))

        # From YAML
        config = ConverterConfig.from_yaml("biresamp.yaml")

        # Shorthand
        config = ConverterConfig.from_dict({"channel": 1, "overflow": "wrap"})
    """

    resample: ResampleConfig = Field(default_factory=ResampleConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ConverterConfig:
        """Load configuration from a YAML file."""
        path = Path(path)
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        return cls._from_raw(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConverterConfig:
        """Load configuration from a dictionary.

        Supports both the full nested format and a flat shorthand format:

        Full format:
            {"resample": {"channel": 1, "overflow": "wrap"}, "logging": {"level": "DEBUG"}}

        Shorthand format:
            {"channel": 1, "overflow": "wrap", "log_level": "DEBUG"}
        """
        return cls._from_raw(copy.deepcopy(data))

    @classmethod
    def _from_raw(cls, data: dict[str, Any]) -> ConverterConfig:
        """Normalize and construct config from a raw dict."""
        if not isinstance(data, dict):
            raise TypeError(f"Config must be a mapping, got {type(data).__name__}")

        flat_mappings = {
            "channel": ("resample", "channel"),
            "overflow": ("resample", "overflow"),
            "block_size": ("resample", "block_size"),
            "subtype": ("output", "subtype"),
            "log_level": ("logging", "level"),
        }

        for flat_key, (section, nested_key) in flat_mappings.items():
            if flat_key in data:
                if section not in data:
                    data[section] = {}
                data[section][nested_key] = data.pop(flat_key)

        return cls(**data)

    def with_overrides(self, **overrides: Any) -> ConverterConfig:
        """Return a copy with flat shorthand keys applied; ``None`` values are ignored."""
        data = self.model_dump(mode="json")
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ConverterConfig._from_raw(data)


def load_config(source: str | Path | dict[str, Any] | ConverterConfig | None = None) -> ConverterConfig:
    """Load a ConverterConfig from any supported source.

    Args:
        source: A YAML file path (str/Path), a dict, an existing
            ConverterConfig, or None for the defaults.

    Returns:
        A ConverterConfig instance.
    """
    if source is None:
        return ConverterConfig()
    if isinstance(source, ConverterConfig):
        return source
    if isinstance(source, dict):
        return ConverterConfig.from_dict(source)
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        return ConverterConfig.from_yaml(path)
    raise TypeError(f"Cannot load config from {type(source)}")
