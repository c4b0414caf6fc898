"""
Configuration management for EngineStats.

Loads configuration from YAML files and environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


MIN_INTERVAL_SECONDS = 1.0
OUTPUT_FORMATS = ("text", "json")


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass
class SamplingConfig:
    """Sampling schedule configuration."""

    interval_seconds: float = 1.0


@dataclass
class CollectionConfig:
    """Which hardware providers are included in the tree."""

    collect_cpu: bool = True
    collect_gpu: bool = True
    collect_memory: bool = True


@dataclass
class DisplayConfig:
    """Snapshot presentation configuration."""

    gpu_unavailable_text: str = "N/A"
    output_format: str = "text"  # text or json


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Main configuration container."""

    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    collection: CollectionConfig = field(default_factory=CollectionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            config = cls()
            config._apply_env_overrides()
            config.validate()
            return config

        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create config from dictionary."""
        config = cls()

        try:
            if "sampling" in data:
                config.sampling = SamplingConfig(**data["sampling"])

            if "collection" in data:
                config.collection = CollectionConfig(**data["collection"])

            if "display" in data:
                config.display = DisplayConfig(**data["display"])

            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])
        except TypeError as e:
            raise ConfigError(f"Unknown configuration key: {e}") from e

        # Override with environment variables
        config._apply_env_overrides()
        config.validate()

        return config

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        if os.getenv("ENGINESTATS_INTERVAL"):
            try:
                self.sampling.interval_seconds = float(os.getenv("ENGINESTATS_INTERVAL"))
            except ValueError as e:
                raise ConfigError(f"ENGINESTATS_INTERVAL must be a number: {e}") from e
        if os.getenv("ENGINESTATS_COLLECT_GPU"):
            self.collection.collect_gpu = os.getenv("ENGINESTATS_COLLECT_GPU").lower() == "true"
        if os.getenv("ENGINESTATS_OUTPUT"):
            self.display.output_format = os.getenv("ENGINESTATS_OUTPUT").lower()

        # Logging
        if os.getenv("LOG_LEVEL"):
            self.logging.level = os.getenv("LOG_LEVEL")

    def validate(self):
        """Check values that cannot be expressed by the dataclass types."""
        try:
            interval = float(self.sampling.interval_seconds)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"sampling.interval_seconds must be a number: {e}") from e
        if interval < MIN_INTERVAL_SECONDS:
            raise ConfigError(
                f"sampling.interval_seconds must be at least {MIN_INTERVAL_SECONDS}, got {interval}"
            )
        self.sampling.interval_seconds = interval

        if self.display.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"display.output_format must be one of {', '.join(OUTPUT_FORMATS)}, "
                f"got {self.display.output_format!r}"
            )

    def to_yaml(self, path: str):
        """Save configuration to YAML file."""
        data = {
            "sampling": {
                "interval_seconds": self.sampling.interval_seconds,
            },
            "collection": {
                "collect_cpu": self.collection.collect_cpu,
                "collect_gpu": self.collection.collect_gpu,
                "collect_memory": self.collection.collect_memory,
            },
            "display": {
                "gpu_unavailable_text": self.display.gpu_unavailable_text,
                "output_format": self.display.output_format,
            },
            "logging": {
                "level": self.logging.level,
                "file_path": self.logging.file_path,
                "max_file_size_mb": self.logging.max_file_size_mb,
                "backup_count": self.logging.backup_count,
            },
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    # Check common locations
    candidates = [
        Path("config/config.yaml"),
        Path("config.yaml"),
        Path.home() / ".enginestats" / "config.yaml",
    ]

    for path in candidates:
        if path.exists():
            return str(path)

    # Return the first candidate as default
    return str(candidates[0])
