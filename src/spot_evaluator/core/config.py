"""Configuration management for Spot Evaluator"""

import yaml
import json
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import logging

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class AWSConfig(BaseModel):
    """AWS session and API configuration"""
    profile: Optional[str] = None
    region: str = "us-east-1"
    # The Price List API is only served from a few regions
    pricing_region: str = "us-east-1"
    product_description: str = "Linux/UNIX"
    max_retries: int = 5
    connect_timeout: int = 10
    read_timeout: int = 30


class KubernetesConfig(BaseModel):
    """Kubernetes client and node label configuration"""
    kubeconfig: Optional[Path] = None
    context: Optional[str] = None
    in_cluster: bool = False
    instance_type_label: str = "node.kubernetes.io/instance-type"
    zone_label: str = "topology.kubernetes.io/zone"
    region_label: str = "topology.kubernetes.io/region"
    capacity_type_label: str = "eks.amazonaws.com/capacityType"
    spot_capacity_value: str = "SPOT"


class RecommendationConfig(BaseModel):
    """Replacement ranking configuration"""
    limit: int = 3
    max_workers: int = 8
    timeout: Optional[float] = None  # seconds per node group

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_workers must be at least 1")
        return value


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = "INFO"
    file: Optional[Path] = None
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5
    console: bool = True
    structured: bool = False


class Settings(BaseSettings):
    """Main application settings"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SPOT_EVALUATOR_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Spot Evaluator"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False

    aws: AWSConfig = Field(default_factory=AWSConfig)
    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)
    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file"""
        if not path.exists():
            logger.warning(f"Configuration file {path} not found, using defaults")
            return cls()

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        return cls._from_mapping({} if data is None else data, path)

    @classmethod
    def from_json(cls, path: Path) -> "Settings":
        """Load settings from JSON file"""
        if not path.exists():
            logger.warning(f"Configuration file {path} not found, using defaults")
            return cls()

        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        return cls._from_mapping(data, path)

    @classmethod
    def _from_mapping(cls, data, path: Path) -> "Settings":
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration in {path}: expected a mapping, got {type(data).__name__}"
            )
        return cls(**data)

    @classmethod
    def from_file(cls, path: Path) -> "Settings":
        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    def to_yaml(self, path: Path) -> None:
        """Save settings to YAML file"""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False)

    def to_json(self, path: Path) -> None:
        """Save settings to JSON file"""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)


DEFAULT_CONFIG_PATH = Path.home() / ".spot-evaluator" / "config.yaml"

# Global settings instance
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings instance"""
    global settings
    if settings is None:
        # Try to load from default locations
        config_paths = [
            DEFAULT_CONFIG_PATH,
            DEFAULT_CONFIG_PATH.with_suffix(".json"),
            Path("./config.yaml"),
            Path("./config.json"),
        ]

        for path in config_paths:
            if path.exists():
                settings = Settings.from_file(path)
                logger.info(f"Loaded configuration from {path}")
                break
        else:
            settings = Settings()
            logger.info("Using default configuration")

    return settings


def reload_settings(path: Optional[Path] = None) -> Settings:
    """Reload settings from file"""
    global settings

    if path:
        settings = Settings.from_file(path)
    else:
        settings = None
        settings = get_settings()

    return settings
