"""Configuration management for pricecache"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import logging

logger = logging.getLogger(__name__)

DEFAULT_REGION_DESCRIPTION = "US East (N. Virginia)"


class AWSConfig(BaseModel):
    """AWS session configuration"""
    profile: Optional[str] = None
    region: str = "us-east-1"
    # The pricing API only has endpoints in us-east-1 and ap-south-1
    pricing_region: str = "us-east-1"
    max_retries: int = Field(default=5, ge=0)
    timeout: int = Field(default=60, ge=1)


class PricingConfig(BaseModel):
    """Filters and windows used when querying upstream pricing"""
    service_code: str = "AmazonEC2"
    operating_system: str = "linux"
    capacity_status: str = "used"
    pre_installed_sw: str = "NA"
    tenancy: str = "shared"
    product_description: str = "Linux/UNIX (Amazon VPC)"
    spot_days_back: int = Field(default=30, ge=1, le=90)
    default_region_description: str = DEFAULT_REGION_DESCRIPTION


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = "INFO"
    file: Optional[Path] = None
    console: bool = True
    structured: bool = False

    @field_validator("level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level


class Settings(BaseSettings):
    """Main application settings"""
    app_name: str = "pricecache"
    version: str = "0.1.0"
    debug: bool = False

    aws: AWSConfig = Field(default_factory=AWSConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PRICECACHE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file"""
        if not path.exists():
            logger.warning(f"Configuration file {path} not found, using defaults")
            return cls()

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        return cls(**data if data else {})

    @classmethod
    def from_json(cls, path: Path) -> "Settings":
        """Load settings from JSON file"""
        if not path.exists():
            logger.warning(f"Configuration file {path} not found, using defaults")
            return cls()

        with open(path, 'r') as f:
            data = json.load(f)

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
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


# Global settings instance
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings instance"""
    global settings
    if settings is None:
        config_paths = [
            Path.home() / ".pricecache" / "config.yaml",
            Path.home() / ".pricecache" / "config.json",
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
            logger.debug("Using default configuration")

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
