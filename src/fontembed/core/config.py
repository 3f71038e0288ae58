"""Configuration management for the font embedding pipeline."""

import logging
import re
from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidAssetUrlPatternError,
    InvalidChunkSizeError,
    InvalidCompressionLevelError,
    InvalidYamlError,
)
from .models import (
    ALL_VARIANTS,
    FontVariantKey,
    FontVariantRequest,
    default_variant_requests,
    family_slug,
)

DEFAULT_CHUNK_SIZE = 32 * 1024
DEFAULT_ASSET_URL_PATTERN = r"url\((https://fonts\.gstatic\.com/[^)]+\.ttf)\)"


class AcquirerConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ACQUIRER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Build-time font acquisition configuration."""

    family: str = Field("Nunito", min_length=1, description="Font family to download")
    css_api_url: str = Field(
        "https://fonts.googleapis.com/css2", description="Web font stylesheet API endpoint"
    )
    display: str = Field("swap", description="font-display value sent to the API")
    user_agent: str = Field(
        "Mozilla/5.0 (compatible; fontdownloader/1.0)",
        description="User agent; the API only serves TTF urls to non-browser agents",
    )
    timeout_seconds: float | None = Field(
        None, gt=0.0, description="Request timeout, None keeps the transport default"
    )
    verify_ssl: bool = Field(True, description="Verify TLS certificates")
    asset_url_pattern: str = Field(
        DEFAULT_ASSET_URL_PATTERN, description="Regex with one group capturing the TTF url"
    )
    compression_level: int = Field(9, description="gzip compression level")
    max_workers: int = Field(1, ge=1, description="Parallel variant downloads")
    show_progress: bool = Field(False, description="Show a download progress bar")
    fail_on_empty: bool = Field(
        False, description="Fail the build when no variant could be downloaded"
    )
    output_dir: Path | None = Field(
        None, description="Asset store package directory, defaults to fonts/<family slug>"
    )
    variants: list[FontVariantRequest] = Field(default_factory=default_variant_requests)

    @field_validator("compression_level")
    @classmethod
    def validate_compression_level(cls, v):
        if not 0 <= v <= 9:
            raise InvalidCompressionLevelError(v)
        return v

    @field_validator("asset_url_pattern")
    @classmethod
    def validate_asset_url_pattern(cls, v):
        try:
            compiled = re.compile(v)
        except re.error as e:
            raise InvalidAssetUrlPatternError(v, str(e)) from e
        if compiled.groups < 1:
            raise InvalidAssetUrlPatternError(v, "no capture group for the url")
        return v

    @property
    def store_dir(self) -> Path:
        """Directory the asset store is written to."""
        return self.output_dir or Path("fonts") / family_slug(self.family)


class LoaderConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Run-time font loading configuration."""

    family: str | None = Field(None, description="Registered family name, defaults to the store's")
    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, description="Bytes per base64 encoding chunk")
    required_variants: list[FontVariantKey] = Field(
        default_factory=lambda: list(ALL_VARIANTS),
        description="Variants that must be registered",
    )

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v):
        if v < 1:
            raise InvalidChunkSizeError(v)
        return v


class AppConfig(BaseSettings):
    """Main application configuration that loads from multiple sources."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field("INFO", description="Application log level")

    acquirer: AcquirerConfig = Field(default_factory=AcquirerConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def load_from_env(cls, env_file: str | Path | None = ".env") -> "AppConfig":
        """Load configuration from environment variables and .env file."""
        if env_file:
            env_file = Path(env_file)
            if env_file.exists():
                return cls(_env_file=env_file)
        return cls()


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with config_path.open() as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            raise EmptyConfigFileError(str(config_path))

        # YAML values win over .env for this instance
        if issubclass(config_class, BaseSettings):

            class TempConfig(config_class):
                model_config = SettingsConfigDict(
                    env_file=None,
                    case_sensitive=False,
                    extra="ignore",
                )

            return TempConfig(**config_data)
        return config_class(**config_data)

    except ConfigurationError:
        raise
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e
    except Exception as e:
        raise ConfigLoadError(str(e)) from e


def _add_yaml_methods():
    """Add YAML loading methods to configuration classes."""

    @classmethod
    def from_yaml(cls, config_path: str | Path):
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(cls, yaml_path: str | Path | None = None, env_file: str = ".env"):
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path and Path(yaml_path).exists():
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)

    for config_class in [AcquirerConfig, LoaderConfig, AppConfig]:
        config_class.from_yaml = from_yaml
        config_class.from_env_and_yaml = from_env_and_yaml


_add_yaml_methods()
