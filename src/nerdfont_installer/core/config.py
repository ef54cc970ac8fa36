"""Configuration management for the Nerd Font installer."""

from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigFileNotFoundError, ConfigurationError, InvalidYamlError

NERD_FONTS_CATALOG_URL = (
    "https://raw.githubusercontent.com/ryanoasis/nerd-fonts/master/bin/scripts/lib/fonts.json"
)
NERD_FONTS_RELEASE_URL = "https://api.github.com/repos/ryanoasis/nerd-fonts/releases/latest"
CASCADIA_RELEASE_URL = "https://api.github.com/repos/microsoft/cascadia-code/releases/latest"

DEFAULT_DISALLOWED_MARKERS = [
    "AZUREPS_HOST_ENVIRONMENT",
    "ACC_CLOUD",
    "CLOUD_SHELL",
    "CODESPACES",
    "REMOTE_CONTAINERS",
]


def default_cache_file() -> Path:
    return Path.home() / ".cache" / "nerdfont-installer" / "fonts.json"


class InstallerConfig(BaseSettings):
    """Installer configuration.

    Values come from ``NERDFONTS_``-prefixed environment variables, an
    optional ``.env`` file, or a YAML file via :meth:`from_env_and_yaml`.
    """

    model_config = SettingsConfigDict(
        env_prefix="NERDFONTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Catalog
    catalog_url: str = Field(NERD_FONTS_CATALOG_URL, description="Font catalog JSON URL")
    nerd_fonts_release_url: str = Field(
        NERD_FONTS_RELEASE_URL, description="Release metadata URL for catalog entries"
    )
    cascadia_release_url: str = Field(
        CASCADIA_RELEASE_URL, description="Release metadata URL for Cascadia entries"
    )
    cache_file: Path = Field(default_factory=default_cache_file, description="Catalog cache")
    catalog_cache_ttl_seconds: int = Field(120, gt=0, description="Catalog freshness window")

    # HTTP
    request_timeout_seconds: int = Field(60, gt=0, description="HTTP request timeout")
    chunk_size: int = Field(65536, gt=0, description="Download chunk size in bytes")
    user_agent: str = Field("nerdfont-installer/1.0.0", description="HTTP User-Agent")
    github_api_host: str = Field("api.github.com", description="GitHub API host name")
    github_token: str | None = Field(None, description="Optional GitHub token", repr=False)
    max_rate_limit_retries: int = Field(5, ge=0, description="API rate limit retries")

    # Installation
    copy_max_attempts: int = Field(10, ge=1, description="Font copy attempts")
    copy_retry_delay_seconds: float = Field(1.0, ge=0.0, description="Delay between copies")
    disallowed_environment_markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DISALLOWED_MARKERS),
        description="Environment variables that mark unsupported hosts",
    )
    show_progress: bool = Field(True, description="Show download progress bars")

    @field_validator("github_api_host")
    @classmethod
    def normalize_api_host(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("catalog_url", "nerd_fonts_release_url", "cascadia_release_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("URL must start with https:// or http://")
        return v

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "InstallerConfig":
        """Load configuration from a YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigFileNotFoundError(str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidYamlError(str(config_path), str(e)) from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration in {config_path} must be a mapping")

        return cls(_env_file=None, **config_data)

    @classmethod
    def from_env_and_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str = ".env"
    ) -> "InstallerConfig":
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path:
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)
