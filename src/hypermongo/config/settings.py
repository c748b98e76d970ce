"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (HYPERMONGO_ prefix), then a .env file
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, YamlConfigSettingsSource

from hypermongo.adapters.mongodb.meta import DEFAULT_META_DB_NAME
from hypermongo.clients.atlas.client import AtlasAuth

# YAML file read by the next Settings construction inside from_yaml
_yaml_file: ContextVar[Path | None] = ContextVar("hypermongo_yaml_file", default=None)


class AtlasSettings(BaseModel):
    """Atlas Data API options, required when ``url`` is an https endpoint.

    Exactly one auth scheme must be set: ``api_key``, ``jwt_token_string``,
    or ``email`` together with ``password``.
    """

    data_source: str = Field(default="", description="Atlas cluster name")
    api_key: str | None = Field(default=None, description="Data API key")
    jwt_token_string: str | None = Field(default=None, description="Custom JWT bearer token")
    email: str | None = Field(default=None, description="Email/password auth user")
    password: str | None = Field(default=None, description="Email/password auth secret")
    timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")

    def auth(self) -> AtlasAuth:
        return AtlasAuth(
            api_key=self.api_key,
            jwt_token_string=self.jwt_token_string,
            email=self.email,
            password=self.password,
        )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root adapter settings.

    Configuration is loaded from environment variables with the HYPERMONGO_ prefix.
    Nested settings use double underscores: HYPERMONGO_ATLAS__API_KEY=secret

    Example:
        HYPERMONGO_URL=mongodb://127.0.0.1:27017
        HYPERMONGO_URL=https://data.mongodb-api.com/app/<app-id>/endpoint/data/v1
        HYPERMONGO_ATLAS__DATA_SOURCE=Cluster0
    """

    model_config = {
        "env_prefix": "HYPERMONGO_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    url: str = Field(default="mongodb://127.0.0.1:27017", description="MongoDB connection string or Atlas Data API url")
    meta_db_name: str = Field(default=DEFAULT_META_DB_NAME, description="Reserved control database/collection name")

    atlas: AtlasSettings = Field(default_factory=AtlasSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=_yaml_file.get()),
            file_secret_settings,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        (and ``.env``) still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        token = _yaml_file.set(config_path)
        try:
            return cls()
        finally:
            _yaml_file.reset(token)
