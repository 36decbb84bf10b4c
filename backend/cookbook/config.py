"""
Cookbook Services — Application Configuration
===============================================

What:  Typed configuration for both services, grouped into the Global,
       Database, Oauth and Cors sections.
How:   pydantic-settings merges, highest priority first:
           1. keyword arguments (tests, tools)
           2. environment variables  COOKBOOK_<SECTION>__<KEY>
              (e.g. COOKBOOK_DATABASE__HOST, COOKBOOK_OAUTH__REALM)
           3. a YAML file: $COOKBOOK_CONFIG_FILE, else ./config.yaml,
              else /config/config.yaml
           4. field defaults
       YAML keys may be written in PascalCase (``LogLevel``, ``SSLMode``)
       or snake_case; they are normalised to field names on load.

Example config.yaml:
    Global:
      LogLevel: DEBUG
    Database:
      Host: postgres
      Username: cookbook
      Password: secret
      Database: cookbook
      Port: 5432
      SSLMode: disable
      Timezone: Europe/Berlin
    Oauth:
      Service: recipe-service
      Url: https://keycloak.example.com
      Realm: cookbook
      DisableSecurityCheck: false
    Cors:
      AllowedOrigins: ["https://cookbook.example.com"]

Reload:
    reload_settings() re-reads every source and re-initialises logging. A
    running service calls it on SIGHUP (see cookbook.main.serve).
    The database engine and the CORS middleware keep the values they were
    built with until the process restarts.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_snake
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from sqlalchemy.engine import URL

from cookbook.logger import setup_logging

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "COOKBOOK_CONFIG_FILE"
CONFIG_SEARCH_PATHS = (Path("config.yaml"), Path("/config/config.yaml"))

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# YAML section names that cannot be used verbatim as Python field names
_SECTION_ALIASES = {"global": "global_settings"}


# ══════════════════════════════════════════════════════════════════════════
# Sections
# ══════════════════════════════════════════════════════════════════════════


class GlobalConfig(BaseModel):
    """Process-wide settings."""

    log_level: str = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Unknown levels fall back to INFO with a warning instead of failing startup."""
        upper = str(v).upper()
        if upper not in VALID_LOG_LEVELS:
            logger.warning("Invalid log level '%s', defaulting to INFO", v)
            return "INFO"
        return upper


class DatabaseConfig(BaseModel):
    """PostgreSQL connection and pool settings."""

    host: str = Field(default="localhost")
    port: int = Field(default=5432, ge=1, le=65535)
    username: str = Field(default="cookbook")
    password: str = Field(default="cookbook")
    database: str = Field(default="cookbook")
    ssl_mode: str = Field(default="disable")
    timezone: str = Field(default="UTC")

    # Full SQLAlchemy URL; overrides the discrete fields above when set
    url: Optional[str] = Field(default=None)

    pool_size: int = Field(default=20, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0, le=50)
    pool_pre_ping: bool = Field(default=True)

    @property
    def sqlalchemy_url(self) -> str:
        if self.url:
            return self.url
        return URL.create(
            "postgresql+asyncpg",
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        ).render_as_string(hide_password=False)

    @property
    def connect_args(self) -> Dict[str, Any]:
        """asyncpg connection arguments for SSL mode and session time zone."""
        if self.url:
            return {}
        return {
            "ssl": self.ssl_mode,
            "server_settings": {"timezone": self.timezone},
        }


class OauthConfig(BaseModel):
    """OIDC identity provider (Keycloak) settings."""

    service: str = Field(default="cookbook")
    url: str = Field(default="http://localhost:8180")
    realm: str = Field(default="cookbook")
    full_certs_path: Optional[str] = Field(default=None)
    disable_security_check: bool = Field(default=False)

    @property
    def issuer(self) -> str:
        return f"{self.url.rstrip('/')}/realms/{self.realm}"

    @property
    def certs_url(self) -> str:
        if self.full_certs_path:
            return self.full_certs_path
        return f"{self.issuer}/protocol/openid-connect/certs"


class CorsConfig(BaseModel):
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    allow_credentials: bool = Field(default=False)
    allowed_headers: List[str] = Field(default_factory=lambda: ["*"])
    allowed_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    expose_headers: List[str] = Field(
        default_factory=lambda: ["Content-Length", "X-Request-ID"]
    )
    max_age: int = Field(default=12 * 60 * 60, ge=0)


# ══════════════════════════════════════════════════════════════════════════
# YAML Source
# ══════════════════════════════════════════════════════════════════════════


def _normalise_keys(data: Any) -> Any:
    """Recursively map PascalCase / camelCase mapping keys to snake_case."""
    if not isinstance(data, dict):
        return data
    normalised = {}
    for key, value in data.items():
        name = to_snake(str(key))
        normalised[_SECTION_ALIASES.get(name, name)] = _normalise_keys(value)
    return normalised


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a YAML config file, if one was found."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_path: Optional[Path]) -> None:
        super().__init__(settings_cls)
        self._data: Dict[str, Any] = {}
        if yaml_path and yaml_path.is_file():
            try:
                raw = yaml.safe_load(yaml_path.read_text(encoding="utf-8"))
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {yaml_path}: {exc}") from exc
            if raw is None:
                raw = {}
            if not isinstance(raw, dict):
                raise ValueError(f"Config file {yaml_path} must contain a mapping")
            self._data = _normalise_keys(raw)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> Dict[str, Any]:
        return self._data


def find_config_file() -> Optional[Path]:
    """Locate the YAML config file, or None when running on env/defaults only."""
    explicit = os.environ.get(CONFIG_FILE_ENV)
    if explicit:
        return Path(explicit)
    for candidate in CONFIG_SEARCH_PATHS:
        if candidate.is_file():
            return candidate
    return None


# Thread-local storage for the YAML path during construction.
_tls = threading.local()


# ══════════════════════════════════════════════════════════════════════════
# Settings
# ══════════════════════════════════════════════════════════════════════════


class Settings(BaseSettings):
    """Root settings object for a cookbook service process."""

    model_config = {
        "env_prefix": "COOKBOOK_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }

    global_settings: GlobalConfig = Field(default_factory=GlobalConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    oauth: OauthConfig = Field(default_factory=OauthConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_path = getattr(_tls, "yaml_path", None)
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls, yaml_path),
        )

    @classmethod
    def load(cls, config_file: Optional[Path] = None, **overrides: Any) -> "Settings":
        """
        Build settings from all sources.

        Args:
            config_file: Explicit YAML path; discovered via find_config_file()
                         when omitted.
            overrides:   Section values with the highest priority.
        """
        yaml_path = config_file if config_file is not None else find_config_file()
        _tls.yaml_path = yaml_path
        try:
            loaded = cls(**overrides)
        finally:
            _tls.yaml_path = None
        if yaml_path is not None:
            logger.debug("Configuration loaded from %s", yaml_path)
        return loaded


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_file: Optional[Path] = None) -> Settings:
    """
    Re-read configuration and re-initialise logging.

    Only the settings object and the root log level change; the engine and
    middleware created at startup are left as they are.
    """
    global _settings
    _settings = Settings.load(config_file)
    setup_logging(_settings.global_settings.log_level)
    logger.info("Configuration reloaded")
    return _settings
