"""Configuration system using pydantic-settings with environment variable loading."""

from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict


class UpstreamSettings(BaseSettings):
    """Banco Central SGS API connection settings."""

    model_config = SettingsConfigDict(env_prefix="UPSTREAM_")

    base_url: str = "https://api.bcb.gov.br/"
    timeout_seconds: float = 30.0


class RefreshSettings(BaseSettings):
    """Schedule of the per-indicator refresh jobs."""

    model_config = SettingsConfigDict(env_prefix="REFRESH_")

    enabled: bool = True
    update_interval_hours: float = 24.0
    initial_delay_seconds: float = 2.0
    cache_margin_hours: float = 1.0  # cache outlives one missed cycle

    @property
    def update_interval(self) -> timedelta:
        return timedelta(hours=self.update_interval_hours)

    @property
    def initial_delay(self) -> timedelta:
        return timedelta(seconds=self.initial_delay_seconds)

    @property
    def cache_margin(self) -> timedelta:
        return timedelta(hours=self.cache_margin_hours)


class CacheSettings(BaseSettings):
    """Result cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    default_ttl_seconds: int = 3600  # used by self-healing writes from the read path


class DatabaseSettings(BaseSettings):
    """Indicator store location."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    path: str = "data/indicators.db"


class ApiSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    upstream: UpstreamSettings = UpstreamSettings()
    refresh: RefreshSettings = RefreshSettings()
    cache: CacheSettings = CacheSettings()
    database: DatabaseSettings = DatabaseSettings()
    api: ApiSettings = ApiSettings()
