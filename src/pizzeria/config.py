"""Application settings loaded from the environment."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

VERSION = "1.0.0"


class Settings(BaseSettings):
    """Runtime configuration for the pizzeria service.

    Every value can be overridden with a ``PIZZERIA_``-prefixed environment
    variable or a ``.env`` file. Protean's own persistence settings live in
    ``pyproject.toml`` and are selected with ``PROTEAN_ENV``.
    """

    version: str = VERSION
    environment: str = "development"
    log_level: str | None = None

    # Session tokens
    jwt_secret: str = "dev-secret-change-me"

    # Pizza factory
    factory_adapter: str = "http"
    factory_url: str = "https://pizza-factory.cs329.click"
    factory_api_key: str = ""
    factory_timeout_seconds: float = 10.0

    # Listing
    orders_page_size: int = 10

    # HTTP surface
    cors_allowed_origins: list[str] = ["*"]
    expose_stack_traces: bool = True

    # Seeded on startup when both are set
    default_admin_name: str = "pizza admin"
    default_admin_email: str | None = None
    default_admin_password: str | None = None

    # Telemetry shipping (Grafana OTLP metrics and Loki logs)
    telemetry_enabled: bool = True
    telemetry_queue_size: int = 1000
    telemetry_timeout_seconds: float = 5.0
    metrics_url: str = ""
    metrics_api_key: str = ""
    metrics_source: str = "pizzeria-service"
    metrics_flush_interval_seconds: float = 30.0
    logging_url: str = ""
    logging_user_id: str = ""
    logging_api_key: str = ""
    logging_source: str = "pizzeria-service"

    model_config = SettingsConfigDict(
        env_prefix="PIZZERIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
