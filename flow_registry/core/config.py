"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-specific requirements (e.g. DATABASE_URL for
postgres) are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATABASE_BACKENDS = ("memory", "postgres")
TELEMETRY_EXPORTERS = ("console", "otlp", "none")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults; validate_backend enforces
    database_url when database_backend is 'postgres'.
    """

    # App
    app_name: str = "flow-registry"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database: "memory" (process-local store) or "postgres" (SQLAlchemy + Alembic)
    database_backend: str = "memory"
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Versioning: attempts at "next version + insert" before a conflict is surfaced
    version_assign_max_attempts: int = 5

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"
    correlation_id_header: str = "X-Correlation-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backend(self) -> "Settings":
        """Validate database backend and versioning settings.

        - Postgres: DATABASE_URL required.
        - Memory: nothing required; data lives for the process lifetime.
        - Telemetry: known exporter; OTLP needs an endpoint.
        """
        if self.database_backend not in DATABASE_BACKENDS:
            raise ValueError(
                f"database_backend must be one of {DATABASE_BACKENDS}, got: {self.database_backend!r}"
            )
        if self.database_backend == "postgres" and not self.database_url:
            raise ValueError(
                "DATABASE_URL is required when database_backend is 'postgres'. "
                "Set in environment or .env file."
            )
        if self.version_assign_max_attempts < 1:
            raise ValueError("VERSION_ASSIGN_MAX_ATTEMPTS must be at least 1")
        if self.telemetry_exporter not in TELEMETRY_EXPORTERS:
            raise ValueError(
                f"telemetry_exporter must be one of {TELEMETRY_EXPORTERS}, got: {self.telemetry_exporter!r}"
            )
        if self.telemetry_exporter == "otlp" and not self.telemetry_otlp_endpoint:
            raise ValueError(
                "TELEMETRY_OTLP_ENDPOINT is required when telemetry_exporter is 'otlp'"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
