"""Application configuration from environment variables."""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "FitTrack API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Database (PostgreSQL)
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "fittrack"
    database_password: str = ""  # Set in .env - never commit
    database_name: str = "fittrack"
    database_ssl_mode: str = "prefer"
    # Full async DSN; overrides the parts above (e.g. sqlite+aiosqlite:///./fittrack.db)
    database_dsn: str = ""
    auto_create_tables: bool = False

    # Pool (production tuning)
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # CORS: comma-separated list of allowed origins in production
    cors_origins: str = ""

    # Auth
    secret_key: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30  # session timeout
    max_login_attempts: int = 5
    lockout_minutes: int = 15
    audit_log_retention_days: int = 90

    # Encryption
    encryption_secret: str = "dev-encryption-secret-change-me"
    encryption_iterations: int = 10000

    # Privacy
    consent_expiry_days: int = 365
    data_retention_days: int = 365
    deletion_grace_days: int = 30

    # Data cache
    cache_ttl_seconds: int = 300
    cache_max_entries: int = 100

    # Performance budget for a single API response
    api_response_budget_ms: float = 2000.0

    def _build_db_url(self, scheme: str = "postgresql", ssl_query: str = "sslmode=prefer") -> str:
        user = quote_plus(self.database_user)
        password = quote_plus(self.database_password)
        return (
            f"{scheme}://{user}:{password}@{self.database_host}:{self.database_port}"
            f"/{self.database_name}?{ssl_query}"
        )

    @property
    def database_url(self) -> str:
        """Synchronous URL for Alembic and tooling."""
        if self.database_dsn:
            return self.database_dsn.replace("+aiosqlite", "").replace("+asyncpg", "+psycopg2")
        return self._build_db_url(scheme="postgresql", ssl_query=f"sslmode={self.database_ssl_mode}")

    @property
    def async_database_url(self) -> str:
        """Async URL for FastAPI (asyncpg driver, or the DSN override)."""
        if self.database_dsn:
            return self.database_dsn
        return self._build_db_url(scheme="postgresql+asyncpg", ssl_query=f"ssl={self.database_ssl_mode}")

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
