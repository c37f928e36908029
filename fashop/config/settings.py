from decimal import Decimal
from urllib.parse import quote_plus

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration backed by Pydantic BaseSettings.
    Values are loaded from environment variables and the ``.env`` file.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "FASHOP Marketplace API"
    PROJECT_DESCRIPTION: str = "Marketplace backend connecting local suppliers to customers"
    VERSION: str = "0.1.0"

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("fashop", description="Database name")
    DB_USER: str = Field("fashop", description="PostgreSQL user")
    DB_PASSWORD: str | None = Field(None, description="PostgreSQL password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")
    DB_URL: str | None = Field(
        None, description="Full async SQLAlchemy URL; overrides the DB_* parts when set (e.g. sqlite+aiosqlite)"
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(10, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(20, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections every N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout waiting for a pooled connection")

    # Marketplace business rules
    CURRENCY: str = Field("GNF", description="Currency used for every price")
    ORDER_DELIVERY_FEE: Decimal = Field(Decimal("15000"), description="Flat delivery fee added to each order")
    ORDER_NUMBER_MAX_ATTEMPTS: int = Field(3, description="Attempts to allocate a unique order number")
    ORDER_UPDATE_MAX_ATTEMPTS: int = Field(3, description="Retries on optimistic concurrency conflicts")

    # SMS gateway
    SMS_ENABLED: bool = Field(True, description="Send notifications at all")
    SMS_API_URL: str | None = Field(None, description="HTTP endpoint of the SMS provider")
    SMS_API_KEY: str | None = Field(None, description="API key of the SMS provider")
    SMS_SENDER: str = Field("FASHOP", description="Sender name shown on SMS")
    SMS_TIMEOUT: float = Field(10.0, description="SMS request timeout in seconds")

    # Security
    ADMIN_API_TOKEN: str | None = Field(None, description="Token expected in the X-Admin-Token header")
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Sentry
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN; error tracking disabled when empty")

    # Environment and logging
    ENVIRONMENT: str = Field("development", description="Execution environment")
    DEBUG: bool = Field(False, description="Debug mode")
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="colored, json or plain")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"colored", "json", "plain"}
        if v not in allowed:
            raise ValueError(f"LOG_FORMAT must be one of {sorted(allowed)}")
        return v

    @field_validator("ORDER_NUMBER_MAX_ATTEMPTS", "ORDER_UPDATE_MAX_ATTEMPTS")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Attempt counts must be at least 1")
        return v

    @computed_field
    @property
    def is_development(self) -> bool:
        """Whether the app runs in development mode"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @computed_field
    @property
    def sms_configured(self) -> bool:
        """Whether a real SMS provider is configured (otherwise delivery is simulated)"""
        return bool(self.SMS_API_URL and self.SMS_API_KEY)

    @computed_field
    @property
    def async_database_url(self) -> str:
        """Async SQLAlchemy URL used by the application engine"""
        if self.DB_URL:
            return self.DB_URL
        return self._build_url("postgresql+asyncpg")

    @computed_field
    @property
    def database_url(self) -> str:
        """Sync URL used by Alembic migrations"""
        if self.DB_URL:
            return self.DB_URL.replace("+aiosqlite", "").replace("+asyncpg", "+psycopg")
        return self._build_url("postgresql+psycopg")

    def _build_url(self, driver: str) -> str:
        if not self.DB_NAME:
            raise ValueError("Database name is required (DB_NAME)")
        user = quote_plus(self.DB_USER)
        if self.DB_PASSWORD:
            credentials = f"{user}:{quote_plus(self.DB_PASSWORD)}"
        else:
            credentials = user
        return f"{driver}://{credentials}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance.
    Avoids loading environment variables more than once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
