"""
Business Dashboard Reporting Service
Centralized Configuration Management

Configuration is read from environment variables (and an optional .env file)
using Pydantic settings, with validation and type safety.
"""

from functools import lru_cache
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Record store database configuration"""

    model_config = SettingsConfigDict(env_prefix="DATABASE_", env_file=".env", extra="ignore")

    url: str = Field(
        default="sqlite+aiosqlite:///./bizdash.db",
        description="SQLAlchemy async URL (sqlite+aiosqlite or postgresql+asyncpg)",
    )
    echo: bool = Field(default=False, description="Echo SQL queries")

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured backend is SQLite"""
        return self.url.startswith("sqlite")


class StoreSettings(BaseSettings):
    """Collection names inside the record store"""

    model_config = SettingsConfigDict(env_prefix="STORE_", env_file=".env", extra="ignore")

    products_collection: str = Field(default="products", description="Products collection")
    customers_collection: str = Field(default="customers", description="Customers collection")
    sales_collection: str = Field(default="sales", description="Sales collection")


class AnalyticsSettings(BaseSettings):
    """Aggregation and reporting configuration"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_", env_file=".env", extra="ignore")

    reference_policy: str = Field(
        default="skip",
        description="How to treat sales with dangling references: skip or strict",
    )
    round_digits: int = Field(default=2, ge=0, description="Decimal places for money values")

    @field_validator("reference_policy")
    @classmethod
    def validate_policy(cls, v: str) -> str:
        """Validate reference policy value"""
        allowed = ["skip", "strict"]
        if v.lower() not in allowed:
            raise ValueError(f"Reference policy must be one of: {allowed}")
        return v.lower()


class SecuritySettings(BaseSettings):
    """Security configuration"""

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )


class MonitoringSettings(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="bizdash", description="Application name")
    app_env: str = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_workers: int = Field(default=4, description="API workers")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
