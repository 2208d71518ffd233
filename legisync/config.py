"""
Configuration management for LegiSync.

Settings are grouped by concern (database, API, upstream sources, AI
gateway, civic lookup, sync bookkeeping) and loaded from environment
variables and an optional .env file.

A Settings instance is built once at process start and passed explicitly
into the orchestrator, adapters and services; nothing below the entry
points reads the environment.

Responsibility: Centralized configuration and environment management
"""

from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, List, Optional
import json

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _parse_list(value: Any) -> Any:
    """Accept a list, a JSON list string, or a comma-separated string."""
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        value = value.strip()
        if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
            value = value[1:-1]
        if value.startswith("["):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Environment(str, Enum):
    """Deployment environment"""
    LOCAL = "local"
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    driver: str = Field(default="postgresql+asyncpg")
    host: Optional[str] = Field(default="localhost")
    port: Optional[int] = Field(default=5432)
    database: str = Field(default="legisync")
    username: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)

    # Connection pool settings (ignored for SQLite)
    pool_size: int = Field(default=5)
    max_overflow: int = Field(default=10)
    pool_timeout: int = Field(default=30)
    pool_recycle: int = Field(default=3600)

    echo: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured backend is SQLite (local runs and tests)"""
        return self.connection_string.startswith("sqlite")

    @property
    def connection_string(self) -> str:
        """
        Build the async SQLAlchemy connection string.

        DATABASE_URL wins when set; plain postgresql:// URLs are switched
        to the asyncpg driver.
        """
        if self.database_url:
            url = self.database_url
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            if url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return url

        if self.driver.startswith("sqlite"):
            return f"{self.driver}:///{self.database}"

        auth = ""
        if self.username:
            auth = self.username
            if self.password:
                auth = f"{auth}:{self.password}"
            auth = f"{auth}@"

        host_port = self.host or "localhost"
        if self.port:
            host_port = f"{host_port}:{self.port}"

        return f"{self.driver}://{auth}{host_port}/{self.database}"


class AppConfig(BaseSettings):
    """API application configuration"""

    environment: Environment = Field(default=Environment.LOCAL)
    debug: bool = Field(default=True)
    app_name: str = Field(default="LegiSync")
    app_version: str = Field(default="1.0.0")

    log_level: str = Field(default="INFO")

    require_api_key: bool = Field(
        default=True,
        description="Require X-API-Key on protected routes (sync trigger)"
    )
    api_keys: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Accepted X-API-Key values (JSON list or comma-separated)"
    )

    cors_origins: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins (JSON list or comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("cors_origins", "api_keys", mode="before")
    @classmethod
    def parse_lists(cls, v):
        """Parse list settings from JSON or comma-separated strings"""
        return _parse_list(v)


class SourcesConfig(BaseSettings):
    """Upstream legislative source configuration"""

    # Congress.gov v3 (national legislative records)
    congress_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SOURCES_CONGRESS_API_KEY", "CONGRESS_GOV_API_KEY", "congress_api_key"),
    )
    congress_base_url: str = Field(default="https://api.congress.gov/v3")
    congress_number: int = Field(default=119, ge=1, description="Current congress (119th = 2025-2027)")
    congress_page_size: int = Field(default=250, ge=1, le=250)

    # GovTrack v2 (bill tracker)
    govtrack_base_url: str = Field(default="https://www.govtrack.us/api/v2")
    govtrack_lookback_days: int = Field(default=30, ge=1)
    govtrack_page_size: int = Field(default=250, ge=1, le=600)

    # Open States v3 (state legislation)
    openstates_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SOURCES_OPENSTATES_API_KEY", "OPENSTATES_API_KEY", "openstates_api_key"),
    )
    openstates_base_url: str = Field(default="https://v3.openstates.org")
    openstates_jurisdictions: Annotated[List[str], NoDecode] = Field(default=["ca", "ny", "tx", "fl"])
    openstates_page_size: int = Field(default=20, ge=1, le=20)

    fetch_timeout_seconds: float = Field(default=30.0, gt=0)
    rate_limit_per_second: float = Field(default=2.0, gt=0)
    user_agent: str = Field(default="LegiSync/1.0 (+https://github.com/legisync)")

    model_config = SettingsConfigDict(
        env_prefix="SOURCES_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    @field_validator("openstates_jurisdictions", mode="before")
    @classmethod
    def parse_jurisdictions(cls, v):
        """Parse jurisdictions from JSON or comma-separated strings"""
        parsed = _parse_list(v)
        if isinstance(parsed, list):
            return [str(item).lower() for item in parsed]
        return parsed


class AIConfig(BaseSettings):
    """AI gateway (chat-completions) configuration"""

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AI_API_KEY", "LOVABLE_API_KEY", "api_key"),
    )
    base_url: str = Field(default="https://ai.gateway.lovable.dev/v1")
    model: str = Field(default="google/gemini-2.5-flash")
    timeout_seconds: float = Field(default=60.0, gt=0)
    max_attempts: int = Field(default=2, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="AI_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )


class CivicConfig(BaseSettings):
    """Representative lookup (Google Civic Information API) configuration"""

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CIVIC_API_KEY", "GOOGLE_CIVIC_API_KEY", "api_key"),
    )
    base_url: str = Field(default="https://civicinfo.googleapis.com/civicinfo/v2")
    timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="CIVIC_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )


class SyncConfig(BaseSettings):
    """Sync run bookkeeping"""

    stale_after_minutes: int = Field(
        default=60,
        ge=1,
        description="In-progress log entries older than this are marked failed at the next run"
    )
    schedule_cron: Optional[str] = Field(
        default="0 */6 * * *",
        description="Cron schedule for the Prefect deployment (empty runs once)"
    )

    model_config = SettingsConfigDict(
        env_prefix="SYNC_",
        case_sensitive=False,
        extra="ignore"
    )


class Settings(BaseSettings):
    """
    Global settings container.

    Loads configuration from:
    1. Environment variables
    2. .env file
    3. Default values

    Example:
        settings = Settings(
            db=DatabaseConfig(driver="sqlite+aiosqlite", database="legisync.db"),
            sources=SourcesConfig(congress_api_key="..."),
        )
    """

    app: AppConfig = Field(default_factory=AppConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    civic: CivicConfig = Field(default_factory=CivicConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, built on first use by an entry point."""
    return Settings()
