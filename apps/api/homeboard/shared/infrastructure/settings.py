from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

INSECURE_DEV_ENCRYPTION_KEY = "uZr6e4waGdI6B6xzUA8WpoJKzN-Eq9iUumBwJbLfhz0="
VERSION_LIST_HARD_MAX = 200


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: Literal["development", "test", "staging", "production"] = "development"
    cors_origins: Annotated[list[str], NoDecode] = Field(default_factory=list)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Database
    database_url: str = "sqlite:///./homeboard.db"
    database_echo: bool = False

    # Dashboard version history
    dashboard_version_limit: int = 100
    dashboard_version_list_default: int = 30
    dashboard_version_list_max: int = 200

    # Grid layout
    grid_columns_default: int = 4

    # Encryption for connection credentials
    encryption_key: str = INSECURE_DEV_ENCRYPTION_KEY

    # Observability
    log_config_changes: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value: str | list[str] | None) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            raw_items = [item.strip() for item in value.split(",")]
            return [item for item in raw_items if item]
        return value

    @field_validator("database_url", mode="before")
    @classmethod
    def _normalize_sqlalchemy_postgres_urls(cls, value: str) -> str:
        if isinstance(value, str) and value.startswith(("postgres://", "postgresql://")):
            return value.replace("postgres://", "postgresql+psycopg://", 1).replace(
                "postgresql://", "postgresql+psycopg://", 1
            )
        return value

    @field_validator("dashboard_version_limit", "dashboard_version_list_default", "dashboard_version_list_max")
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Version limits must be at least 1")
        return value

    @field_validator("dashboard_version_list_max")
    @classmethod
    def _validate_list_max(cls, value: int) -> int:
        if value > VERSION_LIST_HARD_MAX:
            raise ValueError(f"DASHBOARD_VERSION_LIST_MAX cannot exceed {VERSION_LIST_HARD_MAX}")
        return value

    @field_validator("grid_columns_default")
    @classmethod
    def _validate_grid_columns(cls, value: int) -> int:
        if value < 1:
            raise ValueError("GRID_COLUMNS_DEFAULT must be at least 1")
        return value

    @field_validator("encryption_key")
    @classmethod
    def _validate_encryption_key(cls, value: str, info: ValidationInfo) -> str:
        env = (info.data.get("environment") or "development").lower()
        if env == "production" and value == INSECURE_DEV_ENCRYPTION_KEY:
            raise ValueError("ENCRYPTION_KEY must be configured in production")
        if not value:
            raise ValueError("ENCRYPTION_KEY must be configured")
        return value

    @model_validator(mode="after")
    def _validate_production_rules(self) -> "Settings":
        if self.is_production:
            if not self.cors_origins:
                raise ValueError("CORS_ORIGINS must be configured in production")
            if "*" in self.cors_origins:
                raise ValueError("Wildcard CORS is not allowed in production")
            if self.encryption_key == INSECURE_DEV_ENCRYPTION_KEY:
                raise ValueError("ENCRYPTION_KEY must be configured in production")
            if self.log_level == "DEBUG":
                raise ValueError("DEBUG logging is not allowed in production")
        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()


# Shared settings instance for app-wide imports.
settings = get_settings()
