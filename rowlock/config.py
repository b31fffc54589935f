"""
Configuration settings for the row-lock interception demo.

Uses Pydantic Settings to load environment variables for the database
connection, logging, and the experiment timings. The timings are validated so
the interceptors always start while the updater still holds its transaction.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field(
        "postgres",
        validation_alias=AliasChoices("DB_PASSWORD", "DB_PASS", "db_password"),
    )
    db_name: str = Field("rowlock", alias="DB_NAME")
    pool_max_size: int = Field(4, alias="DB_POOL_MAX_SIZE", ge=3)

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Experiment timings (seconds)
    hold_seconds: float = Field(5.0, alias="EXPERIMENT_HOLD_SECONDS", gt=0)
    intercept_delay_seconds: float = Field(
        1.0, alias="EXPERIMENT_INTERCEPT_DELAY_SECONDS", gt=0
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_delay_ordering(self) -> "Settings":
        if self.intercept_delay_seconds >= self.hold_seconds:
            raise ValueError(
                "intercept_delay_seconds must be shorter than hold_seconds "
                f"(got {self.intercept_delay_seconds} >= {self.hold_seconds})"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
