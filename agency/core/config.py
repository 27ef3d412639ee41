from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(alias="DATABASE_URL")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Notification webhook (optional - notifications are only logged when unset)
    notify_webhook_url: str | None = Field(default=None, alias="NOTIFY_WEBHOOK_URL")
    notify_timeout_seconds: float = Field(default=5.0, alias="NOTIFY_TIMEOUT_SECONDS")

    # Policy defaults
    policy_term_years: int = Field(default=1, alias="POLICY_TERM_YEARS")

    # Optimistic concurrency on customer aggregates
    conflict_retry_attempts: int = Field(default=3, alias="CONFLICT_RETRY_ATTEMPTS")

    # Frontend URL for CORS
    frontend_url: str | None = Field(default=None, alias="FRONTEND_URL")

    @field_validator("notify_webhook_url", "frontend_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @field_validator("conflict_retry_attempts", "policy_term_years")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
