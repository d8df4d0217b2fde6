"""Client settings for the kolam generation service."""

import os
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env"), env_file_encoding="utf-8")

    # App
    APP_NAME: str = "kolam-client"
    ENVIRONMENT: str = "development"  # development | production | test

    # Remote service
    KOLAM_API_BASE_URL: str = "http://127.0.0.1:8080"
    HEALTH_ENDPOINT: str = "/api/health"
    GENERATE_ENDPOINT: str = "/api/generate"
    USER_AGENT: str = "kolam-client/0.1"

    # Deadlines (milliseconds)
    HEALTH_CHECK_TIMEOUT_MS: int = Field(default=10_000, gt=0)
    REGULAR_GENERATION_TIMEOUT_MS: int = Field(default=45_000, gt=0)
    ONE_STROKE_GENERATION_TIMEOUT_MS: int = Field(default=120_000, gt=0)

    # Periodic health probing; 0 disables the schedule
    HEALTH_PROBE_INTERVAL_SECONDS: int = Field(default=0, ge=0)

    @field_validator("KOLAM_API_BASE_URL", mode="before")
    @classmethod
    def normalize_base_url(cls, v: object) -> str:
        """Strip whitespace and require an http(s) scheme."""
        if not isinstance(v, str):
            raise ValueError("KOLAM_API_BASE_URL must be a string")
        s = v.strip()
        if not s.startswith(("http://", "https://")):
            raise ValueError("KOLAM_API_BASE_URL must start with http:// or https://")
        return s

    @model_validator(mode="after")
    def _validate_generation_budgets(self) -> "Settings":
        """One-stroke generation is slower remotely; its budget may not be shorter."""
        if self.ONE_STROKE_GENERATION_TIMEOUT_MS < self.REGULAR_GENERATION_TIMEOUT_MS:
            raise ValueError(
                "ONE_STROKE_GENERATION_TIMEOUT_MS must not be shorter than "
                "REGULAR_GENERATION_TIMEOUT_MS"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env not in {"development", "production", "test"}:
        raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")

    if env == "production":
        env_file = ".env.prod"
    elif env == "development":
        env_file = ".env.dev"
    else:
        # test environment - no env file needed, use defaults
        env_file = ""
    # pydantic-settings silently skips a missing env file, so a fresh checkout
    # runs against the defaults above.
    return Settings(_env_file=env_file or None)  # type: ignore[call-arg]
