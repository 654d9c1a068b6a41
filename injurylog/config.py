"""Application configuration."""
from typing import List
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Environment
    ENVIRONMENT: str = Field(default="development")

    # Storage
    STORAGE_BACKEND: str = Field(default="github")  # github, memory
    GITHUB_TOKEN: str | None = Field(default=None)
    GITHUB_USER: str | None = Field(default=None)
    GITHUB_REPO: str | None = Field(default=None)
    GITHUB_BRANCH: str | None = Field(default=None)
    GITHUB_API_URL: str = Field(default="https://api.github.com")
    GITHUB_TIMEOUT: int = Field(default=10)

    # Data files inside the repository
    LOG_PATH: str = Field(default="data/injury_log.csv")
    CONFIG_PATH: str = Field(default="data/app_info.csv")
    SEASON_DATES_PATH: str = Field(default="data/season_dates.csv")
    SEASON_ROUNDS_PATH: str = Field(default="data/season_rounds.csv")

    # Number of extra read-mutate-write cycles after a version conflict
    COMMIT_MAX_RETRIES: int = Field(default=3, ge=0)

    # Security
    EDITOR_USERNAME: str = Field(default="physio")
    EDITOR_PASSWORD_HASH: str | None = Field(default=None)
    VIEWER_USERNAME: str | None = Field(default=None)
    VIEWER_PASSWORD_HASH: str | None = Field(default=None)

    # Redis (optional, carry-forward runs inline without it)
    REDIS_URL: str | None = Field(default=None)

    # Application
    TZ: str = Field(default="UTC")
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:8080", "http://localhost:3000", "http://localhost:5173"])


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
