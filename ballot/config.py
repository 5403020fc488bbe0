"""Configuration management for the ballot service."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    APP_NAME: str = "ballot"

    # Identity allowed to register voters and move the workflow forward
    ADMIN_ADDRESS: str = "admin"

    # Empty keeps the election in memory
    DATABASE_URL: str = ""

    # Bearer tokens carrying the caller identity
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    LOG_LEVEL: str = "INFO"

    HOST: str = "127.0.0.1"
    PORT: int = 8000


def get_settings() -> Settings:
    return Settings()
