"""
Application Configuration

Centralized settings management using Pydantic BaseSettings.
All values are loaded from environment variables or .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable binding.

    Required env vars (no defaults):
        POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_HOST, POSTGRES_DB

    Optional env vars:
        POSTGRES_PORT (5432), DATABASE_URL_OVERRIDE (unset),
        LOG_LEVEL (INFO), AUTOSAVE_DELAY_MS (2000), TIMEZONE (UTC)
    """

    PROJECT_NAME: str = "notesync"

    # Database
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_HOST: str
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str
    # Full async URL, takes precedence over the POSTGRES_* parts (e.g. sqlite+aiosqlite)
    DATABASE_URL_OVERRIDE: str | None = None

    # Logging
    LOG_LEVEL: str = "INFO"

    # Editing session
    AUTOSAVE_DELAY_MS: int = 2000
    TIMEZONE: str = "UTC"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",  # Silently ignore unknown env vars
    )

    @property
    def DATABASE_URL(self) -> str:
        """Async connection string; asyncpg driver unless overridden."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def AUTOSAVE_DELAY(self) -> float:
        """Debounce delay in seconds."""
        return self.AUTOSAVE_DELAY_MS / 1000


settings = Settings()  # type: ignore[call-arg]
