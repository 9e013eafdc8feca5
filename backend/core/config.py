"""Application settings, read from the environment and `.env`."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """TicketDesk backend settings.

    CORS_ORIGINS is a comma-separated list so it can be set from a plain
    environment variable, e.g. `http://localhost:3000,https://desk.example.com`.
    """
    DATABASE_URL: str = "sqlite+aiosqlite:///./ticketdesk.db"

    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 3001
    APP_DEBUG: bool = True

    CORS_ORIGINS: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # Structured JSON instead of coloured console output
    LOG_SQL: bool = False
    SLOW_REQUEST_MS: float = 1000

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return not self.APP_DEBUG

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
