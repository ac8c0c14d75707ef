from typing import Optional
from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/kanban.db")
    RUN_MIGRATIONS: bool = os.getenv("RUN_MIGRATIONS", "True").lower() in ("true", "1", "t")

    # Application settings
    DEBUG: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "t")
    PROJECT_NAME: str = "Real Kanban API"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "30100"))

    # CORS settings
    ALLOWED_ORIGINS: list[str] = ["*"]

    # Shared secret expected in the X-API-Key header
    KANBAN_API_KEY: Optional[str] = os.getenv("KANBAN_API_KEY")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
