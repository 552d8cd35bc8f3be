# movie_catalog/core/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./movie_catalog.db"
    DATABASE_ECHO: bool = False
    # SQLite busy timeout; on PostgreSQL also the connect and per-statement
    # timeout. Other backends only get it as the pool checkout timeout.
    DB_TIMEOUT_SECONDS: float = 30.0

    # uploaded images land here, one file per key
    BLOB_DIR: str = "./data/images"
    BLOB_TIMEOUT_SECONDS: float = 30.0
    IMAGE_EXTENSION: str = ".png"

    # only the delivery cookie expires, the token itself never does
    SESSION_COOKIE_WEEKS: int = 52

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # load from project-root .env and ignore everything else in it
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

# singleton instance
settings = Settings()
