from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    APP_NAME: str = "Contact Book"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # Database
    DB_PATH: str = "contact.db.sqlite3"
    DB_FALLBACK_TO_MEMORY: bool = True

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "https://contactsmanagerapp.netlify.app",
        ]
    )

    # Pagination
    PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Client
    API_BASE_URL: str = "http://localhost:5000"

settings = Settings()
