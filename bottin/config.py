from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Base de données (URL async, ex: postgresql+asyncpg://...)
    DATABASE_URL: str
    DB_NULL_POOL: bool = False
    SQL_ECHO: bool = False

    # Sessions
    SESSION_SECRET: str = "bottin-dam-secret-dev-only"
    ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "dam_session"
    SESSION_MAX_AGE_DAYS: int = 7
    SESSION_BACKEND: Optional[str] = None  # memory | database
    COOKIE_SECURE: bool = False

    PASSWORD_RESET_EXPIRE_MINUTES: int = 60
    FRONTEND_URL: str = "http://localhost:5173"

    # Email (désactivé si MAIL_SERVER est vide)
    MAIL_SERVER: Optional[str] = None
    MAIL_PORT: int = 587
    MAIL_USERNAME: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_FROM: str = "no-reply@diversiteartistique.org"

    # Stockage des fichiers
    STORAGE_BACKEND: str = "local"  # local | supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    SUPABASE_BUCKET: str = "image"
    STATIC_DIR: str = "static"
    ALLOW_FALLBACK_STORAGE: bool = False

    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def session_backend(self) -> str:
        if self.SESSION_BACKEND:
            return self.SESSION_BACKEND
        return "database" if self.is_production else "memory"

    @property
    def upload_dir(self) -> Path:
        return Path(self.STATIC_DIR) / "upload"


settings = Settings()
