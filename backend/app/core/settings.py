# backend/app/core/settings.py

import os
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SECRET_KEY = "dev-secret-key-change-me"


class Settings(BaseSettings):
    # Строка подключения SQLAlchemy; относительный путь SQLite считается от backend/
    db_url: str = "sqlite:///./taskboard.db"

    # Консольные логи и текст ошибок БД в ответах 500; по умолчанию выключено в production
    app_debug: Optional[bool] = None

    # dev / staging / production
    environment: str = "dev"

    # Выставляется автоматически под pytest
    testing: bool = False

    # Ключ подписи JWT и время жизни сессии
    secret_key: str = DEV_SECRET_KEY
    access_token_expire_minutes: int = 30

    # Origins фронтенда через запятую
    allowed_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _apply_production_rules(self) -> "Settings":
        if self.is_production and self.secret_key == DEV_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set when ENVIRONMENT=production")
        if self.app_debug is None:
            self.app_debug = not self.is_production
        return self

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()

if os.getenv("PYTEST_CURRENT_TEST"):
    settings.testing = True
