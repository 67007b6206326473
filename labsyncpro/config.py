from datetime import time
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "LabSyncPro"
    SECRET_KEY: str = "a_very_secret_key"
    DATABASE_URL: str = "sqlite:///labsyncpro.db"
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    API_PREFIX: str = "/api"

    # Defaults for schedules created implicitly by capacity planning
    CAPACITY_START_TIME: time = time(9, 0)
    CAPACITY_END_TIME: time = time(17, 0)
    COMPUTER_AVAILABILITY_MATCH: Literal["id", "name"] = "id"

    # Client side
    API_BASE_URL: str = "http://localhost:8000/api"
    API_TOKEN: str | None = None
    CLIENT_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
