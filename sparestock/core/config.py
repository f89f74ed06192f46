from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "SpareStock"
    APP_PORT: int = 9300
    DEBUG: bool = False
    DEFAULT_PAGE_SIZE: int = 20

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "sparestock"
    POSTGRES_PORT: int = 5432
    DB_URL: Optional[str] = None  # Full URL override, e.g. sqlite:///./sparestock.db
    DB_BUSY_TIMEOUT: int = 30  # Seconds SQLite waits on a locked database

    # Logging
    LOG_LEVEL: str = "INFO"
    LOGS_PATH: Optional[str] = None

    # Ledger consistency job
    LEDGER_CHECK_ENABLED: bool = True
    LEDGER_CHECK_INTERVAL_MINUTES: int = 60

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
