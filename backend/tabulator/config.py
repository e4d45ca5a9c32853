from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TABULATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    database_url: str = "sqlite+aiosqlite:///./tabulator.db"
    sql_echo: bool = False
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    min_score: int = 1
    max_score: int = 10


@lru_cache()
def get_settings() -> Settings:
    return Settings()
