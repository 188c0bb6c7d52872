"""Application settings loaded from .env file."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Target database (request fields override these)
    CONNECTION_STRING: str = ""
    DB_TYPE: str = ""                  # pgsql | mssql | sqlite, empty = detect
    USE_DATETIME_OFFSET: bool = False

    # Translation dictionary location
    DICTIONARY_SCHEMA: str = "core"
    TABLE_TRANSLATION_TABLE: str = "表格翻譯對照表"
    COLUMN_TRANSLATION_TABLE: str = "表格欄位翻譯對照表"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: str = "http://localhost:5173"

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()
