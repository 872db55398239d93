from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "SOCK-STOCK"
    DATABASE_URL: str = "sqlite+pysqlite:///./sockstock.db"
    DATABASE_ECHO: bool = False
    LOG_LEVEL: str = "INFO"
    METRICS_ENABLED: bool = True
    TRACE_HEADER: str = "X-Trace-ID"
    BATCH_MAX_BYTES: int = 5 * 1024 * 1024
    BATCH_ENCODING: str = "utf-8-sig"

settings = Settings()
