from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "Nova Bulk Admin"
    ENVIRONMENT: str = "development"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite+pysqlite:///./novabulk.db"
    FRONTEND_URL: str = "http://localhost:5173"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ADMIN_ACCOUNT_NAME: str = "admin"
    ADMIN_ACCOUNT_KEY: str = "change-me"
    BULK_MAX_ROWS: int = 5000
    LIST_LIMIT: int = 100
    DEFAULT_ADJUST_COMMENT: str = "Current quantity was changed"
    METRICS_ENABLED: bool = True


settings = Settings()
