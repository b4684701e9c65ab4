from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./codrisk.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # when unset the /v1 routes are open (local dev)
    INTERNAL_SHARED_SECRET: str | None = None

    LOG_LEVEL: str = "INFO"
    ENV: str = "dev"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
