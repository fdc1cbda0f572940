from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BACKEND_BASE_URL: str = "http://localhost:5000"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SCHEDULE_TIMEZONE: str = "UTC"
    SLOT_BUCKET_ORDER: str = "label"  # "label" (lexicographic) or "clock"
    DAY_STRIP_RADIUS: int = 3
    WEEK_JUMP_DAYS: int = 7


settings = Settings()
