from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    APP_NAME: str = "MoodWeek API"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite+aiosqlite:///./moodweek.db"
    DB_AUTO_CREATE: bool = True

    JWT_SECRET: str = ""
    JWT_AUDIENCE: str = "authenticated"
    JWT_ISSUER: str | None = None
    DEV_USER_ID: str = "123e4567-e89b-12d3-a456-426614174000"

    ANALYSIS_WINDOW_DAYS: int = 7

    MODEL_BACKEND: str = "classifier"  # classifier | openai | none
    TRAINING_DATA_PATH: str = "data/weekly_training.json"
    MODEL_TIMEOUT_SECONDS: float = 5.0
    MODEL_MIN_CONFIDENCE: float = 0.0

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.4

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

settings = Settings()
