from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_TITLE: str = "Booking Engine"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    SEED_DEMO_DATA: bool = False


settings = Settings()
