from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # Database settings
    database_url: str = "sqlite:///./budgets.db"

    # Logging
    log_level: str = "INFO"

    # How many times a budget write is retried after losing an optimistic-lock race
    reconcile_max_retries: int = 3

    class Config:
        env_file = ".env"

@lru_cache()
def get_settings():
    return Settings()
