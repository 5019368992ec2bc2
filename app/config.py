"""All settings, loaded from the .env file."""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_url: str = "http://localhost:8000"
    database_url: str = "sqlite:///./pharmabroker.db"
    log_level: str = "INFO"

    # Table backend: "sql" talks to database_url, "rest" to a hosted
    # PostgREST-style API at rest_url
    store_backend: str = "sql"
    rest_url: str = ""
    rest_api_key: str = ""
    rest_timeout_seconds: float = 15

    # Deal defaults (seeded into drafts built from matches)
    default_commission_rate: float = 0.05
    default_probability: int = 60
    default_currency: str = "USD"
    default_next_action: str = "Follow up with supplier and client"

    # Behavior
    default_role: str = "editor"  # editor | viewer
    fixtures_enabled: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
