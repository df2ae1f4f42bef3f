from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SADHANA_",
        case_sensitive=False,
    )

    # App
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    api_token: str = ""

    # Database
    db_url: str = "sqlite+aiosqlite:///./sadhana.db"

    # Sync client
    api_base_url: str = "http://localhost:8000"
    api_timeout_seconds: float = 10.0
    sync_debounce_ms: int = 1000

    # Sadhana defaults
    default_target_rounds: int = 16


def get_settings() -> Settings:
    return Settings()
