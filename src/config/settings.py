from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    relay_backoff_seconds: float = 1.0
    relay_attempt_timeout_seconds: float = 50.0
    relay_budget_seconds: float = 55.0
    relay_last_resort_retry: bool = True
    relay_max_tokens: int = 1500
    relay_temperature: float = 0.7

    tool_store_backend: str = "memory"
    database_url: str = "sqlite+aiosqlite:///./htmlhub.db"

    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"


settings = Settings()
