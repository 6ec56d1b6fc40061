"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Praxis Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://praxis@localhost:5432/praxis"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "praxis"
    openai_api_key: str | None = None
    llm_model: str = "gpt-4o"
    llm_max_tokens: int = 1000
    llm_temperature: float = 0.7
    chat_history_limit: int = 10
    default_persona: str = "praxis"
    draft_storage_key: str = "empty-tasks-card-drafts"
    draft_session_max_entries: int = 1000
    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    backfill_job_hour: int = 3
    backfill_job_minute: int = 0
    jobs_run_on_startup: bool = False
    notifications_enabled: bool = False
    notifications_provider: str = "noop"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
