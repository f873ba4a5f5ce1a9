"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    conversation_repository: str = "in_memory"  # in_memory or postgres
    lead_repository: str = "in_memory"  # in_memory or postgres
    database_url: str = (
        ""  # Required when conversation_repository=postgres or lead_repository=postgres
    )
    llm_enabled: bool = False
    llm_timeout_seconds: float = 30.0
    llm_continuation_enabled: bool = False  # model-written resume message for ACTIVE conversations
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 20
    pharmacy_api_url: str = ""  # empty uses the in-memory directory
    pharmacy_api_timeout_seconds: float = 10.0
    pharmacy_cache_backend: str = "memory"  # memory or redis
    pharmacy_cache_ttl_seconds: int = 300  # 5 minutes
    pharmacy_cache_sweep_interval_seconds: int = 60
    redis_url: str = "redis://localhost:6379/0"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
