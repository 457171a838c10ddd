from __future__ import annotations

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Vagas RMC"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 8000
    timezone: str = "America/Sao_Paulo"
    log_level: str = "INFO"

    secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    session_ttl_min: int = 720
    session_cookie_name: str = "session"
    password_hash_rounds: int = 12

    database_url: str = "sqlite:///./data/vagasrmc.db"
    seed_on_startup: bool = True

    default_max_active_jobs: int = 2
    page_size_default: int = 20
    page_size_max: int = 50
    consent_version: str = "1.0"

    redact_log_pii: bool = True
    web_ui_enabled: bool = True
    cors_origins: str = "http://127.0.0.1:8000"

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @field_validator("password_hash_rounds")
    @classmethod
    def validate_rounds(cls, value: int) -> int:
        if value < 4 or value > 31:
            raise ValueError("password_hash_rounds must be between 4 and 31")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
