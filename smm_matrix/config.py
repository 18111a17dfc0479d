"""smm_matrix.config
====================
Mini-README: Centralises configuration management using Pydantic settings. The module
defines strongly typed settings for the server, the session cookie, login throttling,
and persistence. Values are read from ``SMM_``-prefixed environment variables or a
``.env`` file. Usage: import `get_settings()` to retrieve a cached configuration instance.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration container leveraging environment variables."""

    app_name: str = Field(default="SMM Matrix")
    environment: str = Field(default="development")
    secret_key: str = Field(default="devsecret")
    session_cookie_name: str = Field(default="smm_sess")
    session_max_age_seconds: int = Field(default=24 * 60 * 60)
    database_url: str = Field(default="sqlite+aiosqlite:///./smm_matrix_complete.db")
    database_echo: bool = Field(default=False)
    default_host: str = Field(default="127.0.0.1")
    default_port: int = Field(default=3000)
    login_max_attempts: int = Field(default=6)
    login_lockout_minutes: int = Field(default=5)
    password_hash_rounds: int = Field(default=12)
    display_currency: str = Field(default="USD")
    user_deletion_policy: Literal["retain", "anonymize", "purge"] = Field(default="retain")
    seed_demo_data: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    class Config:
        env_prefix = "SMM_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of application settings."""

    return Settings()
