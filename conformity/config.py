from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Schema defaults, overridable per compile call
    DEFAULT_PRESENCE: Literal["required", "optional"] = "required"
    ATOMIZE: bool = False

    model_config = SettingsConfigDict(env_prefix="CONFORMITY_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
