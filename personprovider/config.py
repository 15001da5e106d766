# personprovider/config.py
import logging
from functools import lru_cache
from typing import Dict

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    """Provider settings loaded from PERSON_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PERSON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    service_url: str = "localhost"
    service_port: str = "8000"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    def provider_config(self) -> Dict[str, str]:
        return {
            "person_service_url": self.service_url,
            "person_service_port": self.service_port,
        }


@lru_cache
def get_settings() -> ProviderSettings:
    """Get cached settings instance."""
    return ProviderSettings()
