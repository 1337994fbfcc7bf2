# src/infrastructure/settings.py

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Search backend connection settings, read from TYPESENSE_* variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="TYPESENSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(default="xyz", description="Admin API key sent with every request")
    scheme: Literal["http", "https"] = Field(default="http")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8108, ge=1, le=65535)
    path: str = Field(default="", description="Path prefix when the server sits behind a proxy")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")

    log_level: str = Field(default="info")

    @property
    def base_url(self) -> str:
        path = self.path.strip("/")
        url = f"{self.scheme}://{self.host}:{self.port}"
        return f"{url}/{path}" if path else url


@lru_cache
def get_settings() -> Settings:
    return Settings()
