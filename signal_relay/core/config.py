"""Application configuration for the signaling relay."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    host: str = Field(default="0.0.0.0")
    http_port: int = Field(default=8888)
    https_port: int = Field(default=8443)
    enable_https: bool = Field(default=False)
    ssl_keyfile: str = Field(default="certs/server.key")
    ssl_certfile: str = Field(default="certs/server.cert")

    default_room: str = Field(default="global")
    topic_prefix: str = Field(default="webrtc")
    gc_empty_rooms: bool = Field(default=True)
    max_connections: int = Field(default=10_000, ge=1)
    outbound_queue_size: int = Field(default=256, ge=1)

    enable_auth: bool = Field(default=False)
    auth_username: str = Field(default="webrtc")
    auth_password: str = Field(default="signaling")

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
