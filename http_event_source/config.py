"""Configuration management using pydantic-settings."""

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 3000
DEFAULT_BODY_LIMIT = 50 * 1024 * 1024


class JwtSettings(BaseModel):
    """Bearer token verification settings."""

    model_config = ConfigDict(frozen=True)

    secret_or_key: str = Field(
        validation_alias=AliasChoices("secret_or_key", "secretOrKey"),
        repr=False,
        description="HMAC secret or PEM encoded public key used to verify signatures",
    )
    audience: str | list[str] | None = Field(default=None, description="Expected 'aud' claim")
    issuer: str | None = Field(default=None, description="Expected 'iss' claim")
    algorithms: list[str] | None = Field(
        default=None,
        min_length=1,
        description="Accepted signing algorithms; derived from the key type when unset",
    )
    ignore_expiration: bool = Field(
        default=True,
        description="Accept tokens whose 'exp' claim is in the past",
    )


class HttpEventSourceConfig(BaseSettings):
    """HTTP event source settings.

    Values handed over by the host framework take precedence; anything left
    out falls back to ``HTTP_EVENTSOURCE_*`` environment variables and then
    to the defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTP_EVENTSOURCE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535, description="Port to listen on")
    request_body_limit: int = Field(
        default=DEFAULT_BODY_LIMIT, gt=0, description="Max URL-encoded body size in bytes"
    )
    file_size_limit: int = Field(
        default=DEFAULT_BODY_LIMIT, gt=0, description="Max JSON body size in bytes"
    )
    jwt: JwtSettings | None = Field(default=None, description="Bearer token settings")
    log_level: str | None = Field(default=None, description="Logging level for this package")


def load_config(config: Mapping[str, Any] | HttpEventSourceConfig | None = None) -> HttpEventSourceConfig:
    """Build the adapter settings from the mapping supplied by the host."""
    if isinstance(config, HttpEventSourceConfig):
        return config
    return HttpEventSourceConfig(**dict(config or {}))
