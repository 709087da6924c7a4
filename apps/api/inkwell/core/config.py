"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from inkwell.domain.sanitizer import SanitizationPolicyName
from inkwell.errors import ConfigurationError
from inkwell.schemas.user import Provider

_ENV_PREFIX = "INKWELL_"

_DEFAULT_EMBED_HOSTS = [
    "youtube.com",
    "youtube-nocookie.com",
    "player.vimeo.com",
    "open.spotify.com",
    "codepen.io",
]


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    discord_client_id: str
    discord_client_secret: str
    github_client_id: str
    github_client_secret: str
    google_client_id: str
    google_client_secret: str
    session_secret: str
    callback_secret: str

    auth_provider: Literal["mock", "session"] = "session"
    session_ttl_seconds: int = 60 * 60 * 24 * 30
    admin_emails: dict[Provider, list[str]] = {}
    default_content_policy: SanitizationPolicyName = SanitizationPolicyName.EMBED
    embed_hosts: list[str] = _DEFAULT_EMBED_HOSTS

    model_config = SettingsConfigDict(env_prefix=_ENV_PREFIX, extra="ignore")

    @field_validator(
        "discord_client_id",
        "discord_client_secret",
        "github_client_id",
        "github_client_secret",
        "google_client_id",
        "google_client_secret",
        "session_secret",
        "callback_secret",
    )
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def client_id_for(self, provider: Provider) -> str:
        return getattr(self, f"{provider.value}_client_id")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def load_settings() -> Settings:
    """Load settings or fail with every missing/invalid variable named."""
    try:
        return get_settings()
    except ValidationError as exc:
        names = sorted(
            f"{_ENV_PREFIX}{str(error['loc'][0]).upper()}"
            for error in exc.errors()
            if error.get("loc")
        )
        raise ConfigurationError(
            "Refusing to start, missing or invalid configuration: " + ", ".join(names),
            missing=names,
        ) from exc
