"""Provider profile normalization and role derivation."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from inkwell.schemas.user import Provider, Role, UserIdentity

DISCORD_CDN = "https://cdn.discordapp.com"
_DISCORD_DEFAULT_AVATAR_COUNT = 5
_DISCORD_ANIMATED_PREFIX = "a_"


class IdentityResolutionError(ValueError):
    """Raised when a provider profile cannot be normalized."""


@dataclass(frozen=True)
class RolePolicy:
    """Per-provider table of emails that are granted the admin role.

    Matching is exact and case-sensitive.
    """

    admin_emails: Mapping[Provider, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, table: Mapping[Provider | str, Iterable[str]]) -> RolePolicy:
        return cls(
            admin_emails={Provider(provider): frozenset(emails) for provider, emails in table.items()}
        )

    def role_for(self, provider: Provider, email: str | None) -> Role:
        if email and email in self.admin_emails.get(provider, frozenset()):
            return Role.ADMIN
        return Role.USER


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _required_id(profile: Mapping[str, Any], key: str, provider: Provider) -> str:
    value = _optional_str(profile.get(key))
    if value is None or not value.strip():
        raise IdentityResolutionError(f"{provider.value} profile is missing '{key}'")
    return value


def discord_default_avatar_index(discriminator: Any) -> int:
    try:
        return int(str(discriminator)) % _DISCORD_DEFAULT_AVATAR_COUNT
    except (TypeError, ValueError):
        return 0


def discord_avatar_url(user_id: str, avatar: str | None, discriminator: Any) -> str:
    """Build the CDN URL Discord serves for a user's avatar."""
    if not avatar:
        index = discord_default_avatar_index(discriminator)
        return f"{DISCORD_CDN}/embed/avatars/{index}.png"

    extension = "gif" if avatar.startswith(_DISCORD_ANIMATED_PREFIX) else "png"
    return f"{DISCORD_CDN}/avatars/{user_id}/{avatar}.{extension}"


def _from_discord(profile: Mapping[str, Any]) -> dict[str, Any]:
    user_id = _required_id(profile, "id", Provider.DISCORD)
    return {
        "id": user_id,
        "display_name": _optional_str(profile.get("username")),
        "email": _optional_str(profile.get("email")),
        "avatar_url": discord_avatar_url(
            user_id,
            _optional_str(profile.get("avatar")),
            profile.get("discriminator"),
        ),
    }


def _from_google(profile: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "id": _required_id(profile, "sub", Provider.GOOGLE),
        "display_name": _optional_str(profile.get("name")),
        "email": _optional_str(profile.get("email")),
        "avatar_url": _optional_str(profile.get("picture")),
    }


def _from_github(profile: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "id": _required_id(profile, "id", Provider.GITHUB),
        "display_name": _optional_str(profile.get("name")) or _optional_str(profile.get("login")),
        "email": _optional_str(profile.get("email")),
        "avatar_url": _optional_str(profile.get("avatar_url")),
    }


PROVIDER_DISPLAY_NAMES: dict[Provider, str] = {
    Provider.DISCORD: "Discord",
    Provider.GOOGLE: "Google",
    Provider.GITHUB: "GitHub",
}

PROVIDER_SCOPES: dict[Provider, tuple[str, ...]] = {
    Provider.DISCORD: ("identify", "email"),
    Provider.GOOGLE: ("openid", "email", "profile"),
    Provider.GITHUB: ("read:user", "user:email"),
}

_EXTRACTORS: dict[Provider, Callable[[Mapping[str, Any]], dict[str, Any]]] = {
    Provider.DISCORD: _from_discord,
    Provider.GOOGLE: _from_google,
    Provider.GITHUB: _from_github,
}


def resolve_identity(
    provider: Provider | str,
    profile: Mapping[str, Any],
    policy: RolePolicy | None = None,
) -> UserIdentity:
    """Normalize a raw provider profile and derive its role."""
    try:
        provider = Provider(provider)
    except ValueError as exc:
        raise IdentityResolutionError(f"Unsupported provider '{provider}'") from exc

    if not isinstance(profile, Mapping):
        raise IdentityResolutionError(f"{provider.value} profile must be an object")

    fields = _EXTRACTORS[provider](profile)
    role = (policy or RolePolicy()).role_for(provider, fields["email"])
    return UserIdentity(role=role, **fields)


__all__ = [
    "PROVIDER_DISPLAY_NAMES",
    "PROVIDER_SCOPES",
    "IdentityResolutionError",
    "RolePolicy",
    "discord_avatar_url",
    "discord_default_avatar_index",
    "resolve_identity",
]
