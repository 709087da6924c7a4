"""User identity schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    DISCORD = "discord"
    GOOGLE = "google"
    GITHUB = "github"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class UserIdentity(BaseModel):
    """Normalized identity produced from a provider profile."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    display_name: str | None = Field(default=None, alias="displayName")
    email: str | None = None
    avatar_url: str | None = Field(default=None, alias="avatarUrl")
    role: Role = Role.USER


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str | None = Field(default=None, alias="displayName")
    email: str | None = None
    avatar_url: str | None = Field(default=None, alias="avatarUrl")
    role: Role
    providers: list[Provider]
