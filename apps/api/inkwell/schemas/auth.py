"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from inkwell.schemas.user import Provider, Role, User


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by business services."""

    user_id: str = Field(min_length=1)
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class SessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    expires_at: datetime = Field(alias="expiresAt")
    user: User


class ProviderInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Provider
    name: str
    client_id: str = Field(alias="clientId")
    scopes: list[str]
    callback_path: str = Field(alias="callbackPath")
