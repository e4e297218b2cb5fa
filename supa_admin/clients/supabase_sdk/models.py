from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    email: str | None = None
    created_at: str | None = None
    last_sign_in_at: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    app_metadata: dict[str, Any] = Field(default_factory=dict)


class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    expires_at: int | None = None
    user: Optional[AuthUser] = None


class SignUpResponse(BaseModel):
    """Sign-up answers with a session when auto-confirm is on, or only the pending user otherwise."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    user: Optional[AuthUser] = None

    @property
    def has_session(self) -> bool:
        return bool(self.access_token)


class OAuthRedirect(BaseModel):
    provider: str
    url: str


class SessionData(BaseModel):
    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None
    user: Optional[AuthUser] = None
