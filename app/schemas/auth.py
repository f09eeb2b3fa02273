"""Authentication schemas."""

from pydantic import Field

from app.models.user import UserRole
from app.schemas.common import BaseSchema


class LoginRequest(BaseSchema):
    """Login request schema."""

    username: str = Field(..., alias="userName", min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseSchema):
    """Token response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class CurrentUserResponse(BaseSchema):
    """Authenticated principal."""

    id: int
    username: str = Field(..., alias="userName")
    role: UserRole
