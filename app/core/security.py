"""Password hashing and JWT access tokens for portal accounts."""

from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.models.user import UserRole

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_TYPE = "access"


class TokenClaims(NamedTuple):
    """Identity carried by a verified access token."""

    user_id: int
    username: str
    role: UserRole


def hash_password(password: str) -> str:
    return pwd_context.hash(password, rounds=settings.BCRYPT_ROUNDS)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: int,
    username: str,
    role: UserRole,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a signed token naming the account and its portal role."""
    lifetime = expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "role": role.value,
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_access_token(token: str) -> TokenClaims | None:
    """Decode an access token; None when it is expired, forged or malformed."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None
    try:
        return TokenClaims(
            user_id=int(payload["sub"]),
            username=payload.get("username", ""),
            role=UserRole(payload["role"]),
        )
    except (KeyError, ValueError):
        return None
