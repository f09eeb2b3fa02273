"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import AuthenticationError, PermissionDeniedError
from app.core.security import verify_access_token
from app.models.user import User, UserRole


class Principal:
    """Authenticated caller as seen by the services."""

    def __init__(self, user_id: int, username: str, role: UserRole):
        self.user_id = user_id
        self.username = username
        self.role = role

    def has_role(self, *roles: UserRole) -> bool:
        """Check if the principal holds one of the given roles."""
        return self.role in roles


def get_current_principal(
    db: Annotated[Session, Depends(get_db)],
    authorization: str = Header(..., description="Bearer token"),
) -> Principal:
    """Extract and validate the current principal from JWT token."""
    if not authorization.startswith("Bearer "):
        raise AuthenticationError("Invalid authorization header format")

    token = authorization[7:]  # Remove "Bearer " prefix
    claims = verify_access_token(token)
    if claims is None:
        raise AuthenticationError("Invalid or expired token")

    result = db.execute(select(User).where(User.id == claims.user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return Principal(user_id=user.id, username=user.username, role=user.role)


def require_role(*roles: UserRole):
    """Dependency factory that requires one of the given roles."""

    def check_role(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if not principal.has_role(*roles):
            raise PermissionDeniedError(
                "Insufficient role for this action",
                required_roles=[role.value for role in roles],
            )
        return principal

    return check_role


# Type aliases for dependency injection
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
CoordinatorPrincipal = Annotated[
    Principal,
    Depends(require_role(UserRole.COORDINATOR, UserRole.ADMIN)),
]
