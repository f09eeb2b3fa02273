"""Authentication service."""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, NotFoundError
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User, UserRole
from app.schemas.auth import CurrentUserResponse, LoginRequest, TokenResponse

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service."""

    def __init__(self, db: Session):
        self.db = db

    def login(self, request: LoginRequest) -> TokenResponse:
        """Authenticate user and return an access token."""
        result = self.db.execute(
            select(User).where(User.username == request.username)
        )
        user = result.scalar_one_or_none()

        if not user:
            raise AuthenticationError("Invalid username or password")

        if not verify_password(request.password, user.password_hash):
            raise AuthenticationError("Invalid username or password")

        if not user.is_active:
            raise AuthenticationError("User account is deactivated")

        # Update last login
        user.last_login_at = datetime.now(timezone.utc)
        self.db.flush()

        access_token = create_access_token(user.id, user.username, user.role)

        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    def get_user(self, user_id: int) -> CurrentUserResponse:
        """Get user by ID."""
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return CurrentUserResponse.model_validate(user)

    def ensure_default_user(
        self,
        username: str | None = None,
        password: str | None = None,
    ) -> bool:
        """Create the default coordinator account if it does not exist."""
        username = username or settings.DEFAULT_ADMIN_USERNAME
        password = password or settings.DEFAULT_ADMIN_PASSWORD

        result = self.db.execute(select(User).where(User.username == username))
        if result.scalar_one_or_none():
            return False

        self.db.add(User(
            username=username,
            password_hash=hash_password(password),
            role=UserRole.COORDINATOR,
            is_active=True,
        ))
        self.db.flush()
        logger.info(f"Default coordinator account '{username}' created")
        return True
