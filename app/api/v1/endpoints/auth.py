"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import CurrentPrincipal
from app.schemas.auth import CurrentUserResponse, LoginRequest, TokenResponse
from app.services.auth import AuthService

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def login(
    request: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Authenticate user and return an access token.
    """
    service = AuthService(db)
    return service.login(request)


@router.get("/me", response_model=CurrentUserResponse)
def get_current_user_info(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Get the authenticated user.
    """
    service = AuthService(db)
    return service.get_user(principal.user_id)
