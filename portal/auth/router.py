"""Staff authentication API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from portal.auth.schemas import StaffLogin, StaffResponse, Token
from portal.auth.service import AuthService, get_auth_service
from portal.dependencies import CurrentStaff, get_db

router = APIRouter()


def get_service(db: Annotated[Session, Depends(get_db)]) -> AuthService:
    """Get auth service dependency."""
    return get_auth_service(db)


@router.post("/login", response_model=Token)
async def login(
    data: StaffLogin,
    service: Annotated[AuthService, Depends(get_service)],
):
    """Log in a staff user.

    Args:
        data: Login credentials.
        service: Auth service.

    Returns:
        Token: Bearer token for the staff API and credential actions.

    Raises:
        HTTPException: If the credentials are rejected.
    """
    user, token, message = service.login(data)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


@router.get("/me", response_model=StaffResponse)
async def get_me(
    current_user: CurrentStaff,
    service: Annotated[AuthService, Depends(get_service)],
):
    """Get the current staff user and their roles."""
    return service.get_user_response(current_user)
