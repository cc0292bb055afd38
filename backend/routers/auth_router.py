"""Authentication router endpoints."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.rate_limiter import LOGIN_RATE_LIMIT, REGISTER_RATE_LIMIT, limiter
from helpers.responses import envelope
from repositories.database import get_db
from services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=schemas.ApiResponse[schemas.TokenResponse],
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(REGISTER_RATE_LIMIT)
def register(
    request: Request,
    user_data: schemas.RegisterGeneral,
    db: Session = Depends(get_db),
) -> dict:
    """
    Register a general account.

    The account gets a generated anonymous nickname and starts in the
    general tier; company verification is a separate flow.
    """
    user = AuthService.register(db, user_data)
    token = auth.create_user_token(user)
    return envelope({"access_token": token, "user": user})


@router.post("/login", response_model=schemas.ApiResponse[schemas.TokenResponse])
@limiter.limit(LOGIN_RATE_LIMIT)
def login(
    request: Request,
    credentials: schemas.LoginRequest,
    db: Session = Depends(get_db),
) -> dict:
    """
    Login with username (or email) and password.

    Domain exceptions are caught by centralized exception handlers.
    """
    user = AuthService.login(db, credentials.username, credentials.password)
    token = auth.create_user_token(user)
    return envelope({"access_token": token, "user": user})


@router.get("/me", response_model=schemas.ApiResponse[schemas.UserResponse])
async def read_users_me(
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    """Get current user."""
    return envelope(current_user)


@router.post(
    "/change-password", response_model=schemas.ApiResponse[schemas.MessageResponse]
)
def change_password(
    password_change: schemas.ChangePassword,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    """Change user password."""
    AuthService.change_password(
        db,
        current_user.id,
        password_change.current_password,
        password_change.new_password,
    )
    return envelope({"message": "Password changed successfully"})
