from datetime import datetime, timedelta, timezone
from typing import Callable, Coroutine, Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.config import settings
from models.exceptions import (
    AccessDeniedException,
    AccountSuspendedException,
    SessionExpiredException,
)
from models.permissions import (
    GUEST_SESSION,
    CompanyInfo,
    RequiredAccess,
    SessionSnapshot,
    authorize,
)
from repositories.database import get_db
from repositories.user_repository import UserRepository

# auto_error=False: a missing token is a guest session, and the access gate
# decides whether a guest may proceed.
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )
    return encoded_jwt


def create_user_token(user: db_models.User) -> str:
    """Issue an access token whose subject is the user ID."""
    return create_access_token(data={"sub": str(user.id)})


def decode_user_id(token: str) -> int | None:
    """
    Extract the user ID from an access token.

    Returns None for malformed or tampered tokens.

    Raises:
        SessionExpiredException: If the token was valid but has expired.
    """
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except jwt.exceptions.ExpiredSignatureError:
        raise SessionExpiredException()
    except jwt.exceptions.InvalidTokenError:
        return None

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def build_session_snapshot(user: db_models.User | None) -> SessionSnapshot:
    """
    Build the classifier input from a freshly loaded user row.

    Users that are not ACTIVE are treated as guests.
    """
    if user is None or user.status != db_models.UserStatus.ACTIVE:
        return GUEST_SESSION

    company = None
    if user.company is not None:
        company = CompanyInfo(
            id=user.company.id, slug=user.company.slug, name=user.company.name
        )

    return SessionSnapshot(
        is_authenticated=True,
        role=user.role,
        company_verified=bool(user.company_verified),
        company=company,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[db_models.User]:
    """
    Load the user named by the bearer token.

    Returns None when no token is sent or the token is unusable, so the
    access gate can produce the login denial.

    Raises:
        SessionExpiredException: If the token has expired (user should re-login).
    """
    if credentials is None:
        return None

    user_id = decode_user_id(credentials.credentials)
    if user_id is None:
        return None
    return UserRepository(db).get_by_id(user_id)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[db_models.User]:
    """
    Get current user if authenticated, otherwise return None.

    Expired, malformed and unknown tokens all fall back to anonymous access.
    """
    try:
        return await get_current_user(credentials, db)
    except SessionExpiredException:
        return None


def require_access(
    required_access: RequiredAccess,
) -> Callable[..., Coroutine[None, None, db_models.User]]:
    """
    Build a dependency that enforces an access level.

    The session snapshot is rebuilt from the database on every request, so
    a role change or a new company verification applies immediately.

    Raises (from the dependency):
        AccountSuspendedException: If the account is SUSPENDED or DELETED.
        AccessDeniedException: If the caller's tier does not satisfy the level.
    """

    async def dependency(
        current_user: Optional[db_models.User] = Depends(get_current_user),
    ) -> db_models.User:
        if (
            current_user is not None
            and current_user.status != db_models.UserStatus.ACTIVE
        ):
            raise AccountSuspendedException()

        decision = authorize(build_session_snapshot(current_user), required_access)
        if not decision.allowed:
            raise AccessDeniedException(decision.denial)  # type: ignore[arg-type]

        return current_user  # type: ignore[return-value]

    dependency.__name__ = f"require_{required_access.value}_access"
    return dependency


get_current_active_user = require_access(RequiredAccess.AUTHENTICATED)
get_company_user = require_access(RequiredAccess.COMPANY)
get_admin_user = require_access(RequiredAccess.ADMIN)
