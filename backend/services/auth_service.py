"""
Service for account registration, login and password changes.
"""

import random

from loguru import logger
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from models.exceptions import (
    AccountSuspendedException,
    InvalidCredentialsException,
    RegistrationDisabledException,
    UserNotFoundException,
    UsernameTakenException,
    ValidationException,
)
from repositories.user_repository import UserRepository

NICKNAME_ADJECTIVES = (
    "brave", "calm", "clever", "cool", "curious", "eager", "fast", "fierce",
    "gentle", "happy", "honest", "kind", "lazy", "lucky", "mighty", "noble",
    "proud", "quick", "quiet", "sharp", "shy", "silent", "smart", "smooth",
    "soft", "swift", "tall", "tiny", "warm", "wild", "wise", "witty",
    "bright", "bold", "golden", "silver", "cosmic", "mystic", "epic", "royal",
)  # fmt: skip

NICKNAME_NOUNS = (
    "bear", "bird", "cat", "deer", "dog", "eagle", "falcon", "fox",
    "hawk", "horse", "lion", "owl", "panda", "rabbit", "raven", "shark",
    "tiger", "whale", "wolf", "zebra", "dragon", "phoenix", "unicorn", "griffin",
    "koala", "dolphin", "penguin", "turtle", "otter", "beaver", "lynx", "cobra",
)  # fmt: skip

MAX_NICKNAME_ATTEMPTS = 10


def generate_nickname(rng: random.Random | None = None) -> str:
    """Generate an anonymous nickname such as ``swift_fox_8472``."""
    rng = rng or random.SystemRandom()
    adjective = rng.choice(NICKNAME_ADJECTIVES)
    noun = rng.choice(NICKNAME_NOUNS)
    return f"{adjective}_{noun}_{rng.randint(1000, 9999)}"


class AuthService:
    """Service for authentication and account business logic."""

    @staticmethod
    def generate_unique_nickname(db: Session) -> str:
        """
        Generate a nickname that no existing user holds.

        Falls back to a five-digit suffix after repeated collisions.
        """
        user_repo = UserRepository(db)
        for _ in range(MAX_NICKNAME_ATTEMPTS):
            nickname = generate_nickname()
            if not user_repo.nickname_exists(nickname):
                return nickname

        while True:
            base = "_".join(generate_nickname().split("_")[:2])
            nickname = f"{base}_{random.randint(10000, 99999)}"
            if not user_repo.nickname_exists(nickname):
                return nickname

    @staticmethod
    def register(db: Session, user_data: schemas.RegisterGeneral) -> db_models.User:
        """
        Register a general (non company-verified) account.

        Args:
            db: Database session
            user_data: Validated registration payload

        Returns:
            Created user

        Raises:
            RegistrationDisabledException: If registration is switched off
            UsernameTakenException: If the username is already registered
        """
        if not settings.REGISTRATION_ENABLED:
            raise RegistrationDisabledException()

        user_repo = UserRepository(db)
        if user_repo.username_exists(user_data.username):
            raise UsernameTakenException(user_data.username)

        user = db_models.User(
            username=user_data.username,
            nickname=AuthService.generate_unique_nickname(db),
            hashed_password=auth.get_password_hash(user_data.password),
            role=db_models.UserRole.USER,
            status=db_models.UserStatus.ACTIVE,
            company_verified=False,
        )
        user = user_repo.create(user)
        logger.info(f"Registered user {user.id} as {user.nickname}")
        return user

    @staticmethod
    def login(db: Session, identifier: str, password: str) -> db_models.User:
        """
        Authenticate by username (or email) and password.

        Raises:
            InvalidCredentialsException: If the user is unknown or the password is wrong
            AccountSuspendedException: If the account is not ACTIVE
        """
        user = UserRepository(db).get_by_login(identifier)
        if user is None or not auth.verify_password(password, user.hashed_password):
            raise InvalidCredentialsException()

        if user.status != db_models.UserStatus.ACTIVE:
            logger.warning(f"Login refused for {user.status.value} user {user.id}")
            raise AccountSuspendedException()

        return user

    @staticmethod
    def change_password(
        db: Session, user_id: int, current_password: str, new_password: str
    ) -> None:
        """
        Change user password.

        Raises:
            UserNotFoundException: If user not found
            ValidationException: If the current password is incorrect
        """
        user_repo = UserRepository(db)
        user = user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundException(user_id)

        if not auth.verify_password(current_password, user.hashed_password):
            raise ValidationException(
                "Current password is incorrect",
                details={"currentPassword": ["Current password is incorrect"]},
            )

        user.hashed_password = auth.get_password_hash(new_password)
        user_repo.update(user)
        logger.info(f"User {user_id} changed password")
