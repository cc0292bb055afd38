"""
User repository for database operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class UserRepository(BaseRepository[db_models.User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize user repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.User, db)

    def get_by_username(self, username: str) -> Optional[db_models.User]:
        """
        Get user by username.

        Args:
            username: Lower-cased username

        Returns:
            User if found, None otherwise
        """
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.username == username)
            .first()
        )

    def get_by_login(self, identifier: str) -> Optional[db_models.User]:
        """Get user whose username or email equals ``identifier``."""
        return (
            self.db.query(db_models.User)
            .filter(
                (db_models.User.username == identifier)
                | (db_models.User.email == identifier)
            )
            .first()
        )

    def username_exists(self, username: str) -> bool:
        return self.get_by_username(username) is not None

    def nickname_exists(self, nickname: str) -> bool:
        return (
            self.db.query(db_models.User.id)
            .filter(db_models.User.nickname == nickname)
            .first()
            is not None
        )

    def get_active_user_ids(self) -> List[int]:
        """
        Get IDs of every ACTIVE user.

        Returns:
            List of user IDs
        """
        rows = (
            self.db.query(db_models.User.id)
            .filter(db_models.User.status == db_models.UserStatus.ACTIVE)
            .all()
        )
        return [row[0] for row in rows]

    def get_admins(self) -> List[db_models.User]:
        return (
            self.db.query(db_models.User)
            .filter(
                db_models.User.role == db_models.UserRole.ADMIN,
                db_models.User.status == db_models.UserStatus.ACTIVE,
            )
            .all()
        )

    def search_active(
        self, search: Optional[str] = None, page: int = 1, limit: int = 20
    ) -> tuple[List[db_models.User], int]:
        """
        Get ACTIVE users ordered by nickname, for picking a notification recipient.

        Args:
            search: Case-insensitive nickname substring
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (users, total_count)
        """
        query = self.db.query(db_models.User).filter(
            db_models.User.status == db_models.UserStatus.ACTIVE
        )
        if search:
            query = query.filter(db_models.User.nickname.ilike(f"%{search}%"))
        query = query.order_by(db_models.User.nickname.asc(), db_models.User.id.asc())
        return self.paginate(query, page, limit)
