"""
Repositories for communities and the lookup tables a community can link to.
"""

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import (
    Community,
    Company,
    InterestCategory,
    PublicServantCategory,
)


class CommunityRepository(BaseRepository[Community]):
    """Repository for Community entity database operations."""

    def __init__(self, db: Session):
        super().__init__(Community, db)

    def get_by_slug(self, slug: str) -> Community | None:
        return self.db.query(Community).filter(Community.slug == slug).first()

    def slug_exists(self, slug: str) -> bool:
        return self.get_by_slug(slug) is not None


class CompanyRepository(BaseRepository[Company]):
    def __init__(self, db: Session):
        super().__init__(Company, db)


class PublicServantCategoryRepository(BaseRepository[PublicServantCategory]):
    def __init__(self, db: Session):
        super().__init__(PublicServantCategory, db)


class InterestCategoryRepository(BaseRepository[InterestCategory]):
    def __init__(self, db: Session):
        super().__init__(InterestCategory, db)
