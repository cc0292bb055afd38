"""
Base repository class providing common database operations.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Query, Session

from repositories.database import Base

T = TypeVar("T", bound=Base)  # type: ignore[type-arg]


class BaseRepository(Generic[T]):
    """
    Base repository shared by all entity repositories.

    Repositories never commit on their own inside a workflow transition;
    ``add``/``flush`` stage changes and the service decides when to
    ``commit`` or ``rollback``. ``create``/``update``/``delete`` are the
    single-step shortcuts for operations that stand alone.
    """

    def __init__(self, model: type[T], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def get_by_id(self, id: int) -> T | None:
        return self.db.query(self.model).filter(self.model.id == id).first()

    def add(self, entity: T) -> None:
        """Stage an entity without committing."""
        self.db.add(entity)

    def create(self, entity: T) -> T:
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: T) -> T:
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        self.db.delete(entity)
        self.db.commit()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def commit(self) -> None:
        self.db.commit()

    def flush(self) -> None:
        self.db.flush()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, entity: T) -> None:
        self.db.refresh(entity)

    def transition(
        self,
        entity_id: int,
        allowed_from: tuple[Any, ...],
        values: dict[str, Any],
    ) -> int:
        """
        Conditionally update a row whose ``status`` is still in ``allowed_from``.

        The check and the write happen in one UPDATE statement, so two
        concurrent callers cannot both move the same row. Nothing is
        committed here.

        Args:
            entity_id: Primary key of the row
            allowed_from: Statuses the row may currently be in
            values: Column values to set

        Returns:
            Number of rows updated (0 when the row left ``allowed_from``)
        """
        return (
            self.db.query(self.model)
            .filter(
                self.model.id == entity_id,
                self.model.status.in_(allowed_from),  # type: ignore[attr-defined]
            )
            .update(values, synchronize_session=False)
        )

    @staticmethod
    def paginate(query: Query, page: int, limit: int) -> tuple[list[Any], int]:
        """
        Apply page/limit to a query.

        Args:
            query: Filtered and ordered query
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (items for the page, total matching rows)
        """
        total = query.order_by(None).count()
        items = query.offset((page - 1) * limit).limit(limit).all()
        return items, total
