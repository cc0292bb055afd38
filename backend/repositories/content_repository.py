"""
Repositories for posts and comments.

Only the reads and status changes moderation needs live here; post and
comment authoring is handled elsewhere.
"""

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import Comment, ContentStatus, Post


class PostRepository(BaseRepository[Post]):
    def __init__(self, db: Session):
        super().__init__(Post, db)

    def get_visible(self, post_id: int) -> Post | None:
        """Get a post unless it is missing or DELETED."""
        return (
            self.db.query(Post)
            .filter(Post.id == post_id, Post.status != ContentStatus.DELETED)
            .first()
        )

    def set_status(self, post_id: int, status: ContentStatus) -> int:
        """Set post status without committing. Returns affected rows."""
        return (
            self.db.query(Post)
            .filter(Post.id == post_id)
            .update({"status": status}, synchronize_session=False)
        )


class CommentRepository(BaseRepository[Comment]):
    def __init__(self, db: Session):
        super().__init__(Comment, db)

    def get_visible(self, comment_id: int) -> Comment | None:
        """Get a comment unless it is missing or DELETED."""
        return (
            self.db.query(Comment)
            .filter(Comment.id == comment_id, Comment.status != ContentStatus.DELETED)
            .first()
        )

    def set_status(self, comment_id: int, status: ContentStatus) -> int:
        """Set comment status without committing. Returns affected rows."""
        return (
            self.db.query(Comment)
            .filter(Comment.id == comment_id)
            .update({"status": status}, synchronize_session=False)
        )
