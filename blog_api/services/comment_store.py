from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, insert, update, and_, exists, func, literal
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from blog_api.models.comment import Comment
from blog_api.models.like import CommentLike
from blog_api.models.post import Post
from blog_api.models.user import User
from blog_api.schemas.comment_schema import CommentResponse
from blog_api.exceptions import StoreError

logger = logging.getLogger(__name__)

class CommentStore:
    """Persistence boundary for comments and comment likes.

    Owns the rules a managed backend would enforce: replies and likes are
    removed with their comment through FK cascades, only the author may
    delete a comment, a user likes a comment at most once, and
    ``like_count`` always equals the number of like rows.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fail(self, action: str, exc: Exception) -> StoreError:
        logger.error(f"Error {action}: {exc}")
        await self.db.rollback()
        if isinstance(exc, IntegrityError):
            return StoreError(f"Rejected while {action}", "conflict")
        return StoreError(f"Store failure while {action}")

    async def list_comments(
        self,
        post_id: str,
        viewer_id: Optional[str] = None
    ) -> List[CommentResponse]:
        """Flat comment set of a post, oldest first, with author fields"""
        if viewer_id:
            liked = exists().where(
                and_(
                    CommentLike.comment_id == Comment.id,
                    CommentLike.user_id == viewer_id
                )
            )
        else:
            liked = literal(False)

        stmt = select(
            Comment.id,
            Comment.post_id,
            Comment.author_id,
            Comment.parent_id,
            Comment.content,
            Comment.like_count,
            Comment.created_at,
            Comment.updated_at,
            User.full_name,
            User.email,
            User.avatar_url,
            liked.label("liked")
        ).join(
            User, Comment.author_id == User.id
        ).where(
            Comment.post_id == post_id
        ).order_by(
            Comment.created_at.asc()
        )

        try:
            result = await self.db.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            raise await self._fail("listing comments", e)

        return [
            CommentResponse(
                id=row.id,
                post_id=row.post_id,
                author_id=row.author_id,
                parent_id=row.parent_id,
                content=row.content,
                like_count=row.like_count,
                liked=bool(row.liked),
                created_at=row.created_at,
                updated_at=row.updated_at,
                author={
                    "id": row.author_id,
                    "full_name": row.full_name,
                    "email": row.email,
                    "avatar_url": row.avatar_url,
                },
            )
            for row in rows
        ]

    async def get_comment(self, comment_id: str) -> Optional[Comment]:
        stmt = select(Comment).where(Comment.id == comment_id)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise await self._fail("loading comment", e)
        return result.scalar_one_or_none()

    async def require_comment(self, comment_id: str) -> Comment:
        comment = await self.get_comment(comment_id)
        if comment is None:
            raise StoreError("Comment not found", "not_found")
        return comment

    async def insert_comment(
        self,
        post_id: str,
        author_id: str,
        parent_id: Optional[str],
        content: str
    ) -> Comment:
        """Append a comment row; the parent must belong to the same post"""
        try:
            post_exists = await self.db.scalar(select(Post.id).where(Post.id == post_id))
        except SQLAlchemyError as e:
            raise await self._fail("checking post", e)
        if post_exists is None:
            raise StoreError("Post not found", "not_found")

        if parent_id is not None:
            parent = await self.get_comment(parent_id)
            if parent is None or parent.post_id != post_id:
                raise StoreError("Parent comment not found on this post", "not_found")

        comment = Comment(
            post_id=post_id,
            author_id=author_id,
            parent_id=parent_id,
            content=content,
            like_count=0,
        )

        try:
            self.db.add(comment)
            await self.db.commit()
            await self.db.refresh(comment)
        except SQLAlchemyError as e:
            raise await self._fail("inserting comment", e)

        return comment

    async def delete_comment(self, comment_id: str, user_id: str) -> str:
        """Delete an owned comment with its replies; returns the owning post id"""
        comment = await self.require_comment(comment_id)
        if comment.author_id != user_id:
            raise StoreError("Only the author can delete this comment", "forbidden")

        post_id = comment.post_id
        try:
            # Replies and likes go with it through ON DELETE CASCADE
            await self.db.execute(
                delete(Comment).where(
                    and_(Comment.id == comment_id, Comment.author_id == user_id)
                )
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("deleting comment", e)

        return post_id

    async def find_user_like(self, comment_id: str, user_id: str) -> Optional[str]:
        stmt = select(CommentLike.id).where(
            and_(
                CommentLike.comment_id == comment_id,
                CommentLike.user_id == user_id
            )
        )
        try:
            return await self.db.scalar(stmt)
        except SQLAlchemyError as e:
            raise await self._fail("looking up comment like", e)

    async def insert_comment_like(self, comment_id: str, user_id: str) -> None:
        try:
            await self.db.execute(
                insert(CommentLike).values(comment_id=comment_id, user_id=user_id)
            )
            await self._sync_like_count(comment_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("inserting comment like", e)

    async def delete_comment_like(self, like_id: str) -> None:
        try:
            comment_id = await self.db.scalar(
                select(CommentLike.comment_id).where(CommentLike.id == like_id)
            )
            if comment_id is None:
                return
            await self.db.execute(delete(CommentLike).where(CommentLike.id == like_id))
            await self._sync_like_count(comment_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("deleting comment like", e)

    async def toggle_comment_like(self, comment_id: str, user_id: str) -> Tuple[str, bool]:
        """Flip the caller's like in one transaction.

        Returns the owning post id and whether the comment is now liked.

        The conditional delete decides the direction, and the insert is
        guarded by the (comment_id, user_id) unique constraint, so two
        concurrent toggles can never leave a duplicate like behind.
        """
        comment = await self.require_comment(comment_id)
        post_id = comment.post_id

        try:
            result = await self.db.execute(
                delete(CommentLike).where(
                    and_(
                        CommentLike.comment_id == comment_id,
                        CommentLike.user_id == user_id
                    )
                )
            )
            liked = result.rowcount == 0
            if liked:
                await self.db.execute(
                    insert(CommentLike).values(comment_id=comment_id, user_id=user_id)
                )
            await self._sync_like_count(comment_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("toggling comment like", e)

        logger.info(f"User {user_id} {'liked' if liked else 'unliked'} comment {comment_id}")
        return post_id, liked

    async def _sync_like_count(self, comment_id: str) -> None:
        count = select(func.count(CommentLike.id)).where(
            CommentLike.comment_id == comment_id
        ).scalar_subquery()
        await self.db.execute(
            update(Comment)
            .where(Comment.id == comment_id)
            .values(like_count=count)
            .execution_options(synchronize_session=False)
        )
