"""Comment threads: tree reconstruction and the mutations that refresh it.

A thread is always derived from scratch: every mutation is followed by a
full refetch of the post's flat comment set and a rebuild of the tree, so
the returned tree never reflects a write the store has not accepted.
"""
from typing import Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from blog_api.config import settings
from blog_api.exceptions import AuthenticationError, ValidationError
from blog_api.schemas.comment_schema import (
    CommentResponse,
    CommentTreeResponse,
    CommentThreadResponse,
    CommentLikeResponse
)
from blog_api.schemas.user_schema import SessionContext
from blog_api.services.comment_store import CommentStore

logger = logging.getLogger(__name__)

def build_tree(flat_comments: Sequence[CommentResponse]) -> List[CommentTreeResponse]:
    """Arrange a flat, oldest-first comment set into root comments with nested replies.

    Sibling order follows input order. A reply whose parent is not in the
    set is dropped from the result entirely.
    """
    nodes: Dict[str, CommentTreeResponse] = {}
    for comment in flat_comments:
        nodes[comment.id] = CommentTreeResponse(**comment.model_dump(exclude={"replies"}), replies=[])

    roots: List[CommentTreeResponse] = []
    orphans: List[str] = []
    for comment in flat_comments:
        node = nodes[comment.id]
        if comment.parent_id is None:
            roots.append(node)
            continue

        parent = nodes.get(comment.parent_id)
        if parent is not None:
            parent.replies.append(node)
        else:
            orphans.append(comment.id)

    if orphans:
        logger.warning(f"Dropped {len(orphans)} comment(s) with missing parent: {orphans}")

    return roots

class CommentService:
    def __init__(self, db: AsyncSession, store: Optional[CommentStore] = None):
        self.db = db
        self.store = store or CommentStore(db)

    async def fetch_thread(self, ctx: SessionContext, post_id: str) -> CommentThreadResponse:
        """Fetch the full comment set of a post and rebuild its tree"""
        flat = await self.store.list_comments(post_id, viewer_id=ctx.user_id)
        return CommentThreadResponse(
            post_id=post_id,
            comments=build_tree(flat),
            total=len(flat)
        )

    async def create_comment(
        self,
        ctx: SessionContext,
        post_id: str,
        content: str,
        parent_id: Optional[str] = None
    ) -> CommentThreadResponse:
        """Add a comment or reply as the caller"""
        if not ctx.is_authenticated:
            raise AuthenticationError("Sign in to comment")

        content = content.strip() if content else ""
        if not content:
            raise ValidationError("Comment content cannot be empty", "empty_content")
        if len(content) > settings.COMMENT_MAX_LENGTH:
            raise ValidationError(
                f"Comment is longer than {settings.COMMENT_MAX_LENGTH} characters",
                "content_too_long"
            )

        try:
            comment = await self.store.insert_comment(
                post_id=post_id,
                author_id=ctx.user_id,
                parent_id=parent_id,
                content=content
            )
        except Exception as e:
            logger.error(f"Error creating comment: {e}")
            raise

        logger.info(f"Created comment {comment.id} by user {ctx.user_id} on post {post_id}")
        return await self.fetch_thread(ctx, post_id)

    async def delete_comment(self, ctx: SessionContext, comment_id: str) -> CommentThreadResponse:
        """Delete one of the caller's comments together with its replies"""
        if not ctx.is_authenticated:
            raise AuthenticationError("Sign in to delete comments")

        try:
            post_id = await self.store.delete_comment(comment_id, ctx.user_id)
        except Exception as e:
            logger.error(f"Error deleting comment {comment_id}: {e}")
            raise

        logger.info(f"Deleted comment {comment_id} and its replies")
        return await self.fetch_thread(ctx, post_id)

    async def toggle_comment_like(self, ctx: SessionContext, comment_id: str) -> CommentLikeResponse:
        """Like the comment, or remove the caller's like if there already is one"""
        if not ctx.is_authenticated:
            raise AuthenticationError("Sign in to like comments")

        try:
            post_id, liked = await self.store.toggle_comment_like(comment_id, ctx.user_id)
        except Exception as e:
            logger.error(f"Error toggling like on comment {comment_id}: {e}")
            raise

        return CommentLikeResponse(
            comment_id=comment_id,
            liked=liked,
            thread=await self.fetch_thread(ctx, post_id)
        )
