from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from blog_api.schemas.comment_schema import (
    CommentCreate,
    CommentThreadResponse,
    CommentLikeResponse
)
from blog_api.schemas.user_schema import SessionContext
from blog_api.services.comment_service import CommentService
from blog_api.services.auth_service import get_session_context
from blog_api.db.session import get_db
from blog_api.exceptions import BlogError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/posts/{post_id}", response_model=CommentThreadResponse)
async def get_comment_thread(
    post_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Get the comment thread of a post as a tree"""
    return await CommentService(db).fetch_thread(ctx, post_id)

@router.post("/posts/{post_id}", response_model=CommentThreadResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: str,
    comment_data: CommentCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Comment on a post, or reply to a comment when parent_id is given"""
    try:
        return await CommentService(db).create_comment(
            ctx,
            post_id,
            comment_data.content,
            parent_id=comment_data.parent_id
        )
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Create comment error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create comment"
        )

@router.delete("/{comment_id}", response_model=CommentThreadResponse)
async def delete_comment(
    comment_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Delete your comment and every reply under it"""
    try:
        return await CommentService(db).delete_comment(ctx, comment_id)
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Delete comment error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete comment"
        )

@router.post("/{comment_id}/like", response_model=CommentLikeResponse)
async def toggle_comment_like(
    comment_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Like a comment, or unlike it if you already do"""
    try:
        return await CommentService(db).toggle_comment_like(ctx, comment_id)
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Toggle comment like error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update like"
        )
