from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from blog_api.config import settings
from blog_api.schemas.post_schema import (
    PostCreate,
    PostUpdate,
    PostInDB,
    PostWithAuthor,
    PostLikeResponse
)
from blog_api.schemas.user_schema import SessionContext
from blog_api.services.post_service import PostService
from blog_api.services.auth_service import get_session_context
from blog_api.db.session import get_db
from blog_api.exceptions import BlogError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/", response_model=List[PostWithAuthor])
async def list_posts(
    search: Optional[str] = Query(None, description="Match in title or content"),
    category: Optional[str] = Query(None, description="Category slug"),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.POST_PAGE_SIZE, ge=1, le=100),
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """List published posts, newest first"""
    return await PostService(db).list_posts(
        ctx, search=search, category_slug=category, skip=skip, limit=limit
    )

@router.get("/{slug}", response_model=PostWithAuthor)
async def get_post(
    slug: str,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Get a post by its slug"""
    return await PostService(db).get_post_by_slug(ctx, slug)

@router.post("/", response_model=PostInDB, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Create a new post"""
    try:
        return await PostService(db).create_post(ctx, post_data)
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Create post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create post"
        )

@router.put("/{post_id}", response_model=PostInDB)
async def update_post(
    post_id: str,
    post_update: PostUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Update one of your posts"""
    return await PostService(db).update_post(ctx, post_id, post_update)

@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Delete one of your posts"""
    await PostService(db).delete_post(ctx, post_id)
    return {"message": "Post deleted successfully"}

@router.post("/{post_id}/like", response_model=PostLikeResponse)
async def toggle_post_like(
    post_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    """Like a post, or unlike it if you already do"""
    return await PostService(db).toggle_post_like(ctx, post_id)
