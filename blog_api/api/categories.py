from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from blog_api.schemas.post_schema import CategoryCreate, CategoryResponse
from blog_api.schemas.user_schema import SessionContext
from blog_api.services.post_service import PostService
from blog_api.services.auth_service import get_session_context
from blog_api.db.session import get_db

router = APIRouter()

@router.get("/", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    """All categories, alphabetically"""
    return await PostService(db).list_categories()

@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).create_category(ctx, category_data)
