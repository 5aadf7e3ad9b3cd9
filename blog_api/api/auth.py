from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from blog_api.config import settings
from blog_api.schemas.user_schema import UserCreate, UserInDB, Token, RefreshRequest
from blog_api.services.auth_service import AuthService, get_current_user, oauth2_scheme
from blog_api.services.redis_service import RedisService, get_redis_service
from blog_api.db.session import get_db
from blog_api.models.user import User
from blog_api.utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=UserInDB, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Register a new user"""
    auth_service = AuthService(db)

    existing_user = await auth_service.get_user_by_email(user_data.email)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    try:
        return await auth_service.create_user(user_data)
    except Exception as e:
        logger.error(f"Registration error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed"
        )

@router.post("/login", response_model=Token)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """Login with email and password; returns access and refresh tokens"""
    auth_service = AuthService(db)

    user = await auth_service.authenticate_user(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"User {user.id} logged in")
    return auth_service.create_token_pair(user)

@router.post("/refresh", response_model=Token)
async def refresh_token(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange a refresh token for a new token pair"""
    auth_service = AuthService(db)
    token_data = auth_service.verify_refresh_token(body.refresh_token)

    user = await auth_service.get_user(token_data.user_id) if token_data else None
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    return auth_service.create_token_pair(user)

@router.post("/logout")
async def logout(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
    redis: RedisService = Depends(get_redis_service)
):
    """Logout user (invalidate token)"""
    try:
        auth_service = AuthService(db, redis)
        await auth_service.blacklist_token(token)
        return {"message": "Successfully logged out"}
    except Exception as e:
        logger.error(f"Logout error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Logout failed"
        )

@router.get("/me", response_model=UserInDB)
async def read_me(current_user: User = Depends(get_current_user)):
    """Profile of the signed-in user"""
    return current_user
