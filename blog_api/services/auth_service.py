from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from blog_api.config import settings
from blog_api.schemas.user_schema import UserCreate, TokenData, SessionContext
from blog_api.models.user import User
from blog_api.db.session import get_db
from blog_api.services.redis_service import RedisService, get_redis_service

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

class AuthService:
    def __init__(self, db: AsyncSession, redis: Optional[RedisService] = None):
        self.db = db
        self.redis = redis

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        return pwd_context.verify(plain_password, hashed_password)

    def get_password_hash(self, password: str) -> str:
        """Hash a password"""
        return pwd_context.hash(password)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user(self, user_id: str) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, user_data: UserCreate) -> User:
        """Create a new user profile"""
        user = User(
            email=user_data.email.lower(),
            hashed_password=self.get_password_hash(user_data.password),
            full_name=user_data.full_name,
            avatar_url=user_data.avatar_url,
            is_active=True,
        )

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"Created profile {user.id}")
        return user

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Authenticate a user"""
        user = await self.get_user_by_email(email)

        if not user or not self.verify_password(password, user.hashed_password):
            return None

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive user"
            )

        return user

    def _create_token(self, data: dict, token_type: str, expires_delta: timedelta) -> str:
        to_encode = data.copy()
        expire = datetime.utcnow() + expires_delta
        to_encode.update({"exp": expire, "type": token_type})
        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.ALGORITHM)

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token"""
        return self._create_token(data, "access", expires_delta or timedelta(minutes=15))

    def create_refresh_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT refresh token"""
        return self._create_token(data, "refresh", expires_delta or timedelta(days=7))

    def create_token_pair(self, user: User) -> dict:
        data = {"sub": user.email, "user_id": user.id}
        return {
            "access_token": self.create_access_token(
                data, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
            ),
            "refresh_token": self.create_refresh_token(
                data, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
            ),
            "token_type": "bearer",
        }

    def _decode(self, token: str, token_type: str) -> Optional[TokenData]:
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[settings.ALGORITHM])
        except JWTError:
            return None

        if payload.get("type") != token_type:
            return None

        email = payload.get("sub")
        user_id = payload.get("user_id")
        if email is None or user_id is None:
            return None

        return TokenData(email=email, user_id=user_id)

    async def verify_token(self, token: str) -> Optional[TokenData]:
        """Verify a JWT access token"""
        if self.redis is not None and await self.redis.get(f"blacklist:{token}"):
            return None
        return self._decode(token, "access")

    def verify_refresh_token(self, token: str) -> Optional[TokenData]:
        """Verify a refresh token"""
        return self._decode(token, "refresh")

    async def blacklist_token(self, token: str, expires_in: Optional[int] = None) -> None:
        """Add token to blacklist until it would have expired anyway"""
        ttl = expires_in or settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        await self.redis.setex(f"blacklist:{token}", ttl, "1")

async def _resolve_user(token: str, db: AsyncSession, redis: RedisService) -> Optional[User]:
    auth_service = AuthService(db, redis)
    token_data = await auth_service.verify_token(token)
    if token_data is None:
        return None

    user = await auth_service.get_user(token_data.user_id)
    if user is None or not user.is_active:
        return None
    return user

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
    redis: RedisService = Depends(get_redis_service)
) -> User:
    """Dependency to get current authenticated user"""
    user = await _resolve_user(token, db, redis)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

async def get_session_context(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: AsyncSession = Depends(get_db),
    redis: RedisService = Depends(get_redis_service)
) -> SessionContext:
    """Dependency giving the caller's identity, anonymous when no valid token is sent"""
    if not token:
        return SessionContext.anonymous()

    user = await _resolve_user(token, db, redis)
    if user is None:
        return SessionContext.anonymous()
    return SessionContext.for_user(user)
