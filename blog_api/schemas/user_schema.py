from pydantic import BaseModel, EmailStr, ConfigDict, Field
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    email: EmailStr
    full_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=72)

class UserInDB(UserBase):
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

class AuthorInfo(BaseModel):
    """Author display fields joined onto posts and comments"""
    id: str
    full_name: Optional[str] = None
    email: str
    avatar_url: Optional[str] = None

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class RefreshRequest(BaseModel):
    refresh_token: str

class TokenData(BaseModel):
    email: str
    user_id: str

class SessionContext(BaseModel):
    """Identity of the caller, passed explicitly into every service operation"""
    user_id: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    
    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None
    
    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls()
    
    @classmethod
    def for_user(cls, user) -> "SessionContext":
        return cls(
            user_id=user.id,
            display_name=user.display_name,
            email=user.email,
        )
