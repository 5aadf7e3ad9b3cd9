from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from blog_api.schemas.user_schema import AuthorInfo

class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)
    description: Optional[str] = None

class CategoryCreate(CategoryBase):
    pass

class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    created_at: datetime

class CategoryInfo(BaseModel):
    name: str
    slug: str

class PostBase(BaseModel):
    title: str = Field(..., max_length=255)
    content: str
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    tags: List[str] = []
    published: bool = True

class PostCreate(PostBase):
    pass

class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None
    published: Optional[bool] = None

class PostInDB(PostBase):
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    author_id: str
    slug: str
    like_count: int = 0
    created_at: datetime
    updated_at: datetime

class PostWithAuthor(PostInDB):
    author: AuthorInfo
    category: Optional[CategoryInfo] = None
    user_liked: bool = False

class PostLikeResponse(BaseModel):
    post_id: str
    liked: bool
    like_count: int
