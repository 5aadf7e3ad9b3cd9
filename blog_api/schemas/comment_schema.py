from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from blog_api.config import settings
from blog_api.schemas.user_schema import AuthorInfo

class CommentCreate(BaseModel):
    # Emptiness after trimming is checked by the service so that it can
    # reject the submission before any store write
    content: str = Field(..., max_length=settings.COMMENT_MAX_LENGTH)
    parent_id: Optional[str] = None

class CommentResponse(BaseModel):
    """Flat comment row as listed by the store"""
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    post_id: str
    author_id: str
    parent_id: Optional[str] = None
    content: str
    like_count: int = 0
    liked: bool = False
    created_at: datetime
    updated_at: datetime
    author: AuthorInfo

class CommentTreeResponse(CommentResponse):
    replies: List['CommentTreeResponse'] = []

class CommentThreadResponse(BaseModel):
    post_id: str
    comments: List[CommentTreeResponse]
    total: int

class CommentLikeResponse(BaseModel):
    comment_id: str
    liked: bool
    thread: CommentThreadResponse

# For nested models
CommentTreeResponse.model_rebuild()
