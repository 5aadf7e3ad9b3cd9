"""
Models package for the Threaded Blog API
"""
from blog_api.db.base import Base, BaseModel
from blog_api.models.user import User
from blog_api.models.category import Category
from blog_api.models.post import Post
from blog_api.models.comment import Comment
from blog_api.models.like import PostLike, CommentLike

__all__ = [
    'Base',
    'BaseModel',
    'User',
    'Category',
    'Post',
    'Comment',
    'PostLike',
    'CommentLike',
]
