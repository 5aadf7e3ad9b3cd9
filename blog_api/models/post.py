from sqlalchemy import Column, String, Text, Integer, ForeignKey, Boolean, Index, JSON
from sqlalchemy.orm import relationship
from blog_api.db.base import BaseModel

class Post(BaseModel):
    __tablename__ = "posts"
    
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(Text)
    author_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    published = Column(Boolean, default=True, nullable=False)
    
    # Maintained by the store on like insert/delete
    like_count = Column(Integer, default=0, nullable=False)
    
    # Relationships
    author = relationship("User", back_populates="posts")
    category = relationship("Category", back_populates="posts")
    comments = relationship("Comment", back_populates="post", passive_deletes=True)
    likes = relationship("PostLike", back_populates="post", passive_deletes=True)
    
    __table_args__ = (
        Index('ix_posts_author_id', 'author_id'),
        Index('ix_posts_category_id', 'category_id'),
        Index('ix_posts_created_at', 'created_at'),
        Index('ix_posts_published', 'published'),
    )
