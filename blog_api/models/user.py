from sqlalchemy import Column, String, Boolean, Index
from sqlalchemy.orm import relationship
from blog_api.db.base import BaseModel

class User(BaseModel):
    """Profile of a signed-in author"""
    __tablename__ = "profiles"
    
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100))
    avatar_url = Column(String(255))
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    posts = relationship("Post", back_populates="author", passive_deletes=True)
    comments = relationship("Comment", back_populates="author", passive_deletes=True)
    
    __table_args__ = (
        Index('ix_profiles_created_at', 'created_at'),
    )
    
    @property
    def display_name(self) -> str:
        return self.full_name or self.email
