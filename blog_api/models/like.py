from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from blog_api.db.base import BaseModel

class PostLike(BaseModel):
    __tablename__ = "post_likes"
    
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    
    post = relationship("Post", back_populates="likes")
    
    __table_args__ = (
        UniqueConstraint('post_id', 'user_id', name='unique_post_like'),
        Index('ix_post_likes_user_id', 'user_id'),
    )

class CommentLike(BaseModel):
    __tablename__ = "comment_likes"
    
    comment_id = Column(String(36), ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    
    comment = relationship("Comment", back_populates="likes")
    
    __table_args__ = (
        UniqueConstraint('comment_id', 'user_id', name='unique_comment_like'),
        Index('ix_comment_likes_user_id', 'user_id'),
    )
