from sqlalchemy import Column, String, Text, Integer, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from blog_api.db.base import BaseModel

class Comment(BaseModel):
    __tablename__ = "comments"
    
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    # Deleting a comment removes its whole reply subtree
    parent_id = Column(String(36), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    content = Column(Text, nullable=False)
    
    # Maintained by the store on like insert/delete
    like_count = Column(Integer, default=0, nullable=False)
    
    # Relationships
    post = relationship("Post", back_populates="comments")
    author = relationship("User", back_populates="comments")
    likes = relationship("CommentLike", back_populates="comment", passive_deletes=True)
    
    __table_args__ = (
        CheckConstraint('like_count >= 0', name='check_comment_like_count'),
        Index('ix_comments_post_id', 'post_id'),
        Index('ix_comments_author_id', 'author_id'),
        Index('ix_comments_parent_id', 'parent_id'),
        Index('ix_comments_created_at', 'created_at'),
    )
