from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship
from blog_api.db.base import BaseModel

class Category(BaseModel):
    __tablename__ = "categories"
    
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(120), unique=True, index=True, nullable=False)
    description = Column(Text)
    
    posts = relationship("Post", back_populates="category", passive_deletes=True)
