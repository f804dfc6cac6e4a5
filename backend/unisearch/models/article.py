from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from unisearch.database import Base


class NewsCategory(Base):
    __tablename__ = "news_categories"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False, unique=True)

    articles = relationship("Article", back_populates="category")


class Article(Base):
    __tablename__ = "articles"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    summary = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    status = Column(Text, nullable=False, default="draft")
    category_id = Column(Text, ForeignKey("news_categories.id", ondelete="SET NULL"))
    author_name = Column(Text)
    view_count = Column(Integer, nullable=False, default=0)
    bookmark_count = Column(Integer, nullable=False, default=0)
    published_at = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    category = relationship("NewsCategory", back_populates="articles")
