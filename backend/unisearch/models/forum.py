from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from unisearch.database import Base


class ForumCategory(Base):
    __tablename__ = "forum_categories"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False, unique=True)

    topics = relationship("Topic", back_populates="category")


class Topic(Base):
    __tablename__ = "topics"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    content = Column(Text, nullable=False, default="")
    category_id = Column(Text, ForeignKey("forum_categories.id", ondelete="SET NULL"))
    author_id = Column(Text, ForeignKey("users.id", ondelete="SET NULL"))
    status = Column(Text, nullable=False, default="open")
    is_hidden = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    reply_count = Column(Integer, nullable=False, default=0)
    upvote_count = Column(Integer, nullable=False, default=0)
    vote_score = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    category = relationship("ForumCategory", back_populates="topics")
    author = relationship("User")
    replies = relationship("Reply", back_populates="topic", cascade="all, delete-orphan")


class Reply(Base):
    __tablename__ = "replies"

    id = Column(Text, primary_key=True)
    topic_id = Column(Text, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Text, ForeignKey("users.id", ondelete="SET NULL"))
    content = Column(Text, nullable=False)
    is_deleted = Column(Boolean, nullable=False, default=False)
    upvote_count = Column(Integer, nullable=False, default=0)
    vote_score = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    topic = relationship("Topic", back_populates="replies")
    author = relationship("User")
