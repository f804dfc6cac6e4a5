from sqlalchemy import JSON, Boolean, Column, Float, Integer, Text, UniqueConstraint
from unisearch.database import Base


class SearchQueryLog(Base):
    """One row per executed search; feeds popular searches and click tracking."""

    __tablename__ = "search_queries"

    id = Column(Text, primary_key=True)
    user_id = Column(Text)
    query = Column(Text, nullable=False)
    content_types = Column(JSON, nullable=False, default=list)
    results_count = Column(Integer, nullable=False, default=0)
    sort_by = Column(Text)
    execution_time_ms = Column(Float)
    clicked_result_id = Column(Text)
    clicked_result_type = Column(Text)
    created_at = Column(Text, nullable=False)


class SearchHistory(Base):
    __tablename__ = "search_history"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, nullable=False)
    query = Column(Text, nullable=False)
    content_types = Column(JSON, nullable=False, default=list)
    sort_by = Column(Text)
    result_count = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)


class SavedSearch(Base):
    __tablename__ = "saved_searches"
    __table_args__ = (UniqueConstraint("user_id", "name"),)

    id = Column(Text, primary_key=True)
    user_id = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    query = Column(Text, nullable=False)
    content_types = Column(JSON, nullable=False, default=list)
    sort_by = Column(Text)
    notification_enabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
