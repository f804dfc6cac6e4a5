import json
import logging
import uuid

from sqlalchemy import text
from sqlalchemy.orm import Session

from unisearch.config import settings
from unisearch.errors import NotFoundError
from unisearch.models.search import SearchHistory, SearchQueryLog
from unisearch.schemas.search import (
    ContentType,
    PopularSearch,
    SearchHistoryEntry,
    SortOption,
)
from unisearch.utils.timestamps import utc_days_ago, utc_now

logger = logging.getLogger(__name__)


def record_query(
    db: Session,
    user_id: str | None,
    query: str,
    content_types: list[ContentType],
    results_count: int,
    sort_by: SortOption,
    execution_time_ms: float | None = None,
) -> str:
    """Append one row to the query log. Every search is logged, signed in or not."""
    entry_id = str(uuid.uuid4())
    entry = SearchQueryLog(
        id=entry_id,
        user_id=user_id,
        query=query,
        content_types=[ct.value for ct in content_types],
        results_count=results_count,
        sort_by=sort_by.value,
        execution_time_ms=execution_time_ms,
        created_at=utc_now(),
    )
    db.add(entry)
    db.commit()
    return entry_id


def add_to_history(
    db: Session,
    user_id: str,
    query: str,
    content_types: list[ContentType],
    sort_by: SortOption,
    result_count: int = 0,
) -> None:
    """Append to the caller's history and drop everything past the newest N.

    Insert and prune share one transaction, so concurrent searches by the
    same user can overshoot the cap only until the next prune.
    """
    db.add(
        SearchHistory(
            id=str(uuid.uuid4()),
            user_id=user_id,
            query=query,
            content_types=[ct.value for ct in content_types],
            sort_by=sort_by.value,
            result_count=result_count,
            created_at=utc_now(),
        )
    )
    db.flush()
    # rowid breaks ties between entries created within the same second
    db.execute(
        text(
            """
            DELETE FROM search_history
            WHERE user_id = :user_id
              AND id NOT IN (
                  SELECT id FROM search_history
                  WHERE user_id = :user_id
                  ORDER BY created_at DESC, rowid DESC
                  LIMIT :keep
              )
            """
        ),
        {"user_id": user_id, "keep": settings.history_limit},
    )
    db.commit()


def get_history(db: Session, user_id: str) -> list[SearchHistoryEntry]:
    rows = db.execute(
        text(
            """
            SELECT id, query, content_types, sort_by, result_count, created_at
            FROM search_history
            WHERE user_id = :user_id
            ORDER BY created_at DESC, rowid DESC
            LIMIT :limit
            """
        ),
        {"user_id": user_id, "limit": settings.history_limit},
    ).fetchall()
    return [
        SearchHistoryEntry(
            id=r.id,
            query=r.query,
            content_types=json.loads(r.content_types or "[]"),
            sort_by=r.sort_by,
            result_count=r.result_count,
            created_at=r.created_at,
        )
        for r in rows
    ]


def get_popular(db: Session, limit: int | None = None, window_days: int | None = None) -> list[PopularSearch]:
    """Most frequent exact query texts over the trailing window."""
    cutoff = utc_days_ago(window_days or settings.popular_window_days)
    rows = db.execute(
        text(
            """
            SELECT query, COUNT(*) AS n, MAX(created_at) AS last_searched
            FROM search_queries
            WHERE created_at > :cutoff
            GROUP BY query
            ORDER BY n DESC, last_searched DESC
            LIMIT :limit
            """
        ),
        {"cutoff": cutoff, "limit": limit or settings.popular_limit},
    ).fetchall()
    return [PopularSearch(query=r.query, count=r.n, last_searched=r.last_searched) for r in rows]


def track_click(db: Session, query_id: str, result_id: str, result_type: ContentType) -> None:
    entry = db.query(SearchQueryLog).filter(SearchQueryLog.id == query_id).first()
    if not entry:
        raise NotFoundError("Search query not found")
    entry.clicked_result_id = result_id
    entry.clicked_result_type = result_type.value
    db.commit()


def cleanup(db: Session, history_days: int | None = None, query_log_days: int | None = None) -> dict:
    """Delete history and query-log rows older than their retention windows."""
    history_cutoff = utc_days_ago(history_days or settings.history_retention_days)
    log_cutoff = utc_days_ago(query_log_days or settings.query_log_retention_days)

    history_deleted = (
        db.query(SearchHistory)
        .filter(SearchHistory.created_at < history_cutoff)
        .delete(synchronize_session=False)
    )
    queries_deleted = (
        db.query(SearchQueryLog)
        .filter(SearchQueryLog.created_at < log_cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()

    logger.info(
        "Retention cleanup removed %d history entries and %d query log rows",
        history_deleted,
        queries_deleted,
    )
    return {"history": history_deleted, "queries": queries_deleted}
