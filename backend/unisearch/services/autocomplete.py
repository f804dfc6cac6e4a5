from sqlalchemy import text
from sqlalchemy.orm import Session

from unisearch.config import settings
from unisearch.schemas.search import AutocompleteSuggestion, ContentType
from unisearch.utils.text import like_pattern
from unisearch.utils.timestamps import utc_now

# Each branch keeps its best few distinct texts; the union is re-ranked by
# similarity. GROUP BY collapses records that share the same text into a
# single suggestion carrying their count.
_BRANCH = r"""
    SELECT * FROM (
        SELECT {column} AS suggestion,
               '{content_type}' AS type,
               COUNT(*) AS occurrences,
               MAX(similarity({column}, :query)) AS score
        FROM {table}
        WHERE {live_filter}
          AND ({column} LIKE :pattern ESCAPE '\' OR similarity({column}, :query) > :threshold)
        GROUP BY {column}
        ORDER BY score DESC, suggestion
        LIMIT :per_source
    )
"""

_SOURCES = [
    ("articles", "title", ContentType.ARTICLES, "status = 'published'"),
    ("topics", "title", ContentType.FORUM_TOPICS, "status = 'open' AND is_hidden = 0"),
    ("jobs", "title", ContentType.JOBS, "status = 'published' AND (expires_at IS NULL OR expires_at > :now)"),
    ("companies", "name", ContentType.COMPANIES, "1 = 1"),
    (
        "(SELECT COALESCE(p.display_name, u.username) AS name, u.status "
        "FROM users u LEFT JOIN profiles p ON p.user_id = u.id)",
        "name",
        ContentType.USERS,
        "status = 'active'",
    ),
]

AUTOCOMPLETE_SQL = (
    "\nUNION ALL\n".join(
        _BRANCH.format(table=table, column=column, content_type=ct.value, live_filter=live)
        for table, column, ct, live in _SOURCES
    )
    + "\nORDER BY score DESC, suggestion\nLIMIT :limit"
)


def suggest(db: Session, prefix: str, limit: int | None = None) -> list[AutocompleteSuggestion]:
    prefix = prefix.strip()
    if len(prefix) < settings.autocomplete_min_length:
        return []

    rows = db.execute(
        text(AUTOCOMPLETE_SQL),
        {
            "query": prefix,
            "pattern": like_pattern(prefix),
            "threshold": settings.similarity_threshold,
            "per_source": settings.autocomplete_per_source,
            "limit": limit or settings.autocomplete_limit,
            "now": utc_now(),
        },
    ).fetchall()

    return [
        AutocompleteSuggestion(suggestion=r.suggestion, type=ContentType(r.type), count=int(r.occurrences))
        for r in rows
    ]
