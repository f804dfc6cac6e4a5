from unisearch.config import settings
from unisearch.providers.base import ContentProvider
from unisearch.schemas.search import ContentType
from unisearch.utils.text import like_pattern, mark_occurrences


class UserProvider(ContentProvider):
    """Fuzzy people search: substring containment or trigram similarity."""

    content_type = ContentType.USERS
    sql = r"""
        SELECT u.id, u.username, u.role, u.created_at,
               p.display_name, p.headline, p.bio, p.avatar_url,
               p.location, p.availability_status,
               max(
                   similarity(u.username, :query),
                   similarity(COALESCE(p.display_name, ''), :query),
                   similarity(COALESCE(p.headline, ''), :query)
               ) AS relevance_score
        FROM users u
        LEFT JOIN profiles p ON p.user_id = u.id
        WHERE u.status = 'active'
          AND (
              u.username LIKE :pattern ESCAPE '\'
              OR p.display_name LIKE :pattern ESCAPE '\'
              OR p.headline LIKE :pattern ESCAPE '\'
              OR similarity(u.username, :query) > :threshold
              OR similarity(COALESCE(p.display_name, ''), :query) > :threshold
          )
        ORDER BY relevance_score DESC, u.id
        LIMIT :limit OFFSET :offset
    """

    def params(self, query: str) -> dict | None:
        if not query:
            return None
        return {
            "query": query,
            "pattern": like_pattern(query),
            "threshold": settings.similarity_threshold,
        }

    def postprocess(self, row: dict, query: str) -> dict:
        row["name_highlight"] = mark_occurrences(row.get("display_name") or row.get("username"), query)
        row["headline_highlight"] = mark_occurrences(row.get("headline"), query)
        return row
