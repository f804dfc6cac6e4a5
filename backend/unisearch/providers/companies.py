from unisearch.providers.base import ContentProvider
from unisearch.schemas.search import ContentType
from unisearch.utils.text import build_match_expression, like_pattern

_COLUMNS = """
    c.id, c.name, c.slug, c.website,
    substr(COALESCE(c.description, ''), 1, 300) AS excerpt,
    c.logo_url, c.industry, c.company_size, c.location,
    c.verified_company, c.follower_count, c.view_count,
    c.created_at, c.updated_at
"""


class CompanyProvider(ContentProvider):
    """Name similarity (weighted 2x) blended with full-text rank."""

    content_type = ContentType.COMPANIES
    sql = rf"""
        SELECT {_COLUMNS},
               similarity(c.name, :query) * 2.0 + COALESCE(f.text_rank, 0.0) AS relevance_score,
               f.description_highlight
        FROM companies c
        LEFT JOIN (
            SELECT rowid AS fts_rowid,
                   -bm25(companies_fts) AS text_rank,
                   snippet(companies_fts, 1, '<b>', '</b>', '...', 30) AS description_highlight
            FROM companies_fts
            WHERE companies_fts MATCH :match
        ) f ON f.fts_rowid = c.rowid
        WHERE c.name LIKE :pattern ESCAPE '\'
           OR f.fts_rowid IS NOT NULL
        ORDER BY relevance_score DESC, c.id
        LIMIT :limit OFFSET :offset
    """
    # Used when the query has no indexable token (e.g. "C++" punctuation only)
    name_only_sql = rf"""
        SELECT {_COLUMNS},
               similarity(c.name, :query) * 2.0 AS relevance_score,
               NULL AS description_highlight
        FROM companies c
        WHERE c.name LIKE :pattern ESCAPE '\'
        ORDER BY relevance_score DESC, c.id
        LIMIT :limit OFFSET :offset
    """

    def params(self, query: str) -> dict | None:
        if not query:
            return None
        params = {"query": query, "pattern": like_pattern(query)}
        match = build_match_expression(query)
        if match is not None:
            params["match"] = match
        return params

    def statement(self, params: dict) -> str:
        return self.sql if "match" in params else self.name_only_sql
