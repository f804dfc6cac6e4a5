from sqlalchemy import text
from sqlalchemy.orm import Session

from unisearch.schemas.search import ContentType
from unisearch.utils.text import build_match_expression


class ContentProvider:
    """Runs one relevance-scored query against a single content store.

    Hits come back as plain dicts shaped by the provider's SELECT list, with
    a ``relevance_score`` column and ``*_highlight`` columns carrying
    ``<b>...</b>`` markers. Only live records are ever returned.
    """

    content_type: ContentType
    sql: str

    def params(self, query: str) -> dict | None:
        """Bind parameters for ``query``; None means nothing can match."""
        raise NotImplementedError

    def statement(self, params: dict) -> str:
        return self.sql

    def postprocess(self, row: dict, query: str) -> dict:
        return row

    def search(self, db: Session, query: str, limit: int, offset: int = 0) -> list[dict]:
        query = query.strip()
        params = self.params(query)
        if params is None:
            return []
        result = db.execute(
            text(self.statement(params)),
            {**params, "limit": limit, "offset": offset},
        )
        return [self.postprocess(dict(row), query) for row in result.mappings()]


class FullTextProvider(ContentProvider):
    """Provider backed by an FTS5 index whose rank is boosted on title hits."""

    title_column: str | None = None

    def params(self, query: str) -> dict | None:
        match = build_match_expression(query)
        if match is None:
            return None
        params = {"match": match}
        if self.title_column:
            params["title_match"] = build_match_expression(query, self.title_column)
        return params
