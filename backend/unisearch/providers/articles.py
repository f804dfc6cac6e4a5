from unisearch.providers.base import FullTextProvider
from unisearch.schemas.search import ContentType


class ArticleProvider(FullTextProvider):
    content_type = ContentType.ARTICLES
    title_column = "title"
    sql = """
        SELECT a.id, a.title, a.slug,
               a.summary AS excerpt,
               a.published_at, a.view_count, a.bookmark_count,
               a.created_at, a.updated_at, a.author_name,
               nc.name AS category_name,
               -bm25(articles_fts) *
                   CASE WHEN a.rowid IN (
                       SELECT rowid FROM articles_fts WHERE articles_fts MATCH :title_match
                   ) THEN 3.0 ELSE 1.0 END AS relevance_score,
               snippet(articles_fts, 0, '<b>', '</b>', '...', 10) AS title_highlight,
               snippet(articles_fts, 1, '<b>', '</b>', '...', 30) AS excerpt_highlight
        FROM articles_fts
        JOIN articles a ON a.rowid = articles_fts.rowid
        LEFT JOIN news_categories nc ON nc.id = a.category_id
        WHERE articles_fts MATCH :match
          AND a.status = 'published'
        ORDER BY relevance_score DESC, a.id
        LIMIT :limit OFFSET :offset
    """
