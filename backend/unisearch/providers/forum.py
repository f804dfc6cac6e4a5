from unisearch.providers.base import FullTextProvider
from unisearch.schemas.search import ContentType


class ForumTopicProvider(FullTextProvider):
    content_type = ContentType.FORUM_TOPICS
    title_column = "title"
    sql = """
        SELECT t.id, t.title, t.slug,
               substr(t.content, 1, 300) AS excerpt,
               t.created_at, t.updated_at,
               t.view_count, t.reply_count, t.vote_score, t.upvote_count,
               t.status,
               u.id AS author_id, u.username AS author_username,
               fc.name AS category_name,
               -bm25(topics_fts) *
                   CASE WHEN t.rowid IN (
                       SELECT rowid FROM topics_fts WHERE topics_fts MATCH :title_match
                   ) THEN 2.0 ELSE 1.0 END AS relevance_score,
               snippet(topics_fts, 0, '<b>', '</b>', '...', 10) AS title_highlight,
               snippet(topics_fts, 1, '<b>', '</b>', '...', 30) AS content_highlight
        FROM topics_fts
        JOIN topics t ON t.rowid = topics_fts.rowid
        LEFT JOIN users u ON u.id = t.author_id
        LEFT JOIN forum_categories fc ON fc.id = t.category_id
        WHERE topics_fts MATCH :match
          AND t.status = 'open'
          AND t.is_hidden = 0
        ORDER BY relevance_score DESC, t.id
        LIMIT :limit OFFSET :offset
    """


class ForumReplyProvider(FullTextProvider):
    content_type = ContentType.FORUM_REPLIES
    sql = """
        SELECT r.id,
               substr(r.content, 1, 300) AS excerpt,
               r.created_at, r.updated_at,
               r.vote_score, r.upvote_count,
               r.topic_id,
               u.id AS author_id, u.username AS author_username,
               t.title AS topic_title, t.slug AS topic_slug,
               -bm25(replies_fts) AS relevance_score,
               snippet(replies_fts, 0, '<b>', '</b>', '...', 40) AS content_highlight
        FROM replies_fts
        JOIN replies r ON r.rowid = replies_fts.rowid
        LEFT JOIN users u ON u.id = r.author_id
        LEFT JOIN topics t ON t.id = r.topic_id
        WHERE replies_fts MATCH :match
          AND r.is_deleted = 0
        ORDER BY relevance_score DESC, r.id
        LIMIT :limit OFFSET :offset
    """
