from unisearch.providers.base import FullTextProvider
from unisearch.schemas.search import ContentType
from unisearch.utils.timestamps import utc_now


class JobProvider(FullTextProvider):
    content_type = ContentType.JOBS
    title_column = "title"
    sql = """
        SELECT j.id, j.title, j.slug,
               substr(j.description, 1, 300) AS excerpt,
               j.location, j.job_type, j.work_location, j.experience_level,
               j.salary_min, j.salary_max, j.salary_currency,
               j.published_at, j.view_count, j.application_count,
               j.created_at, j.updated_at,
               c.name AS company_name, c.slug AS company_slug, c.logo_url AS company_logo,
               -bm25(jobs_fts) *
                   CASE WHEN j.rowid IN (
                       SELECT rowid FROM jobs_fts WHERE jobs_fts MATCH :title_match
                   ) THEN 2.0 ELSE 1.0 END AS relevance_score,
               snippet(jobs_fts, 0, '<b>', '</b>', '...', 10) AS title_highlight,
               snippet(jobs_fts, 1, '<b>', '</b>', '...', 30) AS description_highlight
        FROM jobs_fts
        JOIN jobs j ON j.rowid = jobs_fts.rowid
        LEFT JOIN companies c ON c.id = j.company_id
        WHERE jobs_fts MATCH :match
          AND j.status = 'published'
          AND (j.expires_at IS NULL OR j.expires_at > :now)
        ORDER BY relevance_score DESC, j.id
        LIMIT :limit OFFSET :offset
    """

    def params(self, query: str) -> dict | None:
        params = super().params(query)
        if params is not None:
            params["now"] = utc_now()
        return params
