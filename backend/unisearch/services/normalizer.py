"""
Maps raw provider hits onto the canonical SearchResult shapes.

Every mapper is a pure function of one row. Highlight columns carry
``<b>...</b>`` markers; only the marked substrings are kept.
"""
import re
from typing import Callable

from unisearch.schemas.search import (
    ArticleMetadata,
    ArticleResult,
    CompanyMetadata,
    CompanyResult,
    ContentType,
    ForumReplyMetadata,
    ForumReplyResult,
    ForumTopicMetadata,
    ForumTopicResult,
    JobMetadata,
    JobResult,
    SalaryRange,
    SearchResult,
    UserMetadata,
    UserResult,
)

_HIGHLIGHT_RE = re.compile(r"<b>(.*?)</b>", re.DOTALL)


def extract_highlights(*highlighted: str | None) -> list[str]:
    seen: dict[str, None] = {}
    for value in highlighted:
        if not value:
            continue
        for fragment in _HIGHLIGHT_RE.findall(value):
            seen.setdefault(fragment, None)
    return list(seen)


def _score(raw: dict) -> float:
    return float(raw.get("relevance_score") or 0.0)


def _salary_bound(value) -> float | None:
    return float(value) if value else None


def map_article(raw: dict) -> ArticleResult:
    return ArticleResult(
        id=raw["id"],
        title=raw["title"],
        excerpt=raw.get("excerpt") or "",
        highlights=extract_highlights(raw.get("title_highlight"), raw.get("excerpt_highlight")),
        url=f"/news/{raw['slug']}",
        metadata=ArticleMetadata(
            author_name=raw.get("author_name"),
            category_name=raw.get("category_name"),
            view_count=raw.get("view_count"),
            created_at=raw.get("created_at"),
            updated_at=raw.get("updated_at"),
        ),
        relevance_score=_score(raw),
    )


def map_topic(raw: dict) -> ForumTopicResult:
    return ForumTopicResult(
        id=raw["id"],
        title=raw["title"],
        excerpt=raw.get("excerpt") or "",
        highlights=extract_highlights(raw.get("title_highlight"), raw.get("content_highlight")),
        url=f"/forum/{raw['slug']}",
        metadata=ForumTopicMetadata(
            author_id=raw.get("author_id"),
            author_username=raw.get("author_username"),
            category_name=raw.get("category_name"),
            status=raw.get("status"),
            view_count=raw.get("view_count"),
            reply_count=raw.get("reply_count"),
            upvote_count=raw.get("upvote_count"),
            created_at=raw.get("created_at"),
            updated_at=raw.get("updated_at"),
        ),
        relevance_score=_score(raw),
    )


def map_reply(raw: dict) -> ForumReplyResult:
    return ForumReplyResult(
        id=raw["id"],
        title=f"Reply to: {raw.get('topic_title') or ''}",
        excerpt=raw.get("excerpt") or "",
        highlights=extract_highlights(raw.get("content_highlight")),
        url=f"/forum/{raw.get('topic_slug')}#reply-{raw['id']}",
        metadata=ForumReplyMetadata(
            author_id=raw.get("author_id"),
            author_username=raw.get("author_username"),
            topic_id=raw.get("topic_id"),
            upvote_count=raw.get("upvote_count"),
            created_at=raw.get("created_at"),
            updated_at=raw.get("updated_at"),
        ),
        relevance_score=_score(raw),
    )


def map_job(raw: dict) -> JobResult:
    return JobResult(
        id=raw["id"],
        title=raw["title"],
        excerpt=raw.get("excerpt") or "",
        highlights=extract_highlights(raw.get("title_highlight"), raw.get("description_highlight")),
        url=f"/jobs/{raw['slug']}",
        metadata=JobMetadata(
            company_name=raw.get("company_name"),
            location=raw.get("location"),
            salary=SalaryRange(
                min=_salary_bound(raw.get("salary_min")),
                max=_salary_bound(raw.get("salary_max")),
                currency=raw.get("salary_currency"),
            ),
            view_count=raw.get("view_count"),
            created_at=raw.get("created_at"),
            updated_at=raw.get("updated_at"),
        ),
        relevance_score=_score(raw),
    )


def map_user(raw: dict) -> UserResult:
    return UserResult(
        id=raw["id"],
        title=raw.get("display_name") or raw["username"],
        excerpt=raw.get("headline") or raw.get("bio") or "",
        highlights=extract_highlights(raw.get("name_highlight"), raw.get("headline_highlight")),
        url=f"/u/{raw['username']}",
        metadata=UserMetadata(
            author_id=raw["id"],
            author_username=raw["username"],
            location=raw.get("location"),
            created_at=raw.get("created_at"),
        ),
        relevance_score=_score(raw),
    )


def map_company(raw: dict) -> CompanyResult:
    return CompanyResult(
        id=raw["id"],
        title=raw["name"],
        excerpt=raw.get("excerpt") or "",
        highlights=extract_highlights(raw.get("description_highlight")),
        url=f"/companies/{raw['slug']}",
        metadata=CompanyMetadata(
            company_name=raw["name"],
            location=raw.get("location"),
            view_count=raw.get("view_count"),
            created_at=raw.get("created_at"),
            updated_at=raw.get("updated_at"),
        ),
        relevance_score=_score(raw),
    )


MAPPERS: dict[ContentType, Callable[[dict], SearchResult]] = {
    ContentType.ARTICLES: map_article,
    ContentType.FORUM_TOPICS: map_topic,
    ContentType.FORUM_REPLIES: map_reply,
    ContentType.JOBS: map_job,
    ContentType.USERS: map_user,
    ContentType.COMPANIES: map_company,
}


def normalize(content_type: ContentType, raw: dict) -> SearchResult:
    return MAPPERS[content_type](raw)
