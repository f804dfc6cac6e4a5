from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    ARTICLES = "articles"
    FORUM_TOPICS = "forum_topics"
    FORUM_REPLIES = "forum_replies"
    JOBS = "jobs"
    USERS = "users"
    COMPANIES = "companies"


ALL_CONTENT_TYPES: tuple[ContentType, ...] = tuple(ContentType)


class SortOption(str, Enum):
    RELEVANCE = "relevance"
    DATE = "date"
    POPULARITY = "popularity"


class SearchOptions(BaseModel):
    """A single search request. Bounds are checked by SearchService."""

    model_config = ConfigDict(frozen=True)

    query: str
    content_types: tuple[ContentType, ...] | None = None
    sort_by: SortOption = SortOption.RELEVANCE
    page: int = 1
    page_size: int = 20
    user_id: str | None = None


# --- Result metadata, one model per content type ---

class ResultMetadata(BaseModel):
    created_at: str | None = None

    def popularity(self) -> int:
        views = getattr(self, "view_count", None) or 0
        upvotes = getattr(self, "upvote_count", None) or 0
        return views + upvotes


class ArticleMetadata(ResultMetadata):
    author_name: str | None = None
    category_name: str | None = None
    view_count: int | None = None
    updated_at: str | None = None


class ForumTopicMetadata(ResultMetadata):
    author_id: str | None = None
    author_username: str | None = None
    category_name: str | None = None
    status: str | None = None
    view_count: int | None = None
    reply_count: int | None = None
    upvote_count: int | None = None
    updated_at: str | None = None


class ForumReplyMetadata(ResultMetadata):
    author_id: str | None = None
    author_username: str | None = None
    topic_id: str | None = None
    upvote_count: int | None = None
    updated_at: str | None = None


class SalaryRange(BaseModel):
    min: float | None = None
    max: float | None = None
    currency: str | None = None


class JobMetadata(ResultMetadata):
    company_name: str | None = None
    location: str | None = None
    salary: SalaryRange = SalaryRange()
    view_count: int | None = None
    updated_at: str | None = None


class UserMetadata(ResultMetadata):
    author_id: str | None = None
    author_username: str | None = None
    location: str | None = None


class CompanyMetadata(ResultMetadata):
    company_name: str | None = None
    location: str | None = None
    view_count: int | None = None
    updated_at: str | None = None


# --- Search results, discriminated by `type` ---

class _BaseResult(BaseModel):
    id: str
    title: str
    excerpt: str = ""
    highlights: list[str] = []
    url: str
    relevance_score: float


class ArticleResult(_BaseResult):
    type: Literal[ContentType.ARTICLES] = ContentType.ARTICLES
    metadata: ArticleMetadata


class ForumTopicResult(_BaseResult):
    type: Literal[ContentType.FORUM_TOPICS] = ContentType.FORUM_TOPICS
    metadata: ForumTopicMetadata


class ForumReplyResult(_BaseResult):
    type: Literal[ContentType.FORUM_REPLIES] = ContentType.FORUM_REPLIES
    metadata: ForumReplyMetadata


class JobResult(_BaseResult):
    type: Literal[ContentType.JOBS] = ContentType.JOBS
    metadata: JobMetadata


class UserResult(_BaseResult):
    type: Literal[ContentType.USERS] = ContentType.USERS
    metadata: UserMetadata


class CompanyResult(_BaseResult):
    type: Literal[ContentType.COMPANIES] = ContentType.COMPANIES
    metadata: CompanyMetadata


SearchResult = Annotated[
    Union[ArticleResult, ForumTopicResult, ForumReplyResult, JobResult, UserResult, CompanyResult],
    Field(discriminator="type"),
]


class SearchResponse(BaseModel):
    results: list[SearchResult]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    query: str
    content_types: list[ContentType]
    sort_by: SortOption
    execution_time_ms: float
    query_id: str | None = None
    failed_content_types: list[ContentType] = []


# --- Autocomplete ---

class AutocompleteSuggestion(BaseModel):
    suggestion: str
    type: ContentType
    count: int


class AutocompleteResponse(BaseModel):
    suggestions: list[AutocompleteSuggestion]
    query: str


# --- History, saved searches, analytics ---

class SearchHistoryEntry(BaseModel):
    id: str
    query: str
    content_types: list[ContentType]
    sort_by: SortOption | None
    result_count: int
    created_at: str


class SearchHistoryResponse(BaseModel):
    history: list[SearchHistoryEntry]


class SavedSearchCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    query: str = Field(min_length=1, max_length=500)
    content_types: list[ContentType] = []
    sort_by: SortOption | None = None
    notification_enabled: bool = False

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query must not be blank")
        return v


class SavedSearchUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    query: str | None = Field(default=None, min_length=1, max_length=500)
    content_types: list[ContentType] | None = None
    sort_by: SortOption | None = None
    notification_enabled: bool | None = None

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("query must not be blank")
        return v


class SavedSearchResponse(BaseModel):
    id: str
    name: str
    query: str
    content_types: list[ContentType]
    sort_by: SortOption | None
    notification_enabled: bool
    created_at: str
    updated_at: str


class SavedSearchListResponse(BaseModel):
    saved_searches: list[SavedSearchResponse]


class PopularSearch(BaseModel):
    query: str
    count: int
    last_searched: str


class PopularSearchesResponse(BaseModel):
    popular_searches: list[PopularSearch]


class ClickTrackRequest(BaseModel):
    query_id: str
    result_id: str
    result_type: ContentType
