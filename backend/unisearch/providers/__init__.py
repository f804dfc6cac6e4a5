from unisearch.providers.articles import ArticleProvider
from unisearch.providers.base import ContentProvider
from unisearch.providers.companies import CompanyProvider
from unisearch.providers.forum import ForumReplyProvider, ForumTopicProvider
from unisearch.providers.jobs import JobProvider
from unisearch.providers.users import UserProvider
from unisearch.schemas.search import ContentType


def default_providers() -> dict[ContentType, ContentProvider]:
    providers = [
        ArticleProvider(),
        ForumTopicProvider(),
        ForumReplyProvider(),
        JobProvider(),
        UserProvider(),
        CompanyProvider(),
    ]
    return {p.content_type: p for p in providers}


__all__ = [
    "ContentProvider", "ArticleProvider", "ForumTopicProvider", "ForumReplyProvider",
    "JobProvider", "UserProvider", "CompanyProvider", "default_providers",
]
