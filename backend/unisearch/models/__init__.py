from unisearch.models.user import User, Profile
from unisearch.models.article import NewsCategory, Article
from unisearch.models.forum import ForumCategory, Topic, Reply
from unisearch.models.company import Company
from unisearch.models.job import Job
from unisearch.models.search import SearchQueryLog, SearchHistory, SavedSearch

__all__ = [
    "User", "Profile", "NewsCategory", "Article", "ForumCategory", "Topic", "Reply",
    "Company", "Job", "SearchQueryLog", "SearchHistory", "SavedSearch",
]
