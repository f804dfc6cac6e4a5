"""
Fan-out and fusion of per-source search hits.

Providers run concurrently, each in a worker thread with its own session.
Nothing is ordered until every provider has returned, so the caller-visible
order depends only on the sort mode, never on completion order.

Tie-break policy: results with equal sort keys are ordered by
(content type, id) ascending. The stable primary sort preserves that
secondary order, which keeps pagination stable across identical requests.
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from sqlalchemy.orm import sessionmaker

from unisearch.config import settings
from unisearch.providers.base import ContentProvider
from unisearch.schemas.search import ContentType, SearchResult, SortOption
from unisearch.services.normalizer import normalize

logger = logging.getLogger(__name__)

# At least one thread per content type: a single search runs every provider
# at once, independent of the loop's default executor.
_provider_pool = ThreadPoolExecutor(
    max_workers=max(settings.provider_workers, len(ContentType)),
    thread_name_prefix="search-provider",
)


@dataclass
class FanOutResult:
    hits: dict[ContentType, list[dict]] = field(default_factory=dict)
    failed: list[ContentType] = field(default_factory=list)


@dataclass
class FusedPage:
    results: list[SearchResult]
    total_count: int


def _run_provider(
    provider: ContentProvider,
    session_factory: sessionmaker,
    query: str,
    limit: int,
) -> list[dict]:
    with session_factory() as db:
        return provider.search(db, query, limit, 0)


async def fan_out(
    providers: Mapping[ContentType, ContentProvider],
    content_types: Sequence[ContentType],
    session_factory: sessionmaker,
    query: str,
    limit: int,
) -> FanOutResult:
    """Query every requested provider at once and wait for all of them.

    A failing provider contributes no hits; its type is reported in
    ``failed`` instead of aborting the search.
    """
    loop = asyncio.get_running_loop()
    outcomes = await asyncio.gather(
        *(
            loop.run_in_executor(_provider_pool, _run_provider, providers[ct], session_factory, query, limit)
            for ct in content_types
        ),
        return_exceptions=True,
    )

    fanned = FanOutResult()
    for content_type, outcome in zip(content_types, outcomes):
        if isinstance(outcome, Exception):
            logger.error("Search provider %s failed: %s", content_type.value, outcome)
            fanned.failed.append(content_type)
            fanned.hits[content_type] = []
        else:
            fanned.hits[content_type] = outcome
    return fanned


def _normalize_scores(results: list[SearchResult]) -> list[SearchResult]:
    """Min-max scale relevance scores within each content type."""
    by_type: dict[ContentType, list[SearchResult]] = {}
    for result in results:
        by_type.setdefault(result.type, []).append(result)

    scaled: dict[int, float] = {}
    for group in by_type.values():
        scores = [r.relevance_score for r in group]
        low, high = min(scores), max(scores)
        for r in group:
            scaled[id(r)] = 1.0 if high == low else (r.relevance_score - low) / (high - low)

    return [r.model_copy(update={"relevance_score": scaled[id(r)]}) for r in results]


def sort_results(results: list[SearchResult], sort_by: SortOption) -> list[SearchResult]:
    ordered = sorted(results, key=lambda r: (r.type.value, r.id))
    if sort_by == SortOption.DATE:
        return sorted(ordered, key=lambda r: r.metadata.created_at or "", reverse=True)
    if sort_by == SortOption.POPULARITY:
        return sorted(ordered, key=lambda r: r.metadata.popularity(), reverse=True)
    return sorted(ordered, key=lambda r: r.relevance_score, reverse=True)


def fuse(
    raw_per_type: Mapping[ContentType, list[dict]],
    sort_by: SortOption,
    page: int,
    page_size: int,
    normalize_scores: bool = False,
) -> FusedPage:
    combined: list[SearchResult] = []
    for content_type, hits in raw_per_type.items():
        combined.extend(normalize(content_type, raw) for raw in hits)

    if normalize_scores and sort_by == SortOption.RELEVANCE:
        combined = _normalize_scores(combined)

    ordered = sort_results(combined, sort_by)
    start = (page - 1) * page_size
    return FusedPage(results=ordered[start:start + page_size], total_count=len(ordered))
