import asyncio
import logging
import math
import time
from typing import Mapping

from sqlalchemy.orm import sessionmaker

from unisearch.config import settings
from unisearch.database import SessionLocal
from unisearch.errors import SearchValidationError
from unisearch.providers import ContentProvider, default_providers
from unisearch.schemas.search import (
    ALL_CONTENT_TYPES,
    AutocompleteResponse,
    ContentType,
    PopularSearch,
    SavedSearchCreate,
    SavedSearchResponse,
    SavedSearchUpdate,
    SearchHistoryEntry,
    SearchOptions,
    SearchResponse,
    SortOption,
)
from unisearch.services import analytics_service, saved_search_service
from unisearch.services.autocomplete import suggest
from unisearch.services.fusion import fan_out, fuse

logger = logging.getLogger(__name__)


class SearchService:
    """Entry point for every search operation.

    Owns validation, the provider fan-out, fusion and analytics. History,
    saved-search and popularity operations are plain pass-throughs.
    """

    def __init__(
        self,
        session_factory: sessionmaker | None = None,
        providers: Mapping[ContentType, ContentProvider] | None = None,
    ):
        self._session_factory = session_factory or SessionLocal
        self._providers = providers if providers is not None else default_providers()

    def _validate(self, options: SearchOptions) -> list[ContentType]:
        query = (options.query or "").strip()
        if not query:
            raise SearchValidationError("Search query is required")
        if len(query) > settings.max_query_length:
            raise SearchValidationError(
                f"Search query is too long (max {settings.max_query_length} characters)"
            )
        if options.page < 1:
            raise SearchValidationError("Page must be 1 or greater")
        if not 1 <= options.page_size <= settings.max_page_size:
            raise SearchValidationError(f"Page size must be between 1 and {settings.max_page_size}")

        if options.content_types is None:
            return list(ALL_CONTENT_TYPES)
        return list(dict.fromkeys(options.content_types))

    def _fetch_limit(self, page: int, page_size: int) -> int:
        # Every provider reads from offset 0 and fusion paginates the
        # combined list, so deep pages need a deep enough candidate pool.
        wanted = max(page * page_size, settings.candidate_pool_size)
        return min(wanted, settings.max_candidates_per_source)

    def _record_analytics(
        self,
        options: SearchOptions,
        query: str,
        content_types: list[ContentType],
        total_count: int,
        execution_time_ms: float,
    ) -> str | None:
        query_id = None
        with self._session_factory() as db:
            try:
                query_id = analytics_service.record_query(
                    db, options.user_id, query, content_types, total_count,
                    options.sort_by, execution_time_ms,
                )
            except Exception as exc:
                db.rollback()
                logger.error("Failed to record search query %r: %s", query, exc)

            if options.user_id:
                try:
                    analytics_service.add_to_history(
                        db, options.user_id, query, content_types, options.sort_by, total_count,
                    )
                except Exception as exc:
                    db.rollback()
                    logger.error("Failed to update search history for user %s: %s", options.user_id, exc)
        return query_id

    async def search(self, options: SearchOptions) -> SearchResponse:
        content_types = self._validate(options)
        query = options.query.strip()
        start = time.perf_counter()

        fanned = await fan_out(
            self._providers,
            content_types,
            self._session_factory,
            query,
            self._fetch_limit(options.page, options.page_size),
        )
        fused = fuse(
            fanned.hits,
            options.sort_by,
            options.page,
            options.page_size,
            normalize_scores=settings.normalize_relevance_scores,
        )

        execution_time_ms = round((time.perf_counter() - start) * 1000, 2)
        if execution_time_ms > settings.performance_target_ms:
            logger.warning(
                "Search performance target exceeded: query=%r time_ms=%.1f results=%d",
                query, execution_time_ms, fused.total_count,
            )

        query_id = await asyncio.to_thread(
            self._record_analytics, options, query, content_types, fused.total_count, execution_time_ms,
        )

        logger.info(
            "Search executed: query=%r types=%s results=%d time_ms=%.1f user=%s",
            query,
            ",".join(ct.value for ct in content_types),
            fused.total_count,
            execution_time_ms,
            options.user_id,
        )

        return SearchResponse(
            results=fused.results,
            total_count=fused.total_count,
            page=options.page,
            page_size=options.page_size,
            total_pages=math.ceil(fused.total_count / options.page_size),
            query=options.query,
            content_types=content_types,
            sort_by=options.sort_by,
            execution_time_ms=execution_time_ms,
            query_id=query_id,
            failed_content_types=fanned.failed,
        )

    def autocomplete(self, prefix: str) -> AutocompleteResponse:
        if len(prefix.strip()) < settings.autocomplete_min_length:
            return AutocompleteResponse(suggestions=[], query=prefix)
        with self._session_factory() as db:
            suggestions = suggest(db, prefix)
        return AutocompleteResponse(suggestions=suggestions, query=prefix)

    def get_search_history(self, user_id: str) -> list[SearchHistoryEntry]:
        with self._session_factory() as db:
            return analytics_service.get_history(db, user_id)

    def get_popular_searches(self) -> list[PopularSearch]:
        with self._session_factory() as db:
            return analytics_service.get_popular(db)

    def track_click(self, query_id: str, result_id: str, result_type: ContentType) -> None:
        with self._session_factory() as db:
            analytics_service.track_click(db, query_id, result_id, result_type)

    def save_search(self, user_id: str, req: SavedSearchCreate) -> SavedSearchResponse:
        with self._session_factory() as db:
            return saved_search_service.save(db, user_id, req)

    def get_saved_searches(self, user_id: str) -> list[SavedSearchResponse]:
        with self._session_factory() as db:
            return saved_search_service.list_for_user(db, user_id)

    def get_saved_search(self, user_id: str, search_id: str) -> SavedSearchResponse:
        with self._session_factory() as db:
            return saved_search_service.get(db, user_id, search_id)

    def update_saved_search(self, user_id: str, search_id: str, req: SavedSearchUpdate) -> SavedSearchResponse:
        with self._session_factory() as db:
            return saved_search_service.update(db, user_id, search_id, req)

    def delete_saved_search(self, user_id: str, search_id: str) -> None:
        with self._session_factory() as db:
            saved_search_service.delete(db, user_id, search_id)

    async def run_saved_search(
        self,
        user_id: str,
        search_id: str,
        page: int = 1,
        page_size: int | None = None,
    ) -> SearchResponse:
        saved = await asyncio.to_thread(self.get_saved_search, user_id, search_id)
        options = SearchOptions(
            query=saved.query,
            content_types=tuple(saved.content_types) or None,
            sort_by=saved.sort_by or SortOption.RELEVANCE,
            page=page,
            page_size=page_size or settings.default_page_size,
            user_id=user_id,
        )
        return await self.search(options)
