from fastapi import APIRouter, Depends, HTTPException, Query

from unisearch.config import settings
from unisearch.dependencies import get_current_user_id, get_search_service, require_user_id
from unisearch.errors import ConflictError, NotFoundError, SearchValidationError
from unisearch.schemas.search import (
    AutocompleteResponse,
    ClickTrackRequest,
    ContentType,
    PopularSearchesResponse,
    SavedSearchCreate,
    SavedSearchListResponse,
    SavedSearchResponse,
    SavedSearchUpdate,
    SearchHistoryResponse,
    SearchOptions,
    SearchResponse,
    SortOption,
)
from unisearch.services.search_service import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResponse)
async def search(
    q: str = Query(""),
    type: list[ContentType] | None = Query(None),
    sort: SortOption = Query(SortOption.RELEVANCE),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    user_id: str | None = Depends(get_current_user_id),
    service: SearchService = Depends(get_search_service),
):
    options = SearchOptions(
        query=q,
        content_types=tuple(type) if type else None,
        sort_by=sort,
        page=page,
        page_size=limit,
        user_id=user_id,
    )
    try:
        return await service.search(options)
    except SearchValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/suggest", response_model=AutocompleteResponse)
def suggest(
    q: str = Query(""),
    service: SearchService = Depends(get_search_service),
):
    return service.autocomplete(q)


@router.get("/history", response_model=SearchHistoryResponse)
def get_history(
    user_id: str = Depends(require_user_id),
    service: SearchService = Depends(get_search_service),
):
    return SearchHistoryResponse(history=service.get_search_history(user_id))


@router.get("/popular", response_model=PopularSearchesResponse)
def get_popular(service: SearchService = Depends(get_search_service)):
    return PopularSearchesResponse(popular_searches=service.get_popular_searches())


@router.post("/click")
def track_click(
    req: ClickTrackRequest,
    service: SearchService = Depends(get_search_service),
):
    try:
        service.track_click(req.query_id, req.result_id, req.result_type)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"message": "Click recorded"}


@router.post("/saved", response_model=SavedSearchResponse, status_code=201)
def create_saved_search(
    req: SavedSearchCreate,
    user_id: str = Depends(require_user_id),
    service: SearchService = Depends(get_search_service),
):
    try:
        return service.save_search(user_id, req)
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.get("/saved", response_model=SavedSearchListResponse)
def list_saved_searches(
    user_id: str = Depends(require_user_id),
    service: SearchService = Depends(get_search_service),
):
    return SavedSearchListResponse(saved_searches=service.get_saved_searches(user_id))


@router.put("/saved/{search_id}", response_model=SavedSearchResponse)
def update_saved_search(
    search_id: str,
    req: SavedSearchUpdate,
    user_id: str = Depends(require_user_id),
    service: SearchService = Depends(get_search_service),
):
    try:
        return service.update_saved_search(user_id, search_id, req)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.delete("/saved/{search_id}")
def delete_saved_search(
    search_id: str,
    user_id: str = Depends(require_user_id),
    service: SearchService = Depends(get_search_service),
):
    try:
        service.delete_saved_search(user_id, search_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"message": "Saved search deleted"}


@router.get("/saved/{search_id}/results", response_model=SearchResponse)
async def run_saved_search(
    search_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    user_id: str = Depends(require_user_id),
    service: SearchService = Depends(get_search_service),
):
    try:
        return await service.run_saved_search(user_id, search_id, page, limit)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SearchValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
