import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from unisearch.errors import ConflictError, NotFoundError
from unisearch.models.search import SavedSearch
from unisearch.schemas.search import SavedSearchCreate, SavedSearchResponse, SavedSearchUpdate
from unisearch.utils.timestamps import utc_now

DUPLICATE_NAME = "A saved search with this name already exists"


def _to_response(saved: SavedSearch) -> SavedSearchResponse:
    return SavedSearchResponse(
        id=saved.id,
        name=saved.name,
        query=saved.query,
        content_types=saved.content_types or [],
        sort_by=saved.sort_by,
        notification_enabled=bool(saved.notification_enabled),
        created_at=saved.created_at,
        updated_at=saved.updated_at,
    )


def _owned(db: Session, user_id: str, search_id: str) -> SavedSearch:
    saved = (
        db.query(SavedSearch)
        .filter(SavedSearch.id == search_id, SavedSearch.user_id == user_id)
        .first()
    )
    if not saved:
        raise NotFoundError("Saved search not found")
    return saved


def save(db: Session, user_id: str, req: SavedSearchCreate) -> SavedSearchResponse:
    now = utc_now()
    saved = SavedSearch(
        id=str(uuid.uuid4()),
        user_id=user_id,
        name=req.name,
        query=req.query,
        content_types=[ct.value for ct in req.content_types],
        sort_by=req.sort_by.value if req.sort_by else None,
        notification_enabled=req.notification_enabled,
        created_at=now,
        updated_at=now,
    )
    db.add(saved)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(DUPLICATE_NAME) from exc
    db.refresh(saved)
    return _to_response(saved)


def list_for_user(db: Session, user_id: str) -> list[SavedSearchResponse]:
    rows = (
        db.query(SavedSearch)
        .filter(SavedSearch.user_id == user_id)
        .order_by(SavedSearch.created_at.desc(), SavedSearch.name)
        .all()
    )
    return [_to_response(s) for s in rows]


def get(db: Session, user_id: str, search_id: str) -> SavedSearchResponse:
    return _to_response(_owned(db, user_id, search_id))


def update(db: Session, user_id: str, search_id: str, req: SavedSearchUpdate) -> SavedSearchResponse:
    saved = _owned(db, user_id, search_id)

    # sort_by may be cleared explicitly; the other fields are required columns
    update_data = {
        k: v for k, v in req.model_dump(exclude_unset=True).items()
        if v is not None or k == "sort_by"
    }
    if "content_types" in update_data:
        update_data["content_types"] = [ct.value for ct in req.content_types or []]
    if "sort_by" in update_data:
        update_data["sort_by"] = req.sort_by.value if req.sort_by else None
    for key, value in update_data.items():
        setattr(saved, key, value)
    saved.updated_at = utc_now()

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(DUPLICATE_NAME) from exc
    db.refresh(saved)
    return _to_response(saved)


def delete(db: Session, user_id: str, search_id: str) -> None:
    # Ownership is part of the predicate: another user's id matches nothing.
    deleted = (
        db.query(SavedSearch)
        .filter(SavedSearch.id == search_id, SavedSearch.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFoundError("Saved search not found")
    db.commit()
