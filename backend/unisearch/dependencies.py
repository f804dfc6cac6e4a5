from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import sessionmaker

from unisearch.database import get_session_factory
from unisearch.services.search_service import SearchService


async def get_current_user_id(x_user_id: str | None = Header(None)) -> str | None:
    # Identity is resolved upstream; anonymous callers simply omit the header.
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


async def require_user_id(user_id: str | None = Depends(get_current_user_id)) -> str:
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id


def get_search_service(session_factory: sessionmaker = Depends(get_session_factory)) -> SearchService:
    return SearchService(session_factory=session_factory)
