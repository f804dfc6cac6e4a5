import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from unisearch.config import settings
from unisearch.database import SessionLocal, init_db
from unisearch.routers import search
from unisearch.services import analytics_service

logger = logging.getLogger("unisearch")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create the schema, then prune analytics past retention
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    init_db()
    logger.info("Search database ready at %s", settings.db_path)
    try:
        with SessionLocal() as db:
            analytics_service.cleanup(db)
    except Exception as exc:
        logger.error("Retention cleanup failed at startup: %s", exc)
    yield


app = FastAPI(
    title="Universal Search",
    description="Unified search across news, forum, jobs, people and companies",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(search.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
