import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from unisearch.config import settings
from unisearch.utils.trigram import similarity


class Base(DeclarativeBase):
    pass


def _on_connect(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # pg_trgm-compatible similarity() for the fuzzy name providers
    dbapi_conn.create_function("similarity", 2, similarity, deterministic=True)


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _on_connect)
    return engine


def make_session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


engine = get_engine()
SessionLocal = make_session_factory(engine)


def get_session_factory() -> sessionmaker:
    # Searches open one session per provider thread, so routes receive the
    # factory rather than a single request-scoped session.
    return SessionLocal


SCHEMA_SQL = """\
-- ============================================================
-- USERS
-- ============================================================
CREATE TABLE IF NOT EXISTS users (
    id         TEXT PRIMARY KEY,
    username   TEXT NOT NULL UNIQUE,
    email      TEXT,
    role       TEXT NOT NULL DEFAULT 'member',
    status     TEXT NOT NULL DEFAULT 'active'
               CHECK(status IN ('active','suspended','deleted')),
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE TABLE IF NOT EXISTS profiles (
    user_id             TEXT PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
    display_name        TEXT,
    headline            TEXT,
    bio                 TEXT,
    avatar_url          TEXT,
    location            TEXT,
    availability_status TEXT
);

CREATE INDEX IF NOT EXISTS idx_users_status ON users(status);

-- ============================================================
-- NEWS
-- ============================================================
CREATE TABLE IF NOT EXISTS news_categories (
    id   TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS articles (
    id             TEXT PRIMARY KEY,
    title          TEXT NOT NULL,
    slug           TEXT NOT NULL UNIQUE,
    summary        TEXT NOT NULL DEFAULT '',
    content        TEXT NOT NULL DEFAULT '',
    status         TEXT NOT NULL DEFAULT 'draft'
                   CHECK(status IN ('draft','published','archived')),
    category_id    TEXT REFERENCES news_categories(id) ON DELETE SET NULL,
    author_name    TEXT,
    view_count     INTEGER NOT NULL DEFAULT 0,
    bookmark_count INTEGER NOT NULL DEFAULT 0,
    published_at   TEXT,
    created_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_articles_status ON articles(status);

-- ============================================================
-- FORUM
-- ============================================================
CREATE TABLE IF NOT EXISTS forum_categories (
    id   TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS topics (
    id           TEXT PRIMARY KEY,
    title        TEXT NOT NULL,
    slug         TEXT NOT NULL UNIQUE,
    content      TEXT NOT NULL DEFAULT '',
    category_id  TEXT REFERENCES forum_categories(id) ON DELETE SET NULL,
    author_id    TEXT REFERENCES users(id) ON DELETE SET NULL,
    status       TEXT NOT NULL DEFAULT 'open'
                 CHECK(status IN ('open','closed','archived')),
    is_hidden    INTEGER NOT NULL DEFAULT 0,
    view_count   INTEGER NOT NULL DEFAULT 0,
    reply_count  INTEGER NOT NULL DEFAULT 0,
    upvote_count INTEGER NOT NULL DEFAULT 0,
    vote_score   INTEGER NOT NULL DEFAULT 0,
    created_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE TABLE IF NOT EXISTS replies (
    id           TEXT PRIMARY KEY,
    topic_id     TEXT NOT NULL REFERENCES topics(id) ON DELETE CASCADE,
    author_id    TEXT REFERENCES users(id) ON DELETE SET NULL,
    content      TEXT NOT NULL,
    is_deleted   INTEGER NOT NULL DEFAULT 0,
    upvote_count INTEGER NOT NULL DEFAULT 0,
    vote_score   INTEGER NOT NULL DEFAULT 0,
    created_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_topics_status ON topics(status, is_hidden);
CREATE INDEX IF NOT EXISTS idx_replies_topic ON replies(topic_id);

-- ============================================================
-- COMPANIES & JOBS
-- ============================================================
CREATE TABLE IF NOT EXISTS companies (
    id               TEXT PRIMARY KEY,
    name             TEXT NOT NULL,
    slug             TEXT NOT NULL UNIQUE,
    website          TEXT,
    description      TEXT,
    logo_url         TEXT,
    industry         TEXT,
    company_size     TEXT,
    location         TEXT,
    verified_company INTEGER NOT NULL DEFAULT 0,
    follower_count   INTEGER NOT NULL DEFAULT 0,
    view_count       INTEGER NOT NULL DEFAULT 0,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE TABLE IF NOT EXISTS jobs (
    id                TEXT PRIMARY KEY,
    company_id        TEXT REFERENCES companies(id) ON DELETE CASCADE,
    title             TEXT NOT NULL,
    slug              TEXT NOT NULL UNIQUE,
    description       TEXT NOT NULL DEFAULT '',
    requirements      TEXT NOT NULL DEFAULT '',
    location          TEXT,
    job_type          TEXT,
    work_location     TEXT,
    experience_level  TEXT,
    salary_min        REAL,
    salary_max        REAL,
    salary_currency   TEXT,
    status            TEXT NOT NULL DEFAULT 'draft'
                      CHECK(status IN ('draft','published','closed')),
    expires_at        TEXT,
    published_at      TEXT,
    view_count        INTEGER NOT NULL DEFAULT 0,
    application_count INTEGER NOT NULL DEFAULT 0,
    created_at        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_jobs_status ON jobs(status, expires_at);
CREATE INDEX IF NOT EXISTS idx_jobs_company ON jobs(company_id);

-- ============================================================
-- SEARCH ANALYTICS
-- ============================================================
CREATE TABLE IF NOT EXISTS search_queries (
    id                  TEXT PRIMARY KEY,
    user_id             TEXT,
    query               TEXT NOT NULL,
    content_types       TEXT NOT NULL DEFAULT '[]',
    results_count       INTEGER NOT NULL DEFAULT 0,
    sort_by             TEXT,
    execution_time_ms   REAL,
    clicked_result_id   TEXT,
    clicked_result_type TEXT,
    created_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_search_queries_created ON search_queries(created_at);
CREATE INDEX IF NOT EXISTS idx_search_queries_query ON search_queries(query);

CREATE TABLE IF NOT EXISTS search_history (
    id            TEXT PRIMARY KEY,
    user_id       TEXT NOT NULL,
    query         TEXT NOT NULL,
    content_types TEXT NOT NULL DEFAULT '[]',
    sort_by       TEXT,
    result_count  INTEGER NOT NULL DEFAULT 0,
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_search_history_user ON search_history(user_id, created_at DESC);

CREATE TABLE IF NOT EXISTS saved_searches (
    id                   TEXT PRIMARY KEY,
    user_id              TEXT NOT NULL,
    name                 TEXT NOT NULL,
    query                TEXT NOT NULL,
    content_types        TEXT NOT NULL DEFAULT '[]',
    sort_by              TEXT,
    notification_enabled INTEGER NOT NULL DEFAULT 0,
    created_at           TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at           TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    UNIQUE (user_id, name)
);

CREATE INDEX IF NOT EXISTS idx_saved_searches_user ON saved_searches(user_id, created_at DESC);

-- ============================================================
-- FTS5
-- ============================================================
CREATE VIRTUAL TABLE IF NOT EXISTS articles_fts USING fts5(
    title, summary, content,
    content='articles', content_rowid='rowid', tokenize='porter unicode61'
);

CREATE VIRTUAL TABLE IF NOT EXISTS topics_fts USING fts5(
    title, content,
    content='topics', content_rowid='rowid', tokenize='porter unicode61'
);

CREATE VIRTUAL TABLE IF NOT EXISTS replies_fts USING fts5(
    content,
    content='replies', content_rowid='rowid', tokenize='porter unicode61'
);

CREATE VIRTUAL TABLE IF NOT EXISTS jobs_fts USING fts5(
    title, description, requirements,
    content='jobs', content_rowid='rowid', tokenize='porter unicode61'
);

CREATE VIRTUAL TABLE IF NOT EXISTS companies_fts USING fts5(
    name, description,
    content='companies', content_rowid='rowid', tokenize='porter unicode61'
);
"""

# table -> indexed columns, in the same order as the fts5 declaration
FTS_TABLES = {
    "articles": ("title", "summary", "content"),
    "topics": ("title", "content"),
    "replies": ("content",),
    "jobs": ("title", "description", "requirements"),
    "companies": ("name", "description"),
}


def _fts_triggers_sql(table: str, columns: tuple[str, ...]) -> str:
    fts = f"{table}_fts"
    cols = ", ".join(columns)
    new_vals = ", ".join(f"new.{c}" for c in columns)
    old_vals = ", ".join(f"old.{c}" for c in columns)
    return f"""\
CREATE TRIGGER IF NOT EXISTS {table}_ai AFTER INSERT ON {table} BEGIN
    INSERT INTO {fts}(rowid, {cols}) VALUES (new.rowid, {new_vals});
END;

CREATE TRIGGER IF NOT EXISTS {table}_ad AFTER DELETE ON {table} BEGIN
    INSERT INTO {fts}({fts}, rowid, {cols}) VALUES ('delete', old.rowid, {old_vals});
END;

CREATE TRIGGER IF NOT EXISTS {table}_au AFTER UPDATE ON {table} BEGIN
    INSERT INTO {fts}({fts}, rowid, {cols}) VALUES ('delete', old.rowid, {old_vals});
    INSERT INTO {fts}(rowid, {cols}) VALUES (new.rowid, {new_vals});
END;
"""


FTS_TRIGGERS_SQL = "\n".join(_fts_triggers_sql(t, cols) for t, cols in FTS_TABLES.items())


MIGRATIONS = [
    # v0.2: click-through tracking on the query log
    "ALTER TABLE search_queries ADD COLUMN clicked_result_id TEXT",
    "ALTER TABLE search_queries ADD COLUMN clicked_result_type TEXT",
]


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    conn.executescript(FTS_TRIGGERS_SQL)
    # Run migrations idempotently (ALTER TABLE fails if column exists)
    for migration in MIGRATIONS:
        try:
            conn.execute(migration)
            conn.commit()
        except sqlite3.OperationalError:
            pass  # column already exists
    conn.close()
