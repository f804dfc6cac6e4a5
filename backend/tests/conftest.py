import re
import uuid

import pytest
from fastapi.testclient import TestClient

from unisearch.database import get_engine, get_session_factory, init_db, make_session_factory
from unisearch.main import app
from unisearch.models import Article, Company, Job, Profile, Reply, Topic, User
from unisearch.utils.timestamps import utc_now


def _slug(text: str) -> str:
    base = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return f"{base}-{uuid.uuid4().hex[:6]}"


class Seeder:
    """Inserts live (or deliberately non-live) records through the ORM."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def _add(self, *objs):
        with self._session_factory() as db:
            db.add_all(objs)
            db.commit()

    def user(self, username, display_name=None, headline=None, bio=None, status="active", location=None):
        user_id = str(uuid.uuid4())
        user = User(id=user_id, username=username, status=status, created_at=utc_now())
        profile = Profile(
            user_id=user_id,
            display_name=display_name,
            headline=headline,
            bio=bio,
            location=location,
        )
        self._add(user, profile)
        return user_id

    def article(self, title, summary="", content="", status="published", view_count=0, created_at=None):
        article_id = str(uuid.uuid4())
        ts = created_at or utc_now()
        self._add(Article(
            id=article_id,
            title=title,
            slug=_slug(title),
            summary=summary,
            content=content,
            status=status,
            view_count=view_count,
            published_at=ts,
            created_at=ts,
            updated_at=ts,
        ))
        return article_id

    def topic(self, title, content="", status="open", is_hidden=False, view_count=0,
              upvote_count=0, author_id=None, created_at=None):
        topic_id = str(uuid.uuid4())
        ts = created_at or utc_now()
        self._add(Topic(
            id=topic_id,
            title=title,
            slug=_slug(title),
            content=content,
            status=status,
            is_hidden=is_hidden,
            view_count=view_count,
            upvote_count=upvote_count,
            author_id=author_id,
            created_at=ts,
            updated_at=ts,
        ))
        return topic_id

    def reply(self, topic_id, content, is_deleted=False, upvote_count=0, created_at=None):
        reply_id = str(uuid.uuid4())
        ts = created_at or utc_now()
        self._add(Reply(
            id=reply_id,
            topic_id=topic_id,
            content=content,
            is_deleted=is_deleted,
            upvote_count=upvote_count,
            created_at=ts,
            updated_at=ts,
        ))
        return reply_id

    def company(self, name, description=None, location=None):
        company_id = str(uuid.uuid4())
        ts = utc_now()
        self._add(Company(
            id=company_id,
            name=name,
            slug=_slug(name),
            description=description,
            location=location,
            created_at=ts,
            updated_at=ts,
        ))
        return company_id

    def job(self, title, description="", requirements="", status="published", expires_at=None,
            company_id=None, salary_min=None, salary_max=None, view_count=0, created_at=None):
        job_id = str(uuid.uuid4())
        ts = created_at or utc_now()
        self._add(Job(
            id=job_id,
            company_id=company_id,
            title=title,
            slug=_slug(title),
            description=description,
            requirements=requirements,
            status=status,
            expires_at=expires_at,
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency="EUR" if salary_min or salary_max else None,
            view_count=view_count,
            published_at=ts,
            created_at=ts,
            updated_at=ts,
        ))
        return job_id


@pytest.fixture
def session_factory(tmp_path):
    db_path = tmp_path / "search.sqlite"
    init_db(db_path)
    engine = get_engine(db_path)
    factory = make_session_factory(engine)

    app.dependency_overrides[get_session_factory] = lambda: factory
    yield factory
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)


@pytest.fixture
def client(session_factory):
    return TestClient(app)
