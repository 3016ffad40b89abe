"""
Shared test fixtures - repositories for every backend and an API client
"""

import os

# Keep tests away from real credentials and the on-disk database
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-bytes")
os.environ.setdefault("STORAGE_BACKEND", "sql")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_eventos.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.db import Base
from app.services.json_repository import JsonFileRepository
from app.services.repositories import get_repository
from app.services.sql_repository import SqlRepository
from app.services.supabase_repository import SupabaseRepository
from main import app

from fake_supabase import FakeSupabase
from factories import make_user, seed_event, seed_geo, seed_venue


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def sql_repo(db_session):
    return SqlRepository(db_session)


@pytest.fixture(params=["sql", "json", "supabase"])
def repo(request):
    """Every storage backend behind the same contract"""
    if request.param == "sql":
        return SqlRepository(request.getfixturevalue("db_session"))
    if request.param == "json":
        return JsonFileRepository(None)
    return SupabaseRepository(client=FakeSupabase())


@pytest.fixture
def client(sql_repo):
    """API client whose routes share the test repository"""
    def override_get_repository():
        yield sql_repo

    app.dependency_overrides[get_repository] = override_get_repository
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def api_world(sql_repo):
    """Owner, second user, venue, tag and upcoming event in the API database"""
    province, location = seed_geo(sql_repo)
    owner = make_user(sql_repo)
    other = make_user(sql_repo, username="bruno@example.com", first_name="Bruno", last_name="Diaz")
    venue = seed_venue(sql_repo, owner, location, max_capacity=3)
    tag = sql_repo.create_tag("music")
    event = seed_event(sql_repo, owner, venue, tag_ids=[tag["id"]], max_assistance=2)
    return {
        "province": province,
        "location": location,
        "owner": owner,
        "other": other,
        "venue": venue,
        "tag": tag,
        "event": event,
    }
