"""Pytest configuration: set test env before any files_manager imports so DB and storage use temp paths."""

import asyncio
import os
import tempfile
import uuid

import pytest

# Set before files_manager.db.session or files_manager.config are used
_tmp = tempfile.mkdtemp(prefix="files_manager_test_")
os.environ.setdefault("FILES_MANAGER_DB_PATH", os.path.join(_tmp, "test.db"))
os.environ.setdefault("FILES_MANAGER_STORAGE_BASE_PATH", os.path.join(_tmp, "blobs"))


class InMemorySessionStore:
    """Session store double keeping tokens in a dict."""

    def __init__(self):
        self.tokens = {}
        self.alive = True

    async def get_user_id(self, token):
        return self.tokens.get(token) if token else None

    async def create(self, token, user_id, ttl_seconds):
        self.tokens[token] = user_id

    async def delete(self, token):
        return self.tokens.pop(token, None) is not None

    async def is_alive(self):
        return self.alive

    async def close(self):
        pass


class RecordingJobQueue:
    """Job queue double that records enqueued thumbnail jobs."""

    def __init__(self):
        self.jobs = []

    async def enqueue_thumbnails(self, user_id, file_id):
        self.jobs.append((user_id, file_id))


@pytest.fixture(scope="session")
def init_test_db():
    """Create tables once per test session."""
    from files_manager.db.session import init_db

    asyncio.run(init_db())


@pytest.fixture
def session_factory(init_test_db):
    """Yield get_session so tests can use async with session_factory() as session."""
    from files_manager.db.session import get_session
    return get_session


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def job_queue():
    return RecordingJobQueue()


@pytest.fixture
def blob_root(tmp_path, monkeypatch):
    """Point the blob store at a per-test directory."""
    root = tmp_path / "blobs"
    monkeypatch.setenv("FILES_MANAGER_STORAGE_BASE_PATH", str(root))
    return root


@pytest.fixture
def client(blob_root, session_store, job_queue, monkeypatch):
    """TestClient with the session store and job queue replaced and rate limiting off.
    Used as context manager so lifespan runs (init_db)."""
    from fastapi.testclient import TestClient

    from files_manager.auth.dependencies import get_session_store
    from files_manager.jobs.queue import get_job_queue
    from files_manager.limiter import limiter
    from files_manager.main import app

    monkeypatch.setattr(limiter, "enabled", False)
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_job_queue] = lambda: job_queue
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _register_and_connect(client):
    email = f"user-{uuid.uuid4().hex[:8]}@example.com"
    r = client.post("/users", json={"email": email, "password": "secret123"})
    assert r.status_code == 201
    user_id = r.json()["id"]
    r = client.get("/connect", auth=(email, "secret123"))
    assert r.status_code == 200
    return user_id, {"X-Token": r.json()["token"]}


@pytest.fixture
def owner(client):
    """(user_id, headers) of a freshly registered and connected user."""
    return _register_and_connect(client)


@pytest.fixture
def other_user(client):
    """A second connected user."""
    return _register_and_connect(client)
