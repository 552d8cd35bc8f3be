import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from movie_catalog.database import build_engine, get_db, init_db
from movie_catalog.main import app
from movie_catalog.storage import FileSystemBlobStore, get_blob_store


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'catalog.db'}", timeout=10)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def blob_store(tmp_path):
    return FileSystemBlobStore(tmp_path / "blobs", timeout=5)


@pytest.fixture
def client(engine, blob_store):
    def _get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    def _register(name="alice", password="p1"):
        response = client.post("/api/users", json={"name": name, "password": password})
        assert response.status_code == 200, response.text
        return response

    return _register


@pytest.fixture
def log_messages():
    from loguru import logger

    messages = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(sink_id)
