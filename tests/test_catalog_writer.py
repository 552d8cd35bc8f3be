import threading

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from movie_catalog.core.errors import BlobError, Conflict, StoreError
from movie_catalog.models.movie import Movie, MovieUpload
from movie_catalog.models.user import UserCredentials
from movie_catalog.repositories.movie_repo import insert_movie
from movie_catalog.repositories.user_repo import get_user_by_name
from movie_catalog.services import catalog_service
from movie_catalog.services.catalog_service import (
    CreateStatus,
    create_movie,
    list_movies,
    list_movies_for_owner,
)
from movie_catalog.services.user_service import register_user
from movie_catalog.storage import FileSystemBlobStore


def _blobs(store):
    return sorted(p.name for p in store.root.iterdir()) if store.root.exists() else []


def _movie_count(db):
    return len(db.exec(select(Movie)).all())


@pytest.fixture
def alice(db):
    user, _ = register_user(db, UserCredentials(name="alice", password="p1"))
    return user


def upload(title="T", author="A", image=(137, 80, 78, 71)):
    return MovieUpload(title=title, author=author, image=list(image))


def test_create_then_list(db, blob_store, alice):
    result = create_movie(db, blob_store, alice, upload())

    assert result.status is CreateStatus.COMMITTED
    assert result.message == "Movie added"
    movies = list_movies(db)
    assert [(m.title, m.author) for m in movies] == [("T", "A")]
    movie = movies[0]
    assert movie.image_url.endswith(".png") and len(movie.image_url) > len(".png")
    assert (movie.avg_rating, movie.num_ratings) == (0, 0)
    assert movie.id == result.movie.id
    assert blob_store.get(movie.image_url) == bytes([137, 80, 78, 71])
    assert [m.id for m in list_movies_for_owner(db, alice)] == [movie.id]


def test_duplicate_is_conflict_without_writes(db, blob_store, alice):
    create_movie(db, blob_store, alice, upload())
    blobs_before = _blobs(blob_store)

    with pytest.raises(Conflict):
        create_movie(db, blob_store, alice, upload(image=[1]))

    assert _blobs(blob_store) == blobs_before
    assert _movie_count(db) == 1


def test_same_title_different_author_is_allowed(db, blob_store, alice):
    create_movie(db, blob_store, alice, upload(author="A"))
    create_movie(db, blob_store, alice, upload(author="B"))

    assert _movie_count(db) == 2


def test_blob_failure_writes_nothing(db, tmp_path, alice):
    blocker = tmp_path / "blocked"
    blocker.write_text("a file where the blob directory should be")
    broken_store = FileSystemBlobStore(blocker / "images", timeout=5)

    with pytest.raises(BlobError):
        create_movie(db, broken_store, alice, upload())

    assert _movie_count(db) == 0
    assert list_movies_for_owner(db, alice) == []


def test_insert_failure_removes_uploaded_blob(db, blob_store, alice, monkeypatch, log_messages):
    def broken_insert(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(catalog_service, "insert_movie", broken_insert)

    with pytest.raises(StoreError):
        create_movie(db, blob_store, alice, upload())

    assert _blobs(blob_store) == []
    assert _movie_count(db) == 0
    assert any("Removed orphaned image" in m for m in log_messages)


def test_insert_race_on_same_title_is_conflict(db, blob_store, alice, monkeypatch):
    # another writer slipped in between the uniqueness check and the insert
    insert_movie(db, "T", "A", "existing.png")
    monkeypatch.setattr(catalog_service, "find_movie", lambda *args: None)

    with pytest.raises(Conflict):
        create_movie(db, blob_store, alice, upload())

    assert _blobs(blob_store) == []
    assert _movie_count(db) == 1


def test_owner_link_failure_still_commits(db, blob_store, alice, monkeypatch, log_messages):
    def broken_link(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("connection reset"))

    monkeypatch.setattr(catalog_service, "add_created_movie", broken_link)

    result = create_movie(db, blob_store, alice, upload())

    assert result.status is CreateStatus.COMMITTED_WITH_WARNINGS
    assert result.message == "Movie added"
    assert len(result.warnings) == 1
    assert [m.title for m in list_movies(db)] == ["T"]
    assert list_movies_for_owner(db, alice) == []
    assert any(
        m.startswith("WARNING") and "not linked to user alice" in m for m in log_messages
    )


def test_concurrent_creates_by_one_user_keep_both_links(engine, blob_store, alice):
    barrier = threading.Barrier(2)
    errors = []

    def worker(title):
        try:
            with Session(engine) as session:
                owner = get_user_by_name(session, "alice")
                barrier.wait()
                create_movie(session, blob_store, owner, upload(title=title))
        except Exception as exc:  # surfaced through `errors` below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(t,)) for t in ("First", "Second")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    with Session(engine) as session:
        owner = get_user_by_name(session, "alice")
        titles = sorted(m.title for m in list_movies_for_owner(session, owner))
    assert titles == ["First", "Second"]


def test_failure_after_insert_commit_keeps_blob(db, blob_store, alice, monkeypatch):
    real_refresh = db.refresh

    def broken_refresh(instance, *args, **kwargs):
        if isinstance(instance, Movie):
            raise OperationalError("SELECT", {}, Exception("connection reset"))
        return real_refresh(instance, *args, **kwargs)

    monkeypatch.setattr(db, "refresh", broken_refresh)

    result = create_movie(db, blob_store, alice, upload())

    assert result.status is CreateStatus.COMMITTED
    movies = list_movies(db)
    assert [m.image_url for m in movies] == [result.movie.image_url]
    assert _blobs(blob_store) == [result.movie.image_url]
    assert result.movie.id == movies[0].id
