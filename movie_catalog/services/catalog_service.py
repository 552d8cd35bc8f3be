# movie_catalog/services/catalog_service.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List
from uuid import uuid4

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from movie_catalog.core.config import settings
from movie_catalog.core.errors import CatalogError, Conflict, StoreError
from movie_catalog.database import store_errors
from movie_catalog.models.movie import MovieRead, MovieUpload
from movie_catalog.models.user import User
from movie_catalog.repositories.movie_repo import (
    find_movie,
    insert_movie,
    get_movies,
    get_movies_by_ids,
)
from movie_catalog.repositories.user_repo import add_created_movie, get_created_movie_ids
from movie_catalog.storage import BlobStore

MOVIE_ADDED = "Movie added"


class CreateStatus(str, Enum):
    COMMITTED = "COMMITTED"
    # movie and blob stored, but a follow-up write (the owner link) failed
    COMMITTED_WITH_WARNINGS = "COMMITTED_WITH_WARNINGS"


@dataclass
class CreateMovieResult:
    status: CreateStatus
    movie: MovieRead
    warnings: List[str] = field(default_factory=list)
    message: str = MOVIE_ADDED


def new_image_key() -> str:
    return f"{uuid4()}{settings.IMAGE_EXTENSION}"


def _discard_orphan(blobs: BlobStore, key: str) -> None:
    try:
        blobs.delete(key)
    except CatalogError as exc:
        logger.error("Could not remove orphaned image {}: {}", key, exc.message)
    else:
        logger.info("Removed orphaned image {}", key)


def create_movie(db: Session, blobs: BlobStore, owner: User, upload: MovieUpload) -> CreateMovieResult:
    """
    uniqueness check -> image key -> blob upload -> movie insert -> owner link

    Nothing is written before the blob upload, so `Conflict` and `BlobError`
    leave both stores untouched. A failed insert removes the uploaded blob.
    A failed owner link is only logged and tagged on the result.
    """
    # 1) owner was authenticated by the caller
    owner_id, owner_name = owner.id, owner.name

    # 2) uniqueness check, no writes yet
    with store_errors("checking movie uniqueness", db):
        existing = find_movie(db, upload.title, upload.author)
    if existing:
        raise Conflict()

    # 3) fresh object key
    key = new_image_key()

    # 4) blob upload; BlobError propagates with nothing written to the database
    blobs.put(key, bytes(upload.image))

    # 5) metadata insert
    try:
        movie_id = insert_movie(db, upload.title, upload.author, key)
    except IntegrityError as exc:
        # a concurrent request inserted the same (title, author) first
        db.rollback()
        logger.warning("Duplicate movie {!r} by {!r} rejected on insert", upload.title, upload.author)
        _discard_orphan(blobs, key)
        raise Conflict() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to insert movie {!r}: {}", upload.title, exc)
        _discard_orphan(blobs, key)
        raise StoreError() from exc

    view = MovieRead(
        id=str(movie_id),
        title=upload.title,
        author=upload.author,
        image_url=key,
        avg_rating=0.0,
        num_ratings=0,
    )

    # 6) owner link
    try:
        add_created_movie(db, owner_id, movie_id)
    except SQLAlchemyError as exc:
        db.rollback()
        warning = f"owner link for movie {movie_id} failed: {exc}"
        logger.warning("Movie {} created but not linked to user {}: {}", movie_id, owner_name, exc)
        return CreateMovieResult(CreateStatus.COMMITTED_WITH_WARNINGS, view, [warning])

    logger.info("User {} added movie {} ({!r} by {!r})", owner_name, movie_id, upload.title, upload.author)
    return CreateMovieResult(CreateStatus.COMMITTED, view)


def list_movies(db: Session) -> List[MovieRead]:
    with store_errors("listing movies", db):
        movies = get_movies(db)
    return [MovieRead.from_movie(m) for m in movies]


def list_movies_for_owner(db: Session, owner: User) -> List[MovieRead]:
    with store_errors("listing movies for owner", db):
        movie_ids = get_created_movie_ids(db, owner.id)
        movies = get_movies_by_ids(db, movie_ids)
    return [MovieRead.from_movie(m) for m in movies]
