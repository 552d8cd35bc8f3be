from typing import List, Optional
from fastapi import APIRouter, Cookie, Depends, Path, status
from sqlmodel import Session
from movie_catalog.core.security import authenticate, get_current_user
from movie_catalog.core.session import TOKEN_COOKIE
from movie_catalog.database import get_db
from movie_catalog.models.movie import MovieRead, MovieUpload
from movie_catalog.models.user import User
from movie_catalog.services.catalog_service import (
    create_movie,
    list_movies,
    list_movies_for_owner,
)
from movie_catalog.storage import BlobStore, get_blob_store

router = APIRouter(prefix="/api", tags=["movies"])


@router.get(
    "/movies",
    response_model=List[MovieRead],
    status_code=status.HTTP_200_OK,
    summary="List every movie in the catalog"
)
def read_movies(db: Session = Depends(get_db)):
    return list_movies(db)


@router.get(
    "/movies/{username}",
    response_model=List[MovieRead],
    status_code=status.HTTP_200_OK,
    summary="List the movies a user created"
)
def read_movies_by_owner(
    username: str = Path(..., description="Owner name, checked against the session cookie"),
    token: Optional[str] = Cookie(None, alias=TOKEN_COOKIE),
    db: Session = Depends(get_db),
):
    """
    The path name plus the `id` cookie must identify a user, otherwise 401.
    """
    owner = authenticate(db, username, token)
    return list_movies_for_owner(db, owner)


@router.post(
    "/add-movie",
    status_code=status.HTTP_200_OK,
)
def add_movie(
    movie_in: MovieUpload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """
    Store the image, then the movie record, then link it to the current user.
    A failed owner link still answers 200; it is only logged.
    """
    result = create_movie(db, blobs, current_user, movie_in)
    return {"message": result.message}


@router.delete(
    "/movies",
    response_model=List[MovieRead],
    status_code=status.HTTP_200_OK,
    summary="Delete a movie (not implemented, always returns an empty list)"
)
def delete_movie(current_user: User = Depends(get_current_user)):
    # TODO: implement deletion (ownership check, blob delete, owner-link removal)
    return []
