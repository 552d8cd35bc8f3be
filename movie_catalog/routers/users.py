from typing import Optional
from fastapi import APIRouter, Cookie, Depends, Response, status
from loguru import logger
from sqlmodel import Session
from movie_catalog.core.session import NAME_COOKIE, TOKEN_COOKIE, SessionToken
from movie_catalog.database import get_db
from movie_catalog.models.user import UserCredentials
from movie_catalog.services.user_service import register_user, login_user

router = APIRouter(tags=["users"])

REDIRECT_AFTER_LOGIN = "/movies"

def _set_session_cookies(response: Response, name: str, session: SessionToken) -> None:
    for key, value in ((NAME_COOKIE, name), (TOKEN_COOKIE, session.value)):
        response.set_cookie(key, value, expires=session.expires_at, path="/")

@router.post(
    "/api/users",
    status_code=status.HTTP_200_OK,
)
def create_user(
    user_in: UserCredentials,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Register a new user.
    - Rejects a taken name with 401 (the stored user is left untouched)
    - Issues a fresh session token and delivers it as the `id` cookie
    """
    user, session = register_user(db, user_in)
    _set_session_cookies(response, user.name, session)
    return {"redirectPath": REDIRECT_AFTER_LOGIN}

@router.post(
    "/api/login",
    status_code=status.HTTP_200_OK,
)
def login(
    user_in: UserCredentials,
    response: Response,
    db: Session = Depends(get_db),
):
    user, session = login_user(db, user_in)
    _set_session_cookies(response, user.name, session)
    return {"redirectPath": REDIRECT_AFTER_LOGIN}

@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(
    username: Optional[str] = Cookie(None),
    uuid: Optional[str] = Cookie(None),
):
    """
    Nothing is revoked server-side; this only records the event.
    """
    if username and uuid:
        logger.info("User {} logged out", username)
    return Response(status_code=status.HTTP_200_OK)
