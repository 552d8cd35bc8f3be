# movie_catalog/core/security.py
from typing import Optional

import bcrypt
from fastapi import Cookie, Depends
from sqlmodel import Session

from movie_catalog.core.errors import Unauthorized
from movie_catalog.core.session import NAME_COOKIE, TOKEN_COOKIE, session_filter
from movie_catalog.database import get_db, store_errors
from movie_catalog.models.user import User
from movie_catalog.repositories.user_repo import get_user_by_session

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72

def hash_password(password: str) -> str:
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("ascii")

def verify_password(password: str, hashed_password: str) -> bool:
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(secret, hashed_password.encode("ascii"))
    except ValueError:
        return False

def authenticate(db: Session, name: Optional[str], token: Optional[str]) -> User:
    """
    Resolve a claimed (name, session token) pair to a stored User.

    A wrong name, a wrong token, both, or missing cookies all raise the same
    `Unauthorized`; only a failing store raises `StoreError`.
    """
    if not name or not token:
        raise Unauthorized()
    with store_errors("authenticating user", db):
        user = get_user_by_session(db, session_filter(name, token))
    if user is None:
        raise Unauthorized()
    return user

def get_current_user(
    username: Optional[str] = Cookie(None, alias=NAME_COOKIE),
    token: Optional[str] = Cookie(None, alias=TOKEN_COOKIE),
    db: Session = Depends(get_db),
) -> User:
    return authenticate(db, username, token)
