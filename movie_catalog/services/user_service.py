from typing import Tuple
from loguru import logger
from sqlmodel import Session
from movie_catalog.core.errors import Unauthorized
from movie_catalog.core.security import hash_password, verify_password
from movie_catalog.core.session import SessionToken, issue_session, renew_cookie
from movie_catalog.database import store_errors
from movie_catalog.models.user import User, UserCredentials
from movie_catalog.repositories.user_repo import (
    get_user_by_name,
    create_user as repo_create_user,
)

def register_user(db: Session, user_in: UserCredentials) -> Tuple[User, SessionToken]:
    with store_errors("checking username", db):
        existing = get_user_by_name(db, user_in.name)
    if existing:
        raise Unauthorized("Username already exists")

    session = issue_session()
    hashed = hash_password(user_in.password)

    with store_errors("inserting user", db):
        user = repo_create_user(db, user_in.name, hashed, session.value)

    logger.info("Registered user {}", user.name)
    return user, session

def login_user(db: Session, user_in: UserCredentials) -> Tuple[User, SessionToken]:
    """
    Check the password and hand back the user's existing session token.
    Tokens are never rotated, so every login returns the registration token.
    """
    with store_errors("looking up user", db):
        user = get_user_by_name(db, user_in.name)
    if not user or not verify_password(user_in.password, user.hashed_password):
        raise Unauthorized("Wrong username or password")

    logger.info("User {} logged in", user.name)
    return user, renew_cookie(user.session_token)
