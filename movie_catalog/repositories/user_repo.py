from typing import Optional, List
import hmac
from sqlmodel import Session, select
from movie_catalog.core.session import SessionFilter
from movie_catalog.models.user import User, UserCreatedMovie

def get_user_by_name(db: Session, name: str) -> Optional[User]:
    stmt = select(User).where(User.name == name)
    return db.exec(stmt).first()

def get_user_by_session(db: Session, session: SessionFilter) -> Optional[User]:
    """
    Match on name in SQL, then on token with a constant-time compare.
    """
    stmt = select(User).where(User.name == session.name)
    for user in db.exec(stmt):
        if hmac.compare_digest(user.session_token.encode(), session.token.encode()):
            return user
    return None

def create_user(db: Session, name: str, hashed_password: str, session_token: str) -> User:
    db_user = User(
        name=name,
        hashed_password=hashed_password,
        session_token=session_token,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def add_created_movie(db: Session, user_id: int, movie_id: int) -> None:
    """
    Append one movie to the user's created set as a single insert, so two
    concurrent appends for the same user cannot overwrite each other.
    """
    db.add(UserCreatedMovie(user_id=user_id, movie_id=movie_id))
    db.commit()

def get_created_movie_ids(db: Session, user_id: int) -> List[int]:
    stmt = select(UserCreatedMovie.movie_id).where(UserCreatedMovie.user_id == user_id)
    return list(db.exec(stmt).all())
