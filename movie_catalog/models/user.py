# movie_catalog/models/user.py
from typing import Optional
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field

class UserCredentials(SQLModel):
    name: str = Field(min_length=1)
    password: str = Field(min_length=1)

class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    # uniqueness is checked by the registration flow, not by the table
    name: str = Field(index=True, nullable=False)
    hashed_password: str = Field(nullable=False)
    session_token: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class UserCreatedMovie(SQLModel, table=True):
    """
    A user's `created_movies` set. Movies carry no owner field, so this table
    is the only place ownership lives.
    """
    __tablename__ = "user_created_movies"

    user_id: int = Field(foreign_key="users.id", primary_key=True)
    movie_id: int = Field(foreign_key="movies.id", primary_key=True)

class MovieRating(SQLModel, table=True):
    # declared for a rating feature that has no writer yet
    __tablename__ = "movie_ratings"

    user_id: int = Field(foreign_key="users.id", primary_key=True)
    movie_id: int = Field(foreign_key="movies.id", primary_key=True)
    rating: float = Field(nullable=False)
