# movie_catalog/models/movie.py
from typing import Optional, List
from pydantic import conint
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

Byte = conint(ge=0, le=255)

class MovieBase(SQLModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)

class MovieUpload(MovieBase):
    # raw image bytes as a JSON array of ints
    image: List[Byte]

class Movie(MovieBase, table=True):
    __tablename__ = "movies"
    __table_args__ = (
        UniqueConstraint("title", "author", name="uq_movies_title_author"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    image_url: str = Field(nullable=False, min_length=1)
    avg_rating: float = Field(default=0.0, nullable=False)
    num_ratings: int = Field(default=0, nullable=False)

class MovieRead(MovieBase):
    id: str
    image_url: str
    avg_rating: float
    num_ratings: int

    @classmethod
    def from_movie(cls, movie: Movie) -> "MovieRead":
        return cls(
            id=str(movie.id),
            title=movie.title,
            author=movie.author,
            image_url=movie.image_url,
            avg_rating=movie.avg_rating,
            num_ratings=movie.num_ratings,
        )
