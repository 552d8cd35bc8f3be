from typing import Optional, List, Sequence
from sqlmodel import Session, select
from movie_catalog.models.movie import Movie

def find_movie(db: Session, title: str, author: str) -> Optional[Movie]:
    stmt = select(Movie).where(Movie.title == title, Movie.author == author)
    return db.exec(stmt).first()

def insert_movie(db: Session, title: str, author: str, image_url: str) -> int:
    """
    Insert a new Movie row with zeroed rating fields and return its new id.
    The id is read before the commit, so nothing after the commit can fail.
    """
    movie = Movie(title=title, author=author, image_url=image_url)
    db.add(movie)
    db.flush()
    movie_id = movie.id
    db.commit()
    return movie_id

def get_movies(db: Session) -> List[Movie]:
    return list(db.exec(select(Movie).order_by(Movie.id)).all())

def get_movies_by_ids(db: Session, movie_ids: Sequence[int]) -> List[Movie]:
    if not movie_ids:
        return []
    stmt = select(Movie).where(Movie.id.in_(movie_ids)).order_by(Movie.id)
    return list(db.exec(stmt).all())
