from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from movie_catalog.core.config import settings
from movie_catalog.core.errors import install_error_handlers
from movie_catalog.core.logging import configure_logging
from movie_catalog.database import init_db
from movie_catalog.routers.users import router as users_router
from movie_catalog.routers.movies import router as movies_router
from movie_catalog.routers.thumbnails import router as thumbnails_router

app = FastAPI(
    title="Movie Catalog API",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

@app.on_event("startup")
def on_startup():
    configure_logging()
    init_db()

@app.get("/health", tags=["health"])
def health():
    return {"ok": True}

app.include_router(users_router)
app.include_router(movies_router)
app.include_router(thumbnails_router)
