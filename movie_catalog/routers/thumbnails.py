from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from movie_catalog.core.errors import NotFound
from movie_catalog.storage import BlobStore, get_blob_store

router = APIRouter(prefix="/api", tags=["thumbnails"])


@router.get("/thumbnail/", include_in_schema=False)
@router.get("/thumbnail/{key}")
def read_thumbnail(key: str = "", blobs: BlobStore = Depends(get_blob_store)):
    """
    Raw image bytes as a JSON array of ints.
    """
    if not key:
        raise NotFound("Image not found")
    data = blobs.get(key)
    return JSONResponse(content=list(data))
