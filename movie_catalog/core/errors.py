# movie_catalog/core/errors.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException


class CatalogError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class Unauthorized(CatalogError):
    """Identity check failed. Never says which of name/token was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class Conflict(CatalogError):
    status_code = status.HTTP_409_CONFLICT
    message = "Movie already exists"


class NotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class StoreError(CatalogError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Database error"


class BlobError(CatalogError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Storage error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def _http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg', 'invalid request')}" if field else "Invalid request"
    return error_response(422, message)


def install_error_handlers(app: FastAPI) -> None:
    """
    Render every CatalogError, HTTP error and validation error as
    `{"error": <message>}` with the matching status.
    """
    app.add_exception_handler(CatalogError, _catalog_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
