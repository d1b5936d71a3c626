# api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import books, borrowers
from core.exceptions import (
    AlreadyReturnedError, ConflictError, DuplicateEmailError, IsbnMismatchError,
    NotFoundError, StorageError, ValidationError
)
from core.sa.database import get_database
from core.settings import settings

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    # Initialize database schema on startup
    get_database().init_db()
    yield
    get_database().dispose()

app = FastAPI(title="Library Lending API", lifespan=lifespan)

app.include_router(books.router, prefix="/api")
app.include_router(borrowers.router, prefix="/api")


def _errors(field: str, message: str) -> Dict[str, List[str]]:
    return {"errors": {field: [message]}}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][-1]) if error.get("loc") else "body"
        errors.setdefault(field, []).append(error["msg"])
    return JSONResponse(status_code=422, content={"errors": errors})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"errors": exc.errors})


@app.exception_handler(IsbnMismatchError)
async def isbn_mismatch_handler(request: Request, exc: IsbnMismatchError):
    content = _errors("isbn", exc.message)
    content["mismatched_fields"] = exc.fields
    return JSONResponse(status_code=422, content=content)


@app.exception_handler(DuplicateEmailError)
async def duplicate_email_handler(request: Request, exc: DuplicateEmailError):
    return JSONResponse(status_code=422, content=_errors("email", exc.message))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": exc.message})


@app.exception_handler(ConflictError)
@app.exception_handler(AlreadyReturnedError)
async def conflict_handler(request: Request, exc):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": exc.message})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    if exc.retryable:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "Server Error"},
            headers={"Retry-After": "1"},
        )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Server Error"})


@app.get("/")
async def root():
    return {"message": "Library Lending API"}


# Main execution
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
