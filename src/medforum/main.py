"""Main entry point for the medforum API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from medforum.api.v1 import (
    comments_router,
    communities_router,
    karma_router,
    posts_router,
    votes_router,
)
from medforum.core.errors import (
    ConflictError,
    DataIntegrityError,
    ForbiddenError,
    ForumError,
    InvalidParentError,
    NotFoundError,
)
from medforum.core.settings import settings

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="medforum API",
    description="Threads, votes and karma for a community of medical professionals",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(votes_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(communities_router, prefix="/api/v1")
app.include_router(karma_router, prefix="/api/v1")

_ERROR_STATUS: dict[type[ForumError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidParentError: status.HTTP_400_BAD_REQUEST,
    DataIntegrityError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@app.exception_handler(ForumError)
async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
    """Translate forum errors raised by the services into HTTP responses."""
    status_code = next(
        (code for error_type, code in _ERROR_STATUS.items() if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": "Internal data error"})
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("medforum.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
