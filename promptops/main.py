"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promptops.api.middleware import RequestContextMiddleware
from promptops.api.routes import api_router
from promptops.domain.exceptions import (
    BadRequestError,
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from promptops.logging_config import setup_logging
from promptops.settings import settings

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
}

# Create FastAPI app
app = FastAPI(
    title="PromptOps API",
    description="Versioning, marketplace publication and deployment of prompt content",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a domain error with the status code of its class."""
    status_code = ERROR_STATUS_CODES[type(exc)]
    logger.info(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
        extra={"status_code": status_code},
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


for error_class in ERROR_STATUS_CODES:
    app.add_exception_handler(error_class, domain_error_handler)

# Include API routes
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
