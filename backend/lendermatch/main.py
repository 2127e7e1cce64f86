"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lendermatch.api.v1.router import api_router
from lendermatch.config import settings
from lendermatch.core.exceptions import ReferenceDataUnavailable
from lendermatch.db.session import dispose_engine

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Lender Match API ({settings.ENVIRONMENT})")
    yield
    await dispose_engine()


# Create FastAPI application
app = FastAPI(
    title="Lender Match API",
    description="API for matching borrower loan scenarios with lender programs",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReferenceDataUnavailable)
async def reference_data_unavailable_handler(
    request: Request, exc: ReferenceDataUnavailable
) -> JSONResponse:
    """Surface reference-data outages as 503 instead of an empty match list."""
    logger.error(f"Reference data unavailable for {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Lender reference data is temporarily unavailable"},
    )


# Include API router with v1 prefix
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "message": "Lender Match API",
        "version": "1.0.0",
        "docs": "/api/docs",
    }
