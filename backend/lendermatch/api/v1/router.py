"""API v1 router configuration."""

from fastapi import APIRouter

from lendermatch.api.v1.endpoints import health, lenders, scenarios

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    health.router,
    tags=["health"],
)

api_router.include_router(
    scenarios.router,
    prefix="/scenarios",
    tags=["scenarios"],
)

api_router.include_router(
    lenders.router,
    prefix="/lenders",
    tags=["lenders"],
)
