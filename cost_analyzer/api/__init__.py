"""
API routes for the cost analyzer.
"""

from fastapi import APIRouter

from cost_analyzer.api import calculations, scenarios, dev
from cost_analyzer.config import Settings, get_settings


def build_router(settings: Settings) -> APIRouter:
    """Assemble the API router for the given settings."""
    router = APIRouter()

    # Include sub-routers
    router.include_router(calculations.router, prefix="/calculate", tags=["calculator"])
    router.include_router(scenarios.router, prefix="/scenarios", tags=["scenarios"])

    # Token issuance is for local development only
    if settings.enable_dev_endpoints:
        router.include_router(dev.router, prefix="/dev", tags=["dev"])

    return router


router = build_router(get_settings())
