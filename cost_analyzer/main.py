"""
Main FastAPI application entry point.
"""

import logging
from datetime import datetime

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from cost_analyzer.config import get_settings
from cost_analyzer.api import router as api_router
from cost_analyzer.db.database import init_db

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Import landed cost and e-commerce unit economics calculator",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    init_db()


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "version": "0.1.0",
        "time_utc": datetime.utcnow().isoformat(),
    }
