"""
FastAPI application

Router registration and app setup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import get_settings
from core.logging import setup_logging
from web.routes import accounting, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """App lifecycle"""
    settings = get_settings()
    setup_logging("web", console_level=settings.log_level, file_level=settings.log_level)

    # Create the schema on startup
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)

    logger.info(f"Web: ready ({settings.environment.value}, db={settings.db_path})")
    yield
    logger.info("Web: shutting down")


app = FastAPI(
    title="Mahall Accounts API",
    description="Ledger postings and financial reports for mahall institutes",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS (development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =========================================================================
# API routers
# =========================================================================

app.include_router(health.router)
app.include_router(accounting.router)
