"""
Dependency injection

Dependencies wired through FastAPI's Depends.
"""

from typing import AsyncGenerator

from fastapi import Header, HTTPException

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.constants import Defaults


def get_app_settings() -> Settings:
    """Application settings"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """Read-only DB session

    Report endpoints only read.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """Writable DB session

    Used for postings, reversals and account administration.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


async def get_tenant_id(
    x_tenant_id: str | None = Header(default=None, alias=Defaults.TENANT_HEADER),
) -> str:
    """Tenant resolved by the upstream auth layer

    Raises:
        HTTPException: 400 when the header is missing
    """
    if not x_tenant_id or not x_tenant_id.strip():
        raise HTTPException(
            status_code=400,
            detail=f"{Defaults.TENANT_HEADER} header is required",
        )
    return x_tenant_id.strip()
