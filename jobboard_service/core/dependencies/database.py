"""Database dependencies for FastAPI route handlers.

Route handlers get a request-scoped session from the factory built during
startup (``app.state.session_factory``). Code outside the request cycle uses
``jobboard_service.infra.database.get_async_session`` with the same factory.

Usage:
    @router.get("/company/{company_id}")
    async def get_company(session: DbSessionDep):
        ...
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard_service.infra.database import get_async_session


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for a database session.

    Yields:
        Session closed when the request completes; rolled back on error.
    """
    async with get_async_session(request.app.state.session_factory) as session:
        yield session


DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]
