"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import Settings, config
from database.helpers import UserStore
from database.session import get_db_session


def get_settings() -> Settings:
    """Process-wide settings, overridable in tests."""
    return config


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


async def get_user_store(session: AsyncSession = Depends(db_session)) -> UserStore:
    return UserStore(session)


async def get_bearer_token(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Optional[str]:
    """
    Pull the token out of the Authorization header.

    The front end sends the raw token; a ``Bearer `` prefix is accepted too.
    Returns ``None`` when no token was sent.
    """
    if not authorization:
        return None
    token = authorization.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == "bearer":
        token = rest.strip()
    return token or None
