"""
Database helpers — user lookups and inserts over a request-scoped session.

"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import UsernameTaken
from database.models import User

logger = logging.getLogger(__name__)


class UserStore:
    """Credential store bound to one pooled session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_username(self, username: str) -> Optional[User]:
        """Exact, case-sensitive match on the unique ``username`` column."""
        result = await self._session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def insert(self, username: str, password_hash: str) -> User:
        """
        Insert and commit a new user.

        The UNIQUE constraint on ``username`` is the final word on
        duplicates: a violation rolls back and raises ``UsernameTaken``.
        """
        user = User(username=username, password_hash=password_hash)
        self._session.add(user)
        try:
            await self._session.flush()
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.info("Insert rejected for %r: %s", username, exc.orig)
            raise UsernameTaken(username) from exc
        return user
