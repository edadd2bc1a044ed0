"""
bookshelf_api.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Create users from an already hashed password.
- Look users up by username (token subject) and check username/email uniqueness.
- Enable or disable accounts (administration, outside the HTTP surface).
"""

from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf_api.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, username: str, email: str, password_hash: str) -> User:
        user = User(username=username, email=email, password_hash=password_hash, enabled=True)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def username_exists(self, username: str) -> bool:
        stmt = select(exists().where(User.username == username))
        return bool((await self._session.execute(stmt)).scalar())

    async def email_exists(self, email: str) -> bool:
        stmt = select(exists().where(User.email == email))
        return bool((await self._session.execute(stmt)).scalar())

    async def set_enabled(self, username: str, enabled: bool) -> bool:
        """
        Account administration hook: a disabled user can neither log in nor use a
        token issued before the change. No HTTP route exposes it.
        """
        user = await self.get_by_username(username)
        if user is None:
            return False
        user.enabled = enabled
        await self._session.flush()
        return True


# --- Module Notes -----------------------------------------------------------
# Absence is reported as None/False; callers decide whether that is an error.
