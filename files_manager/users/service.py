"""User service: registration and credential checks."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.security import hash_password, verify_password
from files_manager.errors import ValidationFailed
from files_manager.users.models import User, UserCreate

log = logging.getLogger(__name__)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Return user by email or None."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
    """Return user by id or None."""
    return await session.get(User, user_id)


async def count_users(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(User))
    return result.scalar_one()


async def create_user(session: AsyncSession, payload: UserCreate) -> User:
    """
    Register a new user. Raises ValidationFailed for a missing field or a taken email.
    Caller must commit.
    """
    if not payload.email:
        raise ValidationFailed("Missing email")
    if not payload.password:
        raise ValidationFailed("Missing password")
    existing = await get_user_by_email(session, payload.email)
    if existing:
        raise ValidationFailed("Already exist")
    user = User(email=payload.email, password_hash=hash_password(payload.password))
    session.add(user)
    await session.flush()
    log.info("Created user id=%s email=%s", user.id, user.email)
    return user


async def authenticate(session: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the user if email and password match, else None."""
    user = await get_user_by_email(session, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user
