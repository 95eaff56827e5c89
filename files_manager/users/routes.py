"""User routes: register, me."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.dependencies import get_current_user_id
from files_manager.db.session import get_db
from files_manager.errors import Unauthorized
from files_manager.limiter import limiter
from files_manager.users.models import UserCreate, UserResponse
from files_manager.users.service import create_user, get_user_by_id

router = APIRouter(prefix="/users", tags=["users"])
log = logging.getLogger(__name__)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def register(
    request: Request,
    payload: UserCreate,
    session: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """Create a user from email and password."""
    user = await create_user(session, payload)
    await session.commit()
    return UserResponse(id=user.id, email=user.email)


@router.get("/me", response_model=UserResponse)
async def me(
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """Return the user behind X-Token."""
    user = await get_user_by_id(session, user_id)
    if not user:
        log.warning("Token valid but user not found: id=%s", user_id)
        raise Unauthorized()
    return UserResponse(id=user.id, email=user.email)
