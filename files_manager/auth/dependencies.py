"""FastAPI dependencies for auth (X-Token header -> user id)."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from files_manager.auth.session_store import SessionStore
from files_manager.errors import Unauthorized

log = logging.getLogger(__name__)


def get_session_store(request: Request) -> SessionStore:
    """Session store created in the app lifespan."""
    return request.app.state.session_store


async def get_optional_user_id(
    store: Annotated[SessionStore, Depends(get_session_store)],
    x_token: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    """Resolve X-Token to a user id; None when the header is missing or unknown."""
    if not x_token:
        return None
    return await store.get_user_id(x_token)


async def get_current_user_id(
    user_id: Annotated[Optional[str], Depends(get_optional_user_id)],
) -> str:
    """Resolve X-Token to a user id; raise 401 if invalid or missing."""
    if not user_id:
        log.debug("Request without a valid X-Token")
        raise Unauthorized()
    return user_id
