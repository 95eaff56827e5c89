"""Auth routes: issue and revoke session tokens."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.dependencies import get_session_store
from files_manager.auth.security import new_session_token
from files_manager.auth.session_store import SessionStore
from files_manager.config import get_settings
from files_manager.db.session import get_db
from files_manager.errors import Unauthorized
from files_manager.limiter import limiter
from files_manager.users.models import TokenResponse
from files_manager.users.service import authenticate

router = APIRouter(tags=["auth"])
log = logging.getLogger(__name__)

basic = HTTPBasic(auto_error=False)


@router.get("/connect", response_model=TokenResponse)
@limiter.limit("30/minute")
async def connect(
    request: Request,
    credentials: Annotated[Optional[HTTPBasicCredentials], Depends(basic)],
    session: Annotated[AsyncSession, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> TokenResponse:
    """Sign in with Basic auth (email:password); returns a token valid for 24h."""
    if not credentials:
        raise Unauthorized()
    user = await authenticate(session, credentials.username, credentials.password)
    if not user:
        log.warning("Connect failed for email=%s", credentials.username)
        raise Unauthorized()
    token = new_session_token()
    await store.create(token, user.id, get_settings().session_ttl_seconds)
    log.info("Connect successful for email=%s", user.email)
    return TokenResponse(token=token)


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(
    store: Annotated[SessionStore, Depends(get_session_store)],
    x_token: Annotated[Optional[str], Header()] = None,
) -> Response:
    """Revoke the X-Token session."""
    if not x_token or not await store.delete(x_token):
        raise Unauthorized()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
