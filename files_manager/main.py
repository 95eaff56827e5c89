"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.dependencies import get_session_store
from files_manager.auth.routes import router as auth_router
from files_manager.auth.session_store import RedisSessionStore, SessionStore
from files_manager.config import get_settings
from files_manager.db import session as db
from files_manager.errors import FilesManagerError
from files_manager.files.routes import router as files_router
from files_manager.files.service import count_files
from files_manager.limiter import limiter
from files_manager.logging_setup import setup_logging
from files_manager.users.routes import router as users_router
from files_manager.users.service import count_users

log = logging.getLogger(__name__)

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and open the session store on startup; close both on shutdown."""
    log.info("Startup: initializing database and session store")
    await db.init_db()
    app.state.session_store = RedisSessionStore.from_url(get_settings().redis_url)
    log.info("Startup complete")
    yield
    log.info("Shutdown")
    await app.state.session_store.close()
    await db.dispose_engine()


app = FastAPI(title="Files Manager API", version="0.1.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    return response


@app.exception_handler(FilesManagerError)
async def files_manager_error_handler(request: Request, exc: FilesManagerError):
    """Expected failures: status from the error class, body names the problem."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Return generic 500 without leaking stack trace or internals."""
    log.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(users_router)
app.include_router(auth_router)
app.include_router(files_router)


@app.get("/status")
@limiter.exempt
async def get_status(
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> dict:
    """Liveness of the session store and the metadata store."""
    return {"redis": await store.is_alive(), "db": await db.is_alive()}


@app.get("/stats")
async def get_stats(session: Annotated[AsyncSession, Depends(db.get_db)]) -> dict:
    """Number of users and files."""
    return {"users": await count_users(session), "files": await count_files(session)}
