"""User SQLAlchemy model and Pydantic schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from files_manager.db.session import Base


def new_id() -> str:
    """Fresh random identifier for users and files."""
    return str(uuid.uuid4())


class User(Base):
    """User table: email is unique and the login identifier."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


# Pydantic schemas for API. Fields are optional so the handler can report
# "Missing email" / "Missing password" instead of a generic 422.
class UserCreate(BaseModel):
    """Registration payload."""

    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """User as returned by API (no password)."""

    id: str
    email: str


class TokenResponse(BaseModel):
    """Result of GET /connect."""

    token: str
