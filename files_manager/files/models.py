"""File SQLAlchemy model and Pydantic schemas (camelCase on the wire)."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from files_manager.db.session import Base
from files_manager.users.models import new_id

ROOT_PARENT_ID = 0


class FileType(str, Enum):
    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"


# Types whose bytes live in the blob store
CONTENT_TYPES = (FileType.FILE.value, FileType.IMAGE.value)


class File(Base):
    """
    File or folder record. parent_id is NULL for root-level entries, otherwise the id
    of a folder. local_path is set only for file and image types.
    """

    __tablename__ = "files"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(1024), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parent_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    local_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class FileCreate(BaseModel):
    """
    POST /files body. Fields are untyped at the schema level; the service checks
    them in order (name, type, data, parent) and reports the first bad one, so a
    wrongly typed value is a 400 like a missing one.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Any = None
    type: Any = None
    parent_id: Any = Field(default=ROOT_PARENT_ID, alias="parentId")
    is_public: Any = Field(default=False, alias="isPublic")
    data: Any = None


class FileOut(BaseModel):
    """File as returned by API (no local path)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    name: str
    type: str
    is_public: bool = Field(alias="isPublic")
    parent_id: Union[int, str] = Field(alias="parentId")

    @classmethod
    def from_file(cls, file: File) -> "FileOut":
        return cls(
            id=file.id,
            user_id=file.user_id,
            name=file.name,
            type=file.type,
            is_public=file.is_public,
            parent_id=file.parent_id or ROOT_PARENT_ID,
        )
