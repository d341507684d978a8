"""
Briefcase models: folders, document metadata and document content.

File bytes live in `document_contents` so listing documents never loads
them.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import Column, JSON, LargeBinary, Index
from sqlmodel import Field

from solosuccess.infrastructure.database.base_model import BaseModel


class BriefcaseFolder(BaseModel, table=True):
    __tablename__ = "briefcase_folders"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    parent_id: Optional[UUID] = Field(default=None, foreign_key="briefcase_folders.id")
    name: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    color: Optional[str] = Field(default=None, max_length=32)
    is_default: bool = Field(
        default=False,
        nullable=False,
        sa_column_kwargs={"comment": "The user's root briefcase"}
    )


class Document(BaseModel, table=True):
    __tablename__ = "documents"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    folder_id: Optional[UUID] = Field(default=None, foreign_key="briefcase_folders.id", index=True)
    name: str = Field(max_length=255, nullable=False)
    original_filename: str = Field(max_length=255, nullable=False)
    mime_type: str = Field(default="application/octet-stream", max_length=255)
    file_size: int = Field(default=0, nullable=False)
    description: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=100, index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_favorite: bool = Field(default=False, nullable=False)
    download_count: int = Field(default=0, nullable=False)

    __table_args__ = (
        Index('ix_documents_user_folder', 'user_id', 'folder_id'),
    )


class DocumentContent(BaseModel, table=True):
    __tablename__ = "document_contents"

    document_id: UUID = Field(
        foreign_key="documents.id",
        ondelete="CASCADE",
        unique=True,
        index=True,
        nullable=False,
    )
    data: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
