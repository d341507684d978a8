"""Briefcase folder and document schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FolderCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[UUID] = None
    color: Optional[str] = Field(default=None, max_length=32)


class FolderUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[UUID] = None
    color: Optional[str] = Field(default=None, max_length=32)


class FolderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    parent_id: Optional[UUID] = None
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    is_default: bool
    created_at: datetime


class DocumentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    folder_id: Optional[UUID] = None
    name: str
    original_filename: str
    mime_type: str
    file_size: int
    description: Optional[str] = None
    category: Optional[str] = None
    tags: list[str]
    is_favorite: bool
    download_count: int
    created_at: datetime
    updated_at: datetime


class DocumentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[list[str]] = Field(default=None, max_length=50)
    folder_id: Optional[UUID] = None
    is_favorite: Optional[bool] = None


BulkAction = Literal["delete", "move", "copy", "tag", "category", "favorite"]


class BulkOperationRequest(BaseModel):
    """
    Bulk document operation.

    `move` needs `folder_id`; `copy` without one copies into the source folder;
    `tag` needs `tags` and `tag_action`;
    `category` needs `category`; `favorite` needs `favorite`.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    action: BulkAction
    document_ids: list[UUID] = Field(..., min_length=1, max_length=100)
    folder_id: Optional[UUID] = None
    tags: Optional[list[str]] = None
    tag_action: Literal["add", "remove"] = "add"
    category: Optional[str] = Field(default=None, max_length=100)
    favorite: Optional[bool] = None

    @model_validator(mode="after")
    def check_action_arguments(self) -> "BulkOperationRequest":
        if self.action == "move" and self.folder_id is None:
            raise ValueError("folder_id is required for move")
        if self.action == "tag" and not self.tags:
            raise ValueError("tags are required for tag")
        if self.action == "category" and self.category is None:
            raise ValueError("category is required for category")
        if self.action == "favorite" and self.favorite is None:
            raise ValueError("favorite is required for favorite")
        return self


class BulkOperationResult(BaseModel):
    success: bool
    processed: int
    failed: int
    errors: list[str] = Field(default_factory=list)
