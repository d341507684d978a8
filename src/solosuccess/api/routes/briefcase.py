"""Briefcase folders and documents."""
from typing import Literal, Optional
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, File, Form, Query, UploadFile, status
from fastapi.responses import Response

from solosuccess.api.dependencies import DbSession, Pagination
from solosuccess.api.schemas.briefcase import (
    BulkOperationRequest,
    BulkOperationResult,
    DocumentRead,
    DocumentUpdate,
    FolderCreate,
    FolderRead,
    FolderUpdate,
)
from solosuccess.api.schemas.pagination import PaginatedResponse
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.services.briefcase import BriefcaseService

router = APIRouter()

DocumentSortField = Literal["created_at", "updated_at", "name", "file_size", "download_count"]


# ============================================================================
# Folders
# ============================================================================


@router.get("/folders", response_model=list[FolderRead])
async def list_folders(user: CurrentUser, session: DbSession):
    """All folders, oldest first. The default folder is created on first access."""
    return await BriefcaseService(session).list_folders(user.id)


@router.post("/folders", response_model=FolderRead, status_code=status.HTTP_201_CREATED)
async def create_folder(data: FolderCreate, user: CurrentUser, session: DbSession):
    return await BriefcaseService(session).create_folder(user.id, data)


@router.patch("/folders/{folder_id}", response_model=FolderRead)
async def update_folder(folder_id: UUID, data: FolderUpdate, user: CurrentUser, session: DbSession):
    return await BriefcaseService(session).update_folder(user.id, folder_id, data)


@router.delete(
    "/folders/{folder_id}",
    responses={409: {"description": "The default folder cannot be deleted"}},
)
async def delete_folder(folder_id: UUID, user: CurrentUser, session: DbSession):
    """Delete a folder; its documents move to the default folder."""
    moved = await BriefcaseService(session).delete_folder(user.id, folder_id)
    return {"success": True, "moved_documents": moved}


# ============================================================================
# Documents
# ============================================================================


@router.get("/documents", response_model=PaginatedResponse[DocumentRead])
async def list_documents(
    user: CurrentUser,
    session: DbSession,
    pagination: Pagination,
    folder_id: Optional[UUID] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    favorite: Optional[bool] = None,
    search: Optional[str] = Query(default=None, max_length=200),
    sort_by: DocumentSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
):
    result = await BriefcaseService(session).search(
        user.id,
        folder_id=folder_id,
        category=category,
        tag=tag,
        favorite=favorite,
        query_text=search,
        sort_by=sort_by,
        order=order,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return PaginatedResponse.build(result, DocumentRead)


@router.post(
    "/documents",
    response_model=DocumentRead,
    status_code=status.HTTP_201_CREATED,
    responses={413: {"description": "File larger than the upload limit"}},
)
async def upload_document(
    user: CurrentUser,
    session: DbSession,
    file: UploadFile = File(...),
    folder_id: Optional[UUID] = Form(default=None),
    description: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None, max_length=100),
    tags: Optional[str] = Form(default=None, description="Comma-separated tags"),
):
    """Upload a file as multipart form data."""
    data = await file.read()
    tag_list = [tag.strip() for tag in tags.split(",") if tag.strip()] if tags else []
    return await BriefcaseService(session).upload(
        user.id,
        filename=file.filename or "untitled",
        mime_type=file.content_type,
        data=data,
        folder_id=folder_id,
        description=description,
        category=category,
        tags=tag_list,
    )


@router.post(
    "/bulk",
    response_model=BulkOperationResult,
    responses={403: {"description": "One or more documents are not the caller's"}},
)
async def bulk_documents(data: BulkOperationRequest, user: CurrentUser, session: DbSession):
    return await BriefcaseService(session).bulk(user.id, data)


@router.get("/documents/{document_id}", response_model=DocumentRead)
async def get_document(document_id: UUID, user: CurrentUser, session: DbSession):
    return await BriefcaseService(session).get_document(user.id, document_id)


@router.get("/documents/{document_id}/download")
async def download_document(document_id: UUID, user: CurrentUser, session: DbSession):
    document, data = await BriefcaseService(session).download(user.id, document_id)
    return Response(
        content=data,
        media_type=document.mime_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(document.original_filename)}"
        },
    )


@router.patch("/documents/{document_id}", response_model=DocumentRead)
async def update_document(
    document_id: UUID, data: DocumentUpdate, user: CurrentUser, session: DbSession
):
    return await BriefcaseService(session).update_document(user.id, document_id, data)


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: UUID, user: CurrentUser, session: DbSession):
    await BriefcaseService(session).delete_document(user.id, document_id)
