"""
Briefcase: a user's folders and uploaded documents.

Every user has one default root folder ("My Briefcase"). It is created on
first use and receives the documents of deleted folders.
"""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.briefcase import (
    BulkOperationRequest,
    DocumentUpdate,
    FolderCreate,
    FolderUpdate,
)
from solosuccess.config.settings import get_settings
from solosuccess.domain.exceptions import (
    Conflict,
    InvalidParameter,
    NotFound,
    PayloadTooLarge,
    ResourceAccessDenied,
)
from solosuccess.infrastructure.database.models.briefcase import BriefcaseFolder, Document
from solosuccess.infrastructure.database.repositories import (
    DocumentRepository,
    FolderRepository,
    PaginatedResult,
)
from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class BriefcaseService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.folders = FolderRepository(session)
        self.documents = DocumentRepository(session)

    # Folders

    async def ensure_default_folder(self, user_id: UUID) -> tuple[BriefcaseFolder, bool]:
        """
        Return the user's default folder, creating it if needed.

        Returns:
            Tuple of (folder, created)
        """
        folder = await self.folders.get_default(user_id)
        if folder is not None:
            return folder, False

        folder = await self.folders.create(
            BriefcaseFolder(
                user_id=user_id,
                name=get_settings().briefcase_default_folder_name,
                description="Your default briefcase for important documents",
                is_default=True,
            )
        )
        logger.info("Default briefcase created", user_id=str(user_id), folder_id=str(folder.id))
        return folder, True

    async def get_folder(self, user_id: UUID, folder_id: UUID) -> BriefcaseFolder:
        folder = await self.folders.get_owned(folder_id, user_id)
        if folder is None:
            raise NotFound("Folder not found", details={"folder_id": str(folder_id)})
        return folder

    async def list_folders(self, user_id: UUID) -> list[BriefcaseFolder]:
        await self.ensure_default_folder(user_id)
        return list(await self.folders.list_owned(user_id, sort_by="created_at", order="asc"))

    async def create_folder(self, user_id: UUID, data: FolderCreate) -> BriefcaseFolder:
        if data.parent_id is not None:
            await self.get_folder(user_id, data.parent_id)
        return await self.folders.create(BriefcaseFolder(user_id=user_id, **data.model_dump()))

    async def update_folder(self, user_id: UUID, folder_id: UUID, data: FolderUpdate) -> BriefcaseFolder:
        folder = await self.get_folder(user_id, folder_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)

        parent_id = changes.get("parent_id")
        if parent_id is not None:
            if parent_id == folder.id:
                raise InvalidParameter("A folder cannot be its own parent", details={"field": "parent_id"})
            await self.get_folder(user_id, parent_id)

        return await self.folders.apply_update(folder, **changes)

    async def delete_folder(self, user_id: UUID, folder_id: UUID) -> int:
        """
        Delete a folder and move its documents to the default folder.

        Returns:
            Number of documents moved

        Raises:
            Conflict: If the folder is the default folder
        """
        folder = await self.get_folder(user_id, folder_id)
        if folder.is_default:
            raise Conflict("The default briefcase cannot be deleted")

        default, _ = await self.ensure_default_folder(user_id)
        moved = await self.documents.move_folder_contents(folder.id, default.id)
        await self.folders.update_many({"parent_id": folder.id}, {"parent_id": folder.parent_id})
        await self.folders.delete_entity(folder)

        logger.info("Folder deleted", folder_id=str(folder_id), moved_documents=moved)
        return moved

    # Documents

    async def get_document(self, user_id: UUID, document_id: UUID) -> Document:
        document = await self.documents.get_owned(document_id, user_id)
        if document is None:
            raise NotFound("Document not found", details={"document_id": str(document_id)})
        return document

    async def upload(
        self,
        user_id: UUID,
        filename: str,
        mime_type: Optional[str],
        data: bytes,
        folder_id: Optional[UUID] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Document:
        """
        Store an uploaded file.

        Raises:
            PayloadTooLarge: If the file exceeds briefcase_max_upload_bytes
            InvalidParameter: If the file is empty
        """
        max_bytes = get_settings().briefcase_max_upload_bytes
        if len(data) > max_bytes:
            raise PayloadTooLarge(
                details={"size": len(data), "max_size": max_bytes},
                suggested_action=f"Upload a file smaller than {max_bytes // (1024 * 1024)} MB",
            )
        if not data:
            raise InvalidParameter("Uploaded file is empty", details={"field": "file"})

        if folder_id is not None:
            folder = await self.get_folder(user_id, folder_id)
        else:
            folder, _ = await self.ensure_default_folder(user_id)

        document = await self.documents.create(
            Document(
                user_id=user_id,
                folder_id=folder.id,
                name=filename,
                original_filename=filename,
                mime_type=mime_type or "application/octet-stream",
                file_size=len(data),
                description=description,
                category=category,
                tags=tags or [],
            )
        )
        await self.documents.save_content(document.id, data)

        logger.info("Document uploaded", document_id=str(document.id), size=len(data))
        return document

    async def search(self, user_id: UUID, **filters: Any) -> PaginatedResult:
        return await self.documents.search(user_id, **filters)

    async def download(self, user_id: UUID, document_id: UUID) -> tuple[Document, bytes]:
        document = await self.get_document(user_id, document_id)
        content = await self.documents.get_content(document.id)
        if content is None:
            raise NotFound("Document content not found", details={"document_id": str(document_id)})
        document = await self.documents.apply_update(document, download_count=document.download_count + 1)
        return document, content.data

    async def update_document(self, user_id: UUID, document_id: UUID, data: DocumentUpdate) -> Document:
        document = await self.get_document(user_id, document_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in ("description", "category")
        }
        if "folder_id" in changes:
            await self.get_folder(user_id, changes["folder_id"])
        return await self.documents.apply_update(document, **changes)

    async def delete_document(self, user_id: UUID, document_id: UUID) -> None:
        document = await self.get_document(user_id, document_id)
        await self.documents.delete_with_content(document)
        logger.info("Document deleted", document_id=str(document_id))

    async def bulk(self, user_id: UUID, request: BulkOperationRequest) -> dict[str, Any]:
        """
        Apply one action to many documents.

        The request is rejected as a whole if any id is not the caller's.
        """
        requested = list(dict.fromkeys(request.document_ids))
        documents = await self.documents.get_many_owned(requested, user_id)
        if len(documents) != len(requested):
            found = {doc.id for doc in documents}
            raise ResourceAccessDenied(
                "Some documents were not found or access denied",
                details={"document_ids": [str(i) for i in requested if i not in found]},
            )

        if request.folder_id is not None and request.action in ("move", "copy"):
            await self.get_folder(user_id, request.folder_id)

        processed, errors = 0, []
        for document in documents:
            try:
                await self._apply_bulk_action(document, request)
                processed += 1
            except NotFound as e:
                errors.append(f"{document.id}: {e.message}")

        logger.info(
            "Bulk document operation",
            action=request.action,
            processed=processed,
            failed=len(errors),
        )
        return {
            "success": not errors,
            "processed": processed,
            "failed": len(errors),
            "errors": errors,
        }

    async def _apply_bulk_action(self, document: Document, request: BulkOperationRequest) -> None:
        action = request.action

        if action == "delete":
            await self.documents.delete_with_content(document)
        elif action == "move":
            await self.documents.apply_update(document, folder_id=request.folder_id)
        elif action == "copy":
            content = await self.documents.get_content(document.id)
            if content is None:
                raise NotFound("Document content not found")
            copy = await self.documents.create(
                Document(
                    user_id=document.user_id,
                    folder_id=request.folder_id or document.folder_id,
                    name=f"{document.name} (Copy)",
                    original_filename=document.original_filename,
                    mime_type=document.mime_type,
                    file_size=document.file_size,
                    description=document.description,
                    category=document.category,
                    tags=list(document.tags or []),
                )
            )
            await self.documents.save_content(copy.id, content.data)
        elif action == "tag":
            tags = list(document.tags or [])
            if request.tag_action == "add":
                tags.extend(tag for tag in request.tags if tag not in tags)
            else:
                tags = [tag for tag in tags if tag not in request.tags]
            await self.documents.apply_update(document, tags=tags)
        elif action == "category":
            await self.documents.apply_update(document, category=request.category)
        elif action == "favorite":
            await self.documents.apply_update(document, is_favorite=request.favorite)
