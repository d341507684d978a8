from typing import Optional
from uuid import UUID

from sqlalchemy import select, or_, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.models.briefcase import (
    BriefcaseFolder,
    Document,
    DocumentContent,
)
from solosuccess.infrastructure.database.repositories.base import OwnedRepository, PaginatedResult


class FolderRepository(OwnedRepository[BriefcaseFolder]):
    def __init__(self, session: AsyncSession):
        super().__init__(BriefcaseFolder, session)

    async def get_default(self, user_id: UUID) -> BriefcaseFolder | None:
        query = self.for_user(user_id).where(BriefcaseFolder.is_default.is_(True))
        result = await self.session.execute(query)
        return result.scalars().first()


class DocumentRepository(OwnedRepository[Document]):
    def __init__(self, session: AsyncSession):
        super().__init__(Document, session)

    async def search(
        self,
        user_id: UUID,
        folder_id: Optional[UUID] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        favorite: Optional[bool] = None,
        query_text: Optional[str] = None,
        sort_by: str = "created_at",
        order: str = "desc",
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResult:
        query = self.apply_filters(
            self.for_user(user_id),
            {"folder_id": folder_id, "category": category, "is_favorite": favorite},
        )
        if query_text:
            pattern = f"%{query_text}%"
            query = query.where(
                or_(Document.name.ilike(pattern), Document.description.ilike(pattern))
            )
        query = self.apply_sorting(query, sort_by, order)

        if tag is None:
            return await self.paginate(query, page, page_size)

        # JSON containment differs between Postgres and SQLite, so tag
        # filtering happens after the fetch
        result = await self.session.execute(query)
        tagged = [doc for doc in result.scalars().all() if tag in (doc.tags or [])]
        total = len(tagged)
        start = (max(1, page) - 1) * page_size
        total_pages = (total + page_size - 1) // page_size
        return PaginatedResult(
            items=tagged[start:start + page_size],
            total=total,
            page=max(1, page),
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

    async def get_content(self, document_id: UUID) -> DocumentContent | None:
        result = await self.session.execute(
            select(DocumentContent).where(DocumentContent.document_id == document_id)
        )
        return result.scalars().first()

    async def save_content(self, document_id: UUID, data: bytes) -> DocumentContent:
        content = DocumentContent(document_id=document_id, data=data)
        self.session.add(content)
        await self.session.flush()
        return content

    async def delete_with_content(self, document: Document) -> None:
        await self.session.execute(
            sql_delete(DocumentContent).where(DocumentContent.document_id == document.id)
        )
        await self.session.delete(document)
        await self.session.flush()

    async def move_folder_contents(self, folder_id: UUID, target_folder_id: UUID) -> int:
        return await self.update_many({"folder_id": folder_id}, {"folder_id": target_folder_id})
