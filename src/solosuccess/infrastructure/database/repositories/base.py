from typing import TypeVar, Generic, Sequence, Any, Literal, NamedTuple
from uuid import UUID

from sqlalchemy import select, Select, func, asc, desc, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from solosuccess.infrastructure.database.base_model import utcnow
from solosuccess.infrastructure.observability.logging import get_logger

T = TypeVar("T", bound=SQLModel)

logger = get_logger(__name__)


class PaginatedResult(NamedTuple):
    """Result of a paginated query."""
    items: Sequence[Any]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


class BaseRepository(Generic[T]):
    """
    Base repository with filtering, sorting and pagination.

    Extend this for entity-specific repositories.

    Example:
        class GoalRepository(OwnedRepository[Goal]):
            def __init__(self, session: AsyncSession):
                super().__init__(Goal, session)
    """

    def __init__(self, model: type[T], session: AsyncSession):
        self.model = model
        self.session = session

    def _has_soft_delete(self) -> bool:
        return hasattr(self.model, "deleted_at")

    def _exclude_deleted(self, query: Select, include_deleted: bool = False) -> Select:
        """Exclude soft-deleted records from query unless include_deleted=True."""
        if not include_deleted and self._has_soft_delete():
            query = query.where(self.model.deleted_at.is_(None))
        return query

    async def get(self, id: UUID, include_deleted: bool = False) -> T | None:
        entity = await self.session.get(self.model, id)
        if entity and not include_deleted and self._has_soft_delete():
            if getattr(entity, "deleted_at", None) is not None:
                return None
        return entity

    async def get_many(
        self,
        skip: int = 0,
        limit: int = 100,
        include_deleted: bool = False,
        **filters
    ) -> Sequence[T]:
        """
        Get multiple entities with filtering.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            include_deleted: Include soft-deleted records
            **filters: Filters in `field` or `field__operator` form

        Returns:
            Sequence of entities
        """
        query = select(self.model)
        query = self._exclude_deleted(query, include_deleted)
        query = self.apply_filters(query, filters)
        query = query.offset(skip).limit(limit)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, **filters) -> int:
        query = self.apply_filters(self._exclude_deleted(select(self.model)), filters)
        result = await self.session.execute(
            select(func.count()).select_from(query.subquery())
        )
        return result.scalar_one()

    async def create(self, entity: T) -> T:
        """Persist a new entity and return it with generated fields populated."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def create_many(self, items: list[dict]) -> list[T]:
        entities = [self.model(**item) for item in items]
        self.session.add_all(entities)
        await self.session.flush()

        for entity in entities:
            await self.session.refresh(entity)

        return entities

    async def update(self, id: UUID, **values) -> T | None:
        """
        Update entity by ID.

        Returns:
            Updated entity or None if not found
        """
        entity = await self.get(id)
        if entity:
            return await self.apply_update(entity, **values)
        return entity

    async def apply_update(self, entity: T, **values) -> T:
        """Set attributes on an already loaded entity and flush."""
        for key, value in values.items():
            setattr(entity, key, value)
        if hasattr(entity, "updated_at"):
            entity.updated_at = utcnow()
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update_many(self, filters: dict, updates: dict) -> int:
        """
        Update every entity matching filters.

        Example:
            count = await repo.update_many(
                {"goal_id": goal.id},
                {"goal_id": None}
            )
        """
        query = select(self.model.id)
        query = self._exclude_deleted(query)
        query = self.apply_filters(query, filters)

        result = await self.session.execute(query)
        ids = list(result.scalars().all())
        if not ids:
            return 0

        if hasattr(self.model, "updated_at") and "updated_at" not in updates:
            updates = {**updates, "updated_at": utcnow()}

        update_stmt = (
            sql_update(self.model)
            .where(self.model.id.in_(ids))
            .values(**updates)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(update_stmt)
        await self.session.flush()
        return result.rowcount

    async def delete(self, id: UUID) -> bool:
        """
        Soft delete entity by ID when the model supports it, hard delete otherwise.

        Returns:
            True if deleted, False if not found
        """
        entity = await self.get(id)
        if not entity:
            return False
        await self.delete_entity(entity)
        return True

    async def delete_entity(self, entity: T) -> None:
        if self._has_soft_delete():
            entity.deleted_at = utcnow()
        else:
            await self.session.delete(entity)
        await self.session.flush()

    def apply_filters(self, query: Select, filters: dict) -> Select:
        """
        Apply filters to query with operator support.

        Supported operators: eq, ne, gt, gte, lt, lte, like, ilike, in,
        not_in, is_null. A key without an operator means eq; a None value
        is skipped so optional query parameters can be passed through as is.

        Example:
            query = repo.apply_filters(query, {
                "created_at__gte": since,
                "status__in": ["pending", "in-progress"],
            })
        """
        for key, value in filters.items():
            if "__" in key:
                field_name, operator = key.rsplit("__", 1)
            else:
                field_name, operator = key, "eq"

            if value is None or not hasattr(self.model, field_name):
                continue

            field = getattr(self.model, field_name)

            if operator == "eq":
                query = query.where(field == value)
            elif operator == "ne":
                query = query.where(field != value)
            elif operator == "gt":
                query = query.where(field > value)
            elif operator == "gte":
                query = query.where(field >= value)
            elif operator == "lt":
                query = query.where(field < value)
            elif operator == "lte":
                query = query.where(field <= value)
            elif operator == "like":
                query = query.where(field.like(value))
            elif operator == "ilike":
                query = query.where(field.ilike(value))
            elif operator == "in":
                query = query.where(field.in_(value))
            elif operator == "not_in":
                query = query.where(field.not_in(value))
            elif operator == "is_null":
                query = query.where(field.is_(None) if value else field.is_not(None))
            else:
                raise ValueError(f"Unsupported filter operator: {operator}")

        return query

    def apply_sorting(
        self,
        query: Select,
        sort_by: str = "created_at",
        order: Literal["asc", "desc"] = "desc"
    ) -> Select:
        """Order by `sort_by`, falling back to created_at for unknown fields."""
        field = getattr(self.model, sort_by, None)
        if field is None:
            field = self.model.created_at

        if order == "asc":
            return query.order_by(asc(field), asc(self.model.id))
        return query.order_by(desc(field), desc(self.model.id))

    async def paginate(
        self,
        query: Select,
        page: int = 1,
        page_size: int = 20
    ) -> PaginatedResult:
        """
        Paginate query results with metadata.

        Example:
            query = select(Task).where(Task.user_id == user_id)
            result = await repo.paginate(query, page=2, page_size=10)
        """
        page = max(1, page)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.session.execute(count_query)).scalar_one()

        total_pages = (total + page_size - 1) // page_size

        result = await self.session.execute(
            query.offset((page - 1) * page_size).limit(page_size)
        )
        items = result.scalars().all()

        return PaginatedResult(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class OwnedRepository(BaseRepository[T]):
    """
    Repository for rows that belong to a single user.

    Every read goes through `for_user`, so one tenant can never see another
    tenant's rows even when it guesses an ID.
    """

    def for_user(self, user_id: UUID, include_deleted: bool = False) -> Select:
        query = select(self.model).where(self.model.user_id == user_id)
        return self._exclude_deleted(query, include_deleted)

    async def get_owned(self, id: UUID, user_id: UUID) -> T | None:
        entity = await self.get(id)
        if entity is None or entity.user_id != user_id:
            return None
        return entity

    async def list_owned(
        self,
        user_id: UUID,
        sort_by: str = "created_at",
        order: Literal["asc", "desc"] = "desc",
        limit: int | None = None,
        **filters,
    ) -> Sequence[T]:
        query = self.apply_filters(self.for_user(user_id), filters)
        query = self.apply_sorting(query, sort_by, order)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_many_owned(self, ids: Sequence[UUID], user_id: UUID) -> Sequence[T]:
        query = self.for_user(user_id).where(self.model.id.in_(list(ids)))
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_owned(self, user_id: UUID, **filters) -> int:
        query = self.apply_filters(self.for_user(user_id), filters)
        result = await self.session.execute(
            select(func.count()).select_from(query.subquery())
        )
        return result.scalar_one()
