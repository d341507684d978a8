from datetime import datetime, timezone
from uuid import UUID, uuid4
from sqlalchemy import text
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp; datetime columns reject naive values."""
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    """
    Base for all database models.

    Example:
        class Goal(BaseModel, table=True):
            __tablename__ = "goals"
            user_id: UUID = Field(foreign_key="users.id", index=True)
            title: str
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")}
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )


class SoftDeleteMixin(SQLModel):
    """Add soft delete to any model."""
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


def as_utc(value: datetime | None) -> datetime | None:
    """Normalise client-supplied datetimes to aware UTC; naive values are taken as UTC."""
    if value is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
