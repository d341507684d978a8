"""
User account model.

A user is the tenant boundary: every other row in the system carries a
`user_id` pointing here.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, JSON, Index
from sqlmodel import Field

from solosuccess.infrastructure.database.base_model import BaseModel, SoftDeleteMixin


def default_notification_preferences() -> dict:
    return {"email": True, "push": True, "marketing": False}


class SubscriptionTier(str, Enum):
    FREE = "free"
    ACCELERATOR = "accelerator"
    DOMINATOR = "dominator"


class User(BaseModel, SoftDeleteMixin, table=True):
    """
    User model for authentication, profile and dashboard gamification.

    Attributes:
        email: Unique email address used to sign in
        hashed_password: bcrypt hash of the password
        full_name: Display name
        subscription_tier: free, accelerator or dominator
        onboarding_completed: Set once by the onboarding workflow
        level/total_points/current_streak: Gamification counters
        wellness_score/focus_minutes: Burnout and focus tracking
    """

    __tablename__ = "users"

    email: str = Field(
        nullable=False,
        unique=True,
        index=True,
        max_length=255,
        description="User email address (unique)",
        sa_column_kwargs={"comment": "User email address"}
    )

    hashed_password: str = Field(
        nullable=False,
        max_length=255,
        description="bcrypt password hash",
    )

    full_name: Optional[str] = Field(default=None, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)
    company_name: Optional[str] = Field(default=None, max_length=255)
    industry: Optional[str] = Field(default=None, max_length=100)
    business_type: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    website: Optional[str] = Field(default=None, max_length=512)
    bio: Optional[str] = Field(default=None)
    timezone: str = Field(default="America/New_York", max_length=64)

    notification_preferences: dict = Field(
        default_factory=default_notification_preferences,
        sa_column=Column(JSON),
        description="Email/push/marketing opt-ins",
    )

    # Subscription
    subscription_tier: str = Field(
        default=SubscriptionTier.FREE.value,
        max_length=32,
        sa_column_kwargs={"comment": "free, accelerator or dominator"}
    )
    subscription_status: str = Field(default="active", max_length=32)

    # Onboarding and gamification
    onboarding_completed: bool = Field(default=False, nullable=False)
    onboarding_completed_at: Optional[datetime] = Field(default=None)
    welcome_email_sent_at: Optional[datetime] = Field(default=None)
    level: int = Field(default=1, nullable=False)
    total_points: int = Field(default=0, nullable=False)
    current_streak: int = Field(default=0, nullable=False)
    wellness_score: int = Field(default=50, nullable=False)
    focus_minutes: int = Field(default=0, nullable=False)

    is_active: bool = Field(default=True, nullable=False)
    last_login_at: Optional[datetime] = Field(default=None)

    __table_args__ = (
        Index('ix_users_email_deleted_at', 'email', 'deleted_at'),
    )
