"""create users table

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision = '20261018_0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the users table. Every other table is scoped by users.id."""

    op.create_table(
        'users',
        # Primary key and timestamps (from BaseModel)
        sa.Column('id', UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),

        # Credentials
        sa.Column('email', sa.String(length=255), nullable=False, comment='User email address'),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),

        # Profile
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('avatar_url', sa.String(length=1024), nullable=True),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        sa.Column('industry', sa.String(length=100), nullable=True),
        sa.Column('business_type', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('website', sa.String(length=512), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('timezone', sa.String(length=64), nullable=False, server_default='America/New_York'),
        sa.Column('notification_preferences', sa.JSON(), nullable=True),

        # Subscription
        sa.Column(
            'subscription_tier',
            sa.String(length=32),
            nullable=False,
            server_default='free',
            comment='free, accelerator or dominator'
        ),
        sa.Column('subscription_status', sa.String(length=32), nullable=False, server_default='active'),

        # Onboarding and gamification
        sa.Column('onboarding_completed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('onboarding_completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('welcome_email_sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('total_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('wellness_score', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('focus_minutes', sa.Integer(), nullable=False, server_default='0'),

        # Status
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),

        # Soft delete (from SoftDeleteMixin)
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_email_deleted_at', 'users', ['email', 'deleted_at'], unique=False)


def downgrade() -> None:
    """Drop the users table and its indexes."""

    op.drop_index('ix_users_email_deleted_at', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
