"""create goals, tasks, briefcase and conversation tables

Revision ID: 20261018_0002
Revises: 20261018_0001
Create Date: 2026-10-18 09:10:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision = '20261018_0002'
down_revision = '20261018_0001'
branch_labels = None
depends_on = None


def _base_columns() -> list:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column('id', UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def _owner_column() -> sa.Column:
    return sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False)


def upgrade() -> None:
    """Create the SlayList, briefcase and chat tables."""

    # Goals and tasks
    op.create_table(
        'goals',
        *_base_columns(),
        _owner_column(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('priority', sa.String(length=16), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_goals_user_id', 'goals', ['user_id'])
    op.create_index('ix_goals_status', 'goals', ['status'])
    op.create_index('ix_goals_user_status', 'goals', ['user_id', 'status'])

    op.create_table(
        'tasks',
        *_base_columns(),
        _owner_column(),
        sa.Column(
            'goal_id',
            UUID(as_uuid=True),
            sa.ForeignKey('goals.id', ondelete='SET NULL'),
            nullable=True
        ),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('priority', sa.String(length=16), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('estimated_minutes', sa.Integer(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_tasks_user_id', 'tasks', ['user_id'])
    op.create_index('ix_tasks_goal_id', 'tasks', ['goal_id'])
    op.create_index('ix_tasks_status', 'tasks', ['status'])
    op.create_index('ix_tasks_user_status', 'tasks', ['user_id', 'status'])
    op.create_index('ix_tasks_user_due_date', 'tasks', ['user_id', 'due_date'])

    # Briefcase
    op.create_table(
        'briefcase_folders',
        *_base_columns(),
        _owner_column(),
        sa.Column('parent_id', UUID(as_uuid=True), sa.ForeignKey('briefcase_folders.id'), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(length=32), nullable=True),
        sa.Column(
            'is_default',
            sa.Boolean(),
            nullable=False,
            server_default=sa.text('false'),
            comment="The user's root briefcase"
        ),
    )
    op.create_index('ix_briefcase_folders_user_id', 'briefcase_folders', ['user_id'])

    op.create_table(
        'documents',
        *_base_columns(),
        _owner_column(),
        sa.Column('folder_id', UUID(as_uuid=True), sa.ForeignKey('briefcase_folders.id'), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('original_filename', sa.String(length=255), nullable=False),
        sa.Column('mime_type', sa.String(length=255), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('is_favorite', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('download_count', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_documents_user_id', 'documents', ['user_id'])
    op.create_index('ix_documents_folder_id', 'documents', ['folder_id'])
    op.create_index('ix_documents_category', 'documents', ['category'])
    op.create_index('ix_documents_user_folder', 'documents', ['user_id', 'folder_id'])

    op.create_table(
        'document_contents',
        *_base_columns(),
        sa.Column(
            'document_id',
            UUID(as_uuid=True),
            sa.ForeignKey('documents.id', ondelete='CASCADE'),
            nullable=False
        ),
        sa.Column('data', sa.LargeBinary(), nullable=False),
    )
    op.create_index('ix_document_contents_document_id', 'document_contents', ['document_id'], unique=True)

    # Chat
    op.create_table(
        'conversations',
        *_base_columns(),
        _owner_column(),
        sa.Column('agent_id', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('messages', sa.JSON(), nullable=True),
        sa.Column('message_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_message_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_conversations_user_id', 'conversations', ['user_id'])
    op.create_index('ix_conversations_agent_id', 'conversations', ['agent_id'])
    op.create_index(
        'ix_conversations_user_last_message',
        'conversations',
        ['user_id', 'last_message_at']
    )


def downgrade() -> None:
    """Drop the tables in reverse dependency order."""

    op.drop_table('conversations')
    op.drop_table('document_contents')
    op.drop_table('documents')
    op.drop_table('briefcase_folders')
    op.drop_table('tasks')
    op.drop_table('goals')
