"""create competitor, alert, social media, scraping and opportunity tables

Revision ID: 20261018_0003
Revises: 20261018_0002
Create Date: 2026-10-18 09:20:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision = '20261018_0003'
down_revision = '20261018_0002'
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


def _parent_column(name: str, table: str, ondelete: str = 'CASCADE', nullable: bool = False) -> sa.Column:
    return sa.Column(name, UUID(as_uuid=True), sa.ForeignKey(f'{table}.id', ondelete=ondelete), nullable=nullable)


def upgrade() -> None:
    """Create the competitive intelligence tables."""

    # Competitors
    op.create_table(
        'competitors',
        *_base_columns(),
        _owner_column(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('domain', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('industry', sa.String(length=100), nullable=True),
        sa.Column('threat_level', sa.String(length=16), nullable=False, server_default='medium'),
        sa.Column('monitoring_status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('social_media_handles', sa.JSON(), nullable=True),
        sa.Column('key_products', sa.JSON(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('last_analyzed', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_competitors_user_id', 'competitors', ['user_id'])
    op.create_index('ix_competitors_monitoring_status', 'competitors', ['monitoring_status'])

    op.create_table(
        'competitor_alerts',
        *_base_columns(),
        _owner_column(),
        _parent_column('competitor_id', 'competitors'),
        sa.Column('alert_type', sa.String(length=100), nullable=False),
        sa.Column('severity', sa.String(length=16), nullable=False, server_default='info'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('source_data', sa.JSON(), nullable=True),
        sa.Column('action_items', sa.JSON(), nullable=True),
        sa.Column('recommended_actions', sa.JSON(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('acknowledged_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_competitor_alerts_user_id', 'competitor_alerts', ['user_id'])
    op.create_index('ix_competitor_alerts_competitor_id', 'competitor_alerts', ['competitor_id'])
    op.create_index('ix_competitor_alerts_alert_type', 'competitor_alerts', ['alert_type'])
    op.create_index('ix_competitor_alerts_user_created', 'competitor_alerts', ['user_id', 'created_at'])

    # Social media monitoring
    op.create_table(
        'social_media_posts',
        *_base_columns(),
        _parent_column('competitor_id', 'competitors'),
        sa.Column('platform', sa.String(length=32), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('url', sa.String(length=1024), nullable=True),
        sa.Column('posted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('comments', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('shares', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('followers', sa.Integer(), nullable=True),
        sa.UniqueConstraint('competitor_id', 'platform', 'external_id', name='uq_social_posts_external'),
    )
    op.create_index('ix_social_media_posts_competitor_id', 'social_media_posts', ['competitor_id'])
    op.create_index('ix_social_media_posts_posted_at', 'social_media_posts', ['posted_at'])

    op.create_table(
        'social_media_analyses',
        *_base_columns(),
        _parent_column('competitor_id', 'competitors'),
        sa.Column('platform', sa.String(length=32), nullable=False),
        sa.Column('analysis_type', sa.String(length=32), nullable=False),
        sa.Column('results', sa.JSON(), nullable=True),
        sa.Column('insights', sa.JSON(), nullable=True),
        sa.Column('analyzed_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_social_media_analyses_competitor_id', 'social_media_analyses', ['competitor_id'])
    op.create_index('ix_social_media_analyses_analyzed_at', 'social_media_analyses', ['analyzed_at'])

    # Scraping
    op.create_table(
        'scraping_jobs',
        *_base_columns(),
        _owner_column(),
        _parent_column('competitor_id', 'competitors'),
        sa.Column('job_type', sa.String(length=16), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('priority', sa.String(length=16), nullable=False, server_default='medium'),
        sa.Column('frequency', sa.JSON(), nullable=True),
        sa.Column('config', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('retry_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_retries', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('next_run_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_run_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_error', sa.Text(), nullable=True),
    )
    op.create_index('ix_scraping_jobs_user_id', 'scraping_jobs', ['user_id'])
    op.create_index('ix_scraping_jobs_competitor_id', 'scraping_jobs', ['competitor_id'])
    op.create_index('ix_scraping_jobs_status', 'scraping_jobs', ['status'])
    op.create_index('ix_scraping_jobs_next_run_at', 'scraping_jobs', ['next_run_at'])
    op.create_index('ix_scraping_jobs_status_next_run', 'scraping_jobs', ['status', 'next_run_at'])

    op.create_table(
        'scraping_results',
        *_base_columns(),
        _parent_column('job_id', 'scraping_jobs'),
        sa.Column('success', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('status_code', sa.Integer(), nullable=True),
        sa.Column('content_hash', sa.String(length=64), nullable=True),
        sa.Column('content_text', sa.Text(), nullable=True),
        sa.Column('has_changes', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('change_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('duration_ms', sa.Float(), nullable=True),
        sa.Column('executed_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_scraping_results_job_id', 'scraping_results', ['job_id'])

    # Opportunities
    op.create_table(
        'opportunities',
        *_base_columns(),
        _owner_column(),
        _parent_column('competitor_id', 'competitors', ondelete='SET NULL', nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('opportunity_type', sa.String(length=64), nullable=False),
        sa.Column('impact', sa.String(length=16), nullable=False, server_default='medium'),
        sa.Column('effort', sa.String(length=16), nullable=False, server_default='medium'),
        sa.Column('timing', sa.String(length=16), nullable=False, server_default='short-term'),
        sa.Column('confidence', sa.Float(), nullable=False, server_default='0.5'),
        sa.Column('evidence', sa.JSON(), nullable=True),
        sa.Column('priority_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='identified'),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('implementation_notes', sa.Text(), nullable=True),
        sa.Column('estimated_roi', sa.Float(), nullable=True),
        sa.Column('actual_roi', sa.Float(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('success_metrics', sa.JSON(), nullable=True),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('detected_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_opportunities_user_id', 'opportunities', ['user_id'])
    op.create_index('ix_opportunities_competitor_id', 'opportunities', ['competitor_id'])
    op.create_index('ix_opportunities_opportunity_type', 'opportunities', ['opportunity_type'])
    op.create_index('ix_opportunities_priority_score', 'opportunities', ['priority_score'])
    op.create_index('ix_opportunities_status', 'opportunities', ['status'])
    op.create_index('ix_opportunities_user_archived', 'opportunities', ['user_id', 'is_archived'])

    op.create_table(
        'opportunity_actions',
        *_base_columns(),
        _parent_column('opportunity_id', 'opportunities'),
        _owner_column(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('action_type', sa.String(length=64), nullable=False, server_default='general'),
        sa.Column('priority', sa.String(length=16), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('estimated_effort_hours', sa.Float(), nullable=True),
        sa.Column('actual_effort_hours', sa.Float(), nullable=True),
        sa.Column('estimated_cost', sa.Float(), nullable=True),
        sa.Column('actual_cost', sa.Float(), nullable=True),
        sa.Column('expected_outcome', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_opportunity_actions_opportunity_id', 'opportunity_actions', ['opportunity_id'])
    op.create_index('ix_opportunity_actions_user_id', 'opportunity_actions', ['user_id'])

    op.create_table(
        'opportunity_metrics',
        *_base_columns(),
        _parent_column('opportunity_id', 'opportunities'),
        _owner_column(),
        sa.Column('metric_name', sa.String(length=255), nullable=False),
        sa.Column('metric_type', sa.String(length=32), nullable=False, server_default='custom'),
        sa.Column('baseline_value', sa.Float(), nullable=True),
        sa.Column('current_value', sa.Float(), nullable=True),
        sa.Column('target_value', sa.Float(), nullable=True),
        sa.Column('unit', sa.String(length=32), nullable=False, server_default='units'),
        sa.Column('measured_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.UniqueConstraint('opportunity_id', 'metric_name', name='uq_opportunity_metric_name'),
    )
    op.create_index('ix_opportunity_metrics_opportunity_id', 'opportunity_metrics', ['opportunity_id'])
    op.create_index('ix_opportunity_metrics_user_id', 'opportunity_metrics', ['user_id'])


def downgrade() -> None:
    """Drop the tables in reverse dependency order."""

    op.drop_table('opportunity_metrics')
    op.drop_table('opportunity_actions')
    op.drop_table('opportunities')
    op.drop_table('scraping_results')
    op.drop_table('scraping_jobs')
    op.drop_table('social_media_analyses')
    op.drop_table('social_media_posts')
    op.drop_table('competitor_alerts')
    op.drop_table('competitors')
