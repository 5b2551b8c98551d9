"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2025-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


campaign_status = sa.Enum('active', 'expired', name='campaignstatus')
border_style = sa.Enum('thick', 'none', name='borderstyle')
notification_type = sa.Enum('expiring_campaign', 'scan_limit_reached', name='notificationtype')


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    # Campaigns table
    op.create_table(
        'campaigns',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scan_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('scan_limit', sa.Integer(), nullable=True),
        sa.Column('status', campaign_status, nullable=False, server_default='active'),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('created_by', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('icon_path', sa.String(), nullable=True),
        sa.Column('border_style', border_style, nullable=False, server_default='none'),
        sa.Column('target_url', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
        sa.CheckConstraint(
            'scan_limit IS NULL OR scan_count <= scan_limit',
            name='ck_campaigns_scan_count_within_limit',
        ),
    )
    op.create_index('ix_campaigns_category', 'campaigns', ['category'])
    op.create_index('ix_campaigns_status', 'campaigns', ['status'])
    op.create_index('ix_campaigns_end_date', 'campaigns', ['end_date'])
    op.create_index('ix_campaigns_created_by', 'campaigns', ['created_by'])

    # Scan events table
    op.create_table(
        'scan_events',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('campaign_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('region', sa.String(), nullable=False),
        sa.Column('scanned_at', sa.DateTime(), nullable=False),
        sa.Column('user_agent', sa.String(), nullable=True),
        sa.Column('ip_address', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id'], ),
    )
    op.create_index('ix_scan_events_campaign_id', 'scan_events', ['campaign_id'])
    op.create_index('ix_scan_events_region', 'scan_events', ['region'])
    op.create_index('ix_scan_events_scanned_at', 'scan_events', ['scanned_at'])

    # Notifications table
    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('type', notification_type, nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('campaign_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('campaign_name', sa.String(), nullable=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_campaign_user_type', 'notifications', ['campaign_id', 'user_id', 'type'])


def downgrade() -> None:
    op.drop_index('ix_notifications_campaign_user_type', table_name='notifications')
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_scan_events_scanned_at', table_name='scan_events')
    op.drop_index('ix_scan_events_region', table_name='scan_events')
    op.drop_index('ix_scan_events_campaign_id', table_name='scan_events')
    op.drop_table('scan_events')
    op.drop_index('ix_campaigns_created_by', table_name='campaigns')
    op.drop_index('ix_campaigns_end_date', table_name='campaigns')
    op.drop_index('ix_campaigns_status', table_name='campaigns')
    op.drop_index('ix_campaigns_category', table_name='campaigns')
    op.drop_table('campaigns')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    notification_type.drop(bind, checkfirst=True)
    border_style.drop(bind, checkfirst=True)
    campaign_status.drop(bind, checkfirst=True)
