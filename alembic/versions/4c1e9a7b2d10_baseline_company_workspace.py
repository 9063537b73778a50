"""baseline_company_workspace

Revision ID: 4c1e9a7b2d10
Revises:
Create Date: 2026-02-03 14:21:47.118204

Production-safe migration: only creates tables that don't exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '4c1e9a7b2d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


company_plan = sa.Enum('free', 'starter', 'growth', name='companyplan')
company_role = sa.Enum('owner', 'admin', 'recruiter', 'member', name='companyrole')
membership_status = sa.Enum('pending', 'active', 'removed', name='membershipstatus')
notification_type = sa.Enum(
    'application_status', 'application_received', 'job_closed', 'system',
    name='notificationtype',
)


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    """Create users, companies, company_members and notifications if missing."""
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('clerk_user_id', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=True),
            sa.Column('first_name', sa.String(), nullable=True),
            sa.Column('last_name', sa.String(), nullable=True),
            sa.Column('image_url', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_clerk_user_id'), 'users', ['clerk_user_id'], unique=True)

    if not table_exists('companies'):
        op.create_table('companies',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('clerk_org_id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('plan', company_plan, nullable=True),
            sa.Column('seat_limit', sa.Integer(), nullable=True),
            sa.Column('job_limit', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_companies_id'), 'companies', ['id'], unique=False)
        op.create_index(op.f('ix_companies_clerk_org_id'), 'companies', ['clerk_org_id'], unique=True)

    if not table_exists('company_members'):
        op.create_table('company_members',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('role', company_role, nullable=False),
            sa.Column('status', membership_status, nullable=False),
            sa.Column('invited_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('company_id', 'user_id', name='uq_company_members_company_user')
        )
        op.create_index(op.f('ix_company_members_id'), 'company_members', ['id'], unique=False)
        op.create_index(op.f('ix_company_members_user_id'), 'company_members', ['user_id'], unique=False)

    if not table_exists('notifications'):
        op.create_table('notifications',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('type', notification_type, nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('link_url', sa.String(), nullable=True),
            sa.Column('metadata', sa.JSON(), nullable=True),
            sa.Column('is_read', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
            sa.CheckConstraint('read_at IS NULL OR is_read', name='ck_notifications_read_at_requires_is_read'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'], unique=False)
        op.create_index('idx_notifications_user_read_created', 'notifications', ['user_id', 'is_read', 'created_at'], unique=False)
        op.create_index('idx_notifications_user_created', 'notifications', ['user_id', 'created_at'], unique=False)


def downgrade() -> None:
    """Drop the workspace tables in dependency order."""
    op.drop_index('idx_notifications_user_created', table_name='notifications')
    op.drop_index('idx_notifications_user_read_created', table_name='notifications')
    op.drop_index(op.f('ix_notifications_id'), table_name='notifications')
    op.drop_table('notifications')
    op.drop_index(op.f('ix_company_members_user_id'), table_name='company_members')
    op.drop_index(op.f('ix_company_members_id'), table_name='company_members')
    op.drop_table('company_members')
    op.drop_index(op.f('ix_companies_clerk_org_id'), table_name='companies')
    op.drop_index(op.f('ix_companies_id'), table_name='companies')
    op.drop_table('companies')
    op.drop_index(op.f('ix_users_clerk_user_id'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (notification_type, membership_status, company_role, company_plan):
        enum_type.drop(bind, checkfirst=True)
