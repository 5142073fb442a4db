"""Users, projects, defects, comments and status history

Revision ID: 202610180000
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '202610180000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ------------------------------
    # Create users table
    # ------------------------------
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    # ------------------------------
    # Create projects table
    # ------------------------------
    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('environment', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    # ------------------------------
    # Create defects table
    # ------------------------------
    op.create_table(
        'defects',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('project_id', sa.Uuid(), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('screenshot', sa.String(255), nullable=True),
        sa.Column('assigned_to', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reporter_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('severity', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_defects_project_id', 'defects', ['project_id'])
    op.create_index('ix_defects_assigned_to', 'defects', ['assigned_to'])
    op.create_index('ix_defects_severity', 'defects', ['severity'])
    op.create_index('ix_defects_status', 'defects', ['status'])

    # ------------------------------
    # Create comment and status history tables
    # ------------------------------
    op.create_table(
        'defect_comments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('defect_id', sa.Uuid(), sa.ForeignKey('defects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('author_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_defect_comments_defect_id', 'defect_comments', ['defect_id'])

    op.create_table(
        'defect_status_changes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('defect_id', sa.Uuid(), sa.ForeignKey('defects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('changed_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_defect_status_changes_defect_id', 'defect_status_changes', ['defect_id'])


def downgrade() -> None:
    op.drop_table('defect_status_changes')
    op.drop_table('defect_comments')
    op.drop_table('defects')
    op.drop_table('projects')
    op.drop_table('users')
