"""create checklist schema

Revision ID: a1c4e2f9b7d3
Revises: 
Create Date: 2026-10-19 09:12:41.220318

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e2f9b7d3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=True, comment="Managed by the auth provider"),
        sa.Column('role', sa.String(20), nullable=False, server_default='employee', comment="employee|supervisor|admin"),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('employee', 'supervisor', 'admin')", name='check_user_role'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'sections',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_sections_is_active', 'sections', ['is_active'])

    op.create_table(
        'check_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('requires_photo', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('requires_note_on_fail', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_check_items_section_id', 'check_items', ['section_id'])
    op.create_index('ix_check_items_is_active', 'check_items', ['is_active'])
    op.create_index('idx_check_items_section_order', 'check_items', ['section_id', 'sort_order', 'id'])

    op.create_table(
        'check_runs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='in_progress', comment="in_progress|submitted|reviewed"),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reviewed_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('review_note', sa.Text(), nullable=True),
        sa.CheckConstraint("status IN ('in_progress', 'submitted', 'reviewed')", name='check_run_status'),
    )
    op.create_index('ix_check_runs_employee_id', 'check_runs', ['employee_id'])
    op.create_index('ix_check_runs_section_id', 'check_runs', ['section_id'])
    op.create_index('ix_check_runs_status', 'check_runs', ['status'])
    op.create_index('ix_check_runs_started_at', 'check_runs', ['started_at'])
    op.create_index('ix_check_runs_reviewed_by', 'check_runs', ['reviewed_by'])
    op.create_index(
        'idx_check_runs_owner_section', 'check_runs',
        ['employee_id', 'section_id', 'status', 'started_at'],
    )

    op.create_table(
        'check_entries',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('run_id', sa.Integer(), sa.ForeignKey('check_runs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('check_items.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('result', sa.String(10), nullable=False, comment="pass|fail|na"),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('photo_url', sa.String(1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), comment="Touched on every upsert"),
        sa.UniqueConstraint('run_id', 'item_id', name='unique_run_item'),
        sa.CheckConstraint("result IN ('pass', 'fail', 'na')", name='check_entry_result'),
    )
    op.create_index('ix_check_entries_run_id', 'check_entries', ['run_id'])
    op.create_index('ix_check_entries_item_id', 'check_entries', ['item_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('check_entries')
    op.drop_table('check_runs')
    op.drop_table('check_items')
    op.drop_table('sections')
    op.drop_table('users')
