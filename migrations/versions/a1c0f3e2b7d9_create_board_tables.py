"""create board tables

Revision ID: a1c0f3e2b7d9
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


revision = 'a1c0f3e2b7d9'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('name', sa.String, nullable=False),
        sa.Column('sort_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'columns',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('project_id', sa.Integer, sa.ForeignKey('projects.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('name', sa.String, nullable=False),
        sa.Column('sort_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('project_id', sa.Integer, sa.ForeignKey('projects.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('column_id', sa.Integer, sa.ForeignKey('columns.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('title', sa.String, nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('priority', sa.String, nullable=True),
        sa.Column('source_tag', sa.String, nullable=True),
        sa.Column('sort_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'subtasks',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('task_id', sa.Integer, sa.ForeignKey('tasks.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('title', sa.String, nullable=False),
        sa.Column('done', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('name', sa.String(50), nullable=False, unique=True),
        sa.Column('color', sa.String(7), nullable=False, server_default='#6b7280'),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'linked_paths',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('project_id', sa.Integer, sa.ForeignKey('projects.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('path', sa.String, nullable=False, unique=True),
        sa.Column('hostname', sa.String, nullable=True),
        sa.Column('default_column_id', sa.Integer, sa.ForeignKey('columns.id', ondelete='SET NULL'),
                  nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )


def downgrade():
    op.drop_table('linked_paths')
    op.drop_table('tags')
    op.drop_table('subtasks')
    op.drop_table('tasks')
    op.drop_table('columns')
    op.drop_table('projects')
