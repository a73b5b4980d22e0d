"""Create planning_items table

Revision ID: 0001_planning_items
Revises:
Create Date: 2025-06-02 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = '0001_planning_items'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'planning_items',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('assigned_resource_id', sa.String(length=64), nullable=False),
        sa.Column('project_id', sa.String(length=64), nullable=False),
        sa.Column('location', sa.String(length=512), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='scheduled'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('reminder_sent_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_planning_items_date', 'planning_items', ['date'])
    op.create_index('ix_planning_items_assigned_resource_id', 'planning_items', ['assigned_resource_id'])
    op.create_index('ix_planning_items_project_id', 'planning_items', ['project_id'])
    op.create_index('ix_planning_items_status', 'planning_items', ['status'])
    op.create_index('ix_planning_items_resource_date', 'planning_items', ['assigned_resource_id', 'date'])


def downgrade():
    op.drop_index('ix_planning_items_resource_date', table_name='planning_items')
    op.drop_index('ix_planning_items_status', table_name='planning_items')
    op.drop_index('ix_planning_items_project_id', table_name='planning_items')
    op.drop_index('ix_planning_items_assigned_resource_id', table_name='planning_items')
    op.drop_index('ix_planning_items_date', table_name='planning_items')
    op.drop_table('planning_items')
