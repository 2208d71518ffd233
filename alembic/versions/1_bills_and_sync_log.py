"""Alembic migration: Create bills and sync_log tables."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1_bills_and_sync_log'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


BILL_STATUSES = (
    'Introduced',
    'Committee Review',
    'Passed House',
    'Passed Senate',
    'Enacted',
    'Vetoed',
    'Failed',
)
BILL_SOURCES = (
    'national-legislative',
    'bill-tracker',
    'state-legislative',
    'user-submission',
)
SYNC_STATUSES = ('in_progress', 'completed', 'failed')


def _in_clause(column: str, values) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


def upgrade() -> None:
    """Create bills and sync_log with their constraints and indexes."""
    from sqlalchemy import inspect

    conn = op.get_bind()
    inspector = inspect(conn)
    existing_tables = inspector.get_table_names()

    if 'bills' not in existing_tables:
        op.create_table(
            'bills',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('external_id', sa.String(255), nullable=False),
            sa.Column('source', sa.String(50), nullable=False),
            sa.Column('bill_number', sa.String(100), nullable=False),
            sa.Column('title', sa.Text(), nullable=False),
            sa.Column('short_description', sa.Text(), nullable=False, server_default=''),
            sa.Column('full_text', sa.Text(), nullable=False, server_default=''),
            sa.Column('status', sa.String(50), nullable=False, server_default='Introduced'),
            sa.Column('introduced_date', sa.Date(), nullable=False),
            sa.Column('category', sa.String(100), nullable=False, server_default='Other'),
            sa.Column('sponsor', sa.String(255), nullable=True),
            sa.Column('official_url', sa.Text(), nullable=True),
            sa.Column('cosponsors', sa.JSON(), nullable=True),
            sa.Column('committees', sa.JSON(), nullable=True),
            sa.Column('impact_data', sa.JSON(), nullable=True),
            sa.Column('stages', sa.JSON(), nullable=True),
            sa.Column('arguments', sa.JSON(), nullable=True),
            sa.Column('last_synced', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('external_id', name='uq_bill_external_id'),
            sa.CheckConstraint(_in_clause('status', BILL_STATUSES), name='ck_bill_status_vocabulary'),
            sa.CheckConstraint(_in_clause('source', BILL_SOURCES), name='ck_bill_source_vocabulary'),
        )

        op.create_index('ix_bills_source', 'bills', ['source'])
        op.create_index('ix_bills_bill_number', 'bills', ['bill_number'])
        op.create_index('ix_bills_status', 'bills', ['status'])
        op.create_index('ix_bills_introduced_date', 'bills', ['introduced_date'])
        op.create_index('ix_bills_category', 'bills', ['category'])
        op.create_index('ix_bills_last_synced', 'bills', ['last_synced'])
        op.create_index('idx_bill_status_introduced', 'bills', ['status', 'introduced_date'])
        op.create_index('idx_bill_source_synced', 'bills', ['source', 'last_synced'])

    if 'sync_log' not in existing_tables:
        op.create_table(
            'sync_log',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('source', sa.String(100), nullable=False),
            sa.Column('status', sa.String(20), nullable=False, server_default='in_progress'),
            sa.Column('started_at', sa.DateTime(), nullable=False),
            sa.Column('completed_at', sa.DateTime(), nullable=True),
            sa.Column('bills_synced', sa.Integer(), nullable=True),
            sa.Column('error_message', sa.Text(), nullable=True),
            sa.Column('failed_records', sa.JSON(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.CheckConstraint(_in_clause('status', SYNC_STATUSES), name='ck_sync_log_status'),
        )

        op.create_index('ix_sync_log_source', 'sync_log', ['source'])
        op.create_index('ix_sync_log_status', 'sync_log', ['status'])
        op.create_index('idx_sync_log_source_started', 'sync_log', ['source', 'started_at'])
        op.create_index('idx_sync_log_status_started', 'sync_log', ['status', 'started_at'])


def downgrade() -> None:
    """Drop sync_log and bills."""
    op.drop_table('sync_log', if_exists=True)
    op.drop_table('bills', if_exists=True)
