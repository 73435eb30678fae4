"""Create document_audit_log table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade():
    """Create append-only audit trail for document lifecycle events."""

    # No foreign key to document: entries outlive deleted documents
    op.create_table(
        'document_audit_log',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('document_id', sa.Text(), nullable=False),
        sa.Column('actor_id', sa.Text(), nullable=True),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('metadata_json', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('request_id', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_index('ix_document_audit_log_document_id', 'document_audit_log', ['document_id'])
    op.create_index('ix_document_audit_log_created_at', 'document_audit_log', ['created_at'])


def downgrade():
    """Drop document_audit_log table."""

    op.drop_index('ix_document_audit_log_created_at', table_name='document_audit_log')
    op.drop_index('ix_document_audit_log_document_id', table_name='document_audit_log')
    op.drop_table('document_audit_log')
