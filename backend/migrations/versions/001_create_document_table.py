"""Create document table

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create document table holding upload metadata and review state."""

    op.create_table(
        'document',
        sa.Column('document_id', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Text(), nullable=False),
        sa.Column('loan_id', sa.Text(), nullable=True),

        # Blob reference (relative to the blob store root / key prefix)
        sa.Column('storage_path', sa.Text(), nullable=False),

        # File metadata
        sa.Column('original_name', sa.Text(), nullable=False),
        sa.Column('mime_type', sa.Text(), nullable=False),
        sa.Column('size_bytes', sa.BigInteger(), nullable=False),

        # Descriptive fields supplied at upload
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('legacy_type', sa.Text(), nullable=False, server_default='general'),
        sa.Column('display_name', sa.Text(), nullable=False),
        sa.Column('purpose', sa.Text(), nullable=False),

        # Review state
        sa.Column('status', sa.String(16), nullable=False, server_default='pending'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.Text(), nullable=True),
        sa.Column('reviewed_at', sa.TIMESTAMP(timezone=True), nullable=True),

        # Timestamps
        sa.Column('uploaded_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),

        # Constraints
        sa.PrimaryKeyConstraint('document_id'),
        sa.UniqueConstraint('storage_path', name='uq_document_storage_path'),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='ck_document_status'
        ),
        sa.CheckConstraint('size_bytes > 0', name='ck_document_size_positive'),
    )

    op.create_index('ix_document_owner_id', 'document', ['owner_id'])
    op.create_index('ix_document_status', 'document', ['status'])
    op.create_index('ix_document_uploaded_at', 'document', ['uploaded_at'])
    op.create_index('ix_document_owner_status', 'document', ['owner_id', 'status'])
    op.create_index('ix_document_loan_id', 'document', ['loan_id'])


def downgrade():
    """Drop document table."""

    op.drop_index('ix_document_loan_id', table_name='document')
    op.drop_index('ix_document_owner_status', table_name='document')
    op.drop_index('ix_document_uploaded_at', table_name='document')
    op.drop_index('ix_document_status', table_name='document')
    op.drop_index('ix_document_owner_id', table_name='document')

    op.drop_table('document')
