"""add Dropbox Sign signature fields to documents

Revision ID: b7e2d9c4a1f6
Revises: a1f0c2d3e4b5
Create Date: 2025-12-09

Stores the signature request a document was sent with and its mirrored
status: pending, partially_signed, completed, declined, cancelled, expired, error.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision = 'b7e2d9c4a1f6'
down_revision = 'a1f0c2d3e4b5'
branch_labels = None
depends_on = None


def upgrade():
    conn = op.get_bind()
    inspector = inspect(conn)
    columns = [c['name'] for c in inspector.get_columns('documents')]

    if 'signature_request_id' not in columns:
        op.add_column('documents', sa.Column('signature_request_id', sa.String(length=64), nullable=True))
        op.create_index('idx_documents_signature_request_id', 'documents', ['signature_request_id'])

    if 'signature_status' not in columns:
        op.add_column('documents', sa.Column('signature_status', sa.String(length=20), nullable=True))


def downgrade():
    op.drop_index('idx_documents_signature_request_id', table_name='documents')
    op.drop_column('documents', 'signature_status')
    op.drop_column('documents', 'signature_request_id')
