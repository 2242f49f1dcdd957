"""create profiles and documents tables

Revision ID: a1f0c2d3e4b5
Revises:
Create Date: 2025-11-03

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision = 'a1f0c2d3e4b5'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    conn = op.get_bind()
    inspector = inspect(conn)
    tables = inspector.get_table_names()

    if 'profiles' not in tables:
        op.create_table(
            'profiles',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('full_name', sa.String(length=255), nullable=True),
            sa.Column('subscription_tier', sa.String(length=20), nullable=False, server_default='free'),
            sa.Column('documents_this_month', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('billing_cycle_start', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.CheckConstraint("subscription_tier IN ('free', 'basic', 'pro')", name='ck_profiles_subscription_tier'),
            sa.PrimaryKeyConstraint('id', name='pk_profiles')
        )

    if 'documents' not in tables:
        op.create_table(
            'documents',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('property_id', sa.String(length=36), nullable=True),
            sa.Column('tenant_id', sa.String(length=36), nullable=True),
            sa.Column('document_type', sa.String(length=30), nullable=False),
            sa.Column('title', sa.String(length=255), nullable=False),
            sa.Column('content', sa.Text(), nullable=False),
            sa.Column('form_data', sa.JSON(), nullable=True),
            sa.Column('state', sa.String(length=2), nullable=True, server_default='TX'),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.CheckConstraint(
                "document_type IN ('late_rent', 'lease_renewal', 'maintenance', 'move_in_out', "
                "'deposit_return', 'lease_agreement')",
                name='ck_documents_document_type'
            ),
            sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], name='fk_documents_user_id', ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id', name='pk_documents')
        )
        op.create_index('idx_documents_user_id', 'documents', ['user_id'])


def downgrade():
    op.drop_index('idx_documents_user_id', table_name='documents')
    op.drop_table('documents')
    op.drop_table('profiles')
