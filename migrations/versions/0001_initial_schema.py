"""initial schema: apartments, tenants, keys, users

Revision ID: 0001_initial_schema
Revises: 
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('apartments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('street', sa.String(length=255), nullable=False),
        sa.Column('number', sa.String(length=32), nullable=False),
        sa.Column('apartment_number', sa.String(length=32), nullable=False),
        sa.Column('floor', sa.String(length=32), nullable=False),
        sa.Column('postal_code', sa.String(length=20), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_apartments_tenant_id', 'apartments', ['tenant_id'])
    op.create_table('tenants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone_number', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('personal_number', sa.String(length=50), nullable=False),
        sa.Column('move_in_date', sa.String(length=32), nullable=True),
        sa.Column('resiliation_date', sa.String(length=32), nullable=True),
        sa.Column('apartment_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['apartment_id'], ['apartments.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tenants_apartment_id', 'tenants', ['apartment_id'])
    op.create_table('keys',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=64), nullable=False),
        sa.Column('number', sa.String(length=64), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('apartment_id', sa.Integer(), nullable=True),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['apartment_id'], ['apartments.id']),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_keys_apartment_id', 'keys', ['apartment_id'])
    op.create_index('ix_keys_tenant_id', 'keys', ['tenant_id'])
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

def downgrade():
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_keys_tenant_id', table_name='keys')
    op.drop_index('ix_keys_apartment_id', table_name='keys')
    op.drop_table('keys')
    op.drop_index('ix_tenants_apartment_id', table_name='tenants')
    op.drop_table('tenants')
    op.drop_index('ix_apartments_tenant_id', table_name='apartments')
    op.drop_table('apartments')
