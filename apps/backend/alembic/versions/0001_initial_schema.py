"""
Initial schema: categories, vehicles, personnel, transactions

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 10:00:00
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'transactioncategory',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('name', name='uq_transactioncategory_name'),
    )

    op.create_table(
        'vehicle',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('plate', sa.String(length=20), nullable=False),
        sa.Column('brand', sa.String(length=60), nullable=True),
        sa.Column('model', sa.String(length=60), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('customer_name', sa.String(length=120), nullable=True),
        sa.Column('customer_phone', sa.String(length=32), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('plate', name='uq_vehicle_plate'),
    )

    op.create_table(
        'personnel',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('full_name', sa.String(length=120), nullable=False),
        sa.Column('username', sa.String(length=60), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('role', sa.Enum('admin', 'employee', name='personnel_role'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('username', name='uq_personnel_username'),
    )

    op.create_table(
        'transaction',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('expense', sa.Numeric(18, 2), nullable=True),
        sa.Column('is_expense', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('transaction_date', sa.DateTime(), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('transactioncategory.id', ondelete='SET NULL'), nullable=True),
        sa.Column('vehicle_id', sa.Integer(), sa.ForeignKey('vehicle.id', ondelete='SET NULL'), nullable=True),
        sa.Column('personnel_id', sa.Integer(), sa.ForeignKey('personnel.id', ondelete='SET NULL'), nullable=True),
        sa.Column('payment_method', sa.Enum('cash', 'card', 'transfer', 'other', name='payment_method'), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'completed', 'cancelled', name='txn_status'),
            nullable=False,
            server_default='completed',
        ),
        *_timestamps(),
    )
    op.create_index('ix_transaction_date_status', 'transaction', ['transaction_date', 'status'])
    op.create_index('ix_transaction_category', 'transaction', ['category_id'])


def downgrade() -> None:
    op.drop_index('ix_transaction_category', table_name='transaction')
    op.drop_index('ix_transaction_date_status', table_name='transaction')
    op.drop_table('transaction')
    op.drop_table('personnel')
    op.drop_table('vehicle')
    op.drop_table('transactioncategory')
