"""initial tillbook schema

Revision ID: t0001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates the complete schema:
- stores, locations: tenancy
- staff, session_tokens: sign-in and bearer sessions
- tenders, device_tender_assignments: payment methods and till button layouts
- customers, orders, order_items: online checkout
- tills: cash-drawer sessions (open_slot enforces one live till per staff/location)
- transactions, transaction_items: the unified sales ledger
- expenses
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 't0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade():
    # ============================================================================
    # Tenancy
    # ============================================================================
    op.create_table(
        'stores',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('currency_code', sa.String(length=3), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('store_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('store_id', 'name', name='uq_locations_store_name'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_locations_store_id', 'locations', ['store_id'])

    # ============================================================================
    # Staff and sessions
    # ============================================================================
    op.create_table(
        'staff',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('location_name', sa.String(length=128), nullable=True),
        sa.Column('account_name', sa.String(length=128), nullable=True),
        sa.Column('account_number', sa.String(length=32), nullable=True),
        sa.Column('bank_name', sa.String(length=128), nullable=True),
        sa.Column('salary_cents', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username', name='uq_staff_username'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_staff_location_id', 'staff', ['location_id'])
    op.create_index('ix_staff_is_active', 'staff', ['is_active'])

    op.create_table(
        'session_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_session_tokens_staff_id', 'session_tokens', ['staff_id'])
    op.create_index('ix_session_tokens_token_hash', 'session_tokens', ['token_hash'], unique=True)
    op.create_index('ix_session_tokens_expires_at', 'session_tokens', ['expires_at'])
    op.create_index('ix_session_tokens_staff_active', 'session_tokens', ['staff_id', 'is_revoked'])

    # ============================================================================
    # Tenders
    # ============================================================================
    op.create_table(
        'tenders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('button_color', sa.String(length=16), nullable=False),
        sa.Column('till_order', sa.Integer(), nullable=False),
        sa.Column('classification', sa.String(length=16), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_tenders_name'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_tenders_till_order', 'tenders', ['till_order'])

    op.create_table(
        'device_tender_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('device_id', sa.String(length=64), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('tender_rank', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('device_id', 'position', name='uq_device_tender_position'),
        sa.UniqueConstraint('device_id', 'tender_rank', name='uq_device_tender_rank'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_device_tender_assignments_device_id', 'device_tender_assignments', ['device_id'])

    # ============================================================================
    # Customers and online orders
    # ============================================================================
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=128), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_customers_email'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('shipping_name', sa.String(length=128), nullable=False),
        sa.Column('shipping_email', sa.String(length=255), nullable=False),
        sa.Column('shipping_phone', sa.String(length=32), nullable=False),
        sa.Column('shipping_address', sa.String(length=255), nullable=False),
        sa.Column('shipping_city', sa.String(length=128), nullable=False),
        sa.Column('subtotal_cents', sa.Integer(), nullable=False),
        sa.Column('shipping_cost_cents', sa.Integer(), nullable=False),
        sa.Column('total_cents', sa.Integer(), nullable=False),
        sa.Column('payment_reference', sa.String(length=128), nullable=True),
        sa.Column('payment_status', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('paid', sa.Boolean(), nullable=False),
        sa.Column('delivery_person', sa.String(length=128), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_orders_status_created', 'orders', ['status', 'created_at'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=128), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('images_text', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    # ============================================================================
    # Tills
    # ============================================================================
    op.create_table(
        'tills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('store_id', sa.Integer(), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('staff_name', sa.String(length=128), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('opening_balance_cents', sa.Integer(), nullable=False),
        sa.Column('closing_balance_cents', sa.Integer(), nullable=True),
        sa.Column('opened_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('closed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('device', sa.String(length=64), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('open_slot', sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id']),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('open_slot', name='uq_tills_open_slot'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_tills_store_location_status', 'tills', ['store_id', 'location_id', 'status'])
    op.create_index('ix_tills_staff_status', 'tills', ['staff_id', 'status'])
    op.create_index('ix_tills_opened_at', 'tills', ['opened_at'])

    # ============================================================================
    # Transaction ledger
    # ============================================================================
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('channel', sa.String(length=16), nullable=False),
        sa.Column('tender_type', sa.String(length=64), nullable=False),
        sa.Column('amount_paid_cents', sa.Integer(), nullable=False),
        sa.Column('total_cents', sa.Integer(), nullable=False),
        sa.Column('change_cents', sa.Integer(), nullable=False),
        sa.Column('discount_cents', sa.Integer(), nullable=False),
        sa.Column('discount_reason', sa.String(length=255), nullable=True),
        sa.Column('staff_id', sa.Integer(), nullable=True),
        sa.Column('staff_name', sa.String(length=128), nullable=True),
        sa.Column('till_id', sa.Integer(), nullable=True),
        sa.Column('location', sa.String(length=128), nullable=False),
        sa.Column('device', sa.String(length=64), nullable=True),
        sa.Column('table_name', sa.String(length=64), nullable=True),
        sa.Column('customer_name', sa.String(length=128), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('refund_reason', sa.String(length=255), nullable=True),
        sa.Column('refunded_by_staff_id', sa.Integer(), nullable=True),
        sa.Column('refunded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('source_order_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id']),
        sa.ForeignKeyConstraint(['refunded_by_staff_id'], ['staff.id']),
        sa.ForeignKeyConstraint(['till_id'], ['tills.id']),
        sa.ForeignKeyConstraint(['source_order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('source_order_id', name='uq_transactions_source_order'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_transactions_channel', 'transactions', ['channel'])
    op.create_index('ix_transactions_staff_id', 'transactions', ['staff_id'])
    op.create_index('ix_transactions_status_created', 'transactions', ['status', 'created_at'])
    op.create_index('ix_transactions_till_status', 'transactions', ['till_id', 'status'])

    op.create_table(
        'transaction_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('unit_price_cents', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['transaction_id'], ['transactions.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_transaction_items_transaction_id', 'transaction_items', ['transaction_id'])

    # ============================================================================
    # Expenses
    # ============================================================================
    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('amount_cents', sa.Integer(), nullable=False),
        sa.Column('category_name', sa.String(length=128), nullable=False),
        sa.Column('location_name', sa.String(length=128), nullable=True),
        sa.Column('expense_date', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by_staff_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by_staff_id'], ['staff.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_expenses_category_date', 'expenses', ['category_name', 'expense_date'])


def downgrade():
    op.drop_table('expenses')
    op.drop_table('transaction_items')
    op.drop_table('transactions')
    op.drop_table('tills')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('customers')
    op.drop_table('device_tender_assignments')
    op.drop_table('tenders')
    op.drop_table('session_tokens')
    op.drop_table('staff')
    op.drop_table('locations')
    op.drop_table('stores')
