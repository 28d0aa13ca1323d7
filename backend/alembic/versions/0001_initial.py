"""initial schema

Revision ID: 0001_initial
Revises: 
Create Date: 2025-12-01
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.Column('photo', sa.String(length=1024), nullable=True),
        sa.Column('address', sa.String(length=512), nullable=True),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='user'),
        sa.Column('is_fraud', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('fraud_marked_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_table('tickets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('vendor_email', sa.String(length=255), nullable=False),
        sa.Column('vendor_name', sa.String(length=255), nullable=True),
        sa.Column('from_location', sa.String(length=128), nullable=False),
        sa.Column('to_location', sa.String(length=128), nullable=False),
        sa.Column('transport_type', sa.String(length=32), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('ticket_quantity', sa.Integer(), nullable=False),
        sa.Column('departure_date_time', sa.DateTime(), nullable=False),
        sa.Column('perks', sa.JSON(), nullable=False),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column('verification_status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('is_advertised', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_hidden', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_tickets_vendor_email', 'tickets', ['vendor_email'])
    op.create_index('ix_tickets_from_location', 'tickets', ['from_location'])
    op.create_index('ix_tickets_to_location', 'tickets', ['to_location'])
    op.create_index('ix_tickets_transport_type', 'tickets', ['transport_type'])
    op.create_index('ix_tickets_verification_status', 'tickets', ['verification_status'])
    op.create_table('bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ticket_id', sa.Integer(), sa.ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('ticket_title', sa.String(length=255), nullable=False),
        sa.Column('from_location', sa.String(length=128), nullable=False),
        sa.Column('to_location', sa.String(length=128), nullable=False),
        sa.Column('departure_date_time', sa.DateTime(), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=True),
        sa.Column('vendor_email', sa.String(length=255), nullable=False),
        sa.Column('booking_quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('accepted_at', sa.DateTime(), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
    )
    op.create_index('ix_bookings_ticket_id', 'bookings', ['ticket_id'])
    op.create_index('ix_bookings_user_email', 'bookings', ['user_email'])
    op.create_index('ix_bookings_vendor_email', 'bookings', ['vendor_email'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])
    op.create_table('payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('bookings.id', ondelete='SET NULL'), nullable=True),
        sa.Column('ticket_id', sa.Integer(), sa.ForeignKey('tickets.id', ondelete='SET NULL'), nullable=True),
        sa.Column('ticket_title', sa.String(length=255), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('vendor_email', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('booking_quantity', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.String(length=255), nullable=False),
        sa.Column('payment_date', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_payments_booking_id', 'payments', ['booking_id'])
    op.create_index('ix_payments_user_email', 'payments', ['user_email'])
    op.create_index('ix_payments_vendor_email', 'payments', ['vendor_email'])
    op.create_index('ix_payments_transaction_id', 'payments', ['transaction_id'], unique=True)

def downgrade():
    op.drop_table('payments')
    op.drop_table('bookings')
    op.drop_table('tickets')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
