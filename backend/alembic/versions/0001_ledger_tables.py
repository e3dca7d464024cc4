"""create_ledger_tables

Revision ID: 0001_ledger_tables
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '0001_ledger_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

REQUEST_STATUS = ('submitted', 'in_negotiation', 'accepted', 'rejected')
QUOTE_STATUS = ('pending', 'countered', 'accepted', 'rejected')
BILL_STATUS = ('unpaid', 'paid', 'disputed')
SENDER_TYPE = ('client', 'anna')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('credit_card_token', sa.String(64), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_clients_id', 'clients', ['id'])
    op.create_index('ix_clients_email', 'clients', ['email'], unique=True)

    op.create_table(
        'service_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('service_address', sa.String(255), nullable=False),
        sa.Column('cleaning_type', sa.String(50), nullable=False),
        sa.Column('num_rooms', sa.Integer(), nullable=False),
        sa.Column('preferred_datetime', sa.DateTime(), nullable=False),
        sa.Column('proposed_budget', sa.Numeric(10, 2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum(*REQUEST_STATUS, name='requeststatus'), nullable=False, server_default='submitted'),
        *_timestamps(),
    )
    op.create_index('ix_service_requests_id', 'service_requests', ['id'])
    op.create_index('ix_service_requests_client_id', 'service_requests', ['client_id'])
    op.create_index('ix_service_requests_preferred_datetime', 'service_requests', ['preferred_datetime'])
    op.create_index('ix_service_requests_status', 'service_requests', ['status'])

    op.create_table(
        'request_photos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('service_requests.id'), nullable=False),
        sa.Column('file_path', sa.String(255), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_request_photos_id', 'request_photos', ['id'])
    op.create_index('ix_request_photos_request_id', 'request_photos', ['request_id'])

    op.create_table(
        'quotes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('service_requests.id'), nullable=False),
        sa.Column('adjusted_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('scheduled_time_window', sa.String(100), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum(*QUOTE_STATUS, name='quotestatus'), nullable=False, server_default='pending'),
        *_timestamps(),
    )
    op.create_index('ix_quotes_id', 'quotes', ['id'])
    op.create_index('ix_quotes_request_status', 'quotes', ['request_id', 'status'])

    op.create_table(
        'negotiation_messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('service_requests.id'), nullable=False),
        sa.Column('sender', sa.Enum(*SENDER_TYPE, name='sendertype'), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_negotiation_messages_id', 'negotiation_messages', ['id'])
    op.create_index('ix_negotiation_messages_request_time', 'negotiation_messages', ['request_id', 'timestamp'])

    op.create_table(
        'service_orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('service_requests.id'), nullable=False),
        sa.Column('quote_id', sa.Integer(), sa.ForeignKey('quotes.id'), nullable=False, unique=True),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('scheduled_time_window', sa.String(100), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_service_orders_id', 'service_orders', ['id'])
    op.create_index('ix_service_orders_request_id', 'service_orders', ['request_id'])
    op.create_index('ix_service_orders_client_id', 'service_orders', ['client_id'])

    op.create_table(
        'bills',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('service_orders.id'), nullable=False, unique=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', sa.Enum(*BILL_STATUS, name='billstatus'), nullable=False, server_default='unpaid'),
        sa.Column('generated_at', sa.DateTime(), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_bills_id', 'bills', ['id'])
    op.create_index('ix_bills_status', 'bills', ['status'])
    op.create_index('ix_bills_generated_at', 'bills', ['generated_at'])

    # sendertype already exists on PostgreSQL once negotiation_messages is created
    op.create_table(
        'bill_responses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('bill_id', sa.Integer(), sa.ForeignKey('bills.id'), nullable=False),
        sa.Column('sender', postgresql.ENUM(*SENDER_TYPE, name='sendertype', create_type=False), nullable=False),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_bill_responses_id', 'bill_responses', ['id'])
    op.create_index('ix_bill_responses_bill_id', 'bill_responses', ['bill_id'])


def downgrade() -> None:
    op.drop_table('bill_responses')
    op.drop_table('bills')
    op.drop_table('service_orders')
    op.drop_table('negotiation_messages')
    op.drop_table('quotes')
    op.drop_table('request_photos')
    op.drop_table('service_requests')
    op.drop_table('clients')
    for enum_name in ('billstatus', 'sendertype', 'quotestatus', 'requeststatus'):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
