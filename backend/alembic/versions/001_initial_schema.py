"""Initial leasing schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Creates:
- properties, rooms
- occupants
- contracts
- payments, documents (no ON DELETE CASCADE on contract_id)
"""

from alembic import op
import sqlalchemy as sa

revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

USAGE_TYPES = ('SINGLE_UNIT', 'COLOCATION', 'COLOCATION_INDIVIDUAL', 'COLOCATION_SOLIDAIRE', 'SHORT_TERM')
PROPERTY_STATUSES = ('VACANT', 'RESERVED', 'ACTIVE')
ROOM_STATUSES = ('VACANT', 'RESERVED', 'ON_HOLD', 'OCCUPIED')
CONTRACT_STATUSES = ('DRAFT', 'SIGNED', 'ACTIVE', 'EXPIRED', 'TERMINATED')
OCCUPANT_STATUSES = ('ACTIVE', 'INACTIVE')
PAYMENT_STATUSES = ('PENDING', 'COMPLETED', 'LATE')
DOCUMENT_TYPES = ('LEASE', 'INVENTORY', 'IDENTITY', 'INSURANCE', 'OTHER')


def upgrade() -> None:
    op.create_table(
        'properties',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('usage_type', sa.Enum(*USAGE_TYPES, name='propertyusagetype'), nullable=False),
        sa.Column('status', sa.Enum(*PROPERTY_STATUSES, name='propertystatus'), nullable=False),
        sa.Column('total_rooms', sa.Integer(), nullable=True),
        sa.Column('occupied_rooms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reserved_rooms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_properties_status', 'properties', ['status'])

    op.create_table(
        'rooms',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('rent', sa.Numeric(10, 2), nullable=True),
        sa.Column('status', sa.Enum(*ROOM_STATUSES, name='roomstatus'), nullable=False),
        sa.Column('on_hold_until', sa.DateTime(), nullable=True),
        sa.Column('current_contract_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_rooms_property_id', 'rooms', ['property_id'])
    op.create_index('ix_rooms_status', 'rooms', ['status'])

    op.create_table(
        'occupants',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('status', sa.Enum(*OCCUPANT_STATUSES, name='occupantstatus'), nullable=False),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_occupants_property_id', 'occupants', ['property_id'])

    op.create_table(
        'contracts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('occupant_id', sa.Uuid(), sa.ForeignKey('occupants.id'), nullable=False),
        sa.Column('room_id', sa.Uuid(), sa.ForeignKey('rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', sa.Enum(*CONTRACT_STATUSES, name='contractstatus'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('signed_date', sa.DateTime(), nullable=True),
        sa.Column('rent', sa.Numeric(10, 2), nullable=False),
        sa.Column('charges', sa.Numeric(10, 2), nullable=True),
        sa.Column('deposit', sa.Numeric(10, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('start_date < end_date', name='ck_contract_dates'),
        sa.CheckConstraint('rent > 0', name='ck_contract_rent_positive'),
    )
    op.create_index('ix_contracts_property_id', 'contracts', ['property_id'])
    op.create_index('ix_contracts_occupant_id', 'contracts', ['occupant_id'])
    op.create_index('ix_contracts_status', 'contracts', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('contract_id', sa.Uuid(), sa.ForeignKey('contracts.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('status', sa.Enum(*PAYMENT_STATUSES, name='paymentstatus'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_payments_contract_id', 'payments', ['contract_id'])

    op.create_table(
        'documents',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('contract_id', sa.Uuid(), sa.ForeignKey('contracts.id'), nullable=False),
        sa.Column('type', sa.Enum(*DOCUMENT_TYPES, name='documenttype'), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_documents_contract_id', 'documents', ['contract_id'])


def downgrade() -> None:
    op.drop_table('documents')
    op.drop_table('payments')
    op.drop_table('contracts')
    op.drop_table('occupants')
    op.drop_table('rooms')
    op.drop_table('properties')

    if op.get_bind().dialect.name != 'postgresql':
        return

    for enum_name in (
        'documenttype', 'paymentstatus', 'contractstatus',
        'occupantstatus', 'roomstatus', 'propertystatus', 'propertyusagetype',
    ):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
