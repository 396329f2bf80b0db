"""Initial schema

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Creates every table: users, properties, units, tenants, payments,
reminders, expenses, settings and activity_logs.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('admin', 'caretaker', name='user_role'), nullable=False),
        sa.Column('avatar', sa.String(length=500), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('otp', sa.String(length=10), nullable=True),
        sa.Column('otp_expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('caretaker_id', sa.Integer(), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['caretaker_id'], ['users.id'], name='fk_properties_caretaker_id'),
    )

    op.create_table(
        'units',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('unit_number', sa.String(length=50), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'status',
            sa.Enum('vacant', 'occupied', 'maintenance', name='unit_status'),
            nullable=False,
        ),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('size', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'],
            ['properties.id'],
            name='fk_units_property_id',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_units_user_id'),
    )
    op.create_index('ix_units_property_id', 'units', ['property_id'])
    op.create_index('ix_units_status', 'units', ['status'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column(
            'id_type',
            sa.Enum('national_id', 'passport', 'driving_license', name='tenant_id_type'),
            nullable=False,
        ),
        sa.Column('national_id', sa.String(length=100), nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.Enum('active', 'past', name='tenant_status'), nullable=False),
        sa.Column('lease_start', sa.Date(), nullable=True),
        sa.Column('lease_end', sa.Date(), nullable=True),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('deposit', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('next_payment_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['unit_id'],
            ['units.id'],
            name='fk_tenants_unit_id',
            ondelete='SET NULL',
        ),
    )
    op.create_index('ix_tenants_unit_id', 'tenants', ['unit_id'])
    op.create_index('ix_tenants_status', 'tenants', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('unit_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('deposit_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('date', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column(
            'method',
            sa.Enum('cash', 'bank', 'mobile_money', 'lipa_na_mpesa', name='payment_method'),
            nullable=True,
        ),
        sa.Column(
            'status',
            sa.Enum('pending', 'paid', 'partial', 'overdue', 'failed', name='payment_status'),
            nullable=False,
        ),
        sa.Column('month_covered', sa.String(length=20), nullable=True),
        sa.Column('type', sa.Enum('Rent', 'Deposit', 'Combined', name='payment_type'), nullable=False),
        sa.Column('reference', sa.String(length=100), nullable=True),
        sa.Column('checkout_request_id', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['tenant_id'],
            ['tenants.id'],
            name='fk_payments_tenant_id',
            ondelete='SET NULL',
        ),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_payments_unit_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_payments_user_id'),
    )
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])
    op.create_index('ix_payments_unit_id', 'payments', ['unit_id'])
    op.create_index('ix_payments_user_id', 'payments', ['user_id'])
    op.create_index('ix_payments_date', 'payments', ['date'])
    op.create_index('ix_payments_status', 'payments', ['status'])
    op.create_index('ix_payments_checkout_request_id', 'payments', ['checkout_request_id'])

    op.create_table(
        'reminders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column(
            'type',
            sa.Enum('rent_due', 'overdue', 'maintenance', 'inspection', name='reminder_type'),
            nullable=False,
        ),
        sa.Column('method', sa.Enum('email', 'sms', name='reminder_method'), nullable=False),
        sa.Column(
            'frequency',
            sa.Enum('immediate', '1day', '3days', '1week', name='reminder_frequency'),
            nullable=False,
        ),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('pending', 'sent', 'overdue', name='reminder_status'), nullable=False),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reminders_due_date', 'reminders', ['due_date'])
    op.create_index('ix_reminders_status', 'reminders', ['status'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('property_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_expenses_user_id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_expenses_property_id'),
    )
    op.create_index('ix_expenses_user_id', 'expenses', ['user_id'])
    op.create_index('ix_expenses_date', 'expenses', ['date'])

    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('org_name', sa.String(length=255), nullable=False),
        sa.Column('org_email', sa.String(length=255), nullable=False),
        sa.Column('org_phone', sa.String(length=50), nullable=False),
        sa.Column('org_address', sa.String(length=500), nullable=False),
        sa.Column('tax_id', sa.String(length=100), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        sa.Column('notifications', sa.JSON(), nullable=True),
        sa.Column('integrations', sa.JSON(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user', sa.String(length=200), nullable=True),
        sa.Column('action', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('timestamp', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_activity_logs_timestamp', 'activity_logs', ['timestamp'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_activity_logs_timestamp', table_name='activity_logs')
    op.drop_table('activity_logs')
    op.drop_table('settings')
    op.drop_index('ix_expenses_date', table_name='expenses')
    op.drop_index('ix_expenses_user_id', table_name='expenses')
    op.drop_table('expenses')
    op.drop_index('ix_reminders_status', table_name='reminders')
    op.drop_index('ix_reminders_due_date', table_name='reminders')
    op.drop_table('reminders')
    op.drop_index('ix_payments_checkout_request_id', table_name='payments')
    op.drop_index('ix_payments_status', table_name='payments')
    op.drop_index('ix_payments_date', table_name='payments')
    op.drop_index('ix_payments_user_id', table_name='payments')
    op.drop_index('ix_payments_unit_id', table_name='payments')
    op.drop_index('ix_payments_tenant_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_tenants_status', table_name='tenants')
    op.drop_index('ix_tenants_unit_id', table_name='tenants')
    op.drop_table('tenants')
    op.drop_index('ix_units_status', table_name='units')
    op.drop_index('ix_units_property_id', table_name='units')
    op.drop_table('units')
    op.drop_table('properties')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
