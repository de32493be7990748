"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('customers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(length=120), nullable=False),
        sa.Column('last_name', sa.String(length=120), nullable=False),
    )
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.UniqueConstraint('username'),
        sa.CheckConstraint("role IN ('management', 'customer', 'pilot', 'technician')", name='ck_user_role'),
    )
    op.create_index('ix_users_username', 'users', ['username'])
    op.create_table('flight_instances',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('flight_number', sa.String(length=32), nullable=False),
        sa.Column('flight_date', sa.Date(), nullable=False),
        sa.Column('seats_total', sa.Integer(), nullable=False),
        sa.Column('seats_sold', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint('seats_total > 0', name='ck_seats_total_positive'),
        sa.CheckConstraint('seats_sold >= 0', name='ck_seats_sold_non_negative'),
        sa.CheckConstraint('seats_sold <= seats_total', name='ck_seats_sold_within_total'),
    )
    op.create_index('ix_flight_instances_flight_number', 'flight_instances', ['flight_number'])
    op.create_index('ix_flight_instances_flight_date', 'flight_instances', ['flight_date'])
    op.create_table('reservations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('reservation_id', sa.String(length=32), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('flight_instance_id', sa.Integer(), sa.ForeignKey('flight_instances.id'), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('reservation_id'),
        sa.UniqueConstraint('sequence'),
        sa.CheckConstraint("status IN ('CONFIRMED', 'WAITLISTED', 'CANCELLED')", name='ck_reservation_status'),
    )
    op.create_index('ix_reservations_reservation_id', 'reservations', ['reservation_id'])
    op.create_index('ix_reservations_customer_id', 'reservations', ['customer_id'])
    op.create_index('ix_reservations_flight_instance_id', 'reservations', ['flight_instance_id'])
    counters = op.create_table('reservation_counters',
        sa.Column('name', sa.String(length=32), primary_key=True),
        sa.Column('value', sa.Integer(), nullable=False, server_default='0'),
    )
    op.bulk_insert(counters, [{'name': 'reservation', 'value': 0}])

def downgrade():
    op.drop_table('reservation_counters')
    op.drop_index('ix_reservations_flight_instance_id', table_name='reservations')
    op.drop_index('ix_reservations_customer_id', table_name='reservations')
    op.drop_index('ix_reservations_reservation_id', table_name='reservations')
    op.drop_table('reservations')
    op.drop_index('ix_flight_instances_flight_date', table_name='flight_instances')
    op.drop_index('ix_flight_instances_flight_number', table_name='flight_instances')
    op.drop_table('flight_instances')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_table('customers')
