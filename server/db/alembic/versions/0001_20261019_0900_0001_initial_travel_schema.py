"""Initial travel schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade database schema."""
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=150), nullable=True),
        sa.Column('last_name', sa.String(length=150), nullable=True),
        sa.Column('verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(username) > 0', name='ck_user_username_not_empty'),
        sa.CheckConstraint('length(email) > 0', name='ck_user_email_not_empty'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)

    # Create superadmins table
    op.create_table('superadmins',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )
    op.create_index(op.f('ix_superadmins_user_id'), 'superadmins', ['user_id'], unique=False)

    # Create agencies table
    op.create_table('agencies',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_agencies_name'), 'agencies', ['name'], unique=False)

    # Create vehicles table
    op.create_table('vehicles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('vehicle_type', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    # Create stations table; the back-link to travels is added once travels exists
    op.create_table('stations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('from', sa.String(length=255), nullable=True),
        sa.Column('to', sa.String(length=255), nullable=True),
        sa.Column('travel_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_stations_from'), 'stations', ['from'], unique=False)
    op.create_index(op.f('ix_stations_to'), 'stations', ['to'], unique=False)
    op.create_index(op.f('ix_stations_travel_id'), 'stations', ['travel_id'], unique=False)

    # Create travels table
    op.create_table('travels',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('dates', sa.String(length=100), nullable=True),
        sa.Column('agency_id', sa.Integer(), nullable=False),
        sa.Column('station_id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('duration > 0', name='ck_travel_duration_positive'),
        sa.CheckConstraint('price >= 0', name='ck_travel_price_non_negative'),
        sa.ForeignKeyConstraint(['agency_id'], ['agencies.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_travels_date'), 'travels', ['date'], unique=False)
    op.create_index(op.f('ix_travels_agency_id'), 'travels', ['agency_id'], unique=False)
    op.create_index(op.f('ix_travels_station_id'), 'travels', ['station_id'], unique=False)
    op.create_index(op.f('ix_travels_vehicle_id'), 'travels', ['vehicle_id'], unique=False)

    op.create_foreign_key(
        'fk_stations_travel_id', 'stations', 'travels', ['travel_id'], ['id'], ondelete='SET NULL'
    )

    # Create flights table
    op.create_table('flights',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('from', sa.String(length=255), nullable=False),
        sa.Column('to', sa.String(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('departure_time', sa.Time(), nullable=False),
        sa.Column('arrival_time', sa.Time(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('price >= 0', name='ck_flight_price_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_flights_from'), 'flights', ['from'], unique=False)
    op.create_index(op.f('ix_flights_to'), 'flights', ['to'], unique=False)

    # Create resorts table
    op.create_table('resorts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('price >= 0', name='ck_resort_price_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_resorts_address'), 'resorts', ['address'], unique=False)

    # Create passengers table
    op.create_table('passengers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('travel_id', sa.Integer(), nullable=False),
        sa.Column('passengers_no', sa.Integer(), nullable=False),
        sa.Column('flight_id', sa.Integer(), nullable=True),
        sa.Column('resort_id', sa.Integer(), nullable=True),
        sa.Column('vehicle_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('passengers_no > 0', name='ck_passenger_count_positive'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['travel_id'], ['travels.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['flight_id'], ['flights.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['resort_id'], ['resorts.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_passengers_user_id'), 'passengers', ['user_id'], unique=False)
    op.create_index(op.f('ix_passengers_travel_id'), 'passengers', ['travel_id'], unique=False)

    # Create discounts table
    op.create_table('discounts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('discount_type', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(code) > 0', name='ck_discount_code_not_empty'),
        sa.CheckConstraint('amount IS NULL OR amount > 0', name='ck_discount_amount_positive'),
        sa.CheckConstraint("discount_type IN ('percentage', 'fixed')", name='ck_discount_type_valid'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )
    op.create_index(op.f('ix_discounts_code'), 'discounts', ['code'], unique=False)

    # Create orders table
    op.create_table('orders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('total_price', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('passenger_id', sa.Integer(), nullable=False),
        sa.Column('discount_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('total_price >= 0', name='ck_order_total_non_negative'),
        sa.ForeignKeyConstraint(['passenger_id'], ['passengers.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['discount_id'], ['discounts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_orders_status'), 'orders', ['status'], unique=False)
    op.create_index(op.f('ix_orders_passenger_id'), 'orders', ['passenger_id'], unique=False)

    # Create billings table
    op.create_table('billings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('amount_paid', sa.BigInteger(), nullable=False),
        sa.Column('is_paid', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('amount_paid >= 0', name='ck_billing_amount_non_negative'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id')
    )
    op.create_index(op.f('ix_billings_order_id'), 'billings', ['order_id'], unique=False)
    op.create_index(op.f('ix_billings_user_id'), 'billings', ['user_id'], unique=False)
    op.create_index(op.f('ix_billings_created_at'), 'billings', ['created_at'], unique=False)

    # Create trip_drafts table
    op.create_table('trip_drafts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('travel_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('current_step', sa.String(length=30), nullable=False),
        sa.Column('travelers', sa.Integer(), nullable=False),
        sa.Column('origin', sa.String(length=255), nullable=False),
        sa.Column('destination', sa.String(length=255), nullable=False),
        sa.Column('is_international', sa.Boolean(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('selections', sa.JSON(), nullable=False),
        sa.Column('itinerary', sa.JSON(), nullable=True),
        sa.Column('outbound_flight_id', sa.Integer(), nullable=True),
        sa.Column('return_flight_id', sa.Integer(), nullable=True),
        sa.Column('resort_id', sa.Integer(), nullable=True),
        sa.Column('local_vehicle_id', sa.Integer(), nullable=True),
        sa.Column('discount_id', sa.Integer(), nullable=True),
        sa.Column('order_id', sa.Integer(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('travelers >= 1', name='ck_trip_travelers_min'),
        sa.CheckConstraint('travelers <= 10', name='ck_trip_travelers_max'),
        sa.CheckConstraint('end_date >= start_date', name='ck_trip_date_range'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['travel_id'], ['travels.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['outbound_flight_id'], ['flights.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['return_flight_id'], ['flights.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['resort_id'], ['resorts.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['local_vehicle_id'], ['vehicles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['discount_id'], ['discounts.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_trip_drafts_user_id'), 'trip_drafts', ['user_id'], unique=False)
    op.create_index(op.f('ix_trip_drafts_travel_id'), 'trip_drafts', ['travel_id'], unique=False)
    op.create_index(op.f('ix_trip_drafts_status'), 'trip_drafts', ['status'], unique=False)
    op.create_index(op.f('ix_trip_drafts_expires_at'), 'trip_drafts', ['expires_at'], unique=False)

    # Create idempotency_records table
    op.create_table('idempotency_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('idempotency_key', sa.String(length=255), nullable=False),
        sa.Column('method', sa.String(length=100), nullable=False),
        sa.Column('request_body_hash', sa.String(length=64), nullable=False),
        sa.Column('response_status_code', sa.Integer(), nullable=False),
        sa.Column('response_body', sa.Text(), nullable=False),
        sa.Column('response_headers', sa.Text(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(idempotency_key) > 0', name='ck_idempotency_key_not_empty'),
        sa.CheckConstraint('length(method) > 0', name='ck_idempotency_method_not_empty'),
        sa.CheckConstraint('length(request_body_hash) = 64', name='ck_idempotency_hash_length'),
        sa.CheckConstraint('response_status_code >= 100', name='ck_idempotency_status_code_valid'),
        sa.CheckConstraint('response_status_code <= 599', name='ck_idempotency_status_code_max'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('idempotency_key', 'method', name='uq_idempotency_key_method')
    )
    op.create_index(op.f('ix_idempotency_records_idempotency_key'), 'idempotency_records', ['idempotency_key'], unique=False)
    op.create_index(op.f('ix_idempotency_records_method'), 'idempotency_records', ['method'], unique=False)
    op.create_index(op.f('ix_idempotency_records_expires_at'), 'idempotency_records', ['expires_at'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('idempotency_records')
    op.drop_table('trip_drafts')
    op.drop_table('billings')
    op.drop_table('orders')
    op.drop_table('discounts')
    op.drop_table('passengers')
    op.drop_table('resorts')
    op.drop_table('flights')
    op.drop_constraint('fk_stations_travel_id', 'stations', type_='foreignkey')
    op.drop_table('travels')
    op.drop_table('stations')
    op.drop_table('vehicles')
    op.drop_table('agencies')
    op.drop_table('superadmins')
    op.drop_table('users')
