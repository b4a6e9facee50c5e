"""initial_schema

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-18 09:12:44.183205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = sa.Enum('user', 'customer', 'staff', 'manager', 'admin', name='userrole')
cuisine_type = sa.Enum(
    'italian', 'chinese', 'indian', 'mexican', 'american', 'fast_food', 'cafe', 'other',
    name='cuisinetype',
)
day_of_week = sa.Enum(
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
    name='dayofweek',
)
token_type = sa.Enum('email_verification', 'password_reset', name='verificationtokentype')
staff_role = sa.Enum('staff', 'manager', name='staffrole')
invitation_status = sa.Enum(
    'pending', 'accepted', 'cancelled', 'expired', 'removed', name='invitationstatus'
)
order_status = sa.Enum(
    'pending', 'confirmed', 'preparing', 'ready', 'served', 'cancelled', name='orderstatus'
)
payment_status = sa.Enum('pending', 'paid', 'failed', 'refunded', name='paymentstatus')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create users, restaurants, staff invitations and the ordering schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('email', sa.String(180), nullable=False, unique=True, index=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone_number', sa.String(20), nullable=True),
        sa.Column('password_hash', sa.String(512), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'restaurants',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=True, unique=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('phone_number', sa.String(20), nullable=True),
        sa.Column('email', sa.String(180), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('logo_url', sa.String(500), nullable=True),
        sa.Column('cover_image_url', sa.String(500), nullable=True),
        sa.Column('cuisine_type', cuisine_type, nullable=True),
        sa.Column('service_types', sa.JSON(), nullable=True),
        sa.Column('primary_color', sa.String(7), nullable=True),
        sa.Column('secondary_color', sa.String(7), nullable=True),
        sa.Column('special_instructions', sa.Text(), nullable=True),
        sa.Column('accepts_reservations', sa.Boolean(), nullable=True),
        sa.Column('has_delivery', sa.Boolean(), nullable=True),
        sa.Column('has_takeout', sa.Boolean(), nullable=True),
        sa.Column('minimum_order_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('delivery_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('estimated_delivery_time', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True, index=True),
        *_timestamps(),
    )

    op.create_table(
        'business_hours',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False, index=True),
        sa.Column('day_of_week', day_of_week, nullable=False),
        sa.Column('open_time', sa.Time(), nullable=True),
        sa.Column('close_time', sa.Time(), nullable=True),
        sa.Column('is_open', sa.Boolean(), nullable=False),
        sa.Column('is_24_hours', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('restaurant_id', 'day_of_week', name='unique_restaurant_day'),
    )

    op.create_table(
        'verification_tokens',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('token', sa.String(64), nullable=False, unique=True, index=True),
        sa.Column('type', token_type, nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'staff_invitations',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False, index=True),
        sa.Column('invited_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('email', sa.String(180), nullable=False, index=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('role', staff_role, nullable=False),
        sa.Column('token', sa.String(64), nullable=False, unique=True, index=True),
        sa.Column('status', invitation_status, nullable=False, index=True),
        sa.Column('message', sa.String(500), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False, index=True),
        sa.Column('accepted_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('removed_at', sa.DateTime(), nullable=True),
        sa.Column('removed_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        # MySQL has no partial indexes, so uniqueness of pending rows is enforced
        # on a stored generated column that is NULL once the row leaves pending
        sa.Column(
            'pending_email',
            sa.String(180),
            sa.Computed("CASE WHEN status = 'pending' THEN email END", persisted=True),
            nullable=True,
        ),
        *_timestamps(),
        sa.UniqueConstraint('restaurant_id', 'pending_email', name='uq_staff_invitations_pending_email'),
    )

    op.create_table(
        'staff_members',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False, index=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('invitation_id', sa.Integer(), sa.ForeignKey('staff_invitations.id'), nullable=True),
        sa.Column('role', staff_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('restaurant_id', 'user_id', name='unique_restaurant_user'),
    )

    op.create_table(
        'restaurant_tables',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False, index=True),
        sa.Column('table_number', sa.String(50), nullable=False),
        sa.Column('qr_code', sa.String(255), nullable=True, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('restaurant_id', 'table_number', name='unique_restaurant_table'),
    )

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'menu_items',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False, index=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('order_number', sa.String(100), nullable=False, unique=True),
        sa.Column('status', order_status, nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False, index=True),
        sa.Column('table_id', sa.Integer(), sa.ForeignKey('restaurant_tables.id'), nullable=True),
        sa.Column('payment_status', payment_status, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=False, index=True),
        sa.Column('menu_item_id', sa.Integer(), sa.ForeignKey('menu_items.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('menu_items')
    op.drop_table('categories')
    op.drop_table('restaurant_tables')
    op.drop_table('staff_members')
    op.drop_table('staff_invitations')
    op.drop_table('verification_tokens')
    op.drop_table('business_hours')
    op.drop_table('restaurants')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (
        payment_status, order_status, invitation_status, staff_role,
        token_type, day_of_week, cuisine_type, user_role,
    ):
        enum_type.drop(bind, checkfirst=True)
