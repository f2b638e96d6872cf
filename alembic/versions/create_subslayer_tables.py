"""create users, subscriptions, profiles and notifications

Revision ID: create_subslayer_tables
Revises:
Create Date: 2025-07-08

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'create_subslayer_tables'
down_revision = None
branch_labels = None
depends_on = None

billing_cycle = sa.Enum('monthly', 'annual', name='billingcycle')
subscription_status = sa.Enum('active', 'paused', 'cancelled', name='subscriptionstatus')

def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String, nullable=False),
        sa.Column('hashed_password', sa.String, nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('is_superuser', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_verified', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('full_name', sa.String, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('cost', sa.Float, nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='USD'),
        sa.Column('billing_cycle', billing_cycle, nullable=False, server_default='monthly'),
        sa.Column('next_billing', sa.Date, nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('status', subscription_status, nullable=False, server_default='active'),
        sa.Column('color', sa.String(length=20), nullable=True, server_default='#8B5CF6'),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'])

    op.create_table(
        'profiles',
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('display_name', sa.String(length=150), nullable=False, server_default=''),
        sa.Column('bio', sa.String(length=500), nullable=False, server_default='Subscription management enthusiast'),
        sa.Column('location', sa.String(length=150), nullable=False, server_default=''),
        sa.Column('website', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('avatar', sa.Text, nullable=True),
        sa.Column('reminder_days', sa.Integer, nullable=False, server_default='7'),
        sa.Column('email_notifications', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String, nullable=False),
        sa.Column('message', sa.String, nullable=False),
        sa.Column('type', sa.String, nullable=False),
        sa.Column('status', sa.String, nullable=False),
        sa.Column('subscription_id', sa.Uuid(as_uuid=True), sa.ForeignKey('subscriptions.id', ondelete='SET NULL'), nullable=True),
        sa.Column('days_until', sa.Integer, nullable=True),
        sa.Column('is_read', sa.Boolean, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )

def downgrade():
    op.drop_table('notifications')
    op.drop_table('profiles')
    op.drop_index('ix_subscriptions_user_id', table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    subscription_status.drop(op.get_bind(), checkfirst=True)
    billing_cycle.drop(op.get_bind(), checkfirst=True)
