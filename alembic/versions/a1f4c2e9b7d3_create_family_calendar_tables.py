"""create family calendar tables

Revision ID: a1f4c2e9b7d3
Revises:
Create Date: 2026-03-02 10:00:00.000000

Initial schema for the family calendar:

1. families - the household every other row belongs to
2. users - logins, each belonging to one family
3. family_members / family_calendars - people and shared iCal feeds
4. events - local events (the only editable source)
5. meal_plans - planned meals shown as pseudo-events
6. google_connections - OAuth tokens + target calendar for event mirroring

Ids are 36-character UUID strings so they can be embedded in the merged
calendar's source-namespaced event ids.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f4c2e9b7d3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _family_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE')


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'families',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('family_id', sa.String(length=36), nullable=False),

        # Credentials
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),

        # Profile
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),

        # Timestamps
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        _family_fk(),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_family_id'), 'users', ['family_id'], unique=False)

    op.create_table(
        'family_members',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('family_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('color', sa.String(length=16), nullable=False),
        sa.Column('ical_url', sa.Text(), nullable=True),
        sa.Column('hidden', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        _family_fk(),
    )
    op.create_index(op.f('ix_family_members_family_id'), 'family_members', ['family_id'], unique=False)

    op.create_table(
        'family_calendars',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('family_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('color', sa.String(length=16), nullable=False),
        sa.Column('ical_url', sa.Text(), nullable=False),
        sa.Column('hidden', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        _family_fk(),
    )
    op.create_index(op.f('ix_family_calendars_family_id'), 'family_calendars', ['family_id'], unique=False)

    op.create_table(
        'events',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('family_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),

        # Instants, stored as UTC
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),

        sa.Column('location', sa.Text(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('assignee_ids', sa.JSON(), nullable=False),

        # Rule string without "RRULE:" prefix; '' = not repeating
        sa.Column('recurrence', sa.Text(), nullable=False),

        # Id of the mirrored copy in Google Calendar
        sa.Column('google_event_id', sa.String(length=255), nullable=True),

        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        _family_fk(),
    )
    op.create_index(op.f('ix_events_family_id'), 'events', ['family_id'], unique=False)
    op.create_index(op.f('ix_events_start_time'), 'events', ['start_time'], unique=False)
    op.create_index(op.f('ix_events_end_time'), 'events', ['end_time'], unique=False)

    op.create_table(
        'meal_plans',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('family_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('meal_type', sa.String(length=20), nullable=False),
        sa.Column('food_name', sa.String(length=255), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('assignee_ids', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        _family_fk(),
    )
    op.create_index(op.f('ix_meal_plans_family_id'), 'meal_plans', ['family_id'], unique=False)
    op.create_index(op.f('ix_meal_plans_date'), 'meal_plans', ['date'], unique=False)

    op.create_table(
        'google_connections',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('family_id', sa.String(length=36), nullable=False),

        # Token data
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=False),
        sa.Column('token_expiry', sa.DateTime(timezone=True), nullable=False),

        # Target calendar; 'pending' until the user picks one
        sa.Column('calendar_id', sa.String(length=255), nullable=False),
        sa.Column('calendar_name', sa.String(length=255), nullable=False),

        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        _family_fk(),
        # One connection per family
        sa.UniqueConstraint('family_id', name='uq_google_connections_family_id'),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('google_connections')
    op.drop_index(op.f('ix_meal_plans_date'), table_name='meal_plans')
    op.drop_index(op.f('ix_meal_plans_family_id'), table_name='meal_plans')
    op.drop_table('meal_plans')
    op.drop_index(op.f('ix_events_end_time'), table_name='events')
    op.drop_index(op.f('ix_events_start_time'), table_name='events')
    op.drop_index(op.f('ix_events_family_id'), table_name='events')
    op.drop_table('events')
    op.drop_index(op.f('ix_family_calendars_family_id'), table_name='family_calendars')
    op.drop_table('family_calendars')
    op.drop_index(op.f('ix_family_members_family_id'), table_name='family_members')
    op.drop_table('family_members')
    op.drop_index(op.f('ix_users_family_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    op.drop_table('families')
