"""add_crm_tables_and_download_event

Revision ID: 8c41d7e2a9f3
Revises: 3f9a1c2e7b10
Create Date: 2026-10-18 15:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c41d7e2a9f3'
down_revision: Union[str, Sequence[str], None] = '3f9a1c2e7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

event_type_enum = sa.Enum(
    'wedding', 'portrait', 'corporate', 'event', 'other', name='event_type_enum'
)
event_status_enum = sa.Enum(
    'scheduled', 'completed', 'cancelled', name='event_status_enum'
)


def upgrade() -> None:
    """Upgrade schema - clients, events and the photo_download interaction."""

    # Postgres specific: SQLite stores enums as plain strings.
    if op.get_bind().dialect.name == 'postgresql':
        op.execute(
            "ALTER TYPE interaction_event_enum ADD VALUE IF NOT EXISTS 'photo_download'"
        )

    op.create_table(
        'clients',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('photographer_id', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'photographer_id', 'email', name='uq_clients_photographer_email'
        )
    )
    op.create_index('ix_clients_photographer_id', 'clients', ['photographer_id'])
    op.create_index(
        'ix_clients_photographer_created', 'clients', ['photographer_id', 'created_at']
    )

    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('photographer_id', sa.String(), nullable=False),
        sa.Column('client_id', sa.Uuid(), nullable=True),
        sa.Column('album_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', event_type_enum, nullable=False),
        sa.Column('status', event_status_enum, nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['album_id'], ['albums.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_events_photographer_id', 'events', ['photographer_id'])
    op.create_index('ix_events_client_id', 'events', ['client_id'])
    op.create_index(
        'ix_events_photographer_start', 'events', ['photographer_id', 'start_date']
    )


def downgrade() -> None:
    """Downgrade schema - drop the CRM tables.

    The added interaction_event_enum value stays; Postgres cannot drop
    a single enum value.
    """
    op.drop_index('ix_events_photographer_start', table_name='events')
    op.drop_index('ix_events_client_id', table_name='events')
    op.drop_index('ix_events_photographer_id', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_clients_photographer_created', table_name='clients')
    op.drop_index('ix_clients_photographer_id', table_name='clients')
    op.drop_table('clients')
    event_status_enum.drop(op.get_bind(), checkfirst=True)
    event_type_enum.drop(op.get_bind(), checkfirst=True)
