"""initial_schema

Revision ID: 3f9a1c2e7b10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')

transaction_direction_enum = sa.Enum('credit', 'debit', name='transaction_direction_enum')
transaction_category_enum = sa.Enum(
    'signup_bonus', 'manual_add', 'album_creation', 'refund', 'other',
    name='transaction_category_enum',
)
transaction_status_enum = sa.Enum(
    'pending', 'completed', 'failed', 'cancelled', name='transaction_status_enum'
)
album_status_enum = sa.Enum(
    'draft', 'processing', 'published', 'archived', name='album_status_enum'
)
photo_status_enum = sa.Enum(
    'uploading', 'processing', 'ready', 'failed', name='photo_status_enum'
)
share_type_enum = sa.Enum('link', 'email', 'direct', name='share_type_enum')
interaction_event_enum = sa.Enum(
    'identity_entered', 'album_open', 'photo_view', 'photo_select',
    'photo_unselect', 'photo_favorite', 'photo_unfavorite', 'comment_add',
    'selection_submit',
    name='interaction_event_enum',
)
user_role_enum = sa.Enum('photographer', 'client', 'admin', name='user_role_enum')
otp_purpose_enum = sa.Enum(
    'signup', 'login', 'password_reset', 'email_verification',
    name='otp_purpose_enum',
)


def upgrade() -> None:
    """Upgrade schema - wallet, gallery and identity tables."""

    # Wallet service
    op.create_table(
        'wallets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('balance', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=16), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('balance >= 0', name='ck_wallet_balance_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_wallets_user_id', 'wallets', ['user_id'], unique=True)

    op.create_table(
        'wallet_transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('wallet_id', sa.Uuid(), nullable=False),
        sa.Column('direction', transaction_direction_enum, nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('balance_before', sa.Integer(), nullable=False),
        sa.Column('balance_after', sa.Integer(), nullable=False),
        sa.Column('category', transaction_category_enum, nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column('txn_metadata', JSON_TYPE, nullable=True),
        sa.Column('status', transaction_status_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_transaction_amount_positive'),
        sa.ForeignKeyConstraint(['wallet_id'], ['wallets.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_wallet_transactions_user_id', 'wallet_transactions', ['user_id'])
    op.create_index('ix_wallet_transactions_wallet_id', 'wallet_transactions', ['wallet_id'])
    op.create_index(
        'ix_wallet_transactions_user_created', 'wallet_transactions', ['user_id', 'created_at']
    )
    op.create_index(
        'ix_wallet_transactions_wallet_created', 'wallet_transactions', ['wallet_id', 'created_at']
    )

    # Gallery service
    op.create_table(
        'albums',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('photographer_id', sa.String(), nullable=False),
        sa.Column('photographer_name', sa.String(), nullable=False),
        sa.Column('photographer_email', sa.String(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('client_id', sa.String(), nullable=True),
        sa.Column('cover_photo', sa.String(), nullable=True),
        sa.Column('shoot_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('is_private', sa.Boolean(), nullable=False),
        sa.Column('allow_downloads', sa.Boolean(), nullable=False),
        sa.Column('allow_favorites', sa.Boolean(), nullable=False),
        sa.Column('total_photos', sa.Integer(), nullable=False),
        sa.Column('total_views', sa.Integer(), nullable=False),
        sa.Column('total_downloads', sa.Integer(), nullable=False),
        sa.Column('status', album_status_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_albums_photographer_id', 'albums', ['photographer_id'])
    op.create_index('ix_albums_client_id', 'albums', ['client_id'])
    op.create_index('ix_albums_photographer_created', 'albums', ['photographer_id', 'created_at'])

    op.create_table(
        'photos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('album_id', sa.Uuid(), nullable=False),
        sa.Column('photographer_id', sa.String(), nullable=False),
        sa.Column('filename', sa.String(), nullable=False),
        sa.Column('original_name', sa.String(), nullable=False),
        sa.Column('file_url', sa.String(), nullable=False),
        sa.Column('thumbnail_url', sa.String(), nullable=True),
        sa.Column('width', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('mime_type', sa.String(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('downloads', sa.Integer(), nullable=False),
        sa.Column('favorites_count', sa.Integer(), nullable=False),
        sa.Column('status', photo_status_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['album_id'], ['albums.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_photos_album_id', 'photos', ['album_id'])
    op.create_index('ix_photos_photographer_id', 'photos', ['photographer_id'])
    op.create_index('ix_photos_album_order', 'photos', ['album_id', 'order'])

    op.create_table(
        'album_shares',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('album_id', sa.Uuid(), nullable=False),
        sa.Column('photographer_id', sa.String(), nullable=False),
        sa.Column('shared_with_email', sa.String(), nullable=True),
        sa.Column('shared_with_name', sa.String(), nullable=True),
        sa.Column('shared_with_user_id', sa.String(), nullable=True),
        sa.Column('share_type', share_type_enum, nullable=False),
        sa.Column('access_token', sa.String(length=64), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('can_view', sa.Boolean(), nullable=False),
        sa.Column('can_download', sa.Boolean(), nullable=False),
        sa.Column('can_favorite', sa.Boolean(), nullable=False),
        sa.Column('can_comment', sa.Boolean(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('last_viewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['album_id'], ['albums.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_album_shares_album_id', 'album_shares', ['album_id'])
    op.create_index('ix_album_shares_photographer_id', 'album_shares', ['photographer_id'])
    op.create_index('ix_album_shares_access_token', 'album_shares', ['access_token'], unique=True)
    op.create_index('ix_album_shares_album_active', 'album_shares', ['album_id', 'is_active'])
    op.create_index('ix_album_shares_email', 'album_shares', ['shared_with_email'])

    op.create_table(
        'album_share_clients',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('share_id', sa.Uuid(), nullable=False),
        sa.Column('album_id', sa.Uuid(), nullable=False),
        sa.Column('client_identifier', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('ip_address', sa.String(), nullable=True),
        sa.Column('user_agent', sa.String(), nullable=True),
        sa.Column('photo_views', sa.Integer(), nullable=False),
        sa.Column('favorites', sa.Integer(), nullable=False),
        sa.Column('comments', sa.Integer(), nullable=False),
        sa.Column('downloads', sa.Integer(), nullable=False),
        sa.Column('last_accessed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['share_id'], ['album_shares.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['album_id'], ['albums.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'album_id', 'client_identifier', name='uq_share_client_album_identifier'
        )
    )
    op.create_index('ix_album_share_clients_album_id', 'album_share_clients', ['album_id'])

    op.create_table(
        'album_share_interactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('share_id', sa.Uuid(), nullable=False),
        sa.Column('album_id', sa.Uuid(), nullable=False),
        sa.Column('photographer_id', sa.String(), nullable=False),
        sa.Column('client_id', sa.Uuid(), nullable=True),
        sa.Column('event', interaction_event_enum, nullable=False),
        sa.Column('photo_id', sa.Uuid(), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('meta', JSON_TYPE, nullable=True),
        sa.Column('ip_address', sa.String(), nullable=True),
        sa.Column('user_agent', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['share_id'], ['album_shares.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['client_id'], ['album_share_clients.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_album_share_interactions_album_id', 'album_share_interactions', ['album_id']
    )
    op.create_index(
        'ix_album_share_interactions_photographer_id',
        'album_share_interactions',
        ['photographer_id'],
    )
    op.create_index(
        'ix_share_interactions_share_created',
        'album_share_interactions',
        ['share_id', 'created_at'],
    )
    op.create_index(
        'ix_share_interactions_client_photo',
        'album_share_interactions',
        ['client_id', 'photo_id', 'event'],
    )

    # Identity service
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('role', user_role_enum, nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'otp_codes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('code_hash', sa.String(), nullable=False),
        sa.Column('purpose', otp_purpose_enum, nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_otp_codes_email_purpose_created', 'otp_codes', ['email', 'purpose', 'created_at']
    )

    op.create_table(
        'otp_request_windows',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('identifier', sa.String(), nullable=False),
        sa.Column('purpose', otp_purpose_enum, nullable=False),
        sa.Column('window_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('count', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'identifier', 'purpose', 'window_start', name='uq_otp_request_window'
        )
    )


def downgrade() -> None:
    """Downgrade schema - drop everything created above."""
    op.drop_table('otp_request_windows')
    op.drop_index('ix_otp_codes_email_purpose_created', table_name='otp_codes')
    op.drop_table('otp_codes')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_table('album_share_interactions')
    op.drop_table('album_share_clients')
    op.drop_table('album_shares')
    op.drop_table('photos')
    op.drop_table('albums')
    op.drop_table('wallet_transactions')
    op.drop_table('wallets')

    bind = op.get_bind()
    for enum in (
        otp_purpose_enum,
        user_role_enum,
        interaction_event_enum,
        share_type_enum,
        photo_status_enum,
        album_status_enum,
        transaction_status_enum,
        transaction_category_enum,
        transaction_direction_enum,
    ):
        enum.drop(bind, checkfirst=True)
