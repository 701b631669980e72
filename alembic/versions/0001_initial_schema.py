"""create users, clusters, mints, apps, app envs and transactions

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

# SQLAlchemy stores enum member names
user_role = sa.Enum('ADMIN', 'USER', name='userrole')
cluster_type = sa.Enum('SOLANA_CUSTOM', 'SOLANA_DEVNET', 'SOLANA_MAINNET', 'SOLANA_TESTNET', name='clustertype')
cluster_status = sa.Enum('ACTIVE', 'INACTIVE', name='clusterstatus')
app_user_role = sa.Enum('OWNER', 'MEMBER', name='appuserrole')
transaction_status = sa.Enum('COMMITTED', 'CONFIRMED', 'FINALIZED', 'FAILED', name='apptransactionstatus')
transaction_error_type = sa.Enum(
    'BAD_NONCE', 'INVALID_ACCOUNT', 'SOME_ERROR', 'TIMEOUT', 'UNKNOWN', 'WEBHOOK_FAILED',
    name='apptransactionerrortype',
)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'clusters',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', cluster_type, nullable=False),
        sa.Column('status', cluster_status, nullable=False),
        sa.Column('endpoint', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_clusters_name', 'clusters', ['name'], unique=True)
    op.create_index('ix_clusters_type', 'clusters', ['type'])
    op.create_index('ix_clusters_status', 'clusters', ['status'])

    op.create_table(
        'mints',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('cluster_id', sa.String(), sa.ForeignKey('clusters.id', ondelete='CASCADE'), nullable=False),
        sa.Column('decimals', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('symbol', sa.String(), nullable=False),
        sa.Column('logo_url', sa.String(), nullable=True),
        sa.Column('coin_gecko_id', sa.String(), nullable=True),
        sa.Column('default', sa.Boolean(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('address', 'cluster_id', name='uq_mint_address_cluster'),
    )
    op.create_index('ix_mints_address', 'mints', ['address'])
    op.create_index('ix_mints_cluster_id', 'mints', ['cluster_id'])

    op.create_table(
        'apps',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('index', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('webhook_accept_incoming', sa.Boolean(), nullable=False),
        sa.Column('webhook_event_enabled', sa.Boolean(), nullable=False),
        sa.Column('webhook_event_url', sa.String(), nullable=True),
        sa.Column('webhook_secret', sa.String(), nullable=True),
        sa.Column('webhook_verify_enabled', sa.Boolean(), nullable=False),
        sa.Column('webhook_verify_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('index', name='uq_app_index'),
    )
    op.create_index('ix_apps_index', 'apps', ['index'], unique=True)
    op.create_index('ix_apps_name', 'apps', ['name'])

    op.create_table(
        'app_users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('app_id', sa.String(), sa.ForeignKey('apps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', app_user_role, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.UniqueConstraint('app_id', 'user_id', name='uq_app_user'),
    )
    op.create_index('ix_app_users_app_id', 'app_users', ['app_id'])
    op.create_index('ix_app_users_user_id', 'app_users', ['user_id'])

    op.create_table(
        'app_envs',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('app_id', sa.String(), sa.ForeignKey('apps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('cluster_id', sa.String(), sa.ForeignKey('clusters.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_app_envs_name', 'app_envs', ['name'])
    op.create_index('ix_app_envs_app_id', 'app_envs', ['app_id'])
    op.create_index('ix_app_envs_cluster_id', 'app_envs', ['cluster_id'])

    op.create_table(
        'app_mints',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('app_env_id', sa.String(), sa.ForeignKey('app_envs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('mint_id', sa.String(), sa.ForeignKey('mints.id', ondelete='CASCADE'), nullable=False),
        sa.Column('add_memo', sa.Boolean(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('app_env_id', 'mint_id', name='uq_app_mint_env_mint'),
    )
    op.create_index('ix_app_mints_app_env_id', 'app_mints', ['app_env_id'])
    op.create_index('ix_app_mints_mint_id', 'app_mints', ['mint_id'])

    op.create_table(
        'app_transactions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('app_env_id', sa.String(), sa.ForeignKey('app_envs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=True),
        sa.Column('destination', sa.String(), nullable=True),
        sa.Column('fee_payer', sa.String(), nullable=True),
        sa.Column('mint', sa.String(), nullable=True),
        sa.Column('signature', sa.String(), nullable=True),
        sa.Column('source', sa.String(), nullable=True),
        sa.Column('status', transaction_status, nullable=False),
        sa.Column('solana_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('solana_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('solana_finalized', sa.DateTime(timezone=True), nullable=True),
        sa.Column('solana_transaction', sa.JSON(), nullable=True),
        sa.Column('webhook_event_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('webhook_event_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('webhook_verify_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('webhook_verify_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_app_transactions_app_env_id', 'app_transactions', ['app_env_id'])
    op.create_index('ix_app_transactions_signature', 'app_transactions', ['signature'])
    op.create_index('ix_app_transactions_status', 'app_transactions', ['status'])
    op.create_index('ix_app_transactions_created_at', 'app_transactions', ['created_at'])

    op.create_table(
        'app_transaction_errors',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column(
            'app_transaction_id', sa.String(),
            sa.ForeignKey('app_transactions.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('message', sa.String(), nullable=True),
        sa.Column('type', transaction_error_type, nullable=False),
        sa.Column('instruction', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
    )
    op.create_index('ix_app_transaction_errors_app_transaction_id', 'app_transaction_errors', ['app_transaction_id'])


def downgrade() -> None:
    op.drop_table('app_transaction_errors')
    op.drop_table('app_transactions')
    op.drop_table('app_mints')
    op.drop_table('app_envs')
    op.drop_table('app_users')
    op.drop_table('apps')
    op.drop_table('mints')
    op.drop_table('clusters')
    op.drop_table('users')
    bind = op.get_bind()
    for enum_type in (
        transaction_error_type, transaction_status, app_user_role, cluster_status, cluster_type, user_role,
    ):
        enum_type.drop(bind, checkfirst=True)
