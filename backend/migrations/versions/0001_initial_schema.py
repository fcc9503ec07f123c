"""Initial schema: users, sessions, security events, unclaimed records, collections, reports, areas

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

Table names Unclaimed / OverAllCollections / Reports / Areas match the
existing spreadsheet-era database so it can be adopted in place.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


MONEY = sa.Numeric(precision=12, scale=2, asdecimal=False)


def upgrade():
    # ==========================================================================
    # 1. USERS / SESSIONS / SECURITY EVENTS
    # ==========================================================================
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('fullname', sa.String(length=128), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('area', sa.String(length=128), nullable=True),
        sa.Column('franchise_name', sa.String(length=128), nullable=True),
        sa.Column('assigned_collectors', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username', name='uq_users_username'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_username'), ['username'], unique=False)
        batch_op.create_index(batch_op.f('ix_users_role'), ['role'], unique=False)
        batch_op.create_index(batch_op.f('ix_users_status'), ['status'], unique=False)

    op.create_table('session_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_reason', sa.String(length=255), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('session_tokens', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_session_tokens_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_session_tokens_token_hash'), ['token_hash'], unique=True)
        batch_op.create_index(batch_op.f('ix_session_tokens_expires_at'), ['expires_at'], unique=False)
        batch_op.create_index(batch_op.f('ix_session_tokens_is_revoked'), ['is_revoked'], unique=False)
        batch_op.create_index('ix_session_tokens_user_active', ['user_id', 'is_revoked'], unique=False)

    op.create_table('security_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('event_type', sa.String(length=64), nullable=False),
        sa.Column('resource', sa.String(length=128), nullable=True),
        sa.Column('action', sa.String(length=64), nullable=True),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('occurred_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('security_events', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_security_events_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_security_events_event_type'), ['event_type'], unique=False)
        batch_op.create_index(batch_op.f('ix_security_events_success'), ['success'], unique=False)
        batch_op.create_index('ix_security_events_user_type', ['user_id', 'event_type'], unique=False)
        batch_op.create_index('ix_security_events_occurred', ['occurred_at'], unique=False)

    # ==========================================================================
    # 2. UNCLAIMED RECORDS
    # ==========================================================================
    op.create_table('Unclaimed',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('teller_name', sa.String(length=128), nullable=False),
        sa.Column('trans_id', sa.String(length=64), nullable=True),
        sa.Column('bet_number', sa.String(length=64), nullable=True),
        sa.Column('bet_code', sa.String(length=64), nullable=True),
        sa.Column('draw_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('bet_amount', MONEY, nullable=False),
        sa.Column('win_amount', MONEY, nullable=False),
        sa.Column('charge_amount', MONEY, nullable=False),
        sa.Column('net', MONEY, nullable=True),
        sa.Column('mode', sa.String(length=32), nullable=True),
        sa.Column('collector', sa.String(length=128), nullable=True),
        sa.Column('area', sa.String(length=128), nullable=True),
        sa.Column('franchise_name', sa.String(length=128), nullable=True),
        sa.Column('notification', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('return_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cash_deposited', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('deposit_amount', MONEY, nullable=True),
        sa.Column('bank_name', sa.String(length=64), nullable=True),
        sa.Column('deposit_reference', sa.String(length=128), nullable=True),
        sa.Column('deposit_receipt', sa.String(length=512), nullable=True),
        sa.Column('deposit_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deposited_by', sa.String(length=128), nullable=True),
        sa.Column('verified_by', sa.String(length=128), nullable=True),
        sa.Column('verification_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('Unclaimed', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_Unclaimed_trans_id'), ['trans_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_Unclaimed_draw_date'), ['draw_date'], unique=False)
        batch_op.create_index(batch_op.f('ix_Unclaimed_collector'), ['collector'], unique=False)
        batch_op.create_index(batch_op.f('ix_Unclaimed_area'), ['area'], unique=False)
        batch_op.create_index(batch_op.f('ix_Unclaimed_franchise_name'), ['franchise_name'], unique=False)
        batch_op.create_index(batch_op.f('ix_Unclaimed_status'), ['status'], unique=False)
        batch_op.create_index('ix_unclaimed_status_draw', ['status', 'draw_date'], unique=False)

    # ==========================================================================
    # 3. COLLECTIONS / REPORTS / AREAS
    # ==========================================================================
    op.create_table('OverAllCollections',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('unclaimed_id', sa.Integer(), nullable=True),
        sa.Column('teller_name', sa.String(length=128), nullable=True),
        sa.Column('bet_number', sa.String(length=64), nullable=True),
        sa.Column('collector', sa.String(length=128), nullable=True),
        sa.Column('area', sa.String(length=128), nullable=True),
        sa.Column('franchise_name', sa.String(length=128), nullable=True),
        sa.Column('mode', sa.String(length=32), nullable=True),
        sa.Column('win_amount', MONEY, nullable=False),
        sa.Column('charge_amount', MONEY, nullable=False),
        sa.Column('net', MONEY, nullable=False),
        sa.Column('collected_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['unclaimed_id'], ['Unclaimed.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('OverAllCollections', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_OverAllCollections_unclaimed_id'), ['unclaimed_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_OverAllCollections_collector'), ['collector'], unique=False)
        batch_op.create_index(batch_op.f('ix_OverAllCollections_franchise_name'), ['franchise_name'], unique=False)

    op.create_table('Reports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('unclaimed_id', sa.Integer(), nullable=True),
        sa.Column('teller_name', sa.String(length=128), nullable=True),
        sa.Column('collector', sa.String(length=128), nullable=True),
        sa.Column('area', sa.String(length=128), nullable=True),
        sa.Column('franchise_name', sa.String(length=128), nullable=True),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['unclaimed_id'], ['Unclaimed.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('Reports', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_Reports_unclaimed_id'), ['unclaimed_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_Reports_collector'), ['collector'], unique=False)
        batch_op.create_index(batch_op.f('ix_Reports_area'), ['area'], unique=False)

    op.create_table('Areas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_areas_name'),
        sqlite_autoincrement=True
    )


def downgrade():
    op.drop_table('Areas')
    with op.batch_alter_table('Reports', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_Reports_area'))
        batch_op.drop_index(batch_op.f('ix_Reports_collector'))
        batch_op.drop_index(batch_op.f('ix_Reports_unclaimed_id'))
    op.drop_table('Reports')
    with op.batch_alter_table('OverAllCollections', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_OverAllCollections_franchise_name'))
        batch_op.drop_index(batch_op.f('ix_OverAllCollections_collector'))
        batch_op.drop_index(batch_op.f('ix_OverAllCollections_unclaimed_id'))
    op.drop_table('OverAllCollections')
    op.drop_table('Unclaimed')
    op.drop_table('security_events')
    op.drop_table('session_tokens')
    op.drop_table('users')
