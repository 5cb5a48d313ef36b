"""Initial schema.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

Users, referral edges, plan catalog, investments, ledger and withdrawal
requests.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_000001'
down_revision = None
branch_labels = None
depends_on = None

MONEY = sa.DECIMAL(precision=18, scale=8)


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='user'),
        sa.Column('referral_code', sa.String(length=8), nullable=False),
        sa.Column(
            'referred_by',
            sa.String(length=8),
            nullable=True,
            comment='Referral code of the direct referrer'
        ),
        sa.Column('available_balance', MONEY, nullable=False, server_default='0'),
        sa.Column('total_invested', MONEY, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            'available_balance >= 0',
            name='check_user_available_balance_non_negative'
        ),
        sa.CheckConstraint(
            'total_invested >= 0',
            name='check_user_total_invested_non_negative'
        ),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_referral_code', 'users', ['referral_code'], unique=True)
    op.create_index('ix_users_referred_by', 'users', ['referred_by'])

    op.create_table(
        'referrals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=False),
        sa.Column('referral_id', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['referrer_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referral_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('level BETWEEN 1 AND 3', name='check_referral_level_range'),
        sa.UniqueConstraint('referral_id', 'level', name='uq_referral_level'),
        sa.UniqueConstraint('referrer_id', 'referral_id', name='uq_referrer_referral'),
    )
    op.create_index('ix_referrals_referrer_id', 'referrals', ['referrer_id'])
    op.create_index('ix_referrals_referral_id', 'referrals', ['referral_id'])

    op.create_table(
        'investment_plans',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('invest', MONEY, nullable=False),
        sa.Column('daily', MONEY, nullable=False),
        sa.Column('total', MONEY, nullable=False),
        sa.Column('days', sa.Integer(), nullable=False),
        sa.Column('roi', sa.DECIMAL(precision=7, scale=2), nullable=False),
        sa.Column('badge', sa.String(length=50), nullable=True),
        sa.Column('benefits', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('days > 0', name='check_plan_days_positive'),
        sa.CheckConstraint('daily >= 0', name='check_plan_daily_non_negative'),
        sa.CheckConstraint('invest > 0', name='check_plan_invest_positive'),
    )
    op.create_index('ix_investment_plans_is_active', 'investment_plans', ['is_active'])

    op.create_table(
        'investments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column(
            'plan_id',
            sa.Integer(),
            nullable=False,
            comment='Plan catalog id, no foreign key so plans can be removed'
        ),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('days_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_accrued_on', sa.Date(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint(
            'days_completed >= 0',
            name='check_investment_days_completed_non_negative'
        ),
    )
    op.create_index('ix_investments_user_id', 'investments', ['user_id'])
    op.create_index('ix_investments_plan_id', 'investments', ['plan_id'])
    op.create_index('idx_investments_user_active', 'investments', ['user_id', 'is_active'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('transaction_id', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('plan_id', sa.Integer(), nullable=True),
        sa.Column('source_user_id', sa.Integer(), nullable=True),
        sa.Column('utr_number', sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['source_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('amount >= 0', name='check_transaction_amount_non_negative'),
        sa.CheckConstraint(
            "type IN ('deposit', 'withdraw', 'investment', "
            "'daily_return', 'referral_commission')",
            name='check_transaction_type'
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'completed', 'failed')",
            name='check_transaction_status'
        ),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_transaction_id', 'transactions', ['transaction_id'], unique=True)
    op.create_index('ix_transactions_created_at', 'transactions', ['created_at'])
    op.create_index('ix_transactions_source_user_id', 'transactions', ['source_user_id'])
    op.create_index('idx_transactions_user_type', 'transactions', ['user_id', 'type'])
    op.create_index('idx_transactions_type_status', 'transactions', ['type', 'status'])

    op.create_table(
        'withdrawal_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('amount > 0', name='check_withdrawal_amount_positive'),
    )
    op.create_index('ix_withdrawal_requests_user_id', 'withdrawal_requests', ['user_id'])
    op.create_index('ix_withdrawal_requests_status', 'withdrawal_requests', ['status'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('withdrawal_requests')
    op.drop_table('transactions')
    op.drop_table('investments')
    op.drop_table('investment_plans')
    op.drop_table('referrals')
    op.drop_table('users')
