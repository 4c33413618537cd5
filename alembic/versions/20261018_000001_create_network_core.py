"""Create network core tables.

Revision ID: 20261018_000001
Revises:
Create Date: 2026-10-18

Placement tree nodes, PV ledger, leg events and pairing checkpoints.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018_000001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create tree_nodes, pv_ledger_entries, pair_events, pairing_checkpoints."""
    op.create_table(
        'tree_nodes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('participant_id', sa.String(length=64), nullable=False),
        sa.Column('parent_id', sa.String(length=64), nullable=True),
        sa.Column('left_id', sa.String(length=64), nullable=True),
        sa.Column('right_id', sa.String(length=64), nullable=True),
        sa.Column('position', sa.String(length=16), nullable=True),
        sa.Column('depth', sa.Integer(), nullable=False, server_default='0'),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('participant_id', name='uq_tree_nodes_participant'),
        sa.UniqueConstraint('left_id', name='uq_tree_nodes_left'),
        sa.UniqueConstraint('right_id', name='uq_tree_nodes_right'),
        sa.CheckConstraint('depth >= 0', name='check_tree_node_depth_non_negative'),
        sa.CheckConstraint(
            "(parent_id IS NULL AND position IS NULL AND depth = 0) OR "
            "(parent_id IS NOT NULL AND position IS NOT NULL AND depth > 0)",
            name='check_tree_node_root_shape'
        ),
    )
    op.create_index('idx_tree_nodes_parent', 'tree_nodes', ['parent_id'])

    op.create_table(
        'pv_ledger_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('participant_id', sa.String(length=64), nullable=False),
        sa.Column(
            'amount',
            sa.DECIMAL(precision=18, scale=4),
            nullable=False,
            comment='Signed PV amount (debits are negative)'
        ),
        sa.Column('source', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('remark', sa.Text(), nullable=False, server_default=''),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_pv_ledger_entries_participant_id', 'pv_ledger_entries', ['participant_id']
    )
    op.create_index(
        'idx_pv_ledger_participant_created',
        'pv_ledger_entries',
        ['participant_id', 'created_at']
    )

    op.create_table(
        'pair_events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('participant_id', sa.String(length=64), nullable=False),
        sa.Column('side', sa.String(length=16), nullable=False),
        sa.Column('tier', sa.String(length=16), nullable=False),
        sa.Column('pv', sa.DECIMAL(precision=18, scale=4), nullable=False, server_default='0'),
        sa.Column('source_participant_id', sa.String(length=64), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.Column('matched', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('matched_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('matched_window_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('partner_event_id', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "(matched = false AND partner_event_id IS NULL) OR "
            "(matched = true AND partner_event_id IS NOT NULL)",
            name='check_pair_event_partner_when_matched'
        ),
    )
    op.create_index('ix_pair_events_participant_id', 'pair_events', ['participant_id'])
    op.create_index(
        'ix_pair_events_matched_window_start', 'pair_events', ['matched_window_start']
    )
    op.create_index(
        'idx_pair_events_owner_pending',
        'pair_events',
        ['participant_id', 'matched', 'tier', 'created_at']
    )

    op.create_table(
        'pairing_checkpoints',
        sa.Column('participant_id', sa.String(length=64), nullable=False),
        sa.Column('last_window_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('windows_processed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('pairs_matched', sa.Integer(), nullable=False, server_default='0'),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.PrimaryKeyConstraint('participant_id'),
    )


def downgrade() -> None:
    """Drop network core tables."""
    op.drop_table('pairing_checkpoints')
    op.drop_index('idx_pair_events_owner_pending', table_name='pair_events')
    op.drop_index('ix_pair_events_matched_window_start', table_name='pair_events')
    op.drop_index('ix_pair_events_participant_id', table_name='pair_events')
    op.drop_table('pair_events')
    op.drop_index('idx_pv_ledger_participant_created', table_name='pv_ledger_entries')
    op.drop_index('ix_pv_ledger_entries_participant_id', table_name='pv_ledger_entries')
    op.drop_table('pv_ledger_entries')
    op.drop_index('idx_tree_nodes_parent', table_name='tree_nodes')
    op.drop_table('tree_nodes')
