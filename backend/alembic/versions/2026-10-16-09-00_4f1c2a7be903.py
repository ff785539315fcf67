"""create ventures, stage contents, chat messages and reports

Revision ID: 4f1c2a7be903
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from typing import Sequence, Union
import sqlmodel
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a7be903'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'ventures',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('current_stage', sa.Integer(), nullable=False),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('share_token', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('card_style', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('card_theme', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('card_description', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_ventures_id'), 'ventures', ['id'], unique=False)
    op.create_index(op.f('ix_ventures_user_id'), 'ventures', ['user_id'], unique=False)
    op.create_index(op.f('ix_ventures_share_token'), 'ventures', ['share_token'], unique=True)

    op.create_table(
        'stage_contents',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('venture_id', sa.Uuid(), nullable=False),
        sa.Column('stage', sqlmodel.sql.sqltypes.AutoString(length=40), nullable=False),
        sa.Column('content', sa.JSON(), nullable=False),
        sa.Column('ai_analysis', sa.JSON(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['venture_id'], ['ventures.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('venture_id', 'stage', name='uq_venture_stage'),
    )
    op.create_index(op.f('ix_stage_contents_id'), 'stage_contents', ['id'], unique=False)
    op.create_index(op.f('ix_stage_contents_venture_id'), 'stage_contents', ['venture_id'], unique=False)

    op.create_table(
        'chat_messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('venture_id', sa.Uuid(), nullable=False),
        sa.Column('stage', sqlmodel.sql.sqltypes.AutoString(length=40), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('role', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('content', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.ForeignKeyConstraint(['venture_id'], ['ventures.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('venture_id', 'stage', 'seq', name='uq_message_seq'),
    )
    op.create_index(op.f('ix_chat_messages_id'), 'chat_messages', ['id'], unique=False)
    op.create_index(op.f('ix_chat_messages_venture_id'), 'chat_messages', ['venture_id'], unique=False)
    op.create_index(op.f('ix_chat_messages_stage'), 'chat_messages', ['stage'], unique=False)

    op.create_table(
        'reports',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('venture_id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('full_report', sa.JSON(), nullable=False),
        sa.Column('pitch_deck', sa.JSON(), nullable=False),
        sa.Column('elevator_pitch', sa.Text(), nullable=False),
        sa.Column('full_pitch', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['venture_id'], ['ventures.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reports_id'), 'reports', ['id'], unique=False)
    op.create_index(op.f('ix_reports_venture_id'), 'reports', ['venture_id'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_reports_venture_id'), table_name='reports')
    op.drop_index(op.f('ix_reports_id'), table_name='reports')
    op.drop_table('reports')
    op.drop_index(op.f('ix_chat_messages_stage'), table_name='chat_messages')
    op.drop_index(op.f('ix_chat_messages_venture_id'), table_name='chat_messages')
    op.drop_index(op.f('ix_chat_messages_id'), table_name='chat_messages')
    op.drop_table('chat_messages')
    op.drop_index(op.f('ix_stage_contents_venture_id'), table_name='stage_contents')
    op.drop_index(op.f('ix_stage_contents_id'), table_name='stage_contents')
    op.drop_table('stage_contents')
    op.drop_index(op.f('ix_ventures_share_token'), table_name='ventures')
    op.drop_index(op.f('ix_ventures_user_id'), table_name='ventures')
    op.drop_index(op.f('ix_ventures_id'), table_name='ventures')
    op.drop_table('ventures')
