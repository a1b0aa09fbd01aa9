"""Add listing matches

Revision ID: 8c4e2a9d5f31
Revises: 3f9a1c2d7b10
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '8c4e2a9d5f31'
down_revision = '3f9a1c2d7b10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('listing_matches',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('property_id', sa.String(length=36), nullable=False),
        sa.Column('request_id', sa.String(length=36), nullable=False),
        sa.Column('conversation_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ),
        sa.ForeignKeyConstraint(['request_id'], ['property_requests.id'], ),
        sa.ForeignKeyConstraint(['conversation_id'], ['chat_conversations.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('property_id', 'request_id', name='uq_listing_match_pair')
    )
    op.create_index('ix_listing_matches_conversation_id', 'listing_matches', ['conversation_id'])


def downgrade():
    op.drop_index('ix_listing_matches_conversation_id', table_name='listing_matches')
    op.drop_table('listing_matches')
