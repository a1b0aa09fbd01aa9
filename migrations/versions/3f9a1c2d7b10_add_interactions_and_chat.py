"""Add listing interactions, conversations and messages

Revision ID: 3f9a1c2d7b10
Revises: 
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f9a1c2d7b10'
down_revision = None
branch_labels = None
depends_on = None


listing_type = sa.Enum('PROPERTY', 'REQUEST', name='listingtype')
interaction_type = sa.Enum('LIKE', 'DISLIKE', 'SKIP', name='interactiontype')


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone_number', sa.String(length=50), nullable=True),
        sa.Column('avatar_url', sa.String(length=2048), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_phone_number', 'users', ['phone_number'])
    
    op.create_table('properties',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('property_type', sa.Enum('RENT', 'SALE', name='propertytype'), nullable=False),
        sa.Column('category', sa.Enum('APARTMENT', 'HOUSE', 'CONDO', 'LAND', 'COMMERCIAL', 'OTHER',
                                      name='propertycategory'), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=True),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('likes_count >= 0', name='ck_properties_likes_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug')
    )
    op.create_index('ix_properties_user_id', 'properties', ['user_id'])
    op.create_index('ix_properties_city', 'properties', ['city'])
    
    op.create_table('property_requests',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('desired_location_city', sa.String(length=100), nullable=False),
        sa.Column('desired_location_neighborhood', sa.String(length=100), nullable=True),
        sa.Column('budget_max', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('likes_count >= 0', name='ck_property_requests_likes_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug')
    )
    op.create_index('ix_property_requests_user_id', 'property_requests', ['user_id'])
    op.create_index('ix_property_requests_desired_location_city', 'property_requests', ['desired_location_city'])
    
    # One row per (user, listing, listing type); updated in place
    op.create_table('user_listing_interactions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('listing_id', sa.String(length=36), nullable=False),
        sa.Column('listing_type', listing_type, nullable=False),
        sa.Column('interaction_type', interaction_type, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'listing_id', 'listing_type', name='uq_user_listing_interaction')
    )
    op.create_index('ix_interactions_listing', 'user_listing_interactions',
                    ['listing_id', 'listing_type', 'interaction_type'])
    
    op.create_table('chat_conversations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('participant_low', sa.String(length=36), nullable=False),
        sa.Column('participant_high', sa.String(length=36), nullable=False),
        sa.Column('property_id', sa.String(length=36), nullable=True),
        sa.Column('request_id', sa.String(length=36), nullable=True),
        sa.Column('context_key', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('unread_low', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unread_high', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_message_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('participant_low < participant_high', name='ck_conversation_canonical_pair'),
        sa.CheckConstraint('property_id IS NULL OR request_id IS NULL', name='ck_conversation_single_context'),
        sa.CheckConstraint('unread_low >= 0 AND unread_high >= 0', name='ck_conversation_unread_non_negative'),
        sa.ForeignKeyConstraint(['participant_low'], ['users.id'], ),
        sa.ForeignKeyConstraint(['participant_high'], ['users.id'], ),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ),
        sa.ForeignKeyConstraint(['request_id'], ['property_requests.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('participant_low', 'participant_high', 'context_key',
                            name='uq_conversation_participants_context')
    )
    op.create_index('ix_chat_conversations_property_id', 'chat_conversations', ['property_id'])
    op.create_index('ix_chat_conversations_request_id', 'chat_conversations', ['request_id'])
    op.create_index('ix_conversations_low_activity', 'chat_conversations', ['participant_low', 'last_message_at'])
    op.create_index('ix_conversations_high_activity', 'chat_conversations', ['participant_high', 'last_message_at'])
    
    op.create_table('chat_messages',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('conversation_id', sa.String(length=36), nullable=False),
        sa.Column('sender_id', sa.String(length=36), nullable=False),
        sa.Column('receiver_id', sa.String(length=36), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('sender_id <> receiver_id', name='ck_message_distinct_parties'),
        sa.ForeignKeyConstraint(['conversation_id'], ['chat_conversations.id'], ),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['receiver_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_chat_messages_sender_id', 'chat_messages', ['sender_id'])
    op.create_index('ix_messages_conversation_created', 'chat_messages', ['conversation_id', 'created_at'])
    op.create_index('ix_messages_receiver_read', 'chat_messages', ['receiver_id', 'read_at'])


def downgrade():
    op.drop_index('ix_messages_receiver_read', table_name='chat_messages')
    op.drop_index('ix_messages_conversation_created', table_name='chat_messages')
    op.drop_index('ix_chat_messages_sender_id', table_name='chat_messages')
    op.drop_table('chat_messages')
    op.drop_index('ix_conversations_high_activity', table_name='chat_conversations')
    op.drop_index('ix_conversations_low_activity', table_name='chat_conversations')
    op.drop_index('ix_chat_conversations_request_id', table_name='chat_conversations')
    op.drop_index('ix_chat_conversations_property_id', table_name='chat_conversations')
    op.drop_table('chat_conversations')
    op.drop_index('ix_interactions_listing', table_name='user_listing_interactions')
    op.drop_table('user_listing_interactions')
    op.drop_index('ix_property_requests_desired_location_city', table_name='property_requests')
    op.drop_index('ix_property_requests_user_id', table_name='property_requests')
    op.drop_table('property_requests')
    op.drop_index('ix_properties_city', table_name='properties')
    op.drop_index('ix_properties_user_id', table_name='properties')
    op.drop_table('properties')
    op.drop_index('ix_users_phone_number', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
