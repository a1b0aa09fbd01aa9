"""
Conversation Service
Maps a participant pair plus optional listing context onto exactly one conversation
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError
from extensions import db
from app.models.message import Conversation
from app.models.interaction import ListingType
from app.errors import (
    InvalidParticipants, InvalidContext, ConversationNotFound, NotAParticipant, ListingNotFound, UserNotFound,
)
from app.services.listing_repository import ListingRepository
from app.services.user_directory import UserDirectory
from app.utils.decorators import storage_guard
from datetime import datetime


def canonical_pair(user_a, user_b):
    """
    Order two participant ids into (low, high).
    
    Ids are compared as strings, so the order is total and identical in every
    process; (a, b) and (b, a) always produce the same pair.
    """
    if not user_a or not user_b:
        raise InvalidParticipants('Both participants are required')
    
    a, b = str(user_a), str(user_b)
    if a == b:
        raise InvalidParticipants('You cannot start a conversation with yourself')
    return (a, b) if a < b else (b, a)


def context_key(property_id=None, request_id=None):
    if property_id and request_id:
        raise InvalidContext()
    if property_id:
        return f'property:{property_id}'
    if request_id:
        return f'request:{request_id}'
    return ''


class ConversationService:
    """Conversation registry"""
    
    @staticmethod
    def find(participant_low, participant_high, key):
        return Conversation.query.filter_by(
            participant_low=participant_low,
            participant_high=participant_high,
            context_key=key,
        ).first()
    
    @staticmethod
    @storage_guard
    def get_or_create(user_a, user_b, property_id=None, request_id=None):
        """
        Fetch the conversation for this pair and context, creating it if absent
        
        A concurrent caller may insert the same canonical key first; the unique
        constraint then rejects our insert and the winner's row is returned.
        
        Returns:
            Tuple (conversation, created)
        """
        low, high = canonical_pair(user_a, user_b)
        key = context_key(property_id, request_id)
        
        conversation = ConversationService.find(low, high, key)
        if conversation:
            return conversation, False
        
        for participant in (low, high):
            if not UserDirectory.exists(participant):
                raise UserNotFound(f'User {participant} not found')
        if property_id and ListingRepository.get_listing(property_id, ListingType.PROPERTY) is None:
            raise ListingNotFound('Property not found')
        if request_id and ListingRepository.get_listing(request_id, ListingType.REQUEST) is None:
            raise ListingNotFound('Request not found')
        
        now = datetime.utcnow()
        conversation = Conversation(
            participant_low=low,
            participant_high=high,
            property_id=property_id or None,
            request_id=request_id or None,
            context_key=key,
            unread_low=0,
            unread_high=0,
            last_message_at=now,
            created_at=now,
            updated_at=now,
        )
        db.session.add(conversation)
        
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            winner = ConversationService.find(low, high, key)
            if winner is None:
                raise
            current_app.logger.info(f'Conversation {winner.id} created concurrently, reusing it')
            return winner, False
        
        current_app.logger.info(f'Conversation {conversation.id} created for {low}/{high} [{key or "no context"}]')
        return conversation, True
    
    @staticmethod
    def get_or_create_conversation(user_a, user_b, context=None):
        """
        Public entry point; `context` is None, {'property_id': ...} or {'request_id': ...}
        """
        context = context or {}
        conversation, _ = ConversationService.get_or_create(
            user_a,
            user_b,
            property_id=context.get('property_id'),
            request_id=context.get('request_id'),
        )
        return conversation
    
    @staticmethod
    @storage_guard
    def get_conversation(conversation_id):
        conversation = db.session.get(Conversation, conversation_id) if conversation_id else None
        if conversation is None:
            raise ConversationNotFound()
        return conversation
    
    @staticmethod
    def get_for_participant(conversation_id, user_id):
        """Load a conversation, requiring user_id to be one of its participants"""
        conversation = ConversationService.get_conversation(conversation_id)
        if not conversation.has_participant(user_id):
            raise NotAParticipant()
        return conversation
    
    @staticmethod
    def unread_column_for(conversation, user_id):
        """The unread counter column that belongs to user_id"""
        if user_id == conversation.participant_low:
            return Conversation.unread_low
        if user_id == conversation.participant_high:
            return Conversation.unread_high
        raise NotAParticipant()
