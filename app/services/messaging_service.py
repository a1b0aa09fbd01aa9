"""
Messaging Service
Message delivery, unread counters and conversation listings
"""

from flask import current_app
from sqlalchemy import func, or_
from extensions import db
from app.models.message import Conversation, Message
from app.models.interaction import ListingType
from app.errors import EmptyMessage, NotAParticipant, NotFound
from app.utils.decorators import storage_guard
from app.services.conversation_service import ConversationService
from app.services.listing_repository import ListingRepository
from app.services.user_directory import UserDirectory
from datetime import datetime


PREVIEW_LENGTH = 100


def _preview(content):
    if content is None or len(content) <= PREVIEW_LENGTH:
        return content
    return content[:PREVIEW_LENGTH].rstrip() + '...'


class MessagingService:
    """Messaging channel"""
    
    @staticmethod
    def serialize_message(message):
        data = message.to_dict()
        data['sender'] = UserDirectory.get_display_name(message.sender_id)
        return data
    
    @staticmethod
    @storage_guard
    def send_message(conversation_id, sender_id, receiver_id, content):
        """
        Append a message and bump the receiver's unread counter
        
        The counter increment and last_message_at change are a single UPDATE
        committed together with the message insert.
        
        Returns:
            The persisted Message
        """
        if content is None or not str(content).strip():
            raise EmptyMessage()
        
        conversation = ConversationService.get_conversation(conversation_id)
        
        if not conversation.has_participant(sender_id):
            raise NotAParticipant('You are not allowed to send messages in this conversation')
        if not conversation.has_participant(receiver_id):
            raise NotAParticipant('The receiver is not part of this conversation')
        if sender_id == receiver_id:
            raise NotAParticipant('Sender and receiver cannot be the same user')
        
        now = datetime.utcnow()
        message = Message(
            conversation_id=conversation.id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=str(content).strip(),
            created_at=now,
        )
        db.session.add(message)
        
        counter = ConversationService.unread_column_for(conversation, receiver_id)
        Conversation.query.filter_by(id=conversation.id).update({
            counter: counter + 1,
            Conversation.last_message_at: now,
            Conversation.updated_at: now,
        }, synchronize_session=False)
        db.session.commit()
        
        return message
    
    @staticmethod
    @storage_guard
    def mark_conversation_as_read(conversation_id, caller_id):
        """
        Stamp read_at on every unread message addressed to caller_id and reset
        the caller's unread counter. The counter reset is issued last.
        
        Returns:
            Number of messages marked read
        """
        conversation = ConversationService.get_for_participant(conversation_id, caller_id)
        counter = ConversationService.unread_column_for(conversation, caller_id)
        now = datetime.utcnow()
        
        marked = Message.query.filter(
            Message.conversation_id == conversation.id,
            Message.receiver_id == caller_id,
            Message.read_at.is_(None),
        ).update({Message.read_at: now}, synchronize_session=False)
        
        Conversation.query.filter_by(id=conversation.id).update({
            counter: 0,
            Conversation.updated_at: now,
        }, synchronize_session=False)
        db.session.commit()
        
        return marked
    
    @staticmethod
    @storage_guard
    def total_unread_for_user(user_id):
        """Sum of the user's own unread counter across all their conversations"""
        if not user_id:
            return 0
        
        own_counter = db.case(
            (Conversation.participant_low == user_id, Conversation.unread_low),
            else_=Conversation.unread_high,
        )
        total = db.session.query(func.coalesce(func.sum(own_counter), 0)).filter(
            or_(Conversation.participant_low == user_id, Conversation.participant_high == user_id)
        ).scalar()
        return int(total or 0)
    
    @staticmethod
    @storage_guard
    def get_conversation_messages(conversation_id, caller_id):
        """Mark the conversation read for the caller, then return its messages oldest first"""
        MessagingService.mark_conversation_as_read(conversation_id, caller_id)
        
        messages = Message.query.filter_by(conversation_id=conversation_id)\
            .order_by(Message.created_at.asc(), Message.id.asc()).all()
        return [MessagingService.serialize_message(m) for m in messages]
    
    @staticmethod
    def _context_summary(conversation):
        if conversation.property_id:
            listing_id, listing_type = conversation.property_id, ListingType.PROPERTY
        elif conversation.request_id:
            listing_id, listing_type = conversation.request_id, ListingType.REQUEST
        else:
            return {'context_type': None, 'context_title': None, 'context_slug': None}
        
        try:
            listing = ListingRepository.get_owner_and_title(listing_id, listing_type)
        except NotFound:
            current_app.logger.warning(
                f'Conversation {conversation.id} references missing {listing_type.value} {listing_id}'
            )
            listing = {'title': None, 'slug': None}
        
        return {
            'context_type': listing_type.value,
            'context_title': listing['title'],
            'context_slug': listing['slug'],
        }
    
    @staticmethod
    @storage_guard
    def get_user_conversations(user_id):
        """Conversation summaries for user_id, most recent activity first"""
        last_content = db.session.query(Message.content)\
            .filter(Message.conversation_id == Conversation.id)\
            .order_by(Message.created_at.desc(), Message.id.desc())\
            .limit(1)\
            .correlate(Conversation)\
            .scalar_subquery()
        
        rows = db.session.query(Conversation, last_content.label('last_message_content')).filter(
            or_(Conversation.participant_low == user_id, Conversation.participant_high == user_id)
        ).order_by(Conversation.last_message_at.desc(), Conversation.id.asc()).all()
        
        summaries = []
        for conversation, content in rows:
            summary = {
                'id': conversation.id,
                'other_user': UserDirectory.get_display_name(conversation.other_participant(user_id)),
                'last_message_content': _preview(content),
                'last_message_at': conversation.last_message_at.isoformat() if conversation.last_message_at else None,
                'unread_count': conversation.unread_count_for(user_id),
                'property_id': conversation.property_id,
                'request_id': conversation.request_id,
            }
            summary.update(MessagingService._context_summary(conversation))
            summaries.append(summary)
        
        return summaries
