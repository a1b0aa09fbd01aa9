"""
Conversation & Message Models
"""

from extensions import db
from datetime import datetime
import uuid


def _iso(value):
    return value.isoformat() if value else None


class Conversation(db.Model):
    """Two-party conversation, keyed by its canonical participant pair and context"""
    
    __tablename__ = 'chat_conversations'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    participant_low = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    participant_high = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    property_id = db.Column(db.String(36), db.ForeignKey('properties.id'), index=True)
    request_id = db.Column(db.String(36), db.ForeignKey('property_requests.id'), index=True)
    # '' / 'property:<id>' / 'request:<id>'; non-null so the unique key also covers context-free pairs
    context_key = db.Column(db.String(64), nullable=False, default='')
    
    unread_low = db.Column(db.Integer, nullable=False, default=0)
    unread_high = db.Column(db.Integer, nullable=False, default=0)
    
    # Timestamps
    last_message_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    __table_args__ = (
        db.UniqueConstraint('participant_low', 'participant_high', 'context_key',
                            name='uq_conversation_participants_context'),
        db.CheckConstraint('participant_low < participant_high', name='ck_conversation_canonical_pair'),
        db.CheckConstraint('property_id IS NULL OR request_id IS NULL', name='ck_conversation_single_context'),
        db.CheckConstraint('unread_low >= 0 AND unread_high >= 0', name='ck_conversation_unread_non_negative'),
        db.Index('ix_conversations_low_activity', 'participant_low', 'last_message_at'),
        db.Index('ix_conversations_high_activity', 'participant_high', 'last_message_at'),
    )
    
    def __init__(self, **kwargs):
        """Initialize conversation"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
    
    @property
    def participants(self):
        return (self.participant_low, self.participant_high)
    
    def has_participant(self, user_id):
        return user_id in self.participants
    
    def other_participant(self, user_id):
        """Return the participant that is not user_id"""
        return self.participant_high if user_id == self.participant_low else self.participant_low
    
    def unread_count_for(self, user_id):
        if user_id == self.participant_low:
            return self.unread_low or 0
        if user_id == self.participant_high:
            return self.unread_high or 0
        return 0
    
    @property
    def context_type(self):
        if self.property_id:
            return 'property'
        if self.request_id:
            return 'request'
        return None
    
    def to_dict(self, current_user_id=None):
        """Convert conversation to dictionary"""
        data = {
            'id': self.id,
            'participant_low': self.participant_low,
            'participant_high': self.participant_high,
            'property_id': self.property_id,
            'request_id': self.request_id,
            'unread_low': self.unread_low or 0,
            'unread_high': self.unread_high or 0,
            'last_message_at': _iso(self.last_message_at),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
        
        if current_user_id and self.has_participant(current_user_id):
            data['other_user_id'] = self.other_participant(current_user_id)
            data['unread_count'] = self.unread_count_for(current_user_id)
        
        return data
    
    def __repr__(self):
        return f'<Conversation {self.id} {self.participant_low}/{self.participant_high}>'


class Message(db.Model):
    __tablename__ = 'chat_messages'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    conversation_id = db.Column(db.String(36), db.ForeignKey('chat_conversations.id'), nullable=False)
    sender_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    receiver_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    read_at = db.Column(db.DateTime)
    
    __table_args__ = (
        db.CheckConstraint('sender_id <> receiver_id', name='ck_message_distinct_parties'),
        db.Index('ix_messages_conversation_created', 'conversation_id', 'created_at'),
        db.Index('ix_messages_receiver_read', 'receiver_id', 'read_at'),
    )
    
    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
    
    def to_dict(self):
        return {
            'id': self.id,
            'conversation_id': self.conversation_id,
            'sender_id': self.sender_id,
            'receiver_id': self.receiver_id,
            'content': self.content,
            'created_at': _iso(self.created_at),
            'read_at': _iso(self.read_at),
        }
    
    def __repr__(self):
        return f'<Message {self.id} in {self.conversation_id}>'
