"""
Listing Match Model
"""

from extensions import db
from datetime import datetime
import uuid


class ListingMatch(db.Model):
    """A mutual match between a property and a request that has been announced"""
    
    __tablename__ = 'listing_matches'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    property_id = db.Column(db.String(36), db.ForeignKey('properties.id'), nullable=False)
    request_id = db.Column(db.String(36), db.ForeignKey('property_requests.id'), nullable=False)
    conversation_id = db.Column(db.String(36), db.ForeignKey('chat_conversations.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    
    __table_args__ = (
        db.UniqueConstraint('property_id', 'request_id', name='uq_listing_match_pair'),
    )
    
    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
    
    def __repr__(self):
        return f'<ListingMatch {self.property_id}/{self.request_id}>'
