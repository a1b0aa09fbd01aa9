"""
User Listing Interaction Model
"""

from extensions import db
from datetime import datetime
from enum import Enum
import uuid


class ListingType(str, Enum):
    """Kinds of listing a user can interact with"""
    PROPERTY = 'property'
    REQUEST = 'request'


class InteractionType(str, Enum):
    """Preference a user expresses toward a listing"""
    LIKE = 'like'
    DISLIKE = 'dislike'
    SKIP = 'skip'


class UserListingInteraction(db.Model):
    """Latest preference of a user on a listing; one row per (user, listing, type)"""
    
    __tablename__ = 'user_listing_interactions'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    listing_id = db.Column(db.String(36), nullable=False)
    listing_type = db.Column(db.Enum(ListingType), nullable=False)
    interaction_type = db.Column(db.Enum(InteractionType), nullable=False)
    
    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    __table_args__ = (
        db.UniqueConstraint('user_id', 'listing_id', 'listing_type', name='uq_user_listing_interaction'),
        db.Index('ix_interactions_listing', 'listing_id', 'listing_type', 'interaction_type'),
    )
    
    def __init__(self, **kwargs):
        """Initialize interaction"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
    
    def __repr__(self):
        return f'<UserListingInteraction {self.user_id} {self.interaction_type.value} {self.listing_type.value}:{self.listing_id}>'
