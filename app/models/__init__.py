"""
Models package initialization
Import all models here for easy access
"""

from app.models.user import User
from app.models.property import Property, PropertyType, PropertyCategory
from app.models.property_request import PropertyRequest
from app.models.interaction import UserListingInteraction, ListingType, InteractionType
from app.models.message import Conversation, Message
from app.models.match import ListingMatch

__all__ = [
    'User',
    'Property',
    'PropertyType',
    'PropertyCategory',
    'PropertyRequest',
    'UserListingInteraction',
    'ListingType',
    'InteractionType',
    'Conversation',
    'Message',
    'ListingMatch',
]
