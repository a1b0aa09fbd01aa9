"""
Services Package
Business logic of the interaction, matching and conversation engine
"""

from app.services.listing_repository import ListingRepository
from app.services.user_directory import UserDirectory
from app.services.interaction_service import InteractionService
from app.services.popularity_service import PopularityService
from app.services.match_service import MatchService, MatchResult
from app.services.conversation_service import ConversationService
from app.services.messaging_service import MessagingService
from app.services.notification_service import NotificationService
from app.services.matchmaking_service import MatchmakingService

__all__ = [
    'ListingRepository',
    'UserDirectory',
    'InteractionService',
    'PopularityService',
    'MatchService',
    'MatchResult',
    'ConversationService',
    'MessagingService',
    'NotificationService',
    'MatchmakingService',
]
