"""
Matchmaking Service
Composes interaction recording, like counting, match detection and the
first contact between matched users.
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError
from extensions import db
from app.models.interaction import InteractionType
from app.models.match import ListingMatch
from app.errors import NotAuthenticated, InvalidInteraction, ListingNotFound
from app.utils.decorators import storage_guard
from app.services.listing_repository import ListingRepository
from app.services.interaction_service import InteractionService
from app.services.popularity_service import PopularityService
from app.services.match_service import MatchService
from app.services.conversation_service import ConversationService
from app.services.messaging_service import MessagingService
from app.services.notification_service import NotificationService
from app.services.user_directory import UserDirectory


class MatchmakingService:
    
    @staticmethod
    @storage_guard
    def record_interaction(user_id, listing_id, listing_type, interaction_type):
        """
        Record a like/dislike/skip and react to it
        
        Returns:
            Dict with new_total_likes, new_interaction_type and, for likes on
            someone else's listing, match_details
        """
        if not user_id:
            raise NotAuthenticated()
        if not listing_id:
            raise InvalidInteraction('listing_id is required')
        
        listing_type = InteractionService.parse_listing_type(listing_type)
        interaction_type = InteractionService.parse_interaction_type(interaction_type)
        
        listing = ListingRepository.get_listing(listing_id, listing_type)
        if listing is None:
            raise ListingNotFound()
        
        # Interaction and counter commit together so a failed attempt leaves nothing behind
        previous_type, new_type = InteractionService.record(
            user_id, listing_id, listing_type, interaction_type, commit=False
        )
        total_likes = PopularityService.adjust_like_count(listing, previous_type, new_type, commit=False)
        db.session.commit()
        
        current_app.logger.info(
            f'Interaction {previous_type.value if previous_type else None} -> {new_type.value} '
            f'by {user_id} on {listing_type.value} {listing_id}'
        )
        
        result = {
            'success': True,
            'new_total_likes': total_likes,
            'new_interaction_type': new_type.value,
            'previous_interaction_type': previous_type.value if previous_type else None,
        }
        
        # Repeated likes re-run detection; announcing a match is idempotent
        if new_type == InteractionType.LIKE and listing.user_id != user_id:
            result['match_details'] = MatchmakingService.handle_new_like(user_id, listing, listing_type)
        
        return result
    
    @staticmethod
    def handle_new_like(user_id, listing, listing_type):
        """Run match detection for a fresh like and open the conversation on a match"""
        match = MatchService.detect_mutual_match(user_id, listing, listing_type)
        if not match.matched:
            return {'match_found': False}
        
        owner_id = listing.user_id
        property_listing = match.property_listing
        request_listing = match.request_listing
        
        # The property side is the conversation context no matter which like came last
        conversation, created = ConversationService.get_or_create(
            user_id,
            owner_id,
            property_id=property_listing.id,
        )
        
        details = {
            'match_found': True,
            'conversation_id': conversation.id,
            'property_id': property_listing.id,
            'request_id': request_listing.id,
            'other_user_id': owner_id,
            'new_conversation': created,
            'notification_sent': False,
        }
        
        if MatchmakingService.announce_match(conversation, user_id, owner_id, property_listing, request_listing):
            details['notification_sent'] = MatchmakingService.notify_match(
                conversation.id, [user_id, owner_id], property_listing, request_listing
            )
        
        return details
    
    @staticmethod
    @storage_guard
    def announce_match(conversation, sender_id, receiver_id, property_listing, request_listing):
        """
        Post the automatic match message, once per property/request pair
        
        The match marker and the message commit together, so a failed attempt
        is announced again on retry while a repeated match is not.
        
        Returns:
            True if this call announced the match
        """
        already = ListingMatch.query.filter_by(
            property_id=property_listing.id,
            request_id=request_listing.id,
        ).first()
        if already:
            return False
        
        db.session.add(ListingMatch(
            property_id=property_listing.id,
            request_id=request_listing.id,
            conversation_id=conversation.id,
        ))
        try:
            MessagingService.send_message(
                conversation.id,
                sender_id,
                receiver_id,
                MatchmakingService.match_message(property_listing, request_listing),
            )
        except IntegrityError:
            db.session.rollback()
            current_app.logger.info(
                f'Match {property_listing.id}/{request_listing.id} announced concurrently, skipping'
            )
            return False
        
        return True
    
    @staticmethod
    def match_message(property_listing, request_listing):
        return (
            f"It's a match! We are both interested in each other's listings: "
            f'"{property_listing.title}" and "{request_listing.title}". Let\'s talk.'
        )
    
    @staticmethod
    def notify_match(conversation_id, user_ids, property_listing, request_listing):
        """
        Tell both users about the match over WhatsApp
        
        Failures are logged and reported, the conversation is kept regardless.
        
        Returns:
            True only if every user with a phone number was notified
        """
        dispatcher = NotificationService.from_config()
        link = f"{current_app.config.get('FRONTEND_URL', '')}/dashboard/messages/{conversation_id}"
        text = (
            f'New mutual match on "{property_listing.title}" / "{request_listing.title}". '
            f'Open the conversation: {link}'
        )
        
        results = []
        for uid in user_ids:
            phone = UserDirectory.get_phone_number(uid)
            if phone:
                results.append(dispatcher.send_text(phone, text, context_user_id=uid))
        
        if results and not all(results):
            current_app.logger.warning(f'Match notification for conversation {conversation_id} partially failed')
        
        return bool(results) and all(results)
