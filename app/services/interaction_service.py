"""
Interaction Service
Keeps the latest like/dislike/skip of each user on each listing
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError
from extensions import db
from app.models.interaction import UserListingInteraction, ListingType, InteractionType
from app.errors import NotAuthenticated, InvalidInteraction, StorageError, ListingNotFound, UserNotFound
from app.utils.decorators import storage_guard
from app.services.listing_repository import ListingRepository
from app.services.user_directory import UserDirectory
from datetime import datetime


class InteractionService:
    """Interaction store: explicit upsert keyed by (user, listing, listing type)"""
    
    # Each attempt is an independent read + conditional write
    MAX_ATTEMPTS = 5
    
    @staticmethod
    def parse_listing_type(value):
        try:
            return ListingType(value)
        except ValueError:
            raise InvalidInteraction(f'Unknown listing type: {value!r}')
    
    @staticmethod
    def parse_interaction_type(value):
        try:
            return InteractionType(value)
        except ValueError:
            raise InvalidInteraction(f'Unknown interaction type: {value!r}')
    
    @staticmethod
    def find(user_id, listing_id, listing_type):
        return UserListingInteraction.query.filter_by(
            user_id=user_id,
            listing_id=listing_id,
            listing_type=listing_type,
        ).first()
    
    @staticmethod
    @storage_guard
    def record(user_id, listing_id, listing_type, new_type, commit=True):
        """
        Upsert the user's interaction on a listing
        
        The existing row (if any) is overwritten in place, never appended to.
        The write is conditional on the value that was read, so two callers
        racing on the same row each observe a distinct previous value and a
        lost update cannot hide a like/unlike transition from the counter.
        
        Args:
            user_id: Acting user
            listing_id: Listing the preference is about
            listing_type: 'property' or 'request'
            new_type: 'like', 'dislike' or 'skip'
            commit: When False the write is only flushed and the caller commits,
                so it lands in the same transaction as the counter update
        
        Returns:
            Tuple (previous_type or None, new_type) as InteractionType members
        """
        if not user_id:
            raise NotAuthenticated()
        if not listing_id:
            raise InvalidInteraction('listing_id is required')
        
        listing_type = InteractionService.parse_listing_type(listing_type)
        new_type = InteractionService.parse_interaction_type(new_type)
        if not UserDirectory.exists(user_id):
            raise UserNotFound()
        
        for _ in range(InteractionService.MAX_ATTEMPTS):
            existing = InteractionService.find(user_id, listing_id, listing_type)
            now = datetime.utcnow()
            
            if existing is None:
                db.session.add(UserListingInteraction(
                    user_id=user_id,
                    listing_id=listing_id,
                    listing_type=listing_type,
                    interaction_type=new_type,
                    created_at=now,
                    updated_at=now,
                ))
                try:
                    if commit:
                        db.session.commit()
                    else:
                        db.session.flush()
                except IntegrityError:
                    # A concurrent first interaction won the insert
                    db.session.rollback()
                    continue
                return None, new_type
            
            previous_type = existing.interaction_type
            updated = UserListingInteraction.query.filter_by(
                id=existing.id,
                interaction_type=previous_type,
            ).update({
                UserListingInteraction.interaction_type: new_type,
                UserListingInteraction.updated_at: now,
            }, synchronize_session=False)
            
            if updated:
                if commit:
                    db.session.commit()
                return previous_type, new_type
            
            # Lost to a concurrent writer; start over from a fresh snapshot
            db.session.rollback()
        
        current_app.logger.error(
            f'Interaction upsert for user {user_id} on {listing_type.value}:{listing_id} '
            f'did not settle after {InteractionService.MAX_ATTEMPTS} attempts'
        )
        raise StorageError('The interaction is being updated concurrently, please retry')
    
    @staticmethod
    @storage_guard
    def get_listing_interaction_details(listing_id, listing_type, user_id=None):
        """Total likes of a listing and, when user_id is given, that user's current interaction"""
        listing_type = InteractionService.parse_listing_type(listing_type)
        listing = ListingRepository.get_listing(listing_id, listing_type)
        if listing is None:
            raise ListingNotFound()
        
        current = None
        if user_id:
            interaction = InteractionService.find(user_id, listing_id, listing_type)
            if interaction:
                current = interaction.interaction_type.value
        
        return {
            'total_likes': listing.likes_count or 0,
            'current_user_interaction': current,
        }
