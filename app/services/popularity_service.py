"""
Popularity Service
Maintains the aggregate like count of listings
"""

from sqlalchemy import func
from extensions import db
from app.models.interaction import UserListingInteraction, InteractionType
from app.services.listing_repository import LISTING_MODELS
from app.utils.decorators import storage_guard


def like_count_delta(previous_type, new_type):
    """+1 when entering 'like', -1 when leaving it, 0 otherwise"""
    was_like = previous_type == InteractionType.LIKE
    is_like = new_type == InteractionType.LIKE
    if is_like and not was_like:
        return 1
    if was_like and not is_like:
        return -1
    return 0


class PopularityService:
    """Like counter adjustments expressed as single atomic UPDATE statements"""
    
    @staticmethod
    @storage_guard
    def adjust_like_count(listing, previous_type, new_type, commit=True):
        """
        Apply the like/unlike transition to the listing's likes_count
        
        With commit=False the UPDATE joins the caller's open transaction.
        
        Returns:
            The listing's like count after the adjustment
        """
        model = type(listing)
        delta = like_count_delta(previous_type, new_type)
        
        if delta > 0:
            expression = model.likes_count + 1
        elif delta < 0:
            expression = db.case((model.likes_count > 0, model.likes_count - 1), else_=0)
        else:
            expression = None
        
        if expression is not None:
            model.query.filter_by(id=listing.id).update(
                {model.likes_count: expression},
                synchronize_session=False
            )
            if commit:
                db.session.commit()
        
        count = db.session.query(model.likes_count).filter_by(id=listing.id).scalar()
        return count or 0
    
    @staticmethod
    @storage_guard
    def recount_like_counts():
        """
        Recompute likes_count of every listing from the interaction table
        
        Returns:
            Number of listing rows rewritten
        """
        total = 0
        for listing_type, model in LISTING_MODELS.items():
            likes = db.session.query(func.count(UserListingInteraction.id)).filter(
                UserListingInteraction.listing_id == model.id,
                UserListingInteraction.listing_type == listing_type,
                UserListingInteraction.interaction_type == InteractionType.LIKE,
            ).scalar_subquery()
            
            total += model.query.update({model.likes_count: likes}, synchronize_session=False)
        
        db.session.commit()
        return total
