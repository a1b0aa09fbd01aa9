"""
Match Service
Detects mutual interest between a property owner and a request owner
"""

from dataclasses import dataclass
from typing import Any, Optional
from flask import current_app
from app.models.interaction import ListingType
from app.services.listing_repository import ListingRepository
from app.utils.decorators import storage_guard


@dataclass
class MatchResult:
    """Outcome of a mutual-match check"""
    matched: bool
    liked_listing: Any = None
    liked_type: Optional[ListingType] = None
    reciprocal_listing: Any = None
    reciprocal_type: Optional[ListingType] = None
    
    @property
    def property_listing(self):
        """The property side of the pair, whichever one was just liked"""
        if not self.matched:
            return None
        if self.liked_type == ListingType.PROPERTY:
            return self.liked_listing
        return self.reciprocal_listing
    
    @property
    def request_listing(self):
        if not self.matched:
            return None
        if self.liked_type == ListingType.REQUEST:
            return self.liked_listing
        return self.reciprocal_listing


class MatchService:
    
    @staticmethod
    @storage_guard
    def detect_mutual_match(liker_user_id, liked_listing, liked_type):
        """
        Check whether the owner of `liked_listing` already likes one of the
        liker's active counterpart listings.
        
        When several counterpart listings qualify the newest one is picked, so
        repeated checks against the same state return the same listing.
        Creating the conversation is left to the caller.
        """
        liked_type = ListingType(liked_type)
        owner_id = liked_listing.user_id
        
        if not liker_user_id or liker_user_id == owner_id:
            return MatchResult(matched=False)
        
        counterpart_type = ListingRepository.counterpart_type(liked_type)
        candidate_ids = ListingRepository.get_active_counterpart_likes(
            owner_id=liker_user_id,
            counterpart_type=counterpart_type,
            liked_by=owner_id,
        )
        if not candidate_ids:
            return MatchResult(matched=False)
        
        reciprocal = ListingRepository.get_listing(candidate_ids[0], counterpart_type)
        current_app.logger.info(
            f'Mutual match: user {liker_user_id} liked {liked_type.value} {liked_listing.id}, '
            f'owner {owner_id} likes {counterpart_type.value} {reciprocal.id}'
        )
        
        return MatchResult(
            matched=True,
            liked_listing=liked_listing,
            liked_type=liked_type,
            reciprocal_listing=reciprocal,
            reciprocal_type=counterpart_type,
        )
