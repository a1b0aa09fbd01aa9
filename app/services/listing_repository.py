"""
Listing Repository
Narrow read interface over properties and property requests
"""

from extensions import db
from app.models.property import Property
from app.models.property_request import PropertyRequest
from app.models.interaction import UserListingInteraction, ListingType, InteractionType
from app.errors import ListingNotFound


LISTING_MODELS = {
    ListingType.PROPERTY: Property,
    ListingType.REQUEST: PropertyRequest,
}

# A property is matched against requests and vice versa
COUNTERPART_TYPES = {
    ListingType.PROPERTY: ListingType.REQUEST,
    ListingType.REQUEST: ListingType.PROPERTY,
}


class ListingRepository:
    """Read access to listings for the interaction engine"""
    
    @staticmethod
    def model_for(listing_type):
        return LISTING_MODELS[ListingType(listing_type)]
    
    @staticmethod
    def counterpart_type(listing_type):
        return COUNTERPART_TYPES[ListingType(listing_type)]
    
    @staticmethod
    def get_listing(listing_id, listing_type):
        """Return the listing row or None"""
        if not listing_id:
            return None
        return db.session.get(ListingRepository.model_for(listing_type), listing_id)
    
    @staticmethod
    def get_owner_and_title(listing_id, listing_type):
        """
        Resolve owner, title and slug of a listing
        
        Raises:
            ListingNotFound: if the listing does not exist
        """
        listing = ListingRepository.get_listing(listing_id, listing_type)
        if listing is None:
            raise ListingNotFound(f'{ListingType(listing_type).value} {listing_id} not found')
        
        return {
            'owner_id': listing.user_id,
            'title': listing.title,
            'slug': listing.slug,
        }
    
    @staticmethod
    def get_active_counterpart_likes(owner_id, counterpart_type, liked_by):
        """
        Ids of active `counterpart_type` listings owned by `owner_id` that
        `liked_by` currently likes, newest listing first (ties broken by id).
        """
        counterpart_type = ListingType(counterpart_type)
        model = LISTING_MODELS[counterpart_type]
        
        rows = db.session.query(model.id).join(
            UserListingInteraction,
            db.and_(
                UserListingInteraction.listing_id == model.id,
                UserListingInteraction.listing_type == counterpart_type,
            )
        ).filter(
            model.user_id == owner_id,
            model.is_active.is_(True),
            UserListingInteraction.user_id == liked_by,
            UserListingInteraction.interaction_type == InteractionType.LIKE,
        ).order_by(model.created_at.desc(), model.id.desc()).all()
        
        return [row.id for row in rows]
