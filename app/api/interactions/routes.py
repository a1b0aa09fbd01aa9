"""
Interaction Routes
"""

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import limiter
from app.services.interaction_service import InteractionService
from app.services.matchmaking_service import MatchmakingService

interactions_bp = Blueprint('interactions', __name__)


@interactions_bp.route('/', methods=['POST'], strict_slashes=False)
@jwt_required()
@limiter.limit("120 per minute")
def record_interaction():
    """Record a like/dislike/skip on a property or request"""
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}
    
    result = MatchmakingService.record_interaction(
        user_id,
        data.get('listing_id'),
        data.get('listing_type'),
        data.get('interaction_type'),
    )
    return jsonify(result), 200


@interactions_bp.route('/<listing_type>/<listing_id>', methods=['GET'])
@jwt_required(optional=True)
def get_listing_interaction_details(listing_type, listing_id):
    """Total likes of a listing plus the caller's own interaction, if signed in"""
    user_id = get_jwt_identity()
    details = InteractionService.get_listing_interaction_details(listing_id, listing_type, user_id)
    return jsonify(details), 200
