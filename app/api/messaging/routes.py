from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import limiter
from app.services.conversation_service import ConversationService
from app.services.messaging_service import MessagingService

messaging_bp = Blueprint('messaging', __name__)


@messaging_bp.route('/conversations', methods=['GET'])
@jwt_required()
def get_conversations():
    user_id = get_jwt_identity()
    return jsonify({'conversations': MessagingService.get_user_conversations(user_id)}), 200


@messaging_bp.route('/conversations', methods=['POST'])
@jwt_required()
@limiter.limit("60 per minute")
def create_conversation():
    """Open (or reuse) the conversation with another user, optionally about a listing"""
    current_user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}
    
    conversation, created = ConversationService.get_or_create(
        current_user_id,
        data.get('user_id'),
        property_id=data.get('property_id'),
        request_id=data.get('request_id'),
    )
    
    return jsonify({
        'success': True,
        'conversation': conversation.to_dict(current_user_id),
    }), 201 if created else 200


@messaging_bp.route('/conversations/<convo_id>/messages', methods=['GET'])
@jwt_required()
def get_messages(convo_id):
    user_id = get_jwt_identity()
    messages = MessagingService.get_conversation_messages(convo_id, user_id)
    return jsonify({'messages': messages}), 200


@messaging_bp.route('/conversations/<convo_id>/messages', methods=['POST'])
@jwt_required()
@limiter.limit("120 per minute")
def send_message(convo_id):
    """Send a message; receiver defaults to the other participant"""
    sender_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}
    
    receiver_id = data.get('receiver_id')
    if not receiver_id:
        conversation = ConversationService.get_for_participant(convo_id, sender_id)
        receiver_id = conversation.other_participant(sender_id)
    
    message = MessagingService.send_message(convo_id, sender_id, receiver_id, data.get('content'))
    return jsonify({
        'success': True,
        'message': MessagingService.serialize_message(message),
    }), 201


@messaging_bp.route('/conversations/<convo_id>/read', methods=['POST'])
@jwt_required()
def mark_as_read(convo_id):
    user_id = get_jwt_identity()
    marked = MessagingService.mark_conversation_as_read(convo_id, user_id)
    return jsonify({'success': True, 'marked': marked}), 200


@messaging_bp.route('/unread-count', methods=['GET'])
@jwt_required()
def unread_count():
    user_id = get_jwt_identity()
    return jsonify({'total_unread': MessagingService.total_unread_for_user(user_id)}), 200
