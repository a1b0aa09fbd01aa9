"""
Engine error taxonomy

Expected, user-triggerable failures are raised as EngineError subclasses and
rendered as structured JSON by the error handler registered in create_app.
"""


class EngineError(Exception):
    """Base class for failures reported back to the caller"""
    
    status_code = 400
    code = 'engine_error'
    default_message = 'The request could not be processed'
    
    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)
    
    def to_dict(self):
        return {
            'success': False,
            'error': self.code,
            'message': self.message,
        }


# --- InvalidInput ---

class InvalidInput(EngineError):
    status_code = 400
    code = 'invalid_input'
    default_message = 'Invalid input'


class NotAuthenticated(InvalidInput):
    status_code = 401
    code = 'not_authenticated'
    default_message = 'User is not authenticated'


class InvalidInteraction(InvalidInput):
    code = 'invalid_interaction'
    default_message = 'Invalid listing or interaction type'


class InvalidParticipants(InvalidInput):
    code = 'invalid_participants'
    default_message = 'A conversation needs two different participants'


class InvalidContext(InvalidInput):
    code = 'invalid_context'
    default_message = 'A conversation can reference a property or a request, not both'


class EmptyMessage(InvalidInput):
    code = 'empty_message'
    default_message = 'Message content cannot be empty'


# --- NotFound ---

class NotFound(EngineError):
    status_code = 404
    code = 'not_found'
    default_message = 'Resource not found'


class ListingNotFound(NotFound):
    code = 'listing_not_found'
    default_message = 'Listing not found'


class ConversationNotFound(NotFound):
    code = 'conversation_not_found'
    default_message = 'Conversation not found'


class UserNotFound(NotFound):
    code = 'user_not_found'
    default_message = 'User not found'


# --- PermissionDenied ---

class PermissionDenied(EngineError):
    status_code = 403
    code = 'permission_denied'
    default_message = 'Permission denied'


class NotAParticipant(PermissionDenied):
    code = 'not_a_participant'
    default_message = 'User is not a participant of this conversation'


# --- StorageError ---

class StorageError(EngineError):
    status_code = 503
    code = 'storage_unavailable'
    default_message = 'The data store is temporarily unavailable, please retry'
    
    def to_dict(self):
        data = super().to_dict()
        data['retryable'] = True
        return data
