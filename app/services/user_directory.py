"""
User Directory
Display fields and contact data for conversation participants
"""

from extensions import db
from app.models.user import User


class UserDirectory:
    """Lookups of user profile data"""
    
    UNKNOWN_NAME = 'Unknown user'
    
    @staticmethod
    def get_user(user_id):
        return db.session.get(User, user_id) if user_id else None
    
    @staticmethod
    def exists(user_id):
        return UserDirectory.get_user(user_id) is not None
    
    @staticmethod
    def get_display_name(user_id):
        """Return {'id', 'name', 'avatar_url'}; unknown users get a placeholder name"""
        user = UserDirectory.get_user(user_id)
        if user is None:
            return {'id': user_id, 'name': UserDirectory.UNKNOWN_NAME, 'avatar_url': None}
        return user.to_dict()
    
    @staticmethod
    def get_phone_number(user_id):
        user = UserDirectory.get_user(user_id)
        return user.phone_number if user else None
