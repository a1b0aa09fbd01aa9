"""
User Model
"""

from extensions import db
from datetime import datetime
import uuid


class User(db.Model):
    """Marketplace user as seen by the matching and messaging engine"""
    
    __tablename__ = 'users'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone_number = db.Column(db.String(50), index=True)
    avatar_url = db.Column(db.String(2048))
    
    is_active = db.Column(db.Boolean, default=True)
    
    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def __init__(self, **kwargs):
        """Initialize user"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
    
    def to_dict(self):
        """Public display fields"""
        return {
            'id': self.id,
            'name': self.name,
            'avatar_url': self.avatar_url,
        }
    
    def __repr__(self):
        return f'<User {self.name}>'
