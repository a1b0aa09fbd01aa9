"""
Property Request Model
"""

from extensions import db
from datetime import datetime
import uuid


class PropertyRequest(db.Model):
    """A buyer/tenant request describing the property they are looking for"""
    
    __tablename__ = 'property_requests'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    
    # Desired location & budget
    desired_location_city = db.Column(db.String(100), nullable=False, index=True)
    desired_location_neighborhood = db.Column(db.String(100))
    budget_max = db.Column(db.Numeric(15, 2))
    
    # Statistics
    likes_count = db.Column(db.Integer, nullable=False, default=0)
    
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    
    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    __table_args__ = (
        db.CheckConstraint('likes_count >= 0', name='ck_property_requests_likes_non_negative'),
    )
    
    def __init__(self, **kwargs):
        """Initialize request"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
    
    def __repr__(self):
        return f'<PropertyRequest {self.title}>'
