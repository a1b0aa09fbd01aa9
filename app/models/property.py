"""
Property Model
"""

from extensions import db
from datetime import datetime
from enum import Enum
import uuid


class PropertyType(str, Enum):
    """Property operation enum"""
    RENT = 'rent'
    SALE = 'sale'


class PropertyCategory(str, Enum):
    """Property category enum"""
    APARTMENT = 'apartment'
    HOUSE = 'house'
    CONDO = 'condo'
    LAND = 'land'
    COMMERCIAL = 'commercial'
    OTHER = 'other'


class Property(db.Model):
    """Property listing published by an owner or broker"""
    
    __tablename__ = 'properties'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    
    # Basic Information
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    property_type = db.Column(db.Enum(PropertyType), nullable=False, default=PropertyType.SALE)
    category = db.Column(db.Enum(PropertyCategory), nullable=False, default=PropertyCategory.APARTMENT)
    
    # Location & Pricing
    city = db.Column(db.String(100), nullable=False, index=True)
    price = db.Column(db.Numeric(15, 2))
    currency = db.Column(db.String(3), default='CLP')
    
    # Statistics
    likes_count = db.Column(db.Integer, nullable=False, default=0)
    
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    
    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    __table_args__ = (
        db.CheckConstraint('likes_count >= 0', name='ck_properties_likes_non_negative'),
    )
    
    def __init__(self, **kwargs):
        """Initialize property"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
    
    def __repr__(self):
        return f'<Property {self.title}>'
