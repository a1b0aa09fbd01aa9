"""
API Package
"""

# Import all blueprints for easy access
from app.api.interactions import interactions_bp
from app.api.messaging import messaging_bp

__all__ = [
    'interactions_bp',
    'messaging_bp',
]
