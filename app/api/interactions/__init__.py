"""
Interactions Blueprint
"""

from flask import Blueprint
from app.api.interactions.routes import interactions_bp

__all__ = ['interactions_bp']
