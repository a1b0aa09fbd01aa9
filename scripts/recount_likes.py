"""
Script to rebuild listing like counters from recorded interactions
Usage: python scripts/recount_likes.py [config_name]
"""

import sys
import os

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Now import
from app import create_app
from app.services.popularity_service import PopularityService


def recount_likes(config_name=None):
    """Recompute likes_count for every property and request"""
    app = create_app(config_name)
    
    with app.app_context():
        updated = PopularityService.recount_like_counts()
        print(f"✅ Recounted likes for {updated} listings")
        return updated


if __name__ == '__main__':
    recount_likes(sys.argv[1] if len(sys.argv) > 1 else None)
