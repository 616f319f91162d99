"""
Rating Module - ratings given to items of other components.
"""

from forum_privacy.modules.rating.service import RatingService

__all__ = ["RatingService"]
