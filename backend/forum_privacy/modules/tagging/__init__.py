"""
Tagging Module - tags applied to items of other components.
"""

from forum_privacy.modules.tagging.service import TagService

__all__ = ["TagService"]
