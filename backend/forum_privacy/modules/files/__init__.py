"""
Files Module - storage of files attached to items.
"""

from forum_privacy.modules.files.service import FileStorageService

__all__ = ["FileStorageService"]
