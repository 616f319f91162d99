"""
Privacy Module - per-user data lifecycle for forums.

Features:
- Locate forums holding a user's data, and users holding data in a forum
- Export a user's data as a tree of documents per forum
- Erase a user's data, redacting posts in place
"""

from forum_privacy.modules.privacy.eraser import DataEraser
from forum_privacy.modules.privacy.exporter import DataExporter
from forum_privacy.modules.privacy.locator import DataLocator
from forum_privacy.modules.privacy.provider import ForumPrivacyProvider
from forum_privacy.modules.privacy.tree import PostForest, PostNode
from forum_privacy.modules.privacy.userlist import UserList
from forum_privacy.modules.privacy.writer import FileSystemExportWriter

__all__ = [
    "DataEraser",
    "DataExporter",
    "DataLocator",
    "FileSystemExportWriter",
    "ForumPrivacyProvider",
    "PostForest",
    "PostNode",
    "UserList",
]
