"""
Human-readable path segments for exported forum documents.
"""

from datetime import datetime

from slugify import slugify

from forum_privacy.core.transform import epoch

DISCUSSIONS_LABEL = "Discussions"
POSTS_LABEL = "Posts"

# Keeps labels usable as directory names
MAX_LABEL_LENGTH = 100


def _label(*parts: object) -> str:
    return "-".join(str(part) for part in parts if part not in (None, ""))


def discussion_area(discussion_id: int, name: str) -> list[str]:
    """Path of a discussion document."""
    return [
        DISCUSSIONS_LABEL,
        _label(discussion_id, slugify(name, max_length=MAX_LABEL_LENGTH)),
    ]


def posts_area(discussion_id: int, name: str) -> list[str]:
    """Path under which the posts of a discussion are nested."""
    return [*discussion_area(discussion_id, name), POSTS_LABEL]


def post_area(post_id: int, subject: str, created_at: datetime) -> list[str]:
    """Segment of one post, appended to its parent's path."""
    return [
        _label(
            epoch(created_at),
            slugify(subject, max_length=MAX_LABEL_LENGTH),
            post_id,
        )
    ]
