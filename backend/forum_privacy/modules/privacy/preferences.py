"""
Export of the user's site-wide forum preferences.
"""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.models.user import User, UserPreference
from forum_privacy.modules.privacy import formatting
from forum_privacy.modules.privacy.categories import COMPONENT
from forum_privacy.modules.privacy.collaborators import ExportWriter

MARK_READ_ON_NOTIFICATION = "mark_read_on_notification"


async def export_user_preferences(
    db: AsyncSession, writer: ExportWriter, user_id: int
) -> None:
    """
    Export the user's forum defaults.

    Digest type, auto-subscription and read tracking are always exported;
    marking posts read from notifications only when the user set it.
    """
    user = await db.get(User, user_id)
    if user is None:
        logger.warning(f"User {user_id} not found, no preferences to export")
        return

    await writer.export_user_preference(
        COMPONENT,
        "maildigest",
        user.mail_digest,
        formatting.site_digest_description(user.mail_digest),
    )
    await writer.export_user_preference(
        COMPONENT,
        "autosubscribe",
        int(user.auto_subscribe),
        "Yes: when I post, subscribe me to that forum discussion"
        if user.auto_subscribe
        else "No: don't automatically subscribe me to forum discussions",
    )
    await writer.export_user_preference(
        COMPONENT,
        "trackforums",
        int(user.track_forums),
        "Yes: highlight new posts for me"
        if user.track_forums
        else "No: don't keep track of posts I have seen",
    )

    result = await db.execute(
        select(UserPreference.value).where(
            UserPreference.user_id == user_id,
            UserPreference.name == MARK_READ_ON_NOTIFICATION,
        )
    )
    mark_read = result.scalar_one_or_none()
    if mark_read is not None:
        enabled = mark_read not in ("0", "")
        await writer.export_user_preference(
            COMPONENT,
            "markasreadonnotification",
            mark_read,
            "Posts are marked as read when a notification is sent"
            if enabled
            else "Posts are not marked as read when a notification is sent",
        )
