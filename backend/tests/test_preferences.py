"""Tests for the export of site-wide forum preferences."""

import pytest

from forum_privacy.models import UserPreference
from forum_privacy.modules.privacy.preferences import export_user_preferences


@pytest.mark.asyncio
async def test_defaults_are_always_exported(db, factory, writer):
    user = await factory.user("dora")

    await export_user_preferences(db, writer, user.id)

    assert writer.preferences == {
        "maildigest": (0, "No digest (single email per forum post)"),
        "autosubscribe": (1, "Yes: when I post, subscribe me to that forum discussion"),
        "trackforums": (0, "No: don't keep track of posts I have seen"),
    }


@pytest.mark.asyncio
async def test_chosen_values_are_described(db, factory, writer):
    user = await factory.user("dora")
    user.mail_digest = 2
    user.auto_subscribe = False
    user.track_forums = True
    await db.flush()

    await export_user_preferences(db, writer, user.id)

    assert writer.preferences["maildigest"] == (
        2,
        "Subjects (daily email with subjects only)",
    )
    assert writer.preferences["autosubscribe"][0] == 0
    assert writer.preferences["trackforums"] == (1, "Yes: highlight new posts for me")


@pytest.mark.asyncio
async def test_mark_read_exported_only_when_set(db, factory, writer):
    user = await factory.user("dora")
    other = await factory.user("eve")
    await factory.add(
        UserPreference(user_id=other.id, name="mark_read_on_notification", value="1")
    )

    await export_user_preferences(db, writer, user.id)

    assert "markasreadonnotification" not in writer.preferences


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("value", "description"),
    [
        ("1", "Posts are marked as read when a notification is sent"),
        ("0", "Posts are not marked as read when a notification is sent"),
    ],
)
async def test_mark_read_value(db, factory, writer, value, description):
    user = await factory.user("dora")
    await factory.add(
        UserPreference(user_id=user.id, name="mark_read_on_notification", value=value)
    )

    await export_user_preferences(db, writer, user.id)

    assert writer.preferences["markasreadonnotification"] == (value, description)


@pytest.mark.asyncio
async def test_unknown_user_exports_nothing(db, writer):
    await export_user_preferences(db, writer, 404)

    assert writer.is_empty
