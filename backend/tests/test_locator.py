"""Tests for locating forums by user and users by forum."""

import time

import pytest

from forum_privacy.models import (
    ContainerKind,
    DigestPreference,
    DiscussionSubscription,
    QueueItem,
    Rating,
    Subscription,
    TrackingPreference,
)
from forum_privacy.modules.privacy.locator import DataLocator
from forum_privacy.modules.rating.service import RatingService


def make_locator(db) -> DataLocator:
    return DataLocator(db, RatingService(db))


@pytest.mark.asyncio
async def test_user_without_data_has_no_containers(db, scenario, factory):
    stranger = await factory.user("stranger")

    assert await make_locator(db).find_containers_for_user(stranger.id) == set()


@pytest.mark.asyncio
async def test_authors_and_readers_are_located(db, scenario):
    locator = make_locator(db)

    for user in (scenario.a, scenario.b, scenario.c):
        assert await locator.find_containers_for_user(user.id) == {scenario.container.id}


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", ["digest", "subscription", "tracking", "discussion_sub"])
async def test_preference_rows_are_located(db, factory, kind):
    author = await factory.user("author")
    user = await factory.user("subject")
    container, forum = await factory.forum("Prefs")
    discussion = await factory.discussion(forum, author, "Thread")
    await factory.post(discussion, author, "Root")

    row = {
        "digest": DigestPreference(forum_id=forum.id, user_id=user.id, mail_digest=1),
        "subscription": Subscription(forum_id=forum.id, user_id=user.id),
        "tracking": TrackingPreference(forum_id=forum.id, user_id=user.id),
        "discussion_sub": DiscussionSubscription(
            forum_id=forum.id,
            discussion_id=discussion.id,
            user_id=user.id,
            preference=int(time.time()),
        ),
    }[kind]
    await factory.add(row)

    assert await make_locator(db).find_containers_for_user(user.id) == {container.id}


@pytest.mark.asyncio
async def test_rating_locates_forum(db, scenario, factory):
    rater = await factory.user("rater")
    await factory.add(
        Rating(
            container_id=scenario.container.id,
            component="forum",
            rating_area="post",
            item_id=scenario.p1.id,
            user_id=rater.id,
            value=3,
        )
    )

    assert await make_locator(db).find_containers_for_user(rater.id) == {scenario.container.id}


@pytest.mark.asyncio
async def test_queue_rows_alone_are_not_user_data(db, scenario, factory):
    queued = await factory.user("queued")
    await factory.add(
        QueueItem(user_id=queued.id, discussion_id=scenario.d1.id, post_id=scenario.p1.id)
    )

    assert await make_locator(db).find_containers_for_user(queued.id) == set()


@pytest.mark.asyncio
async def test_only_forum_containers_are_returned(db, factory):
    user = await factory.user("member")
    _, forum = await factory.forum("Real")
    # A non-forum container whose instance id collides with the forum id
    other, _ = await factory.forum("Category", kind=ContainerKind.CATEGORY)
    other.instance_id = forum.id
    await factory.add(Subscription(forum_id=forum.id, user_id=user.id))

    found = await make_locator(db).find_containers_for_user(user.id)

    assert other.id not in found
    assert len(found) == 1


@pytest.mark.asyncio
async def test_several_forums_are_unioned(db, factory):
    user = await factory.user("member")
    first, forum_one = await factory.forum("One")
    second, forum_two = await factory.forum("Two")
    await factory.forum("Three")
    await factory.add(
        Subscription(forum_id=forum_one.id, user_id=user.id),
        TrackingPreference(forum_id=forum_two.id, user_id=user.id),
    )

    assert await make_locator(db).find_containers_for_user(user.id) == {first.id, second.id}


@pytest.mark.asyncio
async def test_users_in_container_are_listed_per_category(db, scenario, factory):
    await factory.add(
        Subscription(forum_id=scenario.forum.id, user_id=scenario.b.id),
        Rating(
            container_id=scenario.container.id,
            component="forum",
            rating_area="post",
            item_id=scenario.p3.id,
            user_id=scenario.c.id,
            value=1,
        ),
    )

    locator = make_locator(db)
    entries = await locator.find_users_in_container(scenario.container.id)
    users = await locator.get_users_in_container(scenario.container.id)

    # A: discussion + posts, B: posts + subscription, C: read marker + rating
    assert sorted(entries) == sorted(
        [scenario.a.id, scenario.a.id, scenario.b.id, scenario.b.id, scenario.c.id, scenario.c.id]
    )
    assert users.user_ids == sorted([scenario.a.id, scenario.b.id, scenario.c.id])


@pytest.mark.asyncio
async def test_users_in_other_forums_are_not_listed(db, scenario, factory):
    outsider = await factory.user("outsider")
    _, other_forum = await factory.forum("Elsewhere")
    await factory.add(Subscription(forum_id=other_forum.id, user_id=outsider.id))

    users = await make_locator(db).get_users_in_container(scenario.container.id)

    assert outsider.id not in users.user_ids


@pytest.mark.asyncio
async def test_non_forum_container_has_no_users(db, factory):
    container, _ = await factory.forum("Category", kind=ContainerKind.CATEGORY)

    assert await make_locator(db).find_users_in_container(container.id) == []


@pytest.mark.asyncio
async def test_missing_container_has_no_users(db):
    assert await make_locator(db).find_users_in_container(12345) == []
