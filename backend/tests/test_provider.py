"""End-to-end tests through the privacy provider."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from forum_privacy.models import Post, Subscription
from forum_privacy.modules.privacy import ForumPrivacyProvider


@pytest.mark.asyncio
async def test_locate_export_then_erase(db, scenario, writer):
    cache = AsyncMock()
    provider = ForumPrivacyProvider(db, writer, cache=cache)

    container_ids = await provider.find_containers_for_user(scenario.c.id)
    assert container_ids == {scenario.container.id}

    await provider.export(scenario.c.id, container_ids)
    assert writer.exported_post_ids([scenario.p1, scenario.p2, scenario.p3]) == {
        scenario.p1.id,
        scenario.p2.id,
    }

    await provider.purge_user_data(scenario.c.id, container_ids)
    assert await provider.find_containers_for_user(scenario.c.id) == set()
    remaining = await provider.find_users_in_container(scenario.container.id)
    assert sorted(remaining) == [scenario.a.id, scenario.a.id, scenario.b.id]
    cache.invalidate.assert_awaited_once_with({scenario.forum.id})


@pytest.mark.asyncio
async def test_erased_author_still_located_through_redacted_posts(db, scenario):
    provider = ForumPrivacyProvider(db)

    await provider.purge_user_data(scenario.b.id, [scenario.container.id])

    users = await provider.get_users_in_container(scenario.container.id)
    assert scenario.b.id in users.user_ids
    posts = (await db.execute(select(Post.id).order_by(Post.id))).scalars().all()
    assert posts == [scenario.p1.id, scenario.p2.id, scenario.p3.id]


@pytest.mark.asyncio
async def test_whole_container_purge(db, scenario, factory):
    await factory.add(Subscription(forum_id=scenario.forum.id, user_id=scenario.b.id))
    provider = ForumPrivacyProvider(db)

    await provider.purge_container(scenario.container.id)

    assert await provider.find_users_in_container(scenario.container.id) == []
    assert await provider.find_containers_for_user(scenario.b.id) == set()


@pytest.mark.asyncio
async def test_batch_purge_through_provider(db, scenario):
    provider = ForumPrivacyProvider(db)

    await provider.purge_users_in_container(scenario.container.id, [scenario.c.id])

    assert scenario.c.id not in await provider.find_users_in_container(
        scenario.container.id
    )


@pytest.mark.asyncio
async def test_export_requires_writer(db, scenario):
    provider = ForumPrivacyProvider(db)

    with pytest.raises(ValueError):
        await provider.export(scenario.a.id, [scenario.container.id])
    with pytest.raises(ValueError):
        await provider.export_user_preferences(scenario.a.id)


@pytest.mark.asyncio
async def test_export_of_nothing_needs_no_writer(db):
    await ForumPrivacyProvider(db).export(1, [])
