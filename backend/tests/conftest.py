"""Shared fixtures: in-memory database, row factories and a recording writer."""

from collections.abc import AsyncIterator
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from forum_privacy.core.database import Base
from forum_privacy.models import (
    Container,
    ContainerKind,
    Discussion,
    Forum,
    MessageFormat,
    Post,
    ReadMarker,
    User,
)


class RecordingWriter:
    """Export writer keeping everything it is given in memory."""

    def __init__(self) -> None:
        self.data: dict[tuple[int, tuple[str, ...]], dict[str, Any]] = {}
        self.metadata: dict[tuple[int, tuple[str, ...]], dict[str, tuple[Any, str]]] = {}
        self.related: dict[tuple[int, tuple[str, ...]], dict[str, Any]] = {}
        self.area_files: list[tuple[int, tuple[str, ...], str, str, int]] = []
        self.preferences: dict[str, tuple[Any, str]] = {}

    async def export_data(self, container_id, path, data):
        self.data[(container_id, tuple(path))] = data

    async def export_metadata(self, container_id, path, key, value, description):
        self.metadata.setdefault((container_id, tuple(path)), {})[key] = (value, description)

    async def export_related_data(self, container_id, path, name, data):
        self.related.setdefault((container_id, tuple(path)), {})[name] = data

    async def export_area_files(self, container_id, path, component, file_area, item_id):
        self.area_files.append((container_id, tuple(path), component, file_area, item_id))

    def rewrite_embedded_references(self, container_id, path, component, file_area, item_id, text):
        return text.replace("@@PLUGINFILE@@", f"files/{file_area}/{item_id}")

    async def export_user_preference(self, component, key, value, description):
        self.preferences[key] = (value, description)

    @property
    def is_empty(self) -> bool:
        return not (
            self.data or self.metadata or self.related or self.area_files or self.preferences
        )

    def post_path(self, post_id: int) -> tuple[int, tuple[str, ...]] | None:
        """Key of the exported document of a post, if it was exported."""
        for key in self.data:
            _, path = key
            if "Posts" in path and path[-1].endswith(f"-{post_id}"):
                return key
        return None

    def exported_post_ids(self, posts: list[Post]) -> set[int]:
        return {post.id for post in posts if self.post_path(post.id) is not None}


class Factory:
    """Creates rows with increasing timestamps."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._clock = datetime(2024, 3, 1, 9, 0, 0)

    def tick(self) -> datetime:
        self._clock += timedelta(minutes=5)
        return self._clock

    async def add(self, *rows: Any) -> None:
        self.db.add_all(rows)
        await self.db.flush()

    async def user(self, username: str) -> User:
        user = User(username=username, email=f"{username}@example.com")
        await self.add(user)
        return user

    async def forum(
        self, name: str = "General", kind: ContainerKind = ContainerKind.FORUM
    ) -> tuple[Container, Forum]:
        forum = Forum(name=name, intro=f"About {name}")
        await self.add(forum)
        container = Container(kind=kind, instance_id=forum.id)
        await self.add(container)
        return container, forum

    async def discussion(self, forum: Forum, author: User, name: str) -> Discussion:
        now = self.tick()
        discussion = Discussion(
            forum_id=forum.id,
            author_id=author.id,
            name=name,
            created_at=now,
            updated_at=now,
        )
        await self.add(discussion)
        return discussion

    async def post(
        self,
        discussion: Discussion,
        author: User,
        subject: str,
        parent: Post | None = None,
        message: str | None = None,
        message_format: int = MessageFormat.HTML,
    ) -> Post:
        now = self.tick()
        post = Post(
            discussion_id=discussion.id,
            parent_id=parent.id if parent else None,
            author_id=author.id,
            subject=subject,
            message=message if message is not None else f"<p>{subject} body</p>",
            message_format=message_format,
            created_at=now,
            modified_at=now,
        )
        await self.add(post)
        if parent is None and discussion.first_post_id is None:
            discussion.first_post_id = post.id
            await self.db.flush()
        return post

    async def read(self, user: User, post: Post, forum: Forum) -> ReadMarker:
        now = self.tick()
        marker = ReadMarker(
            user_id=user.id,
            forum_id=forum.id,
            discussion_id=post.discussion_id,
            post_id=post.id,
            first_read=now,
            last_read=now + timedelta(days=1),
        )
        await self.add(marker)
        return marker


@pytest_asyncio.fixture
async def db() -> AsyncIterator[AsyncSession]:
    """Session on a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest_asyncio.fixture
async def factory(db: AsyncSession) -> Factory:
    return Factory(db)


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest_asyncio.fixture
async def scenario(factory: Factory) -> SimpleNamespace:
    """
    Forum F with discussion D1 started by A.

    P1 (A) is the root, P2 (B) replies to P1 and was read by C,
    P3 (A) replies to P2.
    """
    a = await factory.user("alice")
    b = await factory.user("bob")
    c = await factory.user("carol")
    container, forum = await factory.forum("Forum F")
    d1 = await factory.discussion(forum, a, "Welcome thread")
    p1 = await factory.post(d1, a, "Hello everyone")
    p2 = await factory.post(d1, b, "Hi Alice", parent=p1)
    p3 = await factory.post(d1, a, "Welcome Bob", parent=p2)
    await factory.read(c, p2, forum)
    return SimpleNamespace(
        a=a, b=b, c=c, container=container, forum=forum, d1=d1, p1=p1, p2=p2, p3=p3
    )
