"""
Export of the forum data attributable to one user.
"""

from collections.abc import Collection
from typing import Any

from loguru import logger
from sqlalchemy import and_, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.core.transform import format_datetime, yesno
from forum_privacy.models.forum import (
    Container,
    DigestPreference,
    Discussion,
    DiscussionSubscription,
    Forum,
    Post,
    ReadMarker,
    Subscription,
    TrackingPreference,
)
from forum_privacy.models.rating import Rating
from forum_privacy.modules.privacy import formatting
from forum_privacy.modules.privacy.areas import discussion_area, post_area, posts_area
from forum_privacy.modules.privacy.categories import (
    ATTACHMENT_FILE_AREA,
    COMPONENT,
    INTRO_FILE_AREA,
    POST_FILE_AREA,
    RATING_AREA,
    TAG_ITEM_TYPE,
)
from forum_privacy.modules.privacy.collaborators import (
    ExportWriter,
    PlagiarismProvider,
    RatingProvider,
    TagProvider,
)
from forum_privacy.modules.privacy.containers import select_forum_containers
from forum_privacy.modules.privacy.tree import PostForest, PostNode


class DataExporter:
    """
    Writes a user's forum data, one approved container at a time.

    For every forum it exports the forum summary and the user's digest,
    subscription and tracking preferences, then the discussions the user is
    involved in, then the posts of every discussion the user wrote in, read
    or rated. Posts are nested under their parents and branches that do not
    lead to anything of the user's are left out.

    Usage:
        exporter = DataExporter(db_session, writer, ratings, tags, plagiarism)
        await exporter.export(user_id, approved_container_ids)
    """

    def __init__(
        self,
        db: AsyncSession,
        writer: ExportWriter,
        ratings: RatingProvider,
        tags: TagProvider,
        plagiarism: PlagiarismProvider,
    ) -> None:
        """Initialize exporter with session, writer and collaborators."""
        self.db = db
        self.writer = writer
        self.ratings = ratings
        self.tags = tags
        self.plagiarism = plagiarism

    async def export(self, user_id: int, container_ids: Collection[int]) -> None:
        """
        Export the user's data in the approved containers.

        Containers are processed one after another. An empty approval set
        does nothing. Errors from storage or collaborators propagate.

        Args:
            user_id: User whose data is exported
            container_ids: Approved container ids
        """
        if not container_ids:
            logger.debug(f"No approved containers for user {user_id}, nothing to export")
            return

        query = (
            select_forum_containers(container_ids)
            .outerjoin(
                DigestPreference,
                and_(
                    DigestPreference.forum_id == Forum.id,
                    DigestPreference.user_id == user_id,
                ),
            )
            .outerjoin(
                Subscription,
                and_(Subscription.forum_id == Forum.id, Subscription.user_id == user_id),
            )
            .outerjoin(
                TrackingPreference,
                and_(
                    TrackingPreference.forum_id == Forum.id,
                    TrackingPreference.user_id == user_id,
                ),
            )
            .add_columns(
                DigestPreference.mail_digest,
                Subscription.user_id.label("subscribed"),
                TrackingPreference.user_id.label("tracked"),
            )
        )
        rows = (await self.db.execute(query)).all()

        skipped = set(container_ids) - {row.Container.id for row in rows}
        if skipped:
            logger.warning(f"Skipping containers that are not forums: {sorted(skipped)}")

        logger.info(f"Exporting forum data of user {user_id} from {len(rows)} containers")
        for row in rows:
            await self.export_container(
                user_id,
                row.Container,
                row.Forum,
                mail_digest=row.mail_digest,
                subscribed=row.subscribed,
                tracked=row.tracked,
            )

    async def export_container(
        self,
        user_id: int,
        container: Container,
        forum: Forum,
        mail_digest: int | None = None,
        subscribed: int | None = None,
        tracked: int | None = None,
    ) -> None:
        """Export one forum: summary, preferences, discussions and posts."""
        logger.debug(f"Exporting forum {forum.id} (container {container.id}) for user {user_id}")

        await self.writer.export_data(container.id, [], self.forum_summary(container, forum))
        await self.writer.export_area_files(
            container.id, [], COMPONENT, INTRO_FILE_AREA, 0
        )

        await self.export_digest_data(container.id, forum, mail_digest)
        await self.export_subscription_data(container.id, subscribed)
        await self.export_tracking_data(container.id, tracked)

        await self.export_discussion_data(user_id, container, forum)
        await self.export_all_posts(user_id, container, forum)

    def forum_summary(self, container: Container, forum: Forum) -> dict[str, Any]:
        """General data about the forum itself."""
        intro = self.writer.rewrite_embedded_references(
            container.id, [], COMPONENT, INTRO_FILE_AREA, 0, forum.intro or ""
        )
        return {
            "name": forum.name,
            "intro": formatting.format_message(intro, forum.intro_format),
            "created": format_datetime(forum.created_at),
            "modified": format_datetime(forum.updated_at),
        }

    # ==================== Forum preferences ====================

    async def export_digest_data(
        self, container_id: int, forum: Forum, mail_digest: int | None
    ) -> bool:
        """Export the digest preference when the user set one for this forum."""
        if mail_digest is None:
            return False

        await self.writer.export_metadata(
            container_id,
            [],
            "digestpreference",
            mail_digest,
            formatting.digest_description(forum.name, mail_digest),
        )
        return True

    async def export_subscription_data(
        self, container_id: int, subscribed: int | None
    ) -> bool:
        """Export the forum subscription when the user has one."""
        if subscribed is None:
            return False

        await self.writer.export_metadata(
            container_id,
            [],
            "subscriptionpreference",
            1,
            formatting.subscription_description(),
        )
        return True

    async def export_tracking_data(self, container_id: int, tracked: int | None) -> bool:
        """
        Export the read tracking opt-out.

        A tracking preference row records that the user disabled tracking
        for this forum.
        """
        if tracked is None:
            return False

        await self.writer.export_metadata(
            container_id,
            [],
            "trackreadpreference",
            0,
            formatting.tracking_description(),
        )
        return True

    # ==================== Discussions ====================

    async def export_discussion_data(
        self, user_id: int, container: Container, forum: Forum
    ) -> int:
        """
        Export the discussions of the forum the user is involved in.

        Involvement means the user started the discussion, posted in it, or
        has a subscription preference for it.

        Returns:
            Number of exported discussions
        """
        posted = exists().where(
            Post.discussion_id == Discussion.id, Post.author_id == user_id
        )
        query = (
            select(Discussion, DiscussionSubscription.preference)
            .outerjoin(
                DiscussionSubscription,
                and_(
                    DiscussionSubscription.discussion_id == Discussion.id,
                    DiscussionSubscription.user_id == user_id,
                ),
            )
            .where(
                Discussion.forum_id == forum.id,
                or_(
                    Discussion.author_id == user_id,
                    posted,
                    DiscussionSubscription.id.is_not(None),
                ),
            )
            .order_by(Discussion.id)
        )
        result = await self.db.execute(query)

        count = 0
        for discussion, preference in result.all():
            area = discussion_area(discussion.id, discussion.name)
            await self.export_discussion_subscription_data(container.id, area, preference)

            await self.writer.export_data(
                container.id,
                area,
                {
                    "name": discussion.name,
                    "pinned": yesno(discussion.is_pinned),
                    "time_modified": format_datetime(discussion.updated_at),
                    "creator_was_you": yesno(discussion.author_id == user_id),
                },
            )
            count += 1

        logger.debug(f"Exported {count} discussions of forum {forum.id}")
        return count

    async def export_discussion_subscription_data(
        self, container_id: int, area: list[str], preference: int | None
    ) -> bool:
        """Export the discussion subscription preference when the user has one."""
        if preference is None:
            return False

        await self.writer.export_metadata(
            container_id,
            area,
            "subscriptionpreference",
            preference,
            formatting.discussion_subscription_description(preference),
        )
        return True

    # ==================== Posts ====================

    async def export_all_posts(
        self, user_id: int, container: Container, forum: Forum
    ) -> int:
        """
        Export posts of every discussion where the user wrote, read or rated a post.

        Returns:
            Number of exported posts
        """
        rated = self.ratings.select_rated_item_ids(COMPONENT, RATING_AREA, user_id)
        query = (
            select(Discussion.id, Discussion.name)
            .join(Post, Post.discussion_id == Discussion.id)
            .outerjoin(
                ReadMarker,
                and_(ReadMarker.post_id == Post.id, ReadMarker.user_id == user_id),
            )
            .where(
                Discussion.forum_id == forum.id,
                or_(
                    Post.author_id == user_id,
                    ReadMarker.id.is_not(None),
                    Post.id.in_(rated),
                ),
            )
            .group_by(Discussion.id, Discussion.name)
            .order_by(Discussion.id)
        )
        result = await self.db.execute(query)

        count = 0
        for discussion_id, name in result.all():
            count += await self.export_posts_in_discussion(
                user_id, container, forum, discussion_id, name
            )
        return count

    async def load_post_forest(
        self, user_id: int, forum_id: int, discussion_id: int
    ) -> PostForest:
        """Load every post of a discussion with the user's read and rating flags."""
        has_rating = (
            exists()
            .where(
                Rating.component == COMPONENT,
                Rating.rating_area == RATING_AREA,
                Rating.item_id == Post.id,
                Rating.user_id == user_id,
            )
            .label("has_rating")
        )
        query = (
            select(
                Post,
                ReadMarker.id.label("read_id"),
                ReadMarker.first_read,
                ReadMarker.last_read,
                has_rating,
            )
            .outerjoin(
                ReadMarker,
                and_(ReadMarker.post_id == Post.id, ReadMarker.user_id == user_id),
            )
            .where(Post.discussion_id == discussion_id)
        )
        result = await self.db.execute(query)

        nodes = [
            PostNode(
                id=post.id,
                parent_id=post.parent_id,
                discussion_id=post.discussion_id,
                forum_id=forum_id,
                author_id=post.author_id,
                subject=post.subject,
                message=post.message,
                message_format=post.message_format,
                message_trust=post.message_trust,
                created_at=post.created_at,
                modified_at=post.modified_at,
                first_read=first_read,
                last_read=last_read,
                has_read_marker=read_id is not None,
                has_rating=bool(rated),
            )
            for post, read_id, first_read, last_read, rated in result.all()
        ]
        return PostForest.build(nodes, user_id)

    async def export_posts_in_discussion(
        self,
        user_id: int,
        container: Container,
        forum: Forum,
        discussion_id: int,
        discussion_name: str,
    ) -> int:
        """Export the relevant branches of one discussion's reply tree."""
        forest = await self.load_post_forest(user_id, forum.id, discussion_id)
        base_area = posts_area(discussion_id, discussion_name)

        count = 0
        for post, lineage in forest.walk():
            area = list(base_area)
            for ancestor in lineage:
                area.extend(post_area(ancestor.id, ancestor.subject, ancestor.created_at))
            area.extend(post_area(post.id, post.subject, post.created_at))

            await self.export_post_data(user_id, container, area, post)
            count += 1

        logger.debug(
            f"Exported {count} of {len(forest)} posts in discussion {discussion_id}"
        )
        return count

    async def export_post_data(
        self, user_id: int, container: Container, area: list[str], post: PostNode
    ) -> None:
        """Export one post, its read state, files and related ratings and tags."""
        await self.export_read_data(container.id, area, post)

        message = self.writer.rewrite_embedded_references(
            container.id, area, COMPONENT, POST_FILE_AREA, post.id, post.message
        )
        await self.writer.export_data(
            container.id,
            area,
            {
                "subject": post.subject,
                "created": format_datetime(post.created_at),
                "modified": format_datetime(post.modified_at),
                "author_was_you": yesno(post.author_id == user_id),
                "message": formatting.format_message(message, post.message_format),
            },
        )
        await self.writer.export_area_files(
            container.id, area, COMPONENT, POST_FILE_AREA, post.id
        )
        await self.writer.export_area_files(
            container.id, area, COMPONENT, ATTACHMENT_FILE_AREA, post.id
        )

        if post.author_id == user_id:
            # Every rating on the user's own post is a rating of their content
            await self.ratings.export_ratings(
                self.writer,
                user_id,
                container.id,
                area,
                COMPONENT,
                RATING_AREA,
                post.id,
                include_all=True,
            )
            await self.tags.export_item_tags(
                self.writer, user_id, container.id, area, COMPONENT, TAG_ITEM_TYPE, post.id
            )
            await self.plagiarism.export_user_data(
                self.writer,
                user_id,
                container.id,
                area,
                {
                    "container_id": container.id,
                    "forum_id": post.forum_id,
                    "discussion_id": post.discussion_id,
                    "post_id": post.id,
                },
            )

        await self.ratings.export_ratings(
            self.writer,
            user_id,
            container.id,
            area,
            COMPONENT,
            RATING_AREA,
            post.id,
            include_all=False,
        )

    async def export_read_data(
        self, container_id: int, area: list[str], post: PostNode
    ) -> bool:
        """Export when the user first and last read the post, if they did."""
        if not post.has_read_marker:
            return False

        first_read = format_datetime(post.first_read)
        last_read = format_datetime(post.last_read)
        await self.writer.export_metadata(
            container_id,
            area,
            "postread",
            {"first_read": first_read, "last_read": last_read},
            formatting.read_description(first_read, last_read),
        )
        return True
