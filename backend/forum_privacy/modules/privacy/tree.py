"""
Reply tree of one discussion, used to decide which posts concern a user.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger


@dataclass
class PostNode:
    """A post of the discussion plus what links it to the exported user."""

    id: int
    parent_id: int | None
    discussion_id: int
    forum_id: int
    author_id: int
    subject: str
    message: str
    message_format: int
    message_trust: bool
    created_at: datetime
    modified_at: datetime
    first_read: datetime | None = None
    last_read: datetime | None = None
    has_read_marker: bool = False
    has_rating: bool = False
    has_data: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass
class PostForest:
    """
    Posts of one discussion indexed by id, with a child index.

    Nodes never point at each other; parents and children are looked up by
    id. Build with ``PostForest.build`` which also computes ``has_data``.
    """

    nodes: dict[int, PostNode] = field(default_factory=dict)
    children: dict[int | None, list[int]] = field(default_factory=dict)

    @classmethod
    def build(cls, nodes: Iterable[PostNode], user_id: int) -> "PostForest":
        """
        Index the posts and mark which branches concern the user.

        A post concerns the user when they wrote it, read it or rated it.
        Every ancestor of such a post is marked as well, so a walk from the
        roots reaches it.
        """
        forest = cls()
        for node in nodes:
            forest.nodes[node.id] = node

        for node in sorted(forest.nodes.values(), key=lambda n: (n.created_at, n.id)):
            parent_id = node.parent_id
            if parent_id is not None and parent_id not in forest.nodes:
                logger.warning(
                    f"Post {node.id} in discussion {node.discussion_id} has missing "
                    f"parent {parent_id}, treating it as a root"
                )
                parent_id = None
                node.parent_id = None
            forest.children.setdefault(parent_id, []).append(node.id)

        for node in forest.nodes.values():
            node.has_data = (
                node.has_rating or node.has_read_marker or node.author_id == user_id
            )

        for node in list(forest.nodes.values()):
            if node.has_data:
                forest.mark_ancestors(node.id)

        return forest

    def mark_ancestors(self, post_id: int) -> None:
        """Set ``has_data`` on every ancestor of the post."""
        for ancestor in self.ancestors(post_id):
            ancestor.has_data = True

    @property
    def roots(self) -> list[PostNode]:
        return [self.nodes[post_id] for post_id in self.children.get(None, [])]

    def children_of(self, post_id: int) -> list[PostNode]:
        return [self.nodes[child_id] for child_id in self.children.get(post_id, [])]

    def ancestors(self, post_id: int) -> list[PostNode]:
        """Ancestors of a post, nearest first."""
        result = []
        seen = {post_id}
        parent_id = self.nodes[post_id].parent_id
        while parent_id is not None and parent_id not in seen:
            seen.add(parent_id)
            result.append(self.nodes[parent_id])
            parent_id = self.nodes[parent_id].parent_id
        return result

    def walk(self) -> Iterator[tuple[PostNode, list[PostNode]]]:
        """
        Visit relevant posts depth first, parents before children.

        Yields each post with its chain of visited ancestors (root first).
        A post without ``has_data`` is skipped together with its subtree.
        """
        stack: list[tuple[PostNode, list[PostNode]]] = [
            (root, []) for root in reversed(self.roots)
        ]
        while stack:
            node, lineage = stack.pop()
            if not node.has_data:
                continue
            yield node, lineage
            for child in reversed(self.children_of(node.id)):
                stack.append((child, [*lineage, node]))

    def visited_ids(self) -> list[int]:
        """Ids of the posts ``walk`` visits, in visiting order."""
        return [node.id for node, _ in self.walk()]

    def __len__(self) -> int:
        return len(self.nodes)
