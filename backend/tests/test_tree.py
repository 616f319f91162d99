"""Tests for the discussion reply tree and relevance marking."""

from datetime import datetime, timedelta

from forum_privacy.models.forum import MessageFormat
from forum_privacy.modules.privacy.tree import PostForest, PostNode

START = datetime(2024, 1, 1, 12, 0, 0)


def node(post_id, parent_id=None, author_id=1, read=False, rated=False) -> PostNode:
    created = START + timedelta(minutes=post_id)
    return PostNode(
        id=post_id,
        parent_id=parent_id,
        discussion_id=1,
        forum_id=1,
        author_id=author_id,
        subject=f"Post {post_id}",
        message="",
        message_format=MessageFormat.PLAIN,
        message_trust=False,
        created_at=created,
        modified_at=created,
        has_read_marker=read,
        has_rating=rated,
    )


def test_leaf_read_marker_marks_whole_chain():
    forest = PostForest.build(
        [node(1, author_id=2), node(2, 1, author_id=2), node(3, 2, author_id=2, read=True)],
        user_id=9,
    )

    assert forest.visited_ids() == [1, 2, 3]
    assert all(n.has_data for n in forest.nodes.values())


def test_branch_without_data_is_pruned():
    forest = PostForest.build(
        [
            node(1, author_id=2),
            node(2, 1, author_id=9),
            node(3, 1, author_id=2),
            node(4, 3, author_id=2),
        ],
        user_id=9,
    )

    assert forest.visited_ids() == [1, 2]
    assert forest.nodes[3].has_data is False
    assert forest.nodes[4].has_data is False


def test_authored_post_is_always_visited():
    forest = PostForest.build([node(1, author_id=9)], user_id=9)

    assert forest.visited_ids() == [1]


def test_rating_makes_post_relevant():
    forest = PostForest.build(
        [node(1, author_id=2), node(2, 1, author_id=3, rated=True)], user_id=9
    )

    assert forest.visited_ids() == [1, 2]


def test_discussion_without_user_data_visits_nothing():
    forest = PostForest.build([node(1, author_id=2), node(2, 1, author_id=3)], user_id=9)

    assert forest.visited_ids() == []


def test_reader_of_middle_post_does_not_reach_its_replies():
    # P1 by A, P2 by B read by C, P3 by A replying to P2
    posts = [node(1, author_id=1), node(2, 1, author_id=2, read=True), node(3, 2, author_id=1)]

    forest = PostForest.build(posts, user_id=3)

    assert forest.visited_ids() == [1, 2]


def test_author_reaches_own_reply_through_other_users_post():
    posts = [node(1, author_id=1), node(2, 1, author_id=2), node(3, 2, author_id=1)]

    forest = PostForest.build(posts, user_id=1)

    assert forest.visited_ids() == [1, 2, 3]
    assert forest.nodes[2].author_id != 1


def test_walk_yields_lineage_root_first():
    forest = PostForest.build(
        [node(1), node(2, 1), node(3, 2)],
        user_id=1,
    )

    lineages = {post.id: [a.id for a in lineage] for post, lineage in forest.walk()}

    assert lineages == {1: [], 2: [1], 3: [1, 2]}


def test_children_are_ordered_by_creation():
    forest = PostForest.build([node(5, 1), node(1), node(3, 1)], user_id=1)

    assert [child.id for child in forest.children_of(1)] == [3, 5]
    assert forest.visited_ids() == [1, 3, 5]


def test_missing_parent_is_treated_as_root():
    forest = PostForest.build([node(1), node(2, 99, read=True)], user_id=5)

    assert {root.id for root in forest.roots} == {1, 2}
    assert forest.visited_ids() == [2]


def test_ancestors_nearest_first():
    forest = PostForest.build([node(1), node(2, 1), node(3, 2)], user_id=1)

    assert [a.id for a in forest.ancestors(3)] == [2, 1]
    assert forest.ancestors(1) == []
