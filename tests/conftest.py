from datetime import datetime, timedelta, timezone

import pytest

from client.contentStore import InMemoryContentStore
from ranking.clock import FixedClock
from ranking.models import Account, ContentItem

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_item(
    item_id,
    author_id='author',
    hours_ago=1.0,
    likes=0,
    shares=0,
    replies=0,
    views=0,
    hashtags=(),
    parent_id=None,
    children=None,
    **kwargs
):
    """Content item with synthetic interaction ids"""
    return ContentItem(
        id=item_id,
        author_id=author_id,
        created_at=None if hours_ago is None else NOW - timedelta(hours=hours_ago),
        parent_id=parent_id,
        hashtags=frozenset(hashtags),
        likes=frozenset(f"{item_id}-liker-{i}" for i in range(likes)),
        shares=frozenset(f"{item_id}-sharer-{i}" for i in range(shares)),
        children=children if children is not None else [f"{item_id}-reply-{i}" for i in range(replies)],
        views=[{'viewer': f"{item_id}-viewer-{i}"} for i in range(views)],
        **kwargs
    )


def make_account(account_id, followers=(), following=(), blocked=(), interests=(), **kwargs):
    return Account(
        id=account_id,
        name=kwargs.pop('name', account_id.title()),
        username=kwargs.pop('username', account_id),
        followers=frozenset(followers),
        following=frozenset(following),
        blocked=frozenset(blocked),
        interests=list(interests),
        **kwargs
    )


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def store():
    return InMemoryContentStore()
