"""
Feature projection: flattens a content item into the counters the scorers use.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional

from ranking.errors import InvalidContentError
from ranking.models import ContentItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentFeatures:
    item_id: str
    author_id: str
    created_at: datetime
    likes: int = 0
    shares: int = 0
    replies: int = 0
    views: int = 0
    hashtags: FrozenSet[str] = frozenset()

    @property
    def interactions(self) -> int:
        """Likes + replies + shares, the raw (unweighted) engagement count"""
        return self.likes + self.replies + self.shares


def _count(collection) -> int:
    return len(collection) if collection else 0


def project_features(item: ContentItem) -> ContentFeatures:
    """
    Extract the numeric feature set of a content item

    Args:
        item: Content item from the store

    Returns:
        ContentFeatures with missing counters defaulted to 0

    Raises:
        InvalidContentError: the item has no creation timestamp
    """
    if item.created_at is None:
        raise InvalidContentError(f"Content item {item.id} has no creation timestamp")

    return ContentFeatures(
        item_id=item.id,
        author_id=item.author_id,
        created_at=item.created_at,
        likes=_count(item.likes),
        shares=_count(item.shares),
        replies=_count(item.children),
        views=_count(item.views),
        hashtags=frozenset(item.hashtags or ()),
    )


def age_ms(created_at: datetime, now: datetime) -> float:
    """Age in milliseconds, clamped to 0 when the item is from the future"""
    return max((now - created_at).total_seconds() * 1000.0, 0.0)


def try_project_features(item: ContentItem) -> Optional[ContentFeatures]:
    """Projection for aggregate views, where unscoreable items are skipped rather than fatal"""
    try:
        return project_features(item)
    except InvalidContentError as e:
        logger.warning(f"Skipping content item: {e}")
        return None
