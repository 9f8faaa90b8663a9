"""
Personalized home feed assembly.

Pagination is offset-based over a candidate set that is re-scored on every
call, so writes between page requests can shift items across page boundaries.
Callers dedupe by id; no cursor stability is promised.
"""
import logging
from typing import Dict, List, Optional

from ranking.clock import Clock, SystemClock
from ranking.config import DEFAULT_FEED_LIMIT
from ranking.errors import UpstreamQueryFailure
from ranking.models import ContentItem, ViewerContext
from ranking.scoringEngine import rank_items
from ranking.serializers import ItemSerializer

logger = logging.getLogger(__name__)


def _validate_page(limit: int, offset: int):
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")


class FeedAssembler:
    def __init__(self, store, clock: Optional[Clock] = None):
        """
        Initialize feed assembler

        Args:
            store: ContentStore to read candidates and accounts from
            clock: Time source (defaults to the system clock)
        """
        self.store = store
        self.clock = clock or SystemClock()

    def _scoreable(self, candidates: List[ContentItem]) -> List[ContentItem]:
        scoreable = [item for item in candidates if item.created_at is not None]
        rejected = len(candidates) - len(scoreable)
        if rejected:
            logger.warning(f"Rejected {rejected} candidates without a creation timestamp")
        return scoreable

    def get_feed(self, viewer_id: str, limit: int = DEFAULT_FEED_LIMIT, offset: int = 0) -> List[Dict]:
        """
        Ranked feed page for a viewer

        Args:
            viewer_id: Authenticated viewer identifier
            limit: Page size
            offset: Number of ranked items to skip

        Returns:
            Serialized items in feed order

        Raises:
            NotFound: the viewer does not exist
        """
        _validate_page(limit, offset)

        viewer = ViewerContext.for_account(self.store.get_account(viewer_id))
        serializer = ItemSerializer(self.store, viewer_id=viewer_id)

        try:
            candidates = self._scoreable(self.store.list_top_level_content())
            ranked = rank_items(candidates, viewer, self.clock.now())
            page = ranked[offset:offset + limit]
            feed = [serializer.serialize(item, score) for item, score in page]
        except UpstreamQueryFailure as e:
            logger.warning(f"Ranked feed unavailable for {viewer_id}, falling back to chronological: {e}")
            return self.get_chronological_feed(viewer_id, limit, offset, serializer=serializer)

        logger.info(
            f"Ranked {len(ranked)} candidates for {viewer_id}, "
            f"serving {len(feed)} (offset={offset}, limit={limit})"
        )
        return feed

    def get_chronological_feed(
        self,
        viewer_id: Optional[str],
        limit: int = DEFAULT_FEED_LIMIT,
        offset: int = 0,
        serializer: Optional[ItemSerializer] = None
    ) -> List[Dict]:
        """
        Unranked newest-first feed over the same top-level candidate set

        Args:
            viewer_id: Viewer identifier, used only for the liked-by-viewer flag
            limit: Page size
            offset: Number of items to skip

        Returns:
            Serialized items, newest first
        """
        _validate_page(limit, offset)
        serializer = serializer or ItemSerializer(self.store, viewer_id=viewer_id)

        items = self.store.list_recent_top_level(limit, offset)
        logger.info(f"Serving {len(items)} chronological items to {viewer_id or 'anonymous'}")
        return [serializer.serialize(item) for item in items]
