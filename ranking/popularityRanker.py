"""
Viewer-independent popularity ranking over fixed time windows.
"""
import logging
from datetime import timedelta
from typing import Dict, List, Optional

from ranking.clock import Clock, SystemClock
from ranking.config import (
    PopularityWeights, POPULARITY_WINDOWS, DEFAULT_POPULARITY_WINDOW, MAX_POPULAR
)
from ranking.featureProjector import ContentFeatures, try_project_features
from ranking.serializers import ItemSerializer

logger = logging.getLogger(__name__)


def popularity_score(features: ContentFeatures) -> float:
    """likes*3 + shares*5 + replies*2 + views*0.1"""
    return (
        features.likes * PopularityWeights.LIKES
        + features.shares * PopularityWeights.SHARES
        + features.replies * PopularityWeights.REPLIES
        + features.views * PopularityWeights.VIEWS
    )


def window_hours(window: str) -> int:
    """Resolve '1h' / '24h' / '7d' to hours"""
    if window not in POPULARITY_WINDOWS:
        raise ValueError(
            f"Unknown popularity window '{window}', expected one of {sorted(POPULARITY_WINDOWS)}"
        )
    return POPULARITY_WINDOWS[window]


class PopularityRanker:
    def __init__(self, store, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or SystemClock()

    def get_popular(self, window: str = DEFAULT_POPULARITY_WINDOW, viewer_id: Optional[str] = None) -> List[Dict]:
        """
        Most popular items created within the window

        Args:
            window: One of '1h', '24h', '7d'
            viewer_id: Only used for the liked-by-viewer flag; ranking ignores it

        Returns:
            Up to 50 serialized items, descending popularity then descending creation time

        Raises:
            ValueError: unknown window
            UpstreamQueryFailure: the store could not be queried
        """
        since = self.clock.now() - timedelta(hours=window_hours(window))
        items = self.store.list_content_since(since)

        scored = []
        for item in items:
            features = try_project_features(item)
            if features is not None:
                scored.append((item, popularity_score(features)))
        scored.sort(key=lambda pair: (pair[1], pair[0].created_at), reverse=True)

        top = scored[:MAX_POPULAR]
        logger.info(f"Popular ({window}): {len(scored)} items in window, returning {len(top)}")

        serializer = ItemSerializer(self.store, viewer_id=viewer_id)
        results = []
        for item, popularity in top:
            payload = serializer.serialize(item)
            payload['popularityScore'] = popularity
            results.append(payload)
        return results
