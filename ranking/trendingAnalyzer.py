"""
Hashtag trend detection over a sliding time window.
"""
import logging
from datetime import timedelta
from typing import Dict, List, Optional

from ranking.clock import Clock, SystemClock
from ranking.config import DEFAULT_TRENDING_WINDOW_HOURS, MAX_TRENDING
from ranking.featureProjector import try_project_features

logger = logging.getLogger(__name__)


def trend_score(post_count: int, unique_author_count: int, engagement: int) -> int:
    """
    Breadth x depth x engagement

    Multiplying by distinct authors keeps one prolific account from carrying a
    trend; the +1 keeps zero-engagement topics from scoring zero.
    """
    return post_count * unique_author_count * (engagement + 1)


def aggregate_hashtags(features_list) -> List[Dict]:
    """
    Group projected items by hashtag

    Args:
        features_list: ContentFeatures of items in the window

    Returns:
        One unsorted trend entry per hashtag
    """
    groups: Dict[str, Dict] = {}
    for features in features_list:
        for tag in sorted(features.hashtags):
            group = groups.setdefault(tag, {'posts': 0, 'authors': set(), 'engagement': 0})
            group['posts'] += 1
            group['authors'].add(features.author_id)
            group['engagement'] += features.interactions

    return [
        {
            'hashtag': tag,
            'postCount': group['posts'],
            'uniqueAuthorCount': len(group['authors']),
            'engagement': group['engagement'],
            'trendScore': trend_score(group['posts'], len(group['authors']), group['engagement']),
        }
        for tag, group in groups.items()
    ]


class TrendingAnalyzer:
    def __init__(self, store, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or SystemClock()

    def get_trending(self, window_hours: float = DEFAULT_TRENDING_WINDOW_HOURS) -> List[Dict]:
        """
        Trending hashtags within the last `window_hours`

        Args:
            window_hours: Size of the look-back window

        Returns:
            Up to 20 entries sorted by descending trendScore (ties keep hashtag order)

        Raises:
            UpstreamQueryFailure: the store could not be queried
        """
        if window_hours <= 0:
            raise ValueError(f"window_hours must be positive, got {window_hours}")

        since = self.clock.now() - timedelta(hours=window_hours)
        items = self.store.list_content_since(since)

        features_list = [
            features for features in map(try_project_features, items)
            if features is not None and features.hashtags
        ]
        trends = aggregate_hashtags(features_list)
        trends.sort(key=lambda trend: (-trend['trendScore'], trend['hashtag']))

        logger.info(
            f"Trending: {len(features_list)} tagged items in last {window_hours}h, "
            f"{len(trends)} hashtags, returning top {min(len(trends), MAX_TRENDING)}"
        )
        return trends[:MAX_TRENDING]
