"""
Engagement analytics for single posts, accounts and the whole platform.
"""
import logging
import numpy as np
from datetime import timedelta
from typing import Dict, Optional

from ranking.clock import Clock, SystemClock
from ranking.config import USER_METRICS_DAYS

logger = logging.getLogger(__name__)


class ContentAnalytics:
    def __init__(self, store, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or SystemClock()

    def get_post_analytics(self, item_id: str) -> Dict:
        """
        Engagement totals for one content item

        Args:
            item_id: Content item identifier

        Returns:
            Counters plus engagementRate (interactions per view, views floored at 1)

        Raises:
            NotFound: the item does not exist
        """
        item = self.store.get_content(item_id)
        likes, shares, replies, views = len(item.likes), len(item.shares), len(item.children), len(item.views)
        total = likes + shares + replies

        return {
            'id': item.id,
            'likes': likes,
            'shares': shares,
            'replies': replies,
            'views': views,
            'totalEngagement': total,
            'engagementRate': total / max(views, 1),
        }

    def get_user_metrics(self, user_id: str, days: int = USER_METRICS_DAYS) -> Dict:
        """
        Posting and engagement metrics for an account over the last `days`

        Args:
            user_id: Account identifier
            days: Look-back window in days

        Returns:
            Metrics dictionary; zeros when the account posted nothing in the window

        Raises:
            NotFound: the account does not exist
        """
        if days <= 0:
            raise ValueError(f"days must be positive, got {days}")

        account = self.store.get_account(user_id)
        since = self.clock.now() - timedelta(days=days)
        recent = [
            item for item in self.store.list_content_by_author(user_id)
            if item.created_at is not None and item.created_at >= since
        ]

        likes = np.array([len(item.likes) for item in recent], dtype=float)
        shares = np.array([len(item.shares) for item in recent], dtype=float)
        replies = np.array([len(item.children) for item in recent], dtype=float)

        total_posts = len(recent)
        total_likes = int(likes.sum())
        total_shares = int(shares.sum())
        per_post = likes + shares + replies

        metrics = {
            'userId': account.id,
            'days': days,
            'totalPosts': total_posts,
            'totalLikes': total_likes,
            'totalShares': total_shares,
            'followersCount': len(account.followers),
            'engagementScore': (total_likes + total_shares) / max(total_posts, 1),
            'avgEngagementPerPost': float(np.mean(per_post)) if total_posts else 0.0,
        }
        logger.info(f"User metrics for {user_id}: {total_posts} posts in last {days} days")
        return metrics

    def get_platform_metrics(self) -> Dict:
        """Platform totals plus daily and weekly activity"""
        now = self.clock.now()
        weekly_items = self.store.list_content_since(now - timedelta(days=7))
        day_ago = now - timedelta(days=1)
        daily_items = [item for item in weekly_items if item.created_at >= day_ago]

        return {
            'totalUsers': len(self.store.list_accounts()),
            'totalPosts': self.store.count_content(),
            'dailyPosts': len(daily_items),
            'dailyActiveUsers': len({item.author_id for item in daily_items}),
            'weeklyPosts': len(weekly_items),
            'weeklyActiveUsers': len({item.author_id for item in weekly_items}),
            'generatedAt': now.isoformat(),
        }
