"""
Configuration and constants for the feed ranking engine.
"""
import os
import logging
from typing import Dict, List

# Time-based constants (milliseconds unless noted)
MS_PER_HOUR = 3_600_000
RECENCY_NUMERATOR_MS = 86_400_000  # 24 hours
RECENCY_OFFSET_MS = 3_600_000  # 1 hour, keeps brand-new items finite

# Popularity windows in hours
POPULARITY_WINDOWS: Dict[str, int] = {
    "1h": 1,
    "24h": 24,
    "7d": 24 * 7,
}
DEFAULT_POPULARITY_WINDOW = "24h"
DEFAULT_TRENDING_WINDOW_HOURS = 24

# Result limits
MAX_TRENDING = 20
MAX_POPULAR = 50
MAX_INTERESTS = 20
INTEREST_SOURCE_POSTS = 100
PREVIEW_REPLY_COUNT = 3
DEFAULT_FEED_LIMIT = 20
DEFAULT_SUGGESTION_LIMIT = 10
USER_METRICS_DAYS = 30

DEFAULT_USER_IMAGE = "/assets/user.svg"

# Moderation keyword lists
SPAM_KEYWORDS: List[str] = ["spam", "scam", "fake", "bot", "cryptocurrency_scam"]
OFFENSIVE_KEYWORDS: List[str] = ["hate", "abuse", "toxic"]
FLAGGED_CONFIDENCE = 0.9
CLEAN_CONFIDENCE = 0.1

# Deployment settings
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379')
REDIS_SOCKET_TIMEOUT = float(os.getenv('REDIS_SOCKET_TIMEOUT', '5'))


class LoggingConfig:
    """Logging configuration for the ranking engine."""

    LEVEL = getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)
    FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    @staticmethod
    def configure_logging():
        """Configure logging for the ranking engine."""
        logging.basicConfig(
            level=LoggingConfig.LEVEL,
            format=LoggingConfig.FORMAT
        )


class EngagementWeights:
    """Per-interaction weights for the feed engagement term."""

    LIKES = 3.0
    REPLIES = 5.0
    SHARES = 4.0
    VIEWS = 0.1


class ScoringWeights:
    """Weights of each term in the final feed score."""

    ENGAGEMENT = 0.4
    RECENCY = 0.3
    FOLLOWING = 0.2
    VIRALITY = 0.1


FOLLOWING_BOOST = 10.0


class PopularityWeights:
    """Per-interaction weights for the viewer-independent popularity score."""

    LIKES = 3.0
    SHARES = 5.0
    REPLIES = 2.0
    VIEWS = 0.1


class SuggestionWeights:
    """Who-to-follow scoring weights."""

    MUTUAL_FOLLOWS = 3
    COMMON_INTERESTS = 2
    FOLLOWERS = 1
