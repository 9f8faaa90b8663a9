"""
Feed ranking engine - scoring and ranking for the social feed.

This package decides which content a viewer sees and in what order, which
hashtags are trending, which posts are popular in a window and which accounts
to suggest following. Every call is a pure function of its inputs and the
current store snapshot; nothing is cached or persisted between calls.

Main modules:
- featureProjector: flat numeric features from a content item
- scoringEngine: per-term feed scores and their weighted combination
- feedAssembler: ranked, paginated home feed with chronological fallback
- trendingAnalyzer: hashtag trend scores over a time window
- popularityRanker: viewer-independent popularity over 1h/24h/7d
- recommendationEngine: who-to-follow suggestions
- contentAnalytics: post, account and platform engagement metrics
- serializers: JSON-safe projections for callers
- config: constants and configuration
"""

from ranking.config import LoggingConfig
from ranking.clock import Clock, SystemClock, FixedClock
from ranking.errors import FeedEngineError, UpstreamQueryFailure, NotFound, InvalidContentError
from ranking.models import Account, ContentItem, Score, Verdict, ViewerContext

from ranking.featureProjector import ContentFeatures, project_features

# Scoring functions
from ranking.scoringEngine import (
    engagement_score,
    recency_score,
    following_boost,
    virality_score,
    combine_scores,
    score,
    rank_items
)

from ranking.feedAssembler import FeedAssembler
from ranking.trendingAnalyzer import TrendingAnalyzer, trend_score
from ranking.popularityRanker import PopularityRanker, popularity_score
from ranking.recommendationEngine import RecommendationEngine, suggestion_score
from ranking.contentAnalytics import ContentAnalytics

__version__ = "1.0.0"

# Public API
__all__ = [
    'LoggingConfig',
    'Clock',
    'SystemClock',
    'FixedClock',
    'FeedEngineError',
    'UpstreamQueryFailure',
    'NotFound',
    'InvalidContentError',
    'Account',
    'ContentItem',
    'Score',
    'Verdict',
    'ViewerContext',
    'ContentFeatures',
    'project_features',
    'engagement_score',
    'recency_score',
    'following_boost',
    'virality_score',
    'combine_scores',
    'score',
    'rank_items',
    'FeedAssembler',
    'TrendingAnalyzer',
    'trend_score',
    'PopularityRanker',
    'popularity_score',
    'RecommendationEngine',
    'suggestion_score',
    'ContentAnalytics',
]
