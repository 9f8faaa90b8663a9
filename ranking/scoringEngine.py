"""
Personalized feed scoring.

Each term is its own function so it can be checked in isolation;
combine_scores() is the weighted sum that produces the final ranking value.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Tuple

from ranking.config import (
    EngagementWeights, ScoringWeights, FOLLOWING_BOOST,
    MS_PER_HOUR, RECENCY_NUMERATOR_MS, RECENCY_OFFSET_MS
)
from ranking.featureProjector import ContentFeatures, age_ms, project_features
from ranking.models import ContentItem, Score, ViewerContext

logger = logging.getLogger(__name__)


def engagement_score(features: ContentFeatures) -> float:
    """likes*3 + replies*5 + shares*4 + views*0.1"""
    return (
        features.likes * EngagementWeights.LIKES
        + features.replies * EngagementWeights.REPLIES
        + features.shares * EngagementWeights.SHARES
        + features.views * EngagementWeights.VIEWS
    )


def recency_score(created_at: datetime, now: datetime) -> float:
    """
    Reciprocal time decay

    Approaches 24 for an item created at `now` and falls toward 0 with age.

    Args:
        created_at: Item creation time
        now: Request time

    Returns:
        Recency score
    """
    return RECENCY_NUMERATOR_MS / (age_ms(created_at, now) + RECENCY_OFFSET_MS)


def following_boost(author_id: str, viewer: ViewerContext) -> float:
    """Fixed bonus for authors the viewer follows; always 0 or 10"""
    return FOLLOWING_BOOST if author_id in viewer.following else 0.0


def virality_score(features: ContentFeatures, now: datetime) -> float:
    """Interactions per hour since publication"""
    age_hours = age_ms(features.created_at, now) / MS_PER_HOUR
    return features.interactions / (age_hours + 1)


def combine_scores(engagement: float, recency: float, boost: float, virality: float) -> float:
    return (
        ScoringWeights.ENGAGEMENT * engagement
        + ScoringWeights.RECENCY * recency
        + ScoringWeights.FOLLOWING * boost
        + ScoringWeights.VIRALITY * virality
    )


def score_features(features: ContentFeatures, viewer: ViewerContext, now: datetime) -> Score:
    engagement = engagement_score(features)
    recency = recency_score(features.created_at, now)
    boost = following_boost(features.author_id, viewer)
    virality = virality_score(features, now)

    return Score(
        item_id=features.item_id,
        value=combine_scores(engagement, recency, boost, virality),
        engagement=engagement,
        recency=recency,
        following_boost=boost,
        virality=virality,
    )


def score(item: ContentItem, viewer: ViewerContext, now: datetime) -> Score:
    """
    Score one content item for a viewer

    Args:
        item: Content item
        viewer: Viewer context (following set)
        now: Request time

    Returns:
        Score carrying the final value and each term

    Raises:
        InvalidContentError: the item has no creation timestamp
    """
    return score_features(project_features(item), viewer, now)


def rank_items(
    items: Iterable[ContentItem],
    viewer: ViewerContext,
    now: datetime
) -> List[Tuple[ContentItem, Score]]:
    """
    Score and sort items by descending score, then descending creation time

    Args:
        items: Candidate set
        viewer: Viewer context
        now: Request time

    Returns:
        (item, score) pairs in feed order
    """
    scored = [(item, score(item, viewer, now)) for item in items]
    scored.sort(key=lambda pair: (pair[1].value, pair[0].created_at), reverse=True)

    if scored:
        logger.debug(
            f"Ranked {len(scored)} items, score range "
            f"{scored[-1][1].value:.3f} to {scored[0][1].value:.3f}"
        )
    return scored
