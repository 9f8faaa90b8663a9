"""
Who-to-follow suggestions from social-graph overlap and shared interests.
"""
import logging
from typing import Dict, List

from featureEngineering.userInterests import derive_interests
from ranking.config import (
    SuggestionWeights, DEFAULT_SUGGESTION_LIMIT, MAX_INTERESTS, INTEREST_SOURCE_POSTS
)
from ranking.models import Account
from ranking.serializers import serialize_suggestion

logger = logging.getLogger(__name__)


def mutual_follows(candidate: Account, viewer: Account) -> int:
    """People the viewer follows who also follow the candidate"""
    return len(candidate.followers & viewer.following)


def common_interests(candidate: Account, viewer_interests) -> int:
    return len(set(candidate.interests) & set(viewer_interests))


def suggestion_score(mutual: int, shared_interests: int, follower_count: int) -> int:
    return (
        mutual * SuggestionWeights.MUTUAL_FOLLOWS
        + shared_interests * SuggestionWeights.COMMON_INTERESTS
        + follower_count * SuggestionWeights.FOLLOWERS
    )


def is_eligible(candidate: Account, viewer: Account) -> bool:
    """Excludes the viewer, accounts already followed and accounts the viewer blocked"""
    return (
        candidate.id != viewer.id
        and candidate.id not in viewer.following
        and candidate.id not in viewer.blocked
    )


class RecommendationEngine:
    def __init__(self, store):
        self.store = store

    def viewer_interests(self, viewer: Account) -> List[str]:
        """Stored interests, or derived from the viewer's recent posts when none are stored"""
        if viewer.interests:
            return viewer.interests[:MAX_INTERESTS]

        own_items = self.store.list_content_by_author(viewer.id, limit=INTEREST_SOURCE_POSTS)
        interests = derive_interests(own_items, limit=MAX_INTERESTS)
        logger.debug(f"Derived {len(interests)} interests for {viewer.id} from {len(own_items)} posts")
        return interests

    def get_suggested_users(self, viewer_id: str, limit: int = DEFAULT_SUGGESTION_LIMIT) -> List[Dict]:
        """
        Rank accounts the viewer might want to follow

        Args:
            viewer_id: Authenticated viewer identifier
            limit: Maximum number of suggestions

        Returns:
            Serialized accounts, highest suggestionScore first

        Raises:
            NotFound: the viewer does not exist
            UpstreamQueryFailure: the store could not be queried
        """
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        viewer = self.store.get_account(viewer_id)
        interests = self.viewer_interests(viewer)

        scored = []
        for candidate in self.store.list_accounts():
            if not is_eligible(candidate, viewer):
                continue
            mutual = mutual_follows(candidate, viewer)
            shared = common_interests(candidate, interests)
            scored.append((
                candidate,
                suggestion_score(mutual, shared, len(candidate.followers)),
                mutual
            ))

        scored.sort(key=lambda entry: entry[1], reverse=True)
        suggestions = scored[:limit]

        logger.info(f"Suggestions for {viewer_id}: {len(scored)} eligible, returning {len(suggestions)}")
        return [serialize_suggestion(account, score, mutual) for account, score, mutual in suggestions]
