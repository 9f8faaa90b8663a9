from collections import Counter
from typing import Dict, List, Sequence

from featureEngineering.textPreprocessing import extract_hashtags, normalize_hashtags


def collect_item_hashtags(item) -> List[str]:
    """
    Hashtags of a content item, falling back to the ones written in its text

    Args:
        item: ContentItem

    Returns:
        Normalized hashtags
    """
    if item.hashtags:
        return normalize_hashtags(sorted(item.hashtags))
    return extract_hashtags(item.text)


def derive_interests(items: Sequence, limit: int = 20) -> List[str]:
    """
    Derive an account's interest tags from its own posts

    Most frequent hashtags come first; ties go to the tag used most recently.

    Args:
        items: The account's content items, any order
        limit: Maximum number of interests to keep

    Returns:
        Up to `limit` lower-cased hashtags
    """
    if not items:
        return []

    # Newest first so first_seen ranks recency
    ordered = sorted(
        items,
        key=lambda item: item.created_at.timestamp() if item.created_at else float('-inf'),
        reverse=True
    )

    counts = Counter()
    first_seen: Dict[str, int] = {}
    for position, item in enumerate(ordered):
        for tag in collect_item_hashtags(item):
            counts[tag] += 1
            first_seen.setdefault(tag, position)

    ranked = sorted(counts, key=lambda tag: (-counts[tag], first_seen[tag]))
    return ranked[:limit]
