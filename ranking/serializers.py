"""
Caller-facing JSON-safe projections of content items and accounts.
"""
import logging
from typing import Dict, List, Optional

from ranking.config import DEFAULT_USER_IMAGE, PREVIEW_REPLY_COUNT
from ranking.errors import NotFound
from ranking.models import Account, ContentItem, Score

logger = logging.getLogger(__name__)

ATTACHMENT_FIELDS = (
    'type', 'url', 'filename', 'size', 'duration', 'dimensions', 'thumbnail', 'metadata'
)


def serialize_author(account: Optional[Account]) -> Optional[Dict]:
    if account is None:
        return None
    return {
        'id': account.id,
        'name': account.name,
        'username': account.username,
        'image': account.image or DEFAULT_USER_IMAGE,
        'verified': account.verified,
    }


def serialize_community(community: Optional[Dict]) -> Optional[Dict]:
    if not community:
        return None
    return {
        'id': str(community.get('id', '')),
        'name': community.get('name', ''),
        'image': community.get('image'),
    }


def serialize_attachment(attachment: Dict) -> Dict:
    """Keep only the known attachment descriptor fields"""
    plain = {name: attachment.get(name) for name in ATTACHMENT_FIELDS}
    if attachment.get('id') is not None:
        plain['id'] = str(attachment['id'])
    return plain


class ItemSerializer:
    """
    Serializes content items for one request

    Author lookups are memoized for the lifetime of the serializer only.
    """

    def __init__(self, store, viewer_id: Optional[str] = None):
        self.store = store
        self.viewer_id = viewer_id
        self._authors: Dict[str, Optional[Account]] = {}

    def author(self, author_id: str) -> Optional[Account]:
        if author_id not in self._authors:
            try:
                self._authors[author_id] = self.store.get_account(author_id)
            except NotFound:
                logger.debug(f"Author {author_id} missing, serializing without author")
                self._authors[author_id] = None
        return self._authors[author_id]

    def preview_replies(self, item: ContentItem) -> List[Dict]:
        replies = self.store.get_contents(item.children[:PREVIEW_REPLY_COUNT])
        previews = []
        for reply in replies[:PREVIEW_REPLY_COUNT]:
            author = self.author(reply.author_id)
            previews.append({
                'id': reply.id,
                'text': reply.text,
                'author': {
                    'id': author.id if author else reply.author_id,
                    'name': author.name if author else '',
                    'image': (author.image if author else None) or DEFAULT_USER_IMAGE,
                },
            })
        return previews

    def serialize(self, item: ContentItem, score: Optional[Score] = None) -> Dict:
        """
        Project a content item into the feed payload

        Args:
            item: Content item
            score: Optional score; when given its terms are exposed as algorithmData

        Returns:
            JSON-safe dictionary
        """
        payload = {
            'id': item.id,
            'text': item.text,
            'parentId': item.parent_id,
            'author': serialize_author(self.author(item.author_id)),
            'community': serialize_community(item.community),
            'createdAt': item.created_at.isoformat() if item.created_at else None,
            'hashtags': sorted(item.hashtags),
            'mentions': [dict(mention) for mention in item.mentions],
            'communityTags': list(item.community_tags),
            'likes': sorted(item.likes),
            'shares': sorted(item.shares),
            'attachments': [serialize_attachment(a) for a in item.attachments],
            'isLikedByCurrentUser': bool(self.viewer_id) and self.viewer_id in item.likes,
            'comments': self.preview_replies(item),
        }
        if score is not None:
            payload['algorithmData'] = {
                'engagementScore': score.engagement,
                'recencyScore': score.recency,
                'followingBoost': score.following_boost,
                'viralScore': score.virality,
                'finalScore': score.value,
            }
        return payload


def serialize_suggestion(account: Account, suggestion_score: float, mutual_follows: int) -> Dict:
    return {
        'id': account.id,
        'name': account.name,
        'username': account.username,
        'image': account.image or DEFAULT_USER_IMAGE,
        'bio': account.bio,
        'verified': account.verified,
        'suggestionScore': suggestion_score,
        'mutualFollows': mutual_follows,
    }
