"""
Read-only records consumed by the ranking engine and the ephemeral values it
produces.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional

from dateutil import parser


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse a stored timestamp into an aware UTC datetime

    Args:
        value: ISO string, epoch milliseconds, datetime or None

    Returns:
        Aware datetime, or None when no timestamp is present
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    else:
        parsed = parser.parse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class ContentItem:
    id: str
    author_id: str
    created_at: Optional[datetime]
    text: str = ''
    parent_id: Optional[str] = None
    hashtags: FrozenSet[str] = frozenset()
    mentions: List[Dict[str, str]] = field(default_factory=list)
    community_tags: List[str] = field(default_factory=list)
    attachments: List[Dict[str, Any]] = field(default_factory=list)
    likes: FrozenSet[str] = frozenset()
    shares: FrozenSet[str] = frozenset()
    children: List[str] = field(default_factory=list)
    views: List[Any] = field(default_factory=list)
    community: Optional[Dict[str, Any]] = None

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    @classmethod
    def from_dict(cls, data: Dict) -> 'ContentItem':
        """Build a content item from a stored document, tolerating missing lists"""
        return cls(
            id=str(data['id']),
            author_id=str(data['author_id']),
            created_at=parse_timestamp(data.get('created_at')),
            text=data.get('text') or '',
            parent_id=data.get('parent_id'),
            hashtags=frozenset(tag.lower() for tag in data.get('hashtags') or []),
            mentions=list(data.get('mentions') or []),
            community_tags=list(data.get('community_tags') or []),
            attachments=list(data.get('attachments') or []),
            likes=frozenset(str(uid) for uid in data.get('likes') or []),
            shares=frozenset(str(uid) for uid in data.get('shares') or []),
            children=[str(cid) for cid in data.get('children') or []],
            views=list(data.get('views') or []),
            community=data.get('community'),
        )

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'author_id': self.author_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'text': self.text,
            'parent_id': self.parent_id,
            'hashtags': sorted(self.hashtags),
            'mentions': list(self.mentions),
            'community_tags': list(self.community_tags),
            'attachments': list(self.attachments),
            'likes': sorted(self.likes),
            'shares': sorted(self.shares),
            'children': list(self.children),
            'views': list(self.views),
            'community': self.community,
        }


@dataclass(frozen=True)
class Account:
    id: str
    name: str = ''
    username: str = ''
    image: Optional[str] = None
    bio: str = ''
    verified: bool = False
    followers: FrozenSet[str] = frozenset()
    following: FrozenSet[str] = frozenset()
    blocked: FrozenSet[str] = frozenset()
    interests: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Account':
        return cls(
            id=str(data['id']),
            name=data.get('name') or '',
            username=data.get('username') or '',
            image=data.get('image'),
            bio=data.get('bio') or '',
            verified=bool(data.get('verified', False)),
            followers=frozenset(str(uid) for uid in data.get('followers') or []),
            following=frozenset(str(uid) for uid in data.get('following') or []),
            blocked=frozenset(str(uid) for uid in data.get('blocked') or []),
            interests=[tag.lower() for tag in data.get('interests') or []],
        )

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'username': self.username,
            'image': self.image,
            'bio': self.bio,
            'verified': self.verified,
            'followers': sorted(self.followers),
            'following': sorted(self.following),
            'blocked': sorted(self.blocked),
            'interests': list(self.interests),
        }


@dataclass(frozen=True)
class ViewerContext:
    """What the scorer needs to know about the person looking at the feed"""
    viewer_id: Optional[str] = None
    following: FrozenSet[str] = frozenset()

    @classmethod
    def for_account(cls, account: Account) -> 'ViewerContext':
        return cls(viewer_id=account.id, following=account.following)


@dataclass(frozen=True)
class Score:
    item_id: str
    value: float
    engagement: float = 0.0
    recency: float = 0.0
    following_boost: float = 0.0
    virality: float = 0.0


@dataclass(frozen=True)
class Verdict:
    is_appropriate: bool
    flags: Dict[str, bool]
    confidence: float

    def to_dict(self) -> Dict:
        return {
            'isAppropriate': self.is_appropriate,
            'flags': dict(self.flags),
            'confidenceScore': self.confidence,
        }
