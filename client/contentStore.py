import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ranking.errors import NotFound
from ranking.models import Account, ContentItem


class ContentStore:
    """
    Read-only view of the content/account store used by the ranking engine

    Implementations raise NotFound for missing records and
    UpstreamQueryFailure when the backing store cannot be reached.
    """

    def get_account(self, account_id: str) -> Account:
        raise NotImplementedError

    def list_accounts(self) -> List[Account]:
        raise NotImplementedError

    def get_content(self, item_id: str) -> ContentItem:
        raise NotImplementedError

    def get_contents(self, item_ids: Iterable[str]) -> List[ContentItem]:
        """Fetch several items, silently skipping ids that no longer exist"""
        raise NotImplementedError

    def list_top_level_content(self) -> List[ContentItem]:
        """Unranked candidate set of every non-reply item"""
        raise NotImplementedError

    def list_content_since(self, since: datetime) -> List[ContentItem]:
        """Items (posts and replies) created at or after `since`"""
        raise NotImplementedError

    def list_content_by_author(self, author_id: str, limit: Optional[int] = None) -> List[ContentItem]:
        """An author's items, newest first"""
        raise NotImplementedError

    def list_recent_top_level(self, limit: int, offset: int = 0) -> List[ContentItem]:
        """Top-level items in reverse-chronological order, paginated"""
        raise NotImplementedError

    def count_content(self) -> int:
        raise NotImplementedError


def _newest_first(items: Iterable[ContentItem]) -> List[ContentItem]:
    return sorted(
        items,
        key=lambda item: item.created_at.timestamp() if item.created_at else float('-inf'),
        reverse=True
    )


class InMemoryContentStore(ContentStore):
    """Dictionary-backed store for local development and tests"""

    def __init__(self, accounts: Iterable[Account] = (), items: Iterable[ContentItem] = ()):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.accounts: Dict[str, Account] = {account.id: account for account in accounts}
        self.items: Dict[str, ContentItem] = {item.id: item for item in items}

    def add_account(self, account: Account) -> Account:
        self.accounts[account.id] = account
        return account

    def add_content(self, item: ContentItem) -> ContentItem:
        self.items[item.id] = item
        return item

    def get_account(self, account_id: str) -> Account:
        account = self.accounts.get(account_id)
        if account is None:
            raise NotFound('account', account_id)
        return account

    def list_accounts(self) -> List[Account]:
        return list(self.accounts.values())

    def get_content(self, item_id: str) -> ContentItem:
        item = self.items.get(item_id)
        if item is None:
            raise NotFound('content', item_id)
        return item

    def get_contents(self, item_ids: Iterable[str]) -> List[ContentItem]:
        return [self.items[item_id] for item_id in item_ids if item_id in self.items]

    def list_top_level_content(self) -> List[ContentItem]:
        return [item for item in self.items.values() if item.is_top_level]

    def list_content_since(self, since: datetime) -> List[ContentItem]:
        return [
            item for item in self.items.values()
            if item.created_at is not None and item.created_at >= since
        ]

    def list_content_by_author(self, author_id: str, limit: Optional[int] = None) -> List[ContentItem]:
        authored = _newest_first(item for item in self.items.values() if item.author_id == author_id)
        return authored[:limit] if limit is not None else authored

    def list_recent_top_level(self, limit: int, offset: int = 0) -> List[ContentItem]:
        return _newest_first(self.list_top_level_content())[offset:offset + limit]

    def count_content(self) -> int:
        return len(self.items)
