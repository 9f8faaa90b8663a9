import redis
import json
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from client.contentStore import ContentStore
from ranking.config import REDIS_URL, REDIS_SOCKET_TIMEOUT
from ranking.errors import NotFound, UpstreamQueryFailure
from ranking.models import Account, ContentItem

POSTS_BY_TIME_KEY = "posts:by_time"
TOP_LEVEL_KEY = "posts:top_level"
ACCOUNTS_KEY = "accounts"


def _post_key(item_id: str) -> str:
    return f"post:{item_id}"


def _account_key(account_id: str) -> str:
    return f"account:{account_id}"


def _author_key(author_id: str) -> str:
    return f"author:{author_id}:posts"


def _epoch_ms(moment: Optional[datetime]) -> float:
    return moment.timestamp() * 1000.0 if moment else 0.0


class Client(ContentStore):
    def __init__(self, redis_url: str = None, connection=None):
        """
        Initialize Redis-backed content/account store

        Args:
            redis_url: Redis connection URL (from environment)
            connection: Pre-built redis connection, mainly for tests
        """
        self.logger = logging.getLogger(self.__class__.__name__)

        if connection is not None:
            self.client = connection
            return

        if not redis_url:
            redis_url = REDIS_URL

        try:
            self.client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=REDIS_SOCKET_TIMEOUT
            )
            # Test connection
            self.client.ping()
            self.logger.info("Redis connection established")
        except redis.exceptions.RedisError as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            raise UpstreamQueryFailure(f"Redis unavailable: {e}") from e

    @contextmanager
    def _upstream(self, operation: str):
        """Translate Redis and decoding failures into UpstreamQueryFailure"""
        try:
            yield
        except redis.exceptions.RedisError as e:
            self.logger.error(f"Redis error during {operation}: {e}")
            raise UpstreamQueryFailure(f"{operation} failed: {e}") from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            self.logger.error(f"Malformed document during {operation}: {e}")
            raise UpstreamQueryFailure(f"{operation} returned malformed data: {e}") from e

    def _load_items(self, item_ids: List[str]) -> List[ContentItem]:
        if not item_ids:
            return []
        documents = self.client.mget([_post_key(item_id) for item_id in item_ids])
        return [ContentItem.from_dict(json.loads(doc)) for doc in documents if doc]

    def _load_accounts(self, account_ids: List[str]) -> List[Account]:
        if not account_ids:
            return []
        documents = self.client.mget([_account_key(account_id) for account_id in account_ids])
        return [Account.from_dict(json.loads(doc)) for doc in documents if doc]

    # Writes (used by external writers and seeding scripts, never by the engine)

    def put_content(self, item: ContentItem) -> None:
        """Store a content item and index it by time, author and top-level flag"""
        with self._upstream("put_content"):
            score = _epoch_ms(item.created_at)
            pipeline = self.client.pipeline()
            pipeline.set(_post_key(item.id), json.dumps(item.to_dict(), default=str))
            pipeline.zadd(POSTS_BY_TIME_KEY, {item.id: score})
            pipeline.zadd(_author_key(item.author_id), {item.id: score})
            if item.is_top_level:
                pipeline.zadd(TOP_LEVEL_KEY, {item.id: score})
            pipeline.execute()
            self.logger.debug(f"Stored content item {item.id}")

    def put_account(self, account: Account) -> None:
        with self._upstream("put_account"):
            pipeline = self.client.pipeline()
            pipeline.set(_account_key(account.id), json.dumps(account.to_dict()))
            pipeline.sadd(ACCOUNTS_KEY, account.id)
            pipeline.execute()
            self.logger.debug(f"Stored account {account.id}")

    # Reads

    def get_account(self, account_id: str) -> Account:
        with self._upstream("get_account"):
            data = self.client.get(_account_key(account_id))
            if not data:
                raise NotFound('account', account_id)
            return Account.from_dict(json.loads(data))

    def list_accounts(self) -> List[Account]:
        with self._upstream("list_accounts"):
            account_ids = sorted(self.client.smembers(ACCOUNTS_KEY) or [])
            accounts = self._load_accounts(account_ids)
            self.logger.info(f"Loaded {len(accounts)} accounts")
            return accounts

    def get_content(self, item_id: str) -> ContentItem:
        with self._upstream("get_content"):
            data = self.client.get(_post_key(item_id))
            if not data:
                raise NotFound('content', item_id)
            return ContentItem.from_dict(json.loads(data))

    def get_contents(self, item_ids: Iterable[str]) -> List[ContentItem]:
        with self._upstream("get_contents"):
            return self._load_items(list(item_ids))

    def list_top_level_content(self) -> List[ContentItem]:
        with self._upstream("list_top_level_content"):
            item_ids = self.client.zrange(TOP_LEVEL_KEY, 0, -1)
            items = self._load_items(item_ids)
            self.logger.info(f"Loaded {len(items)} top-level candidates")
            return items

    def list_content_since(self, since: datetime) -> List[ContentItem]:
        with self._upstream("list_content_since"):
            item_ids = self.client.zrangebyscore(POSTS_BY_TIME_KEY, _epoch_ms(since), "+inf")
            return self._load_items(item_ids)

    def list_content_by_author(self, author_id: str, limit: Optional[int] = None) -> List[ContentItem]:
        with self._upstream("list_content_by_author"):
            end = -1 if limit is None else limit - 1
            if limit is not None and limit <= 0:
                return []
            item_ids = self.client.zrevrange(_author_key(author_id), 0, end)
            return self._load_items(item_ids)

    def list_recent_top_level(self, limit: int, offset: int = 0) -> List[ContentItem]:
        with self._upstream("list_recent_top_level"):
            if limit <= 0:
                return []
            item_ids = self.client.zrevrange(TOP_LEVEL_KEY, offset, offset + limit - 1)
            return self._load_items(item_ids)

    def count_content(self) -> int:
        with self._upstream("count_content"):
            return int(self.client.zcard(POSTS_BY_TIME_KEY))

    def get_stats(self) -> Dict:
        """Get connection statistics for health checks"""
        with self._upstream("get_stats"):
            info = self.client.info()
            return {
                'connected_clients': info.get('connected_clients', 0),
                'used_memory_human': info.get('used_memory_human', '0B'),
                'total_commands_processed': info.get('total_commands_processed', 0),
            }
