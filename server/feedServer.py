import os
import json
import logging
import base64
from datetime import datetime, timezone
from typing import Dict, Optional
from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from client.redis import Client as RedisClient
from moderation.classifier import ModerationGate
from ranking import (
    ContentAnalytics, FeedAssembler, PopularityRanker, RecommendationEngine, TrendingAnalyzer,
    LoggingConfig, NotFound, UpstreamQueryFailure, SystemClock
)
from ranking.config import (
    DEFAULT_FEED_LIMIT, DEFAULT_POPULARITY_WINDOW, DEFAULT_SUGGESTION_LIMIT,
    DEFAULT_TRENDING_WINDOW_HOURS, USER_METRICS_DAYS
)

# Configure logging
LoggingConfig.configure_logging()
logger = logging.getLogger(__name__)


def decode_viewer_id(auth_header: str) -> Optional[str]:
    """
    Extract the viewer id from a bearer token payload

    The identity provider has already authenticated the token; the signature
    is not checked here.

    Args:
        auth_header: Value of the Authorization header

    Returns:
        The token's 'sub' (or 'iss') claim, None when absent or malformed
    """
    try:
        if not auth_header or not auth_header.startswith('Bearer '):
            return None

        jwt_token = auth_header.replace('Bearer ', '', 1)
        parts = jwt_token.split('.')
        if len(parts) != 3:
            return None

        # Decode payload
        payload = parts[1]
        payload += '=' * (-len(payload) % 4)

        decoded = base64.urlsafe_b64decode(payload)
        payload_data = json.loads(decoded)

        if not isinstance(payload_data, dict):
            return None

        return payload_data.get('sub') or payload_data.get('iss')

    except (ValueError, TypeError) as e:
        logger.warning(f"Failed to decode bearer token: {e}")
        return None


class FeedServer:
    def __init__(self, store=None, clock=None, gate: Optional[ModerationGate] = None):
        """
        Initialize feed server

        Args:
            store: ContentStore; a Redis client is created on first use when omitted
            clock: Time source shared by the ranking components
            gate: Moderation gate used by the publish check
        """
        self.store = store
        self.clock = clock or SystemClock()
        self.gate = gate or ModerationGate()
        self.app = FastAPI()
        self.setup_error_handlers()
        self.setup_routes()

    def get_store(self):
        """Get or create the Redis-backed store"""
        if self.store is None:
            self.store = RedisClient()
            logger.info("Redis content store initialized")
        return self.store

    def require_viewer(self, request: Request) -> str:
        viewer_id = decode_viewer_id(request.headers.get('authorization', ''))
        if not viewer_id:
            raise HTTPException(status_code=401, detail="Missing or malformed bearer token")
        return viewer_id

    def setup_error_handlers(self):
        """Map engine errors onto HTTP responses"""

        @self.app.exception_handler(NotFound)
        def handle_not_found(request: Request, exc: NotFound):
            return JSONResponse(status_code=404, content={"error": str(exc)})

        @self.app.exception_handler(UpstreamQueryFailure)
        def handle_upstream_failure(request: Request, exc: UpstreamQueryFailure):
            logger.error(f"Upstream failure serving {request.url.path}: {exc}")
            return JSONResponse(status_code=503, content={"error": "Content store unavailable, retry later"})

        @self.app.exception_handler(ValueError)
        def handle_bad_request(request: Request, exc: ValueError):
            return JSONResponse(status_code=400, content={"error": str(exc)})

    def setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get("/")
        def root():
            return {"status": "healthy", "service": "feed-ranking"}

        @self.app.get("/feed")
        def get_feed(
            request: Request,
            limit: int = Query(DEFAULT_FEED_LIMIT, ge=0, le=100),
            offset: int = Query(0, ge=0)
        ):
            viewer_id = self.require_viewer(request)
            items = FeedAssembler(self.get_store(), self.clock).get_feed(viewer_id, limit, offset)
            return {"feed": items, "limit": limit, "offset": offset}

        @self.app.get("/trending")
        def get_trending(window_hours: float = Query(DEFAULT_TRENDING_WINDOW_HOURS, gt=0)):
            trends = TrendingAnalyzer(self.get_store(), self.clock).get_trending(window_hours)
            return {"trending": trends}

        @self.app.get("/popular")
        def get_popular(request: Request, window: str = DEFAULT_POPULARITY_WINDOW):
            viewer_id = decode_viewer_id(request.headers.get('authorization', ''))
            posts = PopularityRanker(self.get_store(), self.clock).get_popular(window, viewer_id=viewer_id)
            return {"popular": posts, "window": window}

        @self.app.get("/suggestions")
        def get_suggestions(request: Request, limit: int = Query(DEFAULT_SUGGESTION_LIMIT, ge=0, le=50)):
            viewer_id = self.require_viewer(request)
            users = RecommendationEngine(self.get_store()).get_suggested_users(viewer_id, limit)
            return {"suggestions": users}

        @self.app.post("/moderate")
        def moderate(payload: Dict = Body(...)):
            text = payload.get('text') or ''
            attachments = payload.get('attachments') or []
            if not isinstance(text, str):
                raise HTTPException(status_code=400, detail="'text' must be a string")
            if not isinstance(attachments, list):
                raise HTTPException(status_code=400, detail="'attachments' must be a list")

            verdict = self.gate.moderate(text, attachments)
            return verdict.to_dict()

        @self.app.get("/analytics/posts/{item_id}")
        def post_analytics(item_id: str):
            return ContentAnalytics(self.get_store(), self.clock).get_post_analytics(item_id)

        @self.app.get("/analytics/users/{user_id}")
        def user_metrics(user_id: str, days: int = Query(USER_METRICS_DAYS, gt=0)):
            return ContentAnalytics(self.get_store(), self.clock).get_user_metrics(user_id, days)

        @self.app.get("/analytics/platform")
        def platform_metrics():
            return ContentAnalytics(self.get_store(), self.clock).get_platform_metrics()

        @self.app.get("/health")
        def health_check():
            try:
                store = self.get_store()
                stats = store.get_stats() if hasattr(store, 'get_stats') else {}
                return {
                    "status": "healthy",
                    "redis_memory": stats.get('used_memory_human', '0B'),
                    "timestamp": datetime.now(timezone.utc).isoformat()
                }
            except UpstreamQueryFailure as e:
                logger.error(f"Health check failed: {e}")
                return JSONResponse(status_code=503, content={"status": "unhealthy", "error": str(e)})


# Global app instance
feed_server = FeedServer()
app = feed_server.app

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv('PORT', 8080))
    host = os.getenv('HOST', '0.0.0.0')

    logger.info(f"Starting feed ranking server on {host}:{port}")
    uvicorn.run(app, host=host, port=port)
