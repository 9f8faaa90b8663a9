"""
Error types raised by the feed ranking engine.
"""


class FeedEngineError(Exception):
    """Base class for engine errors"""


class UpstreamQueryFailure(FeedEngineError):
    """The content/account store is unreachable or timed out"""


class NotFound(FeedEngineError):
    """A viewer, account or content item does not exist"""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class InvalidContentError(FeedEngineError, ValueError):
    """A content item cannot be scored (e.g. it has no creation timestamp)"""
