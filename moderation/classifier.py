"""
Pre-publish content moderation.

The publish flow calls moderate() before persisting a post. A rejected post
is a normal Verdict with is_appropriate=False, never an exception.
"""
import logging
from typing import Dict, List, Optional, Sequence

from featureEngineering.textPreprocessing import find_keywords
from ranking.config import (
    SPAM_KEYWORDS, OFFENSIVE_KEYWORDS, FLAGGED_CONFIDENCE, CLEAN_CONFIDENCE
)
from ranking.models import Verdict

logger = logging.getLogger(__name__)


class Classifier:
    """Capability that turns a submission into a Verdict"""

    def classify(self, text: str, attachments: Sequence[Dict]) -> Verdict:
        raise NotImplementedError


class KeywordClassifier(Classifier):
    """
    Substring heuristic against fixed spam and offensive word lists

    Stand-in for a learned classifier; swap in another Classifier without
    touching callers of ModerationGate.
    """

    def __init__(self, spam_keywords: Optional[List[str]] = None, offensive_keywords: Optional[List[str]] = None):
        self.spam_keywords = list(spam_keywords) if spam_keywords is not None else list(SPAM_KEYWORDS)
        self.offensive_keywords = list(offensive_keywords) if offensive_keywords is not None else list(OFFENSIVE_KEYWORDS)

    def classify(self, text: str, attachments: Sequence[Dict]) -> Verdict:
        spam_hits = find_keywords(text or '', self.spam_keywords)
        offensive_hits = find_keywords(text or '', self.offensive_keywords)
        flagged = bool(spam_hits or offensive_hits)

        if flagged:
            logger.debug(f"Moderation hits: spam={spam_hits} offensive={offensive_hits}")

        return Verdict(
            is_appropriate=not flagged,
            flags={
                'spam': bool(spam_hits),
                'offensive': bool(offensive_hits),
                'hasAttachments': len(attachments or []) > 0,
            },
            confidence=FLAGGED_CONFIDENCE if flagged else CLEAN_CONFIDENCE,
        )


class ModerationGate:
    def __init__(self, classifier: Optional[Classifier] = None):
        self.classifier = classifier or KeywordClassifier()

    def moderate(self, text: str, attachments: Optional[Sequence[Dict]] = None) -> Verdict:
        """
        Check a submission before it is published

        Args:
            text: Post body
            attachments: Attachment descriptors

        Returns:
            Verdict with appropriateness, flags and confidence
        """
        verdict = self.classifier.classify(text or '', list(attachments or []))
        if not verdict.is_appropriate:
            logger.info(f"Submission rejected by moderation: {verdict.flags}")
        return verdict


def moderate(text: str, attachments: Optional[Sequence[Dict]] = None) -> Verdict:
    """Moderate with the default keyword classifier"""
    return ModerationGate().moderate(text, attachments)
