import re
from typing import Iterable, List


def extract_hashtags(text: str) -> List[str]:
    """
    Extract hashtags from text

    Args:
        text: Input text

    Returns:
        Unique hashtags (without # symbol) in order of first appearance
    """
    if not text:
        return []

    hashtags = re.findall(r'#(\w+)', text.lower())
    return list(dict.fromkeys(hashtags))


def normalize_hashtags(hashtags: Iterable[str]) -> List[str]:
    """Lower-case hashtags, strip a leading '#' and drop empties/duplicates"""
    normalized = []
    for tag in hashtags or []:
        if not tag:
            continue
        tag = tag.strip().lstrip('#').lower()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized


def find_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """
    Case-insensitive substring search for keywords

    Args:
        text: Input text
        keywords: Keywords to look for

    Returns:
        Keywords that occur anywhere in the text
    """
    if not text:
        return []

    lowered = text.lower()
    return [keyword for keyword in keywords if keyword.lower() in lowered]
