"""
News item deduplication using link matching and fuzzy title comparison.

This module removes duplicate items based on:
1. Exact link matches (the same story seen in two feeds or result pages)
2. Fuzzy title similarity (same story syndicated under different URLs)
"""

from __future__ import annotations

from rapidfuzz import fuzz

from .types import NewsItem


def dedup_items(items: list[NewsItem], threshold: int = 92) -> list[NewsItem]:
    """Remove duplicate items, preserving original order.

    Args:
        items: Items to deduplicate
        threshold: Similarity threshold (0-100) for fuzzy title matching

    Returns:
        Deduplicated list of items
    """
    seen_links: set[str] = set()
    kept: list[NewsItem] = []
    titles: list[str] = []

    for item in items:
        if item.link and item.link in seen_links:
            continue
        if _is_similar_title(item.title, titles, threshold):
            continue
        if item.link:
            seen_links.add(item.link)
        titles.append(item.title)
        kept.append(item)

    return kept


def _is_similar_title(title: str, titles: list[str], threshold: int) -> bool:
    for existing in titles:
        if fuzz.ratio(title.lower(), existing.lower()) >= threshold:
            return True
    return False
