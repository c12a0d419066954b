"""Filtering for the public directory listing."""

from __future__ import annotations

from collections.abc import Iterable

from groupfinder.schemas.community import DirectoryQuery, LiveCommunity


def _same(left: str, right: str) -> bool:
    return left.strip().casefold() == right.strip().casefold()


def matches_text(community: LiveCommunity, text: str) -> bool:
    """Return True if every word of ``text`` appears in the community's searchable fields."""
    haystack = " ".join(
        (
            community.name,
            community.description,
            community.long_description,
            community.category,
            community.platform,
            *community.tags,
        )
    ).casefold()
    return all(word in haystack for word in text.casefold().split())


def filter_communities(
    communities: Iterable[LiveCommunity],
    query: DirectoryQuery,
) -> list[LiveCommunity]:
    """Apply directory filters while preserving the incoming order."""
    results = []
    for community in communities:
        if query.category and not _same(community.category, query.category):
            continue
        if query.platform and not _same(community.platform, query.platform):
            continue
        if query.join_type and community.join_type is not query.join_type:
            continue
        if query.q and not matches_text(community, query.q):
            continue
        results.append(community)
    return results
