"""Cross-source trending detection.

A story is trending when at least two distinct sources report it in
the same fetch cycle. Detection runs in two passes:

1. Group items by topic. Each group is keyed by the signature of its
   first member; an item joins the first group whose representative
   title matches it, unless that group already holds an item from the
   same source (same-source repeats never inflate the count).
2. Relabel. Every input item whose title matches the key of a group
   with two or more members is flagged with that group's size, whether
   or not the item itself ended up in the group.
"""

from __future__ import annotations

import logging

from headliner.models import Item, TopicGroup
from headliner.topics import normalize_title, same_topic

logger = logging.getLogger(__name__)


def group_topics(items: list[Item]) -> list[TopicGroup]:
    """First pass: greedy grouping in input order."""
    groups: list[TopicGroup] = []
    for item in items:
        for group in groups:
            if same_topic(item.title, group.representative_title):
                if item.source_name not in group.source_names:
                    group.items.append(item)
                break
        else:
            groups.append(TopicGroup(key=normalize_title(item.title), items=[item]))
    return groups


def detect_trending(items: list[Item]) -> list[Item]:
    """Flag items whose topic is reported by two or more sources.

    Args:
        items: Items from every source, in merge order.

    Returns:
        The same items in the same order. Trending ones are copies with
        ``trending=True`` and ``trending_count`` set to the size of the
        first trending group whose key they match.
    """
    trending_groups = [g for g in group_topics(items) if g.size >= 2]
    if not trending_groups:
        return list(items)

    result: list[Item] = []
    for item in items:
        for group in trending_groups:
            if same_topic(item.title, group.key):
                item = item.mark_trending(group.size)
                break
        result.append(item)

    flagged = sum(1 for i in result if i.trending)
    logger.info(
        "Found %d trending topics covering %d items", len(trending_groups), flagged
    )
    return result
