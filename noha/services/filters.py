from __future__ import annotations

from typing import AbstractSet, Iterable

from noha.models import CategoryItem, CategoryType, Channel
from noha.services.categories import channel_countries, channel_groups


def filter_channels(
    channels: Iterable[Channel],
    query: str = "",
    category: CategoryItem | None = None,
    show_hidden: bool = False,
    hidden_ids: AbstractSet[str] = frozenset(),
) -> list[Channel]:
    """Apply text query, then category, then hidden-set exclusion."""
    out = _match_query(list(channels), query)
    out = _match_category(out, category)
    if show_hidden or not hidden_ids:
        return out
    return [ch for ch in out if ch.stream_url not in hidden_ids]


def filter_categories(categories: Iterable[CategoryItem], query: str = "") -> list[CategoryItem]:
    categories = list(categories)
    if not query or not query.strip():
        return categories
    q = query.strip().lower()
    return [c for c in categories if q in c.name.lower()]


def favorite_channels(channels: Iterable[Channel], favorite_ids: AbstractSet[str]) -> list[Channel]:
    return [ch for ch in channels if ch.stream_url in favorite_ids]


def _match_query(channels: list[Channel], query: str) -> list[Channel]:
    if not query or not query.strip():
        return channels
    q = query.strip().lower()

    def _hit(ch: Channel) -> bool:
        for value in (ch.name, ch.group_title, ch.country, ch.language):
            if value and q in value.lower():
                return True
        return False

    return [ch for ch in channels if _hit(ch)]


def _match_category(channels: list[Channel], category: CategoryItem | None) -> list[Channel]:
    if category is None:
        return channels

    tokens_of = channel_groups if category.type is CategoryType.GROUP else channel_countries
    wanted = category.name.lower()
    return [ch for ch in channels if wanted in (t.lower() for t in tokens_of(ch))]
