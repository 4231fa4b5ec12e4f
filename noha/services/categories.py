from __future__ import annotations

import re
from collections import Counter
from typing import Iterable

from noha.models import CategoryItem, CategoryType, Channel


_SEP_RE = re.compile(r"[;,|]")

UNDEFINED_GROUP = "Undefined"
UNKNOWN_COUNTRY = "Unknown"


def split_tokens(value: str | None, fallback: str) -> list[str]:
    """Split a multi-value group/country field on ``;``, ``,`` and ``|``.

    Tokens are trimmed and empty ones dropped; when nothing is left the
    result is ``[fallback]``. Category building and category filtering both
    go through here so they agree on what a channel's tokens are.
    """
    tokens = [t.strip() for t in _SEP_RE.split(value or "")]
    tokens = [t for t in tokens if t]
    return tokens or [fallback]


def channel_groups(channel: Channel) -> list[str]:
    return split_tokens(channel.group_title, UNDEFINED_GROUP)


def channel_countries(channel: Channel) -> list[str]:
    return split_tokens(channel.country, UNKNOWN_COUNTRY)


def build_categories(channels: Iterable[Channel]) -> list[CategoryItem]:
    groups: Counter[str] = Counter()
    countries: Counter[str] = Counter()

    for ch in channels:
        groups.update(channel_groups(ch))
        countries.update(channel_countries(ch))

    items = [CategoryItem(name=g, type=CategoryType.GROUP, count=n) for g, n in groups.items()]
    items += [CategoryItem(name=c, type=CategoryType.COUNTRY, count=n) for c, n in countries.items()]
    return sorted(items, key=lambda c: c.name.lower())
