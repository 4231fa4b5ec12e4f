from __future__ import annotations

import logging
from typing import Callable, Iterable

from noha.errors import PlaylistLoadError, ResolutionCancelled
from noha.models import Channel
from noha.services.m3u import parse_m3u

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], str]
CancelledFn = Callable[[], bool]


def candidate_order(primary: str | None, fallbacks: Iterable[str]) -> list[str]:
    """Primary first, then fallbacks, without exact duplicates."""
    ordered: list[str] = []
    seen: set[str] = set()
    head = [primary] if primary and primary.strip() else []
    for c in [*head, *fallbacks]:
        if c not in seen:
            seen.add(c)
            ordered.append(c)
    return ordered


def resolve_playlist(
    primary: str | None,
    fallbacks: Iterable[str],
    fetch: FetchFn,
    cancelled: CancelledFn | None = None,
) -> list[Channel]:
    """Try each candidate once, in order, and parse the first one that loads.

    Raises PlaylistLoadError after every candidate has failed, and
    ResolutionCancelled when ``cancelled()`` turns true between attempts.
    """
    last_error: Exception | None = None

    for candidate in candidate_order(primary, fallbacks):
        if cancelled and cancelled():
            raise ResolutionCancelled(f"Playlist resolution cancelled before {candidate}")

        try:
            text = fetch(candidate)
        except Exception as e:  # noqa: BLE001
            logger.warning("Playlist candidate %s failed: %s", candidate, e)
            last_error = e
            continue

        channels = parse_m3u(text)
        logger.info("Loaded %d channels from %s", len(channels), candidate)
        return channels

    if last_error is None:
        raise PlaylistLoadError("Failed to load playlist")
    raise PlaylistLoadError(str(last_error) or "Failed to load playlist", last_error) from last_error
