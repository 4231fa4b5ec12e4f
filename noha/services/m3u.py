from __future__ import annotations

import re

from noha.models import Channel


_ATTR_RE = re.compile(r"([a-zA-Z-]+)=\"([^\"]+)\"")

UNKNOWN_CHANNEL = "Unknown Channel"


def parse_m3u(text: str) -> list[Channel]:
    """Parse M3U playlist text into channels, in URL-line order.

    Malformed input never raises: a URL line without a preceding #EXTINF is
    dropped, and comments or unknown directives are skipped.
    """
    lines = [ln.strip().strip("\ufeff") for ln in (text or "").splitlines()]
    channels: list[Channel] = []

    pending: str | None = None
    pending_attrs: dict[str, str] = {}

    for ln in lines:
        if not ln:
            continue

        if ln.startswith("#EXTM3U"):
            continue

        if ln.startswith("#EXTINF:"):
            pending = ln
            pending_attrs = parse_attributes(ln)
            continue

        if ln.startswith("#"):
            continue

        if pending is None:
            continue

        channels.append(_build_channel(pending, pending_attrs, ln))
        pending = None
        pending_attrs = {}

    return channels


def parse_attributes(extinf: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for k, v in _ATTR_RE.findall(extinf):
        attrs[k] = v
    return attrs


def _build_channel(extinf: str, attrs: dict[str, str], stream_url: str) -> Channel:
    _, comma, tail = extinf.rpartition(",")
    name = tail.strip() if comma else ""
    if not name:
        name = attrs.get("tvg-name") or UNKNOWN_CHANNEL

    return Channel(
        name=name,
        stream_url=stream_url,
        logo_url=attrs.get("tvg-logo"),
        group_title=attrs.get("group-title"),
        country=attrs.get("tvg-country"),
        language=attrs.get("tvg-language"),
        tvg_id=attrs.get("tvg-id"),
        tvg_name=attrs.get("tvg-name") or name,
    )
