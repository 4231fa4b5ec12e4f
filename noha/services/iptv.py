from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlencode, urlparse

import requests

from noha.errors import PlaylistSourceError
from noha.models import Channel
from noha.services.resolver import CancelledFn, resolve_playlist


# GitHub Pages first, raw GitHub as a mirror for hosts where Pages DNS fails.
DEFAULT_PLAYLIST_URLS = [
    "https://iptv-org.github.io/iptv/index.m3u",
    "https://raw.githubusercontent.com/iptv-org/iptv/master/index.m3u",
]

USER_AGENT = "NohaPlayer/1.0"


class IPTVService:
    def __init__(self, fallback_urls: list[str] | None = None, timeout_s: int = 30):
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self.fallback_urls = list(DEFAULT_PLAYLIST_URLS if fallback_urls is None else fallback_urls)
        self.timeout_s = timeout_s

    def fetch_text(self, url: str) -> str:
        r = self.session.get(url, timeout=self.timeout_s, allow_redirects=True)
        r.raise_for_status()
        r.encoding = r.encoding or "utf-8"
        return r.text

    def read_local(self, identifier: str) -> str:
        path = _local_path(identifier)
        if not path.is_file():
            raise PlaylistSourceError(f"Unable to open playlist: {identifier}")
        return path.read_text(encoding="utf-8", errors="replace")

    def fetch(self, identifier: str) -> str:
        if identifier.lower().startswith("http"):
            return self.fetch_text(identifier)
        return self.read_local(identifier)

    def load_channels(self, url: str = "", cancelled: CancelledFn | None = None) -> list[Channel]:
        return resolve_playlist(url, self.fallback_urls, self.fetch, cancelled=cancelled)


def xtream_m3u_url(base_url: str, username: str, password: str) -> str:
    base = base_url.strip()
    if base.endswith("/"):
        base = base[:-1]
    query = urlencode({"username": username, "password": password, "type": "m3u"})
    return f"{base}/get.php?{query}"


def _local_path(identifier: str) -> Path:
    u = urlparse(identifier)
    if u.scheme == "file":
        return Path(unquote(u.path))
    return Path(identifier).expanduser()
