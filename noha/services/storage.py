from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Iterable

from dateutil import parser as dtparser

from noha.models import LastPlayed, PlaylistEntry, PlaylistType, Settings

logger = logging.getLogger(__name__)

RECENT_PLAYLISTS_LIMIT = 5


class JsonStore:
    """One JSON document under the app's private data directory."""

    filename = "state.json"

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    def _state_path(self) -> Path:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return self.base_dir / self.filename

    def _load_state(self) -> dict:
        p = self._state_path()
        if not p.exists():
            return {}
        try:
            state = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable %s: %s", p, e)
            return {}
        return state if isinstance(state, dict) else {}

    def _save_state(self, state: dict) -> None:
        p = self._state_path()
        p.write_text(json.dumps(state, ensure_ascii=False), encoding="utf-8")


class FavoritesStore(JsonStore):
    filename = "favorites.json"

    def favorites(self) -> set[str]:
        return set(self._load_state().get("favorite_stream_urls", []))

    def set_favorites(self, ids: Iterable[str]) -> None:
        state = self._load_state()
        state["favorite_stream_urls"] = sorted(set(ids))
        self._save_state(state)

    def toggle_favorite(self, stream_url: str) -> bool:
        current = self.favorites()
        if stream_url in current:
            current.discard(stream_url)
            added = False
        else:
            current.add(stream_url)
            added = True
        self.set_favorites(current)
        return added


class PlaylistStore(JsonStore):
    filename = "playlists.json"

    def playlists(self) -> list[PlaylistEntry]:
        out: list[PlaylistEntry] = []
        for raw in self._load_state().get("playlists", []):
            entry = _entry_from_dict(raw)
            if entry:
                out.append(entry)
        return out

    def active_playlist_id(self) -> str | None:
        return self._load_state().get("active_playlist_id")

    def active_playlist(self) -> PlaylistEntry | None:
        active_id = self.active_playlist_id()
        for p in self.playlists():
            if p.id == active_id:
                return p
        return None

    def save_new_playlist(self, entry: PlaylistEntry) -> None:
        state = self._load_state()
        entries = list(state.get("playlists", []))
        entries.append(_entry_to_dict(entry))
        state["playlists"] = entries
        state["active_playlist_id"] = entry.id
        self._save_state(state)

    def set_active_playlist(self, playlist_id: str | None) -> None:
        state = self._load_state()
        if playlist_id is None:
            state.pop("active_playlist_id", None)
        else:
            state["active_playlist_id"] = playlist_id
        self._save_state(state)

    def update_last_used(self, playlist_id: str, when: datetime | None = None) -> None:
        when = when or datetime.now()
        updated = []
        for p in self.playlists():
            if p.id == playlist_id:
                p.last_used_at = when
            updated.append(_entry_to_dict(p))
        state = self._load_state()
        state["playlists"] = updated
        self._save_state(state)

    def recent_playlists(self, limit: int = RECENT_PLAYLISTS_LIMIT) -> list[PlaylistEntry]:
        return sorted(self.playlists(), key=lambda p: p.recency, reverse=True)[:limit]


class SettingsStore(JsonStore):
    filename = "settings.json"

    def load(self) -> Settings:
        state = self._load_state()
        last = state.get("last_played")
        last_played = None
        if isinstance(last, dict) and last.get("url") and last.get("name"):
            last_played = LastPlayed(name=last["name"], url=last["url"], logo=last.get("logo"))

        return Settings(
            autoplay_last=bool(state.get("autoplay_last", False)),
            use_external_player=bool(state.get("use_external_player", False)),
            start_on_boot=bool(state.get("start_on_boot", False)),
            parental_enabled=bool(state.get("parental_enabled", False)),
            parental_pin=state.get("parental_pin"),
            show_hidden=bool(state.get("show_hidden_channels", False)),
            hidden_channels=set(state.get("hidden_channels", [])),
            disclaimer_accepted=bool(state.get("disclaimer_accepted", False)),
            last_played=last_played,
        )

    def _set(self, key: str, value) -> None:
        state = self._load_state()
        state[key] = value
        self._save_state(state)

    def set_autoplay_last(self, enabled: bool) -> None:
        self._set("autoplay_last", enabled)

    def set_use_external_player(self, enabled: bool) -> None:
        self._set("use_external_player", enabled)

    def set_start_on_boot(self, enabled: bool) -> None:
        self._set("start_on_boot", enabled)

    def set_show_hidden(self, enabled: bool) -> None:
        self._set("show_hidden_channels", enabled)

    def accept_disclaimer(self) -> None:
        self._set("disclaimer_accepted", True)

    def set_parental(self, enabled: bool, pin: str | None) -> None:
        state = self._load_state()
        state["parental_enabled"] = enabled
        if pin is not None:
            state["parental_pin"] = pin
        else:
            state.pop("parental_pin", None)
        self._save_state(state)

    def parental_pin(self) -> str | None:
        return self._load_state().get("parental_pin")

    def hide_channel(self, stream_url: str) -> None:
        hidden = self.load().hidden_channels
        hidden.add(stream_url)
        self._set("hidden_channels", sorted(hidden))

    def unhide_channel(self, stream_url: str) -> None:
        hidden = self.load().hidden_channels
        hidden.discard(stream_url)
        self._set("hidden_channels", sorted(hidden))

    def unhide_all(self) -> None:
        self._set("hidden_channels", [])

    def set_last_played(self, name: str, url: str, logo: str | None) -> None:
        last = {"name": name, "url": url}
        if logo is not None:
            last["logo"] = logo
        self._set("last_played", last)


def new_playlist_entry(url: str, name: str | None = None, type: PlaylistType = PlaylistType.URL) -> PlaylistEntry:
    return PlaylistEntry(
        id=uuid.uuid4().hex,
        name=(name or "").strip() or "Playlist",
        type=type,
        url=url.strip(),
        created_at=datetime.now(),
    )


def _entry_to_dict(entry: PlaylistEntry) -> dict:
    return {
        "id": entry.id,
        "name": entry.name,
        "type": entry.type.value,
        "url": entry.url,
        "created_at": entry.created_at.isoformat(),
        "last_used_at": entry.last_used_at.isoformat() if entry.last_used_at else None,
    }


def _entry_from_dict(raw: dict) -> PlaylistEntry | None:
    try:
        return PlaylistEntry(
            id=str(raw["id"]),
            name=str(raw.get("name") or "Playlist"),
            type=PlaylistType(raw.get("type", PlaylistType.URL.value)),
            url=str(raw["url"]),
            created_at=dtparser.isoparse(raw["created_at"]),
            last_used_at=dtparser.isoparse(raw["last_used_at"]) if raw.get("last_used_at") else None,
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Skipping malformed playlist entry %r: %s", raw, e)
        return None
