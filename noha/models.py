from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class Channel:
    # stream_url is the identity key; no other field takes part in equality
    # or hashing.
    name: str = field(compare=False)
    stream_url: str = field()
    logo_url: str | None = field(default=None, compare=False)
    group_title: str | None = field(default=None, compare=False)
    country: str | None = field(default=None, compare=False)
    language: str | None = field(default=None, compare=False)
    tvg_id: str | None = field(default=None, compare=False)
    tvg_name: str | None = field(default=None, compare=False)


class CategoryType(Enum):
    GROUP = "group"
    COUNTRY = "country"


@dataclass(frozen=True)
class CategoryItem:
    name: str
    type: CategoryType
    count: int


class PlaylistType(Enum):
    URL = "url"
    FILE = "file"
    XTREAM = "xtream"


@dataclass
class PlaylistEntry:
    id: str
    name: str
    type: PlaylistType
    url: str
    created_at: datetime
    last_used_at: datetime | None = None

    @property
    def recency(self) -> datetime:
        return self.last_used_at or self.created_at


@dataclass(frozen=True)
class LastPlayed:
    name: str
    url: str
    logo: str | None = None


@dataclass
class Settings:
    autoplay_last: bool = False
    use_external_player: bool = False
    start_on_boot: bool = False
    parental_enabled: bool = False
    parental_pin: str | None = None
    show_hidden: bool = False
    hidden_channels: set[str] = field(default_factory=set)
    disclaimer_accepted: bool = False
    last_played: LastPlayed | None = None
