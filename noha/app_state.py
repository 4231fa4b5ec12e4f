from __future__ import annotations

from dataclasses import dataclass, field

from noha.models import CategoryItem, Channel
from noha.services.categories import build_categories
from noha.services.filters import favorite_channels, filter_categories, filter_channels

RECENT_CHANNELS_LIMIT = 10


@dataclass
class ChannelListState:
    """Filter state for the channel list plus the view data derived from it.

    Every mutator ends in refresh(), which re-runs the pure filter functions
    over the full channel list.
    """

    channels: list[Channel] = field(default_factory=list)
    categories: list[CategoryItem] = field(default_factory=list)
    query: str = ""
    selected_category: CategoryItem | None = None
    show_hidden: bool = False
    hidden_ids: set[str] = field(default_factory=set)
    favorite_ids: set[str] = field(default_factory=set)
    recent_channels: list[Channel] = field(default_factory=list)

    parental_enabled: bool = False
    parental_unlocked: bool = True

    is_loading: bool = False
    error: str | None = None

    filtered_channels: list[Channel] = field(default_factory=list)
    filtered_categories: list[CategoryItem] = field(default_factory=list)
    favorites: list[Channel] = field(default_factory=list)

    def refresh(self) -> None:
        self.filtered_channels = filter_channels(
            self.channels,
            self.query,
            self.selected_category,
            self.show_hidden,
            self.hidden_ids,
        )
        self.filtered_categories = filter_categories(self.categories, self.query)
        self.favorites = favorite_channels(self.channels, self.favorite_ids)

    def set_channels(self, channels: list[Channel]) -> None:
        self.channels = list(channels)
        self.categories = build_categories(self.channels)
        self.is_loading = False
        self.error = None
        self.refresh()

    def set_error(self, message: str) -> None:
        self.channels = []
        self.is_loading = False
        self.error = message or "Unknown error occurred"
        self.refresh()

    def on_query_change(self, query: str) -> None:
        # A text search drops the category so the two never combine to an
        # empty list by accident.
        self.query = query
        self.selected_category = None
        self.refresh()

    def select_category(self, category: CategoryItem | None) -> None:
        self.query = ""
        self.selected_category = category
        self.refresh()

    def set_show_hidden(self, enabled: bool) -> None:
        self.show_hidden = enabled
        self.refresh()

    def set_hidden_ids(self, ids: set[str]) -> None:
        self.hidden_ids = set(ids)
        self.refresh()

    def set_favorite_ids(self, ids: set[str]) -> None:
        self.favorite_ids = set(ids)
        self.refresh()

    def on_channel_played(self, channel: Channel) -> None:
        rest = [c for c in self.recent_channels if c.stream_url != channel.stream_url]
        self.recent_channels = [channel, *rest][:RECENT_CHANNELS_LIMIT]

    def set_parental_enabled(self, enabled: bool) -> None:
        self.parental_enabled = enabled
        self.parental_unlocked = not enabled

    def unlock_parental(self, pin: str, stored_pin: str | None) -> bool:
        if stored_pin is not None and pin == stored_pin:
            self.parental_unlocked = True
        return self.parental_unlocked

    def lock_parental(self) -> None:
        self.parental_unlocked = False

    @property
    def is_locked(self) -> bool:
        return self.parental_enabled and not self.parental_unlocked
