"""
Tests for ChannelListState: recompute-on-change, the query/category clearing
policy, recents and parental lock.
"""
from conftest import make_channel

from noha.app_state import RECENT_CHANNELS_LIMIT, ChannelListState
from noha.models import CategoryType


def names(channels):
    return [c.name for c in channels]


def loaded(channels):
    state = ChannelListState()
    state.set_channels(channels)
    return state


def test_set_channels_builds_categories_and_views(channels):
    state = loaded(channels)

    assert state.filtered_channels == channels
    assert state.filtered_categories == state.categories
    assert len(state.categories) == 10
    assert state.error is None
    assert state.is_loading is False


def test_query_clears_category(channels):
    state = loaded(channels)
    news = next(c for c in state.categories if c.name == "News" and c.type is CategoryType.GROUP)
    state.select_category(news)
    assert names(state.filtered_channels) == ["Channel One", "Haber Global"]

    state.on_query_change("sport")

    assert state.selected_category is None
    assert names(state.filtered_channels) == ["Sport Eins"]
    assert [c.name for c in state.filtered_categories] == ["Sports"]


def test_category_clears_query(channels):
    state = loaded(channels)
    state.on_query_change("zzz")
    assert state.filtered_channels == []

    kids = next(c for c in state.categories if c.name == "Kids")
    state.select_category(kids)

    assert state.query == ""
    assert names(state.filtered_channels) == ["Cartoon Time"]
    assert state.filtered_categories == state.categories


def test_hidden_and_show_hidden(channels):
    state = loaded(channels)
    state.set_hidden_ids({channels[1].stream_url})
    assert channels[1] not in state.filtered_channels

    state.set_show_hidden(True)
    assert channels[1] in state.filtered_channels


def test_favorites_follow_channel_list(channels):
    state = loaded(channels)
    state.set_favorite_ids({channels[2].stream_url, "http://x/elsewhere"})
    assert names(state.favorites) == ["Cartoon Time"]

    state.set_channels(channels[:2])
    assert state.favorites == []
    assert state.favorite_ids == {channels[2].stream_url, "http://x/elsewhere"}


def test_reload_keeps_filters(channels):
    state = loaded(channels)
    state.on_query_change("news")
    state.set_channels(channels + [make_channel("More News", group_title="News")])

    assert names(state.filtered_channels) == ["Channel One", "Haber Global", "More News"]


def test_set_error_clears_channels(channels):
    state = loaded(channels)
    state.set_error("Failed to load playlist")

    assert state.channels == []
    assert state.filtered_channels == []
    assert state.error == "Failed to load playlist"


def test_recent_channels_dedup_and_limit():
    state = ChannelListState()
    played = [make_channel(f"C{i}") for i in range(RECENT_CHANNELS_LIMIT + 3)]
    for ch in played:
        state.on_channel_played(ch)
    state.on_channel_played(played[5])

    assert len(state.recent_channels) == RECENT_CHANNELS_LIMIT
    assert state.recent_channels[0] == played[5]
    assert names(state.recent_channels).count("C5") == 1


def test_parental_lock():
    state = ChannelListState()
    assert state.is_locked is False

    state.set_parental_enabled(True)
    assert state.is_locked is True

    assert state.unlock_parental("0000", "1234") is False
    assert state.is_locked is True
    assert state.unlock_parental("1234", None) is False

    assert state.unlock_parental("1234", "1234") is True
    assert state.is_locked is False

    state.lock_parental()
    assert state.is_locked is True

    state.set_parental_enabled(False)
    assert state.is_locked is False
