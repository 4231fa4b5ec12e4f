"""
Tests for the JSON-backed favorites, playlist and settings stores.
"""
import json
from datetime import datetime, timedelta

from noha.models import LastPlayed, PlaylistType
from noha.services.storage import FavoritesStore, PlaylistStore, SettingsStore, new_playlist_entry


def test_favorites_toggle(tmp_path):
    store = FavoritesStore(tmp_path)

    assert store.favorites() == set()
    assert store.toggle_favorite("http://x/a") is True
    assert store.toggle_favorite("http://x/b") is True
    assert store.toggle_favorite("http://x/a") is False
    assert FavoritesStore(tmp_path).favorites() == {"http://x/b"}


def test_corrupt_file_reads_as_empty(tmp_path):
    (tmp_path / "favorites.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "settings.json").write_text("[1, 2]", encoding="utf-8")

    assert FavoritesStore(tmp_path).favorites() == set()
    assert SettingsStore(tmp_path).load().hidden_channels == set()


def test_base_dir_is_created(tmp_path):
    store = FavoritesStore(tmp_path / "nested" / "dir")
    store.set_favorites(["u"])

    assert (tmp_path / "nested" / "dir" / "favorites.json").exists()


def test_new_playlist_entry_defaults():
    entry = new_playlist_entry(" http://x/list.m3u ", name="  ")

    assert entry.name == "Playlist"
    assert entry.url == "http://x/list.m3u"
    assert entry.type is PlaylistType.URL
    assert entry.last_used_at is None
    assert len(entry.id) == 32


def test_save_new_playlist_becomes_active_and_round_trips(tmp_path):
    store = PlaylistStore(tmp_path)
    first = new_playlist_entry("http://x/1.m3u", "One")
    second = new_playlist_entry("http://x/2.m3u", "Two", PlaylistType.XTREAM)
    store.save_new_playlist(first)
    store.save_new_playlist(second)

    loaded = PlaylistStore(tmp_path).playlists()
    assert [p.name for p in loaded] == ["One", "Two"]
    assert loaded[1].type is PlaylistType.XTREAM
    assert loaded[0].created_at == first.created_at
    assert store.active_playlist_id() == second.id
    assert store.active_playlist().url == "http://x/2.m3u"


def test_set_active_playlist_none_clears(tmp_path):
    store = PlaylistStore(tmp_path)
    store.save_new_playlist(new_playlist_entry("http://x/1.m3u"))
    store.set_active_playlist(None)

    assert store.active_playlist_id() is None
    assert store.active_playlist() is None


def test_recent_playlists_sorted_by_last_use(tmp_path):
    store = PlaylistStore(tmp_path)
    base = datetime(2024, 1, 1, 12, 0, 0)
    entries = []
    for i in range(7):
        e = new_playlist_entry(f"http://x/{i}.m3u", f"P{i}")
        e.created_at = base + timedelta(days=i)
        store.save_new_playlist(e)
        entries.append(e)

    store.update_last_used(entries[0].id, when=base + timedelta(days=30))
    recent = store.recent_playlists()

    assert [p.name for p in recent] == ["P0", "P6", "P5", "P4", "P3"]
    assert recent[0].last_used_at == base + timedelta(days=30)


def test_malformed_playlist_entries_are_skipped(tmp_path):
    doc = {
        "playlists": [
            {"id": "ok", "name": "Good", "type": "url", "url": "http://x", "created_at": "2024-05-01T10:00:00"},
            {"id": "bad-date", "url": "http://y", "created_at": "not a date"},
            {"name": "no id"},
            {"id": "bad-type", "type": "ftp", "url": "http://z", "created_at": "2024-05-01T10:00:00"},
        ]
    }
    (tmp_path / "playlists.json").write_text(json.dumps(doc), encoding="utf-8")

    assert [p.id for p in PlaylistStore(tmp_path).playlists()] == ["ok"]


def test_settings_defaults(tmp_path):
    settings = SettingsStore(tmp_path).load()

    assert settings.show_hidden is False
    assert settings.parental_enabled is False
    assert settings.parental_pin is None
    assert settings.hidden_channels == set()
    assert settings.last_played is None


def test_hidden_channels(tmp_path):
    store = SettingsStore(tmp_path)
    store.hide_channel("http://x/a")
    store.hide_channel("http://x/b")
    store.hide_channel("http://x/a")
    assert store.load().hidden_channels == {"http://x/a", "http://x/b"}

    store.unhide_channel("http://x/a")
    assert store.load().hidden_channels == {"http://x/b"}

    store.unhide_all()
    assert store.load().hidden_channels == set()


def test_parental_pin(tmp_path):
    store = SettingsStore(tmp_path)
    store.set_parental(True, "1234")
    assert store.load().parental_enabled is True
    assert store.parental_pin() == "1234"

    store.set_parental(False, None)
    assert store.load().parental_enabled is False
    assert store.parental_pin() is None


def test_flags_and_last_played(tmp_path):
    store = SettingsStore(tmp_path)
    store.set_show_hidden(True)
    store.set_autoplay_last(True)
    store.set_use_external_player(True)
    store.set_start_on_boot(True)
    store.accept_disclaimer()
    store.set_last_played("Channel One", "http://x/one", None)

    settings = SettingsStore(tmp_path).load()
    assert settings.show_hidden and settings.autoplay_last
    assert settings.use_external_player and settings.start_on_boot
    assert settings.disclaimer_accepted
    assert settings.last_played == LastPlayed(name="Channel One", url="http://x/one", logo=None)

    store.set_last_played("Two", "http://x/two", "http://x/two.png")
    assert store.load().last_played.logo == "http://x/two.png"
