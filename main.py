from __future__ import annotations

import os
import sys
import signal
import traceback
from datetime import datetime
from pathlib import Path
import faulthandler


def _is_android() -> bool:
    return bool(os.environ.get("ANDROID_PRIVATE") or os.environ.get("ANDROID_ARGUMENT"))


def _crash_private_dir() -> Path:
    if _is_android():
        p = os.environ.get("ANDROID_PRIVATE")
        if p:
            return Path(p)
    return Path.home() / ".noha"


def _write_crash_log(text: str) -> str | None:
    try:
        base = _crash_private_dir() / "crash_logs"
        base.mkdir(parents=True, exist_ok=True)
        name = f"noha_crash_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
        p = base / name
        p.write_text(text, encoding="utf-8")
        return str(p)
    except OSError:
        return None


def _setup_faulthandler() -> None:
    try:
        base = _crash_private_dir() / "crash_logs"
        base.mkdir(parents=True, exist_ok=True)
        f = open(base / "noha_faulthandler.txt", "a", encoding="utf-8")
        f.write(f"\n=== START {datetime.now().isoformat()} ===\n")
        f.flush()
        faulthandler.enable(file=f, all_threads=True)
        for sig in ("SIGABRT", "SIGILL", "SIGFPE", "SIGSEGV", "SIGBUS"):
            if hasattr(signal, sig) and hasattr(faulthandler, "register"):
                try:
                    faulthandler.register(getattr(signal, sig), file=f, all_threads=True)
                except (RuntimeError, ValueError):
                    pass
    except OSError:
        pass


def _excepthook(exc_type, exc, tb):
    text = "".join(traceback.format_exception(exc_type, exc, tb))
    _write_crash_log(text)
    sys.__excepthook__(exc_type, exc, tb)


sys.excepthook = _excepthook
_setup_faulthandler()

from kivy.lang import Builder
from kivy.logger import Logger
from kivy.properties import StringProperty
from kivy.uix.label import Label
from kivy.uix.screenmanager import Screen
from kivy.uix.screenmanager import ScreenManager

from kivymd.app import MDApp
from kivymd.uix.button import MDFlatButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.textfield import MDTextField

from noha.app_state import ChannelListState
from noha.errors import PlaylistLoadError, ResolutionCancelled
from noha.models import Channel
from noha.services.iptv import IPTVService
from noha.services.storage import FavoritesStore, PlaylistStore, SettingsStore
from noha.ui import screens as _screens  # noqa: F401
from noha.utils.threading import run_in_thread


class Root(ScreenManager):
    status_text = StringProperty("")


class NohaApp(MDApp):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.state = ChannelListState()
        self.iptv = IPTVService()
        self.favorites: FavoritesStore | None = None
        self.playlists: PlaylistStore | None = None
        self.settings: SettingsStore | None = None
        self._dialog: MDDialog | None = None
        self._load_seq = 0
        self._autoplayed = False

    def build(self):
        self.theme_cls.primary_palette = "Blue"
        self.theme_cls.theme_style = "Dark"

        base = Path(self.user_data_dir)
        self.favorites = FavoritesStore(base)
        self.playlists = PlaylistStore(base)
        self.settings = SettingsStore(base)

        try:
            kv_path = os.path.join(os.path.dirname(__file__), "noha", "ui", "noha.kv")
            Builder.load_file(kv_path)
            return Root()
        except Exception:  # noqa: BLE001
            err = traceback.format_exc()
            _write_crash_log(err)
            Logger.error("Noha: failed to build UI\n%s", err)
            root = Root()
            scr = Screen(name="error")
            scr.add_widget(Label(text=err))
            root.add_widget(scr)
            root.current = "error"
            return root

    def on_start(self):
        settings = self.settings.load()
        self.state.set_favorite_ids(self.favorites.favorites())
        self.state.set_hidden_ids(settings.hidden_channels)
        self.state.set_show_hidden(settings.show_hidden)
        self.state.set_parental_enabled(settings.parental_enabled)
        if not settings.disclaimer_accepted:
            self._show_disclaimer()
        self.load_channels()

    def load_channels(self) -> None:
        self._load_seq += 1
        seq = self._load_seq
        active = self.playlists.active_playlist()
        url = active.url if active else ""

        self.state.is_loading = True
        self.root.status_text = "Liste yükleniyor..."

        def _work():
            return self.iptv.load_channels(url, cancelled=lambda: seq != self._load_seq)

        def _done(channels: list[Channel]) -> None:
            if seq != self._load_seq:
                return
            self.state.set_channels(channels)
            self.root.status_text = f"{len(channels)} kanal yüklendi"
            self._refresh_channels_screen()
            self._maybe_autoplay()

        def _failed(e: Exception) -> None:
            if isinstance(e, ResolutionCancelled) or seq != self._load_seq:
                return
            Logger.warning("Noha: playlist load failed: %s", e)
            message = str(e) if isinstance(e, PlaylistLoadError) else f"Beklenmeyen hata: {e}"
            self.state.set_error(message)
            self.root.status_text = ""
            self._refresh_channels_screen()
            self.show_error("Hata", message)

        run_in_thread(_work, on_done=_done, on_error=_failed)

    def play(self, channel: Channel) -> None:
        self.state.on_channel_played(channel)
        active = self.playlists.active_playlist()
        if active:
            self.playlists.update_last_used(active.id)
        self.settings.set_last_played(channel.name, channel.stream_url, channel.logo_url)
        self.root.get_screen("player").play(channel)
        self.root.current = "player"

    def toggle_favorite(self, channel: Channel) -> None:
        self.favorites.toggle_favorite(channel.stream_url)
        self.state.set_favorite_ids(self.favorites.favorites())
        self._refresh_channels_screen()

    def hide_channel(self, channel: Channel) -> None:
        self.settings.hide_channel(channel.stream_url)
        self.state.set_hidden_ids(self.settings.load().hidden_channels)
        self._refresh_channels_screen()

    def unhide_channel(self, channel: Channel) -> None:
        self.settings.unhide_channel(channel.stream_url)
        self.state.set_hidden_ids(self.settings.load().hidden_channels)
        self._refresh_channels_screen()

    def ask_parental_pin(self, on_unlocked=None) -> None:
        field = MDTextField(hint_text="PIN", password=True, input_filter="int")

        def _confirm(*_):
            unlocked = self.state.unlock_parental(field.text or "", self.settings.parental_pin())
            self._dismiss_dialog()
            if not unlocked:
                self.show_error("Hata", "PIN yanlış.")
                return
            if on_unlocked:
                on_unlocked()

        self._open_dialog(
            MDDialog(
                title="Ebeveyn kilidi",
                type="custom",
                content_cls=field,
                buttons=[
                    MDFlatButton(text="İptal", on_release=lambda *_: self._dismiss_dialog()),
                    MDFlatButton(text="Aç", on_release=_confirm),
                ],
            )
        )

    def show_error(self, title: str, text: str):
        self._open_dialog(
            MDDialog(
                title=title,
                text=text,
                buttons=[MDFlatButton(text="Tamam", on_release=lambda *_: self._dismiss_dialog())],
            )
        )

    def _show_disclaimer(self) -> None:
        def _accept(*_):
            self.settings.accept_disclaimer()
            self._dismiss_dialog()

        self._open_dialog(
            MDDialog(
                title="Uyarı",
                text="Bu uygulama içerik sağlamaz. Eklediğin listelerin sorumluluğu sana aittir.",
                buttons=[MDFlatButton(text="Kabul ediyorum", on_release=_accept)],
            )
        )

    def _maybe_autoplay(self) -> None:
        if self._autoplayed:
            return
        self._autoplayed = True
        settings = self.settings.load()
        last = settings.last_played
        if not (settings.autoplay_last and last) or self.state.is_locked:
            return
        match = next((c for c in self.state.channels if c.stream_url == last.url), None)
        self.play(match or Channel(name=last.name, stream_url=last.url, logo_url=last.logo))

    def _refresh_channels_screen(self) -> None:
        if self.root.current == "channels":
            self.root.get_screen("channels").render()

    def _open_dialog(self, dialog: MDDialog) -> None:
        self._dismiss_dialog()
        self._dialog = dialog
        self._dialog.open()

    def _dismiss_dialog(self) -> None:
        if self._dialog:
            self._dialog.dismiss()
            self._dialog = None


if __name__ == "__main__":
    try:
        NohaApp().run()
    except Exception:  # noqa: BLE001
        _write_crash_log(traceback.format_exc())
        raise
