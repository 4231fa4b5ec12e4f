from __future__ import annotations

from kivy.app import App
from kivy.metrics import dp
from kivy.properties import ObjectProperty, StringProperty
from kivy.uix.screenmanager import Screen

from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDIconButton
from kivymd.uix.list import (
    IRightBodyTouch,
    MDList,
    OneLineListItem,
    TwoLineAvatarIconListItem,
    TwoLineListItem,
)

from noha.models import CategoryItem, CategoryType, Channel, PlaylistEntry, PlaylistType
from noha.services.iptv import xtream_m3u_url
from noha.services.storage import new_playlist_entry

# MDList builds a widget per row; thousands of rows stall the UI thread.
RENDER_LIMIT = 300


class ChannelListScreen(Screen):
    def on_pre_enter(self, *args):
        super().on_pre_enter(*args)
        app = App.get_running_app()
        if app.state.is_locked:
            app.ask_parental_pin(on_unlocked=self.render)
            return
        self.render()

    def on_search(self) -> None:
        app = App.get_running_app()
        app.state.on_query_change((self.ids.search_field.text or "").strip())
        self.render()

    def on_category(self, category: CategoryItem | None) -> None:
        app = App.get_running_app()
        app.state.select_category(category)
        self.ids.search_field.text = ""
        self.render()

    def render(self, *_) -> None:
        app = App.get_running_app()
        state = app.state

        if state.is_locked:
            self.ids.channel_list.clear_widgets()
            self.ids.summary_label.text = "Kilitli"
            return

        if state.error:
            self.ids.summary_label.text = f"Hata: {state.error}"
        else:
            selected = state.selected_category.name if state.selected_category else "Tümü"
            self.ids.summary_label.text = f"{selected} | Kanal: {len(state.filtered_channels)}/{len(state.channels)}"

        self._render_channels(self.ids.favorites_list, state.favorites)
        self._render_channels(self.ids.channel_list, state.filtered_channels)
        self._render_categories(state.filtered_categories)

    def _render_channels(self, container: MDList, channels: list[Channel]) -> None:
        app = App.get_running_app()
        container.clear_widgets()
        for ch in channels[:RENDER_LIMIT]:
            item = ChannelItem(channel=ch)
            item.actions.set_state(
                favorite=ch.stream_url in app.state.favorite_ids,
                hidden=ch.stream_url in app.state.hidden_ids,
            )
            container.add_widget(item)

    def _render_categories(self, categories: list[CategoryItem]) -> None:
        container: MDList = self.ids.category_list
        container.clear_widgets()

        all_item = OneLineListItem(text="Tümü")
        all_item.bind(on_release=lambda *_: self.on_category(None))
        container.add_widget(all_item)

        for cat in categories[:RENDER_LIMIT]:
            kind = "Grup" if cat.type is CategoryType.GROUP else "Ülke"
            item = TwoLineListItem(text=cat.name, secondary_text=f"{kind} | {cat.count}")
            item.bind(on_release=lambda *_, c=cat: self.on_category(c))
            container.add_widget(item)


class PlaylistsScreen(Screen):
    def on_pre_enter(self, *args):
        super().on_pre_enter(*args)
        self.render()

    def render(self) -> None:
        app = App.get_running_app()
        container: MDList = self.ids.playlist_list
        container.clear_widgets()

        active_id = app.playlists.active_playlist_id()
        for entry in app.playlists.recent_playlists(limit=50):
            mark = "* " if entry.id == active_id else ""
            item = TwoLineListItem(text=f"{mark}{entry.name}", secondary_text=f"{entry.type.value} | {entry.url}")
            item.bind(on_release=lambda *_, e=entry: self.select(e))
            container.add_widget(item)

    def add_url(self) -> None:
        url = (self.ids.url_input.text or "").strip()
        if not url.lower().startswith("http"):
            App.get_running_app().show_error("Hata", "Lütfen geçerli bir playlist linki gir.")
            return
        self._add(new_playlist_entry(url, self.ids.name_input.text, PlaylistType.URL))

    def add_file(self) -> None:
        path = (self.ids.url_input.text or "").strip()
        if not path:
            App.get_running_app().show_error("Hata", "Dosya yolu boş.")
            return
        self._add(new_playlist_entry(path, self.ids.name_input.text, PlaylistType.FILE))

    def add_xtream(self) -> None:
        base = (self.ids.xtream_base.text or "").strip()
        user = (self.ids.xtream_user.text or "").strip()
        password = self.ids.xtream_pass.text or ""
        if not (base and user):
            App.get_running_app().show_error("Hata", "Sunucu ve kullanıcı adı gerekli.")
            return
        name = (self.ids.name_input.text or "").strip() or "Xtream"
        self._add(new_playlist_entry(xtream_m3u_url(base, user, password), name, PlaylistType.XTREAM))

    def select(self, entry: PlaylistEntry | None) -> None:
        app = App.get_running_app()
        app.playlists.set_active_playlist(entry.id if entry else None)
        if entry:
            app.playlists.update_last_used(entry.id)
        app.load_channels()
        app.root.current = "channels"

    def _add(self, entry: PlaylistEntry) -> None:
        app = App.get_running_app()
        app.playlists.save_new_playlist(entry)
        self.ids.url_input.text = ""
        self.ids.name_input.text = ""
        self.render()
        app.load_channels()


class SettingsScreen(Screen):
    def on_pre_enter(self, *args):
        super().on_pre_enter(*args)
        settings = App.get_running_app().settings.load()
        self.ids.show_hidden_switch.active = settings.show_hidden
        self.ids.autoplay_switch.active = settings.autoplay_last
        self.ids.parental_label.text = "Ebeveyn kilidi: açık" if settings.parental_enabled else "Ebeveyn kilidi: kapalı"
        self.ids.hidden_label.text = f"Gizli kanal: {len(settings.hidden_channels)}"

    def on_show_hidden(self, active: bool) -> None:
        app = App.get_running_app()
        app.settings.set_show_hidden(active)
        app.state.set_show_hidden(active)

    def on_autoplay(self, active: bool) -> None:
        App.get_running_app().settings.set_autoplay_last(active)

    def unhide_all(self) -> None:
        app = App.get_running_app()
        app.settings.unhide_all()
        app.state.set_hidden_ids(set())
        self.ids.hidden_label.text = "Gizli kanal: 0"

    def enable_parental(self) -> None:
        app = App.get_running_app()
        pin = (self.ids.pin_input.text or "").strip()
        if len(pin) < 4 or not pin.isdigit():
            app.show_error("Hata", "PIN en az 4 rakam olmalı.")
            return
        app.settings.set_parental(True, pin)
        app.state.set_parental_enabled(True)
        self.ids.pin_input.text = ""
        self.ids.parental_label.text = "Ebeveyn kilidi: açık"

    def disable_parental(self) -> None:
        app = App.get_running_app()
        if app.state.is_locked:
            app.ask_parental_pin(on_unlocked=self.disable_parental)
            return
        app.settings.set_parental(False, None)
        app.state.set_parental_enabled(False)
        self.ids.parental_label.text = "Ebeveyn kilidi: kapalı"


class PlayerScreen(Screen):
    title = StringProperty("")
    channel = ObjectProperty(None, allownone=True)

    def play(self, channel: Channel) -> None:
        self.channel = channel
        self.title = channel.name
        self.ids.video.source = channel.stream_url
        self.ids.video.state = "play"

    def on_leave(self, *args):
        self.ids.video.state = "stop"
        super().on_leave(*args)

    def hide_current(self) -> None:
        if self.channel is not None:
            App.get_running_app().hide_channel(self.channel)
        App.get_running_app().root.current = "channels"


class _RightActions(IRightBodyTouch, MDBoxLayout):
    def __init__(self, channel: Channel, **kwargs):
        super().__init__(orientation="horizontal", **kwargs)
        self.channel = channel
        self.fav_button = MDIconButton(icon="star-outline", on_release=lambda *_: self._toggle_favorite())
        self.hide_button = MDIconButton(icon="eye-off-outline", on_release=lambda *_: self._toggle_hidden())
        self.add_widget(self.fav_button)
        self.add_widget(self.hide_button)

    def set_state(self, favorite: bool, hidden: bool) -> None:
        self.fav_button.icon = "star" if favorite else "star-outline"
        self.hide_button.icon = "eye-off" if hidden else "eye-off-outline"

    def _toggle_favorite(self) -> None:
        app = App.get_running_app()
        app.toggle_favorite(self.channel)
        self.set_state(
            favorite=self.channel.stream_url in app.state.favorite_ids,
            hidden=self.channel.stream_url in app.state.hidden_ids,
        )

    def _toggle_hidden(self) -> None:
        app = App.get_running_app()
        if self.channel.stream_url in app.state.hidden_ids:
            app.unhide_channel(self.channel)
        else:
            app.hide_channel(self.channel)


class ChannelItem(TwoLineAvatarIconListItem):
    def __init__(self, channel: Channel, **kwargs):
        subtitle = " | ".join(v for v in (channel.group_title, channel.country, channel.language) if v)
        super().__init__(text=channel.name, secondary_text=subtitle, **kwargs)
        self.channel = channel
        self.actions = _RightActions(channel=channel, size_hint_x=None, width=dp(96))
        self.add_widget(self.actions)

    def on_release(self):
        App.get_running_app().play(self.channel)
