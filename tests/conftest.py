"""
Shared fixtures for the playlist engine tests.

None of these import Kivy; everything under test is plain Python.
"""
import pytest

from noha.models import Channel


SAMPLE_PLAYLIST = """#EXTM3U x-tvg-url="http://epg.example/guide.xml"
#EXTINF:-1 tvg-id="one.tr" tvg-name="News" tvg-logo="http://x/l.png" group-title="News;World" tvg-country="TR" tvg-language="Turkish",Channel One
http://x/stream.m3u8
#EXTINF:-1 tvg-id="sport.de" group-title="Sports" tvg-country="DE|AT" tvg-language="German",Sport Eins
http://x/sport.m3u8
#EXTINF:-1 group-title="Movies, Kids",Cartoon Time
http://x/kids.m3u8
#EXTINF:-1,Radio Nowhere
http://x/radio.mp3
"""


def render_m3u(channels):
    """Minimal M3U writer used to check that the parser keeps every attribute."""
    out = ["#EXTM3U"]
    for ch in channels:
        attrs = []
        for key, value in (
            ("tvg-id", ch.tvg_id),
            ("tvg-name", ch.tvg_name),
            ("tvg-logo", ch.logo_url),
            ("tvg-country", ch.country),
            ("tvg-language", ch.language),
            ("group-title", ch.group_title),
        ):
            if value:
                attrs.append(f'{key}="{value}"')
        attr_str = " ".join(attrs)
        out.append(f"#EXTINF:-1 {attr_str},{ch.name}" if attr_str else f"#EXTINF:-1,{ch.name}")
        out.append(ch.stream_url)
    return "\n".join(out) + "\n"


def make_channel(name, url=None, **kwargs):
    return Channel(name=name, stream_url=url or f"http://x/{name.lower().replace(' ', '-')}.m3u8", **kwargs)


@pytest.fixture
def sample_text():
    return SAMPLE_PLAYLIST


@pytest.fixture
def channels():
    """A small mixed channel list covering multi-value and missing fields."""
    return [
        make_channel("Channel One", group_title="News;World", country="TR", language="Turkish"),
        make_channel("Sport Eins", group_title="Sports", country="DE|AT", language="German"),
        make_channel("Cartoon Time", group_title="Movies, Kids", country=None),
        make_channel("Radio Nowhere"),
        make_channel("Haber Global", group_title="News", country="TR", language="Turkish"),
    ]
