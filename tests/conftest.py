"""Test configuration and fixtures"""

from collections import Counter, defaultdict
from datetime import datetime, timezone
from pathlib import Path

import pytest

from subsync.config import Config, set_config
from subsync.errors import RemoteLookupError
from subsync.identity import StaticIdentityResolver
from subsync.models import Channel, Playlist, Video


def raw_channel(channel_id, uploads_playlist_id, title=None):
    return {
        "id": channel_id,
        "title": title or f"Channel {channel_id}",
        "thumbnails": {"default": {"url": f"https://img.example/{channel_id}.jpg"}},
        "uploads_playlist_id": uploads_playlist_id,
    }


def raw_playlist(playlist_id, channel_id, title=None, video_count=5, description="", thumbnails=None):
    return {
        "id": playlist_id,
        "title": title or f"Playlist {playlist_id}",
        "description": description,
        "video_count": video_count,
        "thumbnails": thumbnails if thumbnails is not None else {"default": f"https://img.example/{playlist_id}.jpg"},
        "channel_id": channel_id,
    }


def raw_video(video_id, channel_id, published_at="2024-03-01T12:00:00Z"):
    return {
        "id": video_id,
        "title": f"Video {video_id}",
        "description": f"About {video_id}",
        "published_at": published_at,
        "thumbnails": {"medium": {"url": f"https://img.example/{video_id}.jpg"}},
        "channel_id": channel_id,
        "channel_title": f"Channel {channel_id}",
    }


def make_video(video_id, view_count=-1, duration=-1):
    channel = Channel(id="UCa", title="Channel UCa")
    return Video(
        id=video_id,
        title=f"Video {video_id}",
        description="",
        published_at=None,
        channel=channel,
        last_update=datetime(2024, 1, 1, tzinfo=timezone.utc),
        view_count=view_count,
        duration=duration,
    )


class FakeApiClient:
    """In-memory remote API client that counts every call it receives."""

    def __init__(
        self,
        account_info=None,
        channels=None,
        playlists=None,
        subscribed=None,
        pages=None,
        metadata=None,
    ):
        self.account_info = account_info or {}
        self.channels = channels or {}
        self.playlists = playlists or {}
        self.subscribed = subscribed or {}
        self.pages = pages or {}
        self.metadata = metadata or {}
        self.calls = Counter()
        self.requested = defaultdict(list)
        self.pages_served = 0

    def _record(self, name, argument=None):
        self.calls[name] += 1
        self.requested[name].append(argument)

    @property
    def total_calls(self):
        return sum(self.calls.values())

    async def get_account_info(self):
        self._record("get_account_info")
        return dict(self.account_info)

    async def get_channel_info(self, channel_id):
        self._record("get_channel_info", channel_id)
        if channel_id not in self.channels:
            raise RemoteLookupError(f"Channel not found: {channel_id}", status=404)
        return dict(self.channels[channel_id])

    async def get_playlist_info(self, playlist_id):
        self._record("get_playlist_info", playlist_id)
        if playlist_id not in self.playlists:
            raise RemoteLookupError(f"Playlist not found: {playlist_id}", status=404)
        return dict(self.playlists[playlist_id])

    async def get_playlists(self, playlist_ids):
        self._record("get_playlists", list(playlist_ids))
        return [dict(self.playlists[pid]) for pid in playlist_ids if pid in self.playlists]

    async def get_subscribed_channels(self, channel_id):
        self._record("get_subscribed_channels", channel_id)
        return [dict(channel) for channel in self.subscribed.get(channel_id, [])]

    async def get_uploads_playlist_ids(self, channel_ids):
        self._record("get_uploads_playlist_ids", list(channel_ids))
        return [
            {"channel_id": cid, "uploads_playlist_id": self.channels[cid]["uploads_playlist_id"]}
            for cid in channel_ids
            if cid in self.channels
        ]

    async def get_playlist_videos(self, playlist_id, on_page):
        self._record("get_playlist_videos", playlist_id)
        delivered = []
        for page in self.pages.get(playlist_id, []):
            self.pages_served += 1
            delivered.extend(page)
            if not on_page(list(page)):
                break
        return delivered

    async def get_videos_metadata(self, video_ids):
        self._record("get_videos_metadata", list(video_ids))
        return [dict(self.metadata[vid]) for vid in video_ids if vid in self.metadata]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path):
    """Keep every test away from real config files and environment settings."""
    config = Config(log_dir=str(tmp_path / "logs"))
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def api():
    """A small remote world: one account following three channels."""
    return FakeApiClient(
        account_info={
            "id": "UCme",
            "title": "Me",
            "playlist_ids": {"watch_history": "HLme", "watch_later": "WLme"},
        },
        channels={
            "UCme": raw_channel("UCme", "UUme", title="My Channel"),
            "UCa": raw_channel("UCa", "UUa"),
            "UCb": raw_channel("UCb", "UUb"),
            "UCc": raw_channel("UCc", "UUc"),
        },
        playlists={
            "UUme": raw_playlist("UUme", "UCme"),
            "HLme": raw_playlist("HLme", "UCme", title="History"),
            "WLme": raw_playlist("WLme", "UCme", title="Watch later"),
            "UUa": raw_playlist("UUa", "UCa"),
            "UUb": raw_playlist("UUb", "UCb"),
            "PLmix": raw_playlist("PLmix", "UCa", title="Mix"),
        },
        subscribed={
            "UCme": [
                {"id": "UCb", "title": "Channel UCb", "thumbnails": {}},
                {"id": "UCa", "title": "Channel UCa", "thumbnails": {}},
                {"id": "UCc", "title": "Channel UCc", "thumbnails": {}},
            ],
        },
    )


@pytest.fixture
def identity():
    return StaticIdentityResolver("UCme")


@pytest.fixture
def cached_playlist():
    return Playlist(id="PLmix", title="Mix", description="", video_count=5, thumbnails={})
