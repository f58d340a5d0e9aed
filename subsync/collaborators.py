"""
Interfaces of the external collaborators the engine depends on.

The engine only ever talks to these protocols; youtube_api.YouTubeApiClient
and the resolvers in identity.py are the shipped implementations.
"""

from typing import Callable, Optional, Protocol


# Receives one page of raw video dicts, returns False to stop paginating
PageCallback = Callable[[list[dict]], bool]


class IdentityResolver(Protocol):
    async def get_active_account_id(self) -> Optional[str]:
        """Return the signed-in account id, or None if nobody is signed in."""
        ...


class RemoteApiClient(Protocol):
    async def get_account_info(self) -> dict:
        ...

    async def get_channel_info(self, channel_id: str) -> dict:
        ...

    async def get_playlist_info(self, playlist_id: str) -> dict:
        ...

    async def get_playlists(self, playlist_ids: list[str]) -> list[dict]:
        ...

    async def get_subscribed_channels(self, channel_id: str) -> list[dict]:
        ...

    async def get_uploads_playlist_ids(self, channel_ids: list[str]) -> list[dict]:
        ...

    async def get_playlist_videos(self, playlist_id: str, on_page: PageCallback) -> list[dict]:
        ...

    async def get_videos_metadata(self, video_ids: list[str]) -> list[dict]:
        ...
