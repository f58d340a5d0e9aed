"""
Single entry point to the synchronization engine.

SyncDataSource binds one remote API client and one identity resolver at
construction and never rebinds them. Every operation is a thin delegation
to the module implementing it.
"""

from . import accounts, playlists, subscriptions, videos
from .collaborators import IdentityResolver, RemoteApiClient
from .models import Account, Playlist, Subscription, Video
from .videos import ShouldContinue


class SyncDataSource:
    """Fetches and diffs remote state; never writes to a store."""

    __slots__ = ("_api", "_identity")

    def __init__(self, api: RemoteApiClient, identity: IdentityResolver):
        self._api = api
        self._identity = identity

    @property
    def api(self) -> RemoteApiClient:
        return self._api

    @property
    def identity(self) -> IdentityResolver:
        return self._identity

    async def resolve_current_account(self) -> Account:
        return await accounts.resolve_current_account(self._api, self._identity)

    async def resolve_account(self, account_id: str) -> Account:
        return await accounts.resolve_account(self._api, self._identity, account_id)

    async def fetch_subscriptions(self, account: Account) -> list[Subscription]:
        return await subscriptions.fetch_subscriptions(self._api, account)

    async def resolve_incognito_channel_subscription(self, channel_id: str) -> Subscription:
        return await subscriptions.resolve_incognito_channel_subscription(self._api, channel_id)

    async def resolve_incognito_playlist_subscription(self, playlist_id: str) -> Subscription:
        return await subscriptions.resolve_incognito_playlist_subscription(self._api, playlist_id)

    async def fetch_playlist_updates(self, cached: list[Playlist]) -> list[Playlist]:
        return await playlists.fetch_playlist_updates(self._api, cached)

    async def fetch_videos(self, playlist: Playlist, should_continue: ShouldContinue) -> list[Video]:
        return await videos.fetch_videos(self._api, playlist, should_continue)

    async def fetch_view_count_updates(self, cached: list[Video]) -> list[Video]:
        return await videos.fetch_view_count_updates(self._api, cached)
