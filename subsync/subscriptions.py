"""
Subscription discovery.

Builds CHANNEL subscriptions for every channel an account follows, and
incognito (account-less) subscriptions for a bare channel or playlist id.
"""

from typing import Optional

from .builders import (
    build_channel,
    build_channel_subscription,
    build_playlist,
    build_playlist_subscription,
)
from .collaborators import RemoteApiClient
from .logger import LogContext, get_logger
from .models import Account, Playlist, Subscription

log = get_logger("subscriptions")


async def fetch_subscriptions(api: RemoteApiClient, account: Account) -> list[Subscription]:
    """
    Fetch the subscriptions of the account's channel.

    Results keep the order of the followed-channels lookup. A channel whose
    uploads playlist cannot be resolved still yields a subscription, with
    no playlist.
    """
    with LogContext(log, f"Fetching subscriptions of {account.channel.id}"):
        subscribed = await api.get_subscribed_channels(account.channel.id)
        if not subscribed:
            log.debug("Account follows no channels")
            return []

        uploads_ids = await api.get_uploads_playlist_ids([channel["id"] for channel in subscribed])
        uploads_by_channel = {
            mapping["channel_id"]: mapping.get("uploads_playlist_id")
            for mapping in uploads_ids
        }
        playlist_ids = [pid for pid in uploads_by_channel.values() if pid]
        raw_playlists = await api.get_playlists(playlist_ids) if playlist_ids else []
        playlists = {raw["id"]: build_playlist(raw) for raw in raw_playlists}

    subscriptions = []
    for raw_channel in subscribed:
        playlist = playlists.get(uploads_by_channel.get(raw_channel["id"]))
        if playlist is None:
            log.warning(f"No uploads playlist resolved for channel {raw_channel['id']}")
        channel = build_channel(raw_channel, uploads_playlist=playlist)
        subscriptions.append(build_channel_subscription(channel, account=account))

    log.debug(f"Built {len(subscriptions)} subscriptions")
    return subscriptions


async def resolve_incognito_channel_subscription(
    api: RemoteApiClient,
    channel_id: str,
) -> Subscription:
    """Build an incognito subscription to a channel's uploads."""
    channel_info = await api.get_channel_info(channel_id)
    uploads_id = channel_info.get("uploads_playlist_id")
    uploads_playlist = None
    if uploads_id:
        uploads_playlist = build_playlist(await api.get_playlist_info(uploads_id))
    else:
        log.warning(f"Channel {channel_id} has no uploads playlist")

    channel = build_channel(channel_info, uploads_playlist=uploads_playlist)
    return build_channel_subscription(channel)


async def resolve_incognito_playlist_subscription(
    api: RemoteApiClient,
    playlist_id: str,
) -> Subscription:
    """
    Build an incognito subscription to a single playlist.

    If the playlist is its owner's uploads playlist, the channel's uploads
    playlist and the subscription's playlist are the same object.
    """
    raw_playlist = await api.get_playlist_info(playlist_id)
    playlist = build_playlist(raw_playlist)
    channel_info = await api.get_channel_info(raw_playlist["channel_id"])

    uploads_id = channel_info.get("uploads_playlist_id")
    uploads_playlist: Optional[Playlist] = None
    if uploads_id == playlist.id:
        uploads_playlist = playlist
    elif uploads_id:
        uploads_playlist = build_playlist(await api.get_playlist_info(uploads_id))

    channel = build_channel(channel_info, uploads_playlist=uploads_playlist)
    return build_playlist_subscription(playlist, channel)
