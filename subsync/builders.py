"""
Record builders: shape raw API client records into the value types in models.

Raw records are the snake_case dicts produced by the remote API client
(see youtube_api.py). Builders are pure functions; they never call the API.
"""

from datetime import datetime, timezone
from typing import Optional

from .models import (
    Account,
    AccountState,
    Channel,
    Playlist,
    Subscription,
    SubscriptionState,
    SubscriptionType,
    UNFETCHED,
    Video,
)


def normalize_thumbnails(thumbnails: Optional[dict]) -> dict[str, str]:
    """
    Convert a thumbnail set to a {size_label: url} mapping.

    Accepts both the already-flat shape and the API's {size: {"url": ...}} shape.
    """
    result = {}
    for label, value in (thumbnails or {}).items():
        if isinstance(value, dict):
            url = value.get("url")
        else:
            url = value
        if url:
            result[label] = url
    return result


def thumbnails_equal(left: Optional[dict], right: Optional[dict]) -> bool:
    """Structural equality of two thumbnail sets (same labels, same URLs)."""
    return normalize_thumbnails(left) == normalize_thumbnails(right)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp into a timezone-aware UTC datetime."""
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def build_playlist(raw: dict) -> Playlist:
    return Playlist(
        id=raw["id"],
        title=raw.get("title") or "",
        description=raw.get("description") or "",
        video_count=int(raw.get("video_count") or 0),
        thumbnails=normalize_thumbnails(raw.get("thumbnails")),
    )


def build_channel(raw: dict, uploads_playlist: Optional[Playlist] = None) -> Channel:
    return Channel(
        id=raw["id"],
        title=raw.get("title") or "",
        thumbnails=normalize_thumbnails(raw.get("thumbnails")),
        uploads_playlist=uploads_playlist,
    )


def build_account(
    account_id: str,
    account_info: dict,
    channel: Channel,
    watch_history_playlist: Optional[Playlist],
    watch_later_playlist: Optional[Playlist],
) -> Account:
    """Assemble a freshly resolved account: always ACTIVE with no error."""
    return Account(
        id=account_id,
        channel=channel,
        title=account_info.get("title") or "",
        state=AccountState.ACTIVE,
        last_error=None,
        watch_history_playlist=watch_history_playlist,
        watch_later_playlist=watch_later_playlist,
    )


def build_channel_subscription(
    channel: Channel,
    account: Optional[Account] = None,
) -> Subscription:
    """
    Build a CHANNEL subscription following the channel's uploads playlist.

    Without an account the subscription is incognito.
    """
    return Subscription(
        type=SubscriptionType.CHANNEL,
        playlist=channel.uploads_playlist,
        channel=channel,
        state=SubscriptionState.ACTIVE,
        last_error=None,
        account=account,
        is_incognito=account is None,
    )


def build_playlist_subscription(
    playlist: Playlist,
    channel: Channel,
    account: Optional[Account] = None,
) -> Subscription:
    return Subscription(
        type=SubscriptionType.PLAYLIST,
        playlist=playlist,
        channel=channel,
        state=SubscriptionState.ACTIVE,
        last_error=None,
        account=account,
        is_incognito=account is None,
    )


def build_video(raw: dict, channel: Channel, fetched_at: datetime) -> Video:
    """Build a video from a playlist item; statistics start out UNFETCHED."""
    return Video(
        id=raw["id"],
        title=raw.get("title") or "",
        description=raw.get("description") or "",
        published_at=parse_timestamp(raw.get("published_at")),
        thumbnails=normalize_thumbnails(raw.get("thumbnails")),
        duration=UNFETCHED,
        view_count=UNFETCHED,
        channel=channel,
        watched=False,
        last_update=fetched_at,
    )
