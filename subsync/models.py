"""
Value types shared by every part of the synchronization engine.

Records are plain mutable dataclasses. Reconcilers update Playlist and Video
instances in place, so callers holding a cached collection see new state as
soon as a reconciliation call returns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


# Duration / view count value of a video whose statistics were not fetched yet
UNFETCHED = -1


class AccountState(Enum):
    ACTIVE = "active"
    RE_AUTHORIZATION_REQUIRED = "re_authorization_required"
    DISABLED = "disabled"


class SubscriptionState(Enum):
    ACTIVE = "active"
    UNAVAILABLE = "unavailable"
    DISABLED = "disabled"


class SubscriptionType(Enum):
    CHANNEL = "channel"
    PLAYLIST = "playlist"


@dataclass
class Playlist:
    """An ordered remote collection of videos. `id` is the reconciliation key."""

    id: str
    title: str
    description: str = ""
    video_count: int = 0
    thumbnails: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "video_count": self.video_count,
            "thumbnails": dict(self.thumbnails),
        }


@dataclass
class Channel:
    """A content publisher. Embedded in other records, never tracked on its own."""

    id: str
    title: str
    thumbnails: dict[str, str] = field(default_factory=dict)
    uploads_playlist: Optional[Playlist] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "thumbnails": dict(self.thumbnails),
            "uploads_playlist": self.uploads_playlist.to_dict() if self.uploads_playlist else None,
        }


@dataclass
class Account:
    id: str
    channel: Channel
    title: str
    state: AccountState = AccountState.ACTIVE
    last_error: Optional[str] = None
    watch_history_playlist: Optional[Playlist] = None
    watch_later_playlist: Optional[Playlist] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "channel": self.channel.to_dict(),
            "title": self.title,
            "state": self.state.value,
            "last_error": self.last_error,
            "watch_history_playlist": (
                self.watch_history_playlist.to_dict() if self.watch_history_playlist else None
            ),
            "watch_later_playlist": (
                self.watch_later_playlist.to_dict() if self.watch_later_playlist else None
            ),
        }


@dataclass
class Subscription:
    """
    A local record of following a channel or a playlist.

    Incognito subscriptions are not owned by any account: `is_incognito` is
    True exactly when `account` is None. `id` stays None until the record is
    persisted by the store.
    """

    type: SubscriptionType
    playlist: Optional[Playlist]
    channel: Channel
    state: SubscriptionState = SubscriptionState.ACTIVE
    last_error: Optional[str] = None
    account: Optional[Account] = None
    is_incognito: bool = True
    id: Optional[int] = None

    def __post_init__(self):
        if self.is_incognito != (self.account is None):
            raise ValueError(
                "Subscription must be incognito if and only if it has no account "
                f"(is_incognito={self.is_incognito}, account={'set' if self.account else 'absent'})"
            )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "playlist": self.playlist.to_dict() if self.playlist else None,
            "channel": self.channel.to_dict(),
            "state": self.state.value,
            "last_error": self.last_error,
            "account_id": self.account.id if self.account else None,
            "is_incognito": self.is_incognito,
        }


@dataclass
class Video:
    """
    A video listed in a playlist.

    `duration` (seconds) and `view_count` hold UNFETCHED until a view count
    reconciliation fills them in; they are the only fields that reconciliation
    ever changes.
    """

    id: str
    title: str
    description: str
    published_at: Optional[datetime]
    channel: Channel
    last_update: datetime
    thumbnails: dict[str, str] = field(default_factory=dict)
    duration: int = UNFETCHED
    view_count: int = UNFETCHED
    watched: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "thumbnails": dict(self.thumbnails),
            "duration": self.duration,
            "view_count": self.view_count,
            "channel": self.channel.to_dict(),
            "watched": self.watched,
            "last_update": self.last_update.isoformat(),
        }
