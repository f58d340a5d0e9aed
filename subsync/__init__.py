"""
Subscription sync engine for YouTube.

Resolves the signed-in account, discovers its subscriptions, pages through
playlist videos and reports which cached playlists and videos changed upstream.
"""

from .data_source import SyncDataSource
from .errors import (
    AccountMismatchError,
    NoActiveAccountError,
    RemoteLookupError,
    SubsyncError,
)
from .models import (
    UNFETCHED,
    Account,
    AccountState,
    Channel,
    Playlist,
    Subscription,
    SubscriptionState,
    SubscriptionType,
    Video,
)

__version__ = "0.1.0"
