"""
Account resolution: turn the host environment's signed-in identity into a
full Account record (channel, uploads, watch history and watch later playlists).
"""

from .builders import build_account, build_channel, build_playlist
from .collaborators import IdentityResolver, RemoteApiClient
from .errors import AccountMismatchError, NoActiveAccountError
from .logger import LogContext, get_logger
from .models import Account

log = get_logger("accounts")


async def resolve_current_account(api: RemoteApiClient, identity: IdentityResolver) -> Account:
    """Resolve whichever account is currently signed in."""
    account_id = await identity.get_active_account_id()
    if not account_id:
        raise NoActiveAccountError("No account is signed in")
    return await resolve_account(api, identity, account_id)


async def resolve_account(
    api: RemoteApiClient,
    identity: IdentityResolver,
    account_id: str,
) -> Account:
    """
    Resolve the given account, provided it is still the active one.

    The identity is checked again on every call, so an account switch in the
    environment between two calls is detected before any API request is made.

    Raises:
        AccountMismatchError: account_id is not the signed-in account
    """
    active_id = await identity.get_active_account_id()
    if active_id != account_id:
        log.warning(f"Refusing to resolve account {account_id}, active account is {active_id}")
        raise AccountMismatchError(account_id, active_id)

    with LogContext(log, f"Resolving account {account_id}"):
        account_info = await api.get_account_info()
        channel_info = await api.get_channel_info(account_info["id"])

        playlist_ids = account_info.get("playlist_ids") or {}
        uploads_id = channel_info.get("uploads_playlist_id")
        watch_history_id = playlist_ids.get("watch_history")
        watch_later_id = playlist_ids.get("watch_later")

        requested = [pid for pid in (uploads_id, watch_history_id, watch_later_id) if pid]
        raw_playlists = await api.get_playlists(requested)
        playlists = {raw["id"]: build_playlist(raw) for raw in raw_playlists}

    missing = [pid for pid in requested if pid not in playlists]
    if missing:
        log.debug(f"Account playlists not returned by the API: {missing}")

    channel = build_channel(channel_info, uploads_playlist=playlists.get(uploads_id))
    return build_account(
        account_id,
        account_info,
        channel,
        watch_history_playlist=playlists.get(watch_history_id),
        watch_later_playlist=playlists.get(watch_later_id),
    )
