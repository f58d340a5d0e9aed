"""Playlist metadata reconciliation."""

from .builders import build_playlist, thumbnails_equal
from .collaborators import RemoteApiClient
from .logger import LogContext, get_logger
from .models import Playlist

log = get_logger("playlists")


def _playlist_changed(cached: Playlist, fetched: Playlist) -> bool:
    return (
        fetched.title != cached.title
        or fetched.description != cached.description
        or not thumbnails_equal(fetched.thumbnails, cached.thumbnails)
        or fetched.video_count != cached.video_count
    )


async def fetch_playlist_updates(api: RemoteApiClient, playlists: list[Playlist]) -> list[Playlist]:
    """
    Re-fetch the given playlists and update the changed ones in place.

    Returns only the playlists that changed, in the order the API returned
    them. Fetched playlists with no cached counterpart are ignored.
    """
    cached_by_id = {playlist.id: playlist for playlist in playlists}
    if not cached_by_id:
        return []

    with LogContext(log, f"Fetching updates for {len(cached_by_id)} playlists"):
        raw_playlists = await api.get_playlists(list(cached_by_id))

    updated = []
    for raw in raw_playlists:
        cached = cached_by_id.get(raw["id"])
        if cached is None:
            log.debug(f"Ignoring playlist {raw['id']}: not in the cached set")
            continue

        fetched = build_playlist(raw)
        if not _playlist_changed(cached, fetched):
            continue

        cached.title = fetched.title
        cached.description = fetched.description
        cached.thumbnails = fetched.thumbnails
        cached.video_count = fetched.video_count
        updated.append(cached)

    log.debug(f"{len(updated)} of {len(cached_by_id)} playlists changed")
    return updated
