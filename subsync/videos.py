"""
Playlist video pagination and view count reconciliation.

fetch_videos() pages through a playlist until the caller's predicate says
stop, then resolves each distinct channel referenced by the fetched videos
exactly once. The predicate helpers below cover the usual stop conditions:
a known video was reached, or enough videos were fetched.
"""

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from .builders import build_channel, build_playlist, build_video
from .collaborators import RemoteApiClient
from .logger import LogContext, clear_playlist_context, get_logger, set_playlist_context
from .models import Channel, Playlist, Video

log = get_logger("videos")

ShouldContinue = Callable[[list[Video]], bool]


# ============================================================================
# PAGINATION PREDICATES
# ============================================================================

def stop_at_known(known_ids: Iterable[str]) -> ShouldContinue:
    """Stop once a page contains a video that is already known."""
    known = set(known_ids)

    def should_continue(videos: list[Video]) -> bool:
        for video in videos:
            if video.id in known:
                log.debug(f"Found known video {video.id}, stopping")
                return False
        return True

    return should_continue


def limit_total(max_videos: int) -> ShouldContinue:
    """Stop once at least max_videos videos have been fetched."""
    seen = 0

    def should_continue(videos: list[Video]) -> bool:
        nonlocal seen
        seen += len(videos)
        if seen >= max_videos:
            log.debug(f"Reached max_videos ({max_videos}), stopping")
            return False
        return True

    return should_continue


def all_of(*predicates: ShouldContinue) -> ShouldContinue:
    """Continue only while every predicate continues."""

    def should_continue(videos: list[Video]) -> bool:
        # Evaluate all of them, stateful predicates must see every page
        results = [predicate(videos) for predicate in predicates]
        return all(results)

    return should_continue


# ============================================================================
# VIDEO PAGINATION
# ============================================================================

async def _resolve_channel(api: RemoteApiClient, channel_id: str, source: Playlist) -> Channel:
    channel_info = await api.get_channel_info(channel_id)
    uploads_id = channel_info.get("uploads_playlist_id")

    uploads_playlist: Optional[Playlist] = None
    if uploads_id == source.id:
        uploads_playlist = source
    elif uploads_id:
        uploads_playlist = build_playlist(await api.get_playlist_info(uploads_id))

    return build_channel(channel_info, uploads_playlist=uploads_playlist)


async def fetch_videos(
    api: RemoteApiClient,
    playlist: Playlist,
    should_continue: ShouldContinue,
) -> list[Video]:
    """
    Fetch the videos of a playlist, page by page.

    should_continue(page_videos) is called after every page and pagination
    stops as soon as it returns False. The videos it receives carry a
    provisional channel whose uploads playlist is the source playlist; the
    returned videos all point at fully resolved channels.

    Returns:
        Videos of every fetched page, in playlist order, with UNFETCHED
        duration and view count.

    Raises:
        Whatever the API client raises; no partial result is returned.
    """
    videos: list[Video] = []
    channels: dict[str, Channel] = {}
    pages = 0

    def on_page(raw_videos: list[dict]) -> bool:
        nonlocal pages
        pages += 1
        fetched_at = datetime.now(timezone.utc)
        page_videos = []
        for raw in raw_videos:
            provisional = Channel(
                id=raw["channel_id"],
                title=raw.get("channel_title") or "",
                uploads_playlist=playlist,
            )
            page_videos.append(build_video(raw, provisional, fetched_at))
        videos.extend(page_videos)
        log.debug(f"Page {pages}: {len(page_videos)} videos ({len(videos)} total)")
        return bool(should_continue(page_videos))

    set_playlist_context(playlist.id)
    try:
        with LogContext(log, f"Fetching videos of playlist {playlist.id}"):
            await api.get_playlist_videos(playlist.id, on_page)

        for video in videos:
            channel_id = video.channel.id
            if channel_id not in channels:
                channels[channel_id] = await _resolve_channel(api, channel_id, playlist)

        for video in videos:
            video.channel = channels[video.channel.id]
    finally:
        clear_playlist_context()

    log.debug(f"Fetched {len(videos)} videos from {len(channels)} channels in {pages} pages")
    return videos


# ============================================================================
# VIEW COUNT RECONCILIATION
# ============================================================================

async def fetch_view_count_updates(api: RemoteApiClient, videos: list[Video]) -> list[Video]:
    """
    Refresh view counts and durations, updating changed videos in place.

    A video is reported as changed when its view count or its duration
    differs from the fetched value. Statistics for unknown ids are ignored.
    """
    videos_by_id = {video.id: video for video in videos}
    if not videos_by_id:
        return []

    with LogContext(log, f"Fetching statistics for {len(videos_by_id)} videos"):
        statistics = await api.get_videos_metadata(list(videos_by_id))

    updated = []
    for stats in statistics:
        video = videos_by_id.get(stats["id"])
        if video is None:
            log.debug(f"Ignoring statistics for unknown video {stats['id']}")
            continue

        view_count = int(stats["view_count"])
        duration = int(stats["duration"])
        if video.view_count == view_count and video.duration == duration:
            continue

        video.view_count = view_count
        video.duration = duration
        updated.append(video)

    log.debug(f"{len(updated)} of {len(videos_by_id)} videos changed")
    return updated
