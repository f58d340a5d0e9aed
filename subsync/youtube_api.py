"""
YouTube API client module.
Implements the remote lookups the sync engine needs on top of the YouTube Data API v3.

Features:
- Async methods; the blocking googleapiclient requests run in a worker thread
- Batched lookups split into chunks of one API page
- Page-by-page playlist listing with caller-controlled early termination
- HttpError translated into RemoteLookupError carrying the HTTP status
- OAuth user credentials loaded from an authorized-user token file
"""

import asyncio
import re
from typing import Any, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .collaborators import PageCallback
from .config import get_config
from .errors import RemoteLookupError
from .logger import get_logger

log = get_logger("youtube_api")

SCOPES = ["https://www.googleapis.com/auth/youtube.readonly"]


def _chunks(items: list, size: int):
    for i in range(0, len(items), size):
        yield items[i:i + size]


def parse_duration(duration: str) -> Optional[int]:
    """Convert ISO 8601 duration (P1DT1H2M3S) to seconds."""
    if not duration:
        return None
    match = re.fullmatch(r'P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?', duration)
    if not match:
        return None
    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    minutes = int(match.group(3) or 0)
    seconds = int(match.group(4) or 0)
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def _parse_playlist(item: dict) -> dict:
    snippet = item.get("snippet", {})
    return {
        "id": item["id"],
        "title": snippet.get("title"),
        "description": snippet.get("description"),
        "video_count": item.get("contentDetails", {}).get("itemCount", 0),
        "thumbnails": snippet.get("thumbnails", {}),
        "channel_id": snippet.get("channelId"),
    }


def _parse_channel(item: dict) -> dict:
    snippet = item.get("snippet", {})
    related = item.get("contentDetails", {}).get("relatedPlaylists", {})
    return {
        "id": item["id"],
        "title": snippet.get("title"),
        "thumbnails": snippet.get("thumbnails", {}),
        "uploads_playlist_id": related.get("uploads"),
    }


def _parse_playlist_item(item: dict) -> Optional[dict]:
    """Parse a playlist item; None for private or deleted videos (no owner channel)."""
    snippet = item.get("snippet", {})
    content_details = item.get("contentDetails", {})
    channel_id = snippet.get("videoOwnerChannelId")
    video_id = content_details.get("videoId") or snippet.get("resourceId", {}).get("videoId")
    if not channel_id or not video_id:
        return None
    return {
        "id": video_id,
        "title": snippet.get("title"),
        "description": snippet.get("description"),
        "published_at": content_details.get("videoPublishedAt") or snippet.get("publishedAt"),
        "thumbnails": snippet.get("thumbnails", {}),
        "channel_id": channel_id,
        "channel_title": snippet.get("videoOwnerChannelTitle"),
    }


def load_credentials(token_file: str) -> Credentials:
    """
    Load OAuth user credentials from an authorized-user token file.

    The file is the JSON written by an installed-app OAuth flow
    (``Credentials.to_json()``). Missing files raise OSError and malformed
    ones ValueError.
    """
    log.debug(f"Loading OAuth credentials from {token_file}")
    return Credentials.from_authorized_user_file(token_file, SCOPES)


class YouTubeApiClient:
    """Remote API client backed by the YouTube Data API v3."""

    def __init__(
        self,
        api_key: str = None,
        credentials: Any = None,
        youtube: Any = None,
        page_size: int = None,
    ):
        cfg = get_config()
        self.page_size = page_size or cfg.api_max_results_per_page

        if youtube is not None:
            self.youtube = youtube
        else:
            api_key = api_key or cfg.youtube_api_key
            if not api_key and credentials is None:
                raise ValueError("YOUTUBE_API_KEY or OAuth credentials not provided")
            self.youtube = build(
                "youtube", "v3",
                developerKey=api_key,
                credentials=credentials,
                cache_discovery=False,
            )

        log.debug(f"YouTubeApiClient initialized, page size: {self.page_size}")

    async def _execute(self, request, operation: str) -> dict:
        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as e:
            status = e.resp.status if hasattr(e, 'resp') else None
            log.error(f"HTTP error {status} in {operation}: {e}")
            raise RemoteLookupError(f"{operation} failed: {e}", status=status) from e

    async def get_account_info(self) -> dict:
        """
        Fetch the channel of the authorized account and its special playlists.

        channels.list(mine=True) is only answered for OAuth credentials; with an
        API key alone YouTube replies 401. The current API no longer returns the
        watchHistory and watchLater related playlists, so both playlist ids are
        None in practice and the account's watch history and watch later
        playlists stay unset.
        """
        request = self.youtube.channels().list(part="snippet,contentDetails", mine=True)
        response = await self._execute(request, "channels.list(mine)")
        if not response.get("items"):
            raise RemoteLookupError("No channel found for the authorized account", status=404)

        item = response["items"][0]
        related = item.get("contentDetails", {}).get("relatedPlaylists", {})
        return {
            "id": item["id"],
            "title": item.get("snippet", {}).get("title"),
            "playlist_ids": {
                "watch_history": related.get("watchHistory"),
                "watch_later": related.get("watchLater"),
            },
        }

    async def get_channel_info(self, channel_id: str) -> dict:
        log.debug(f"Fetching channel: {channel_id}")
        request = self.youtube.channels().list(part="snippet,contentDetails", id=channel_id)
        response = await self._execute(request, "channels.list")
        if not response.get("items"):
            raise RemoteLookupError(f"Channel not found: {channel_id}", status=404)
        return _parse_channel(response["items"][0])

    async def get_playlist_info(self, playlist_id: str) -> dict:
        log.debug(f"Fetching playlist: {playlist_id}")
        request = self.youtube.playlists().list(part="snippet,contentDetails", id=playlist_id)
        response = await self._execute(request, "playlists.list")
        if not response.get("items"):
            raise RemoteLookupError(f"Playlist not found: {playlist_id}", status=404)
        return _parse_playlist(response["items"][0])

    async def get_playlists(self, playlist_ids: list[str]) -> list[dict]:
        """Fetch playlists in batches; unknown ids are simply absent from the result."""
        playlists = []
        for batch in _chunks(playlist_ids, self.page_size):
            request = self.youtube.playlists().list(
                part="snippet,contentDetails",
                id=",".join(batch),
                maxResults=self.page_size,
            )
            response = await self._execute(request, "playlists.list")
            playlists.extend(_parse_playlist(item) for item in response.get("items", []))

        log.debug(f"Fetched {len(playlists)} of {len(playlist_ids)} playlists")
        return playlists

    async def get_subscribed_channels(self, channel_id: str) -> list[dict]:
        """Fetch all channels the given channel is subscribed to."""
        channels = []
        next_page_token = None

        while True:
            request = self.youtube.subscriptions().list(
                part="snippet",
                channelId=channel_id,
                maxResults=self.page_size,
                pageToken=next_page_token,
            )
            response = await self._execute(request, "subscriptions.list")

            for item in response.get("items", []):
                snippet = item.get("snippet", {})
                resource = snippet.get("resourceId", {})
                if resource.get("kind", "youtube#channel") != "youtube#channel":
                    continue
                channels.append({
                    "id": resource["channelId"],
                    "title": snippet.get("title"),
                    "thumbnails": snippet.get("thumbnails", {}),
                })

            next_page_token = response.get("nextPageToken")
            if not next_page_token:
                break

        log.debug(f"Channel {channel_id} follows {len(channels)} channels")
        return channels

    async def get_uploads_playlist_ids(self, channel_ids: list[str]) -> list[dict]:
        mappings = []
        for batch in _chunks(channel_ids, self.page_size):
            request = self.youtube.channels().list(
                part="contentDetails",
                id=",".join(batch),
                maxResults=self.page_size,
            )
            response = await self._execute(request, "channels.list")
            for item in response.get("items", []):
                related = item.get("contentDetails", {}).get("relatedPlaylists", {})
                mappings.append({
                    "channel_id": item["id"],
                    "uploads_playlist_id": related.get("uploads"),
                })
        return mappings

    async def get_playlist_videos(self, playlist_id: str, on_page: PageCallback) -> list[dict]:
        """
        Fetch playlist videos page by page.

        on_page receives every parsed page and pagination stops as soon as it
        returns False. Private and deleted videos are left out.

        Returns:
            All raw videos delivered to on_page
        """
        videos = []
        next_page_token = None
        page_count = 0

        while True:
            request = self.youtube.playlistItems().list(
                part="snippet,contentDetails",
                playlistId=playlist_id,
                maxResults=self.page_size,
                pageToken=next_page_token,
            )
            response = await self._execute(request, "playlistItems.list")
            page_count += 1

            page = []
            for item in response.get("items", []):
                video = _parse_playlist_item(item)
                if video is None:
                    log.debug(f"Skipping unavailable playlist item {item.get('id')}")
                    continue
                page.append(video)
            videos.extend(page)

            if not on_page(page):
                log.debug(f"Pagination stopped by caller after {page_count} pages")
                break

            next_page_token = response.get("nextPageToken")
            if not next_page_token:
                break

        log.debug(f"Fetched {len(videos)} videos from playlist in {page_count} pages")
        return videos

    async def get_videos_metadata(self, video_ids: list[str]) -> list[dict]:
        """Fetch view counts and durations (seconds) in batches."""
        metadata = []
        for batch in _chunks(video_ids, self.page_size):
            request = self.youtube.videos().list(
                part="contentDetails,statistics",
                id=",".join(batch),
                maxResults=self.page_size,
            )
            response = await self._execute(request, "videos.list")
            for item in response.get("items", []):
                statistics = item.get("statistics", {})
                metadata.append({
                    "id": item["id"],
                    "view_count": int(statistics.get("viewCount", 0)),
                    "duration": parse_duration(item.get("contentDetails", {}).get("duration", "")) or 0,
                })

        log.debug(f"Fetched metadata for {len(metadata)} of {len(video_ids)} videos")
        return metadata
