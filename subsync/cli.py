"""
subsync command line.

Runs one engine operation against the YouTube Data API and prints the
resulting records as JSON. Nothing is persisted.

Usage:
    subsync --credentials token.json account
    subsync --credentials token.json subscriptions
    subsync videos UUxxxxxxxx --max-videos 100 --known-id dQw4w9WgXcQ
    subsync refresh-playlists cached_playlists.json
    subsync channel UCxxxxxxxx
    subsync playlist PLxxxxxxxx
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

from .builders import build_playlist
from .config import get_config
from .data_source import SyncDataSource
from .errors import SubsyncError
from .identity import ConfigIdentityResolver, YouTubeIdentityResolver
from .logger import get_logger, setup_logging
from .videos import all_of, limit_total, stop_at_known
from .youtube_api import YouTubeApiClient, load_credentials

log = get_logger("cli")

# Commands that need the signed-in account
ACCOUNT_COMMANDS = ("account", "subscriptions")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subsync",
        description="Synchronize YouTube subscription data and print changes as JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="Path to subsync YAML config file")
    parser.add_argument(
        "--credentials",
        help="OAuth authorized-user token file (default: credentials_file from config)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("account", help="Resolve the signed-in account")
    commands.add_parser("subscriptions", help="List the signed-in account's subscriptions")

    videos = commands.add_parser("videos", help="List the videos of a playlist")
    videos.add_argument("playlist_id")
    videos.add_argument(
        "--max-videos",
        type=int,
        default=None,
        help="Stop after this many videos (default: from config)",
    )
    videos.add_argument(
        "--known-id",
        action="append",
        default=[],
        help="Stop at the page containing this video id (repeatable)",
    )
    videos.add_argument(
        "--with-stats",
        action="store_true",
        help="Also fetch view counts and durations",
    )

    refresh = commands.add_parser(
        "refresh-playlists",
        help="Print the playlists of a JSON cache file that changed upstream",
    )
    refresh.add_argument("cache_file", help="JSON list of cached playlist records")

    channel = commands.add_parser("channel", help="Build an incognito channel subscription")
    channel.add_argument("channel_id")

    playlist = commands.add_parser("playlist", help="Build an incognito playlist subscription")
    playlist.add_argument("playlist_id")

    return parser


def build_client(args: argparse.Namespace) -> YouTubeApiClient:
    """
    Build the API client, with OAuth credentials when a token file is configured.

    The account commands read the signed-in channel, which YouTube only
    reveals to OAuth credentials, so they fail here without a token file.
    """
    credentials_file = args.credentials or get_config().credentials_file
    if credentials_file:
        return YouTubeApiClient(credentials=load_credentials(credentials_file))
    if args.command in ACCOUNT_COMMANDS:
        raise SubsyncError(
            f"OAuth credentials required for '{args.command}': "
            "pass --credentials or set credentials_file"
        )
    return YouTubeApiClient()


def build_data_source(api: YouTubeApiClient) -> SyncDataSource:
    cfg = get_config()
    if cfg.active_account_id:
        identity = ConfigIdentityResolver(cfg)
    else:
        identity = YouTubeIdentityResolver(api)
    return SyncDataSource(api, identity)


async def run_command(args: argparse.Namespace, source: SyncDataSource) -> object:
    """Run the selected command and return JSON-serializable output."""
    if args.command == "account":
        account = await source.resolve_current_account()
        return account.to_dict()

    if args.command == "subscriptions":
        account = await source.resolve_current_account()
        subscriptions = await source.fetch_subscriptions(account)
        return [subscription.to_dict() for subscription in subscriptions]

    if args.command == "videos":
        max_videos = args.max_videos
        if max_videos is None:
            max_videos = get_config().default_max_videos
        playlist = build_playlist(await source.api.get_playlist_info(args.playlist_id))
        should_continue = all_of(limit_total(max_videos), stop_at_known(args.known_id))
        videos = await source.fetch_videos(playlist, should_continue)
        if args.with_stats:
            await source.fetch_view_count_updates(videos)
        return [video.to_dict() for video in videos]

    if args.command == "refresh-playlists":
        with open(args.cache_file, 'r', encoding='utf-8') as f:
            cached = [build_playlist(raw) for raw in json.load(f)]
        updated = await source.fetch_playlist_updates(cached)
        return [playlist.to_dict() for playlist in updated]

    if args.command == "channel":
        subscription = await source.resolve_incognito_channel_subscription(args.channel_id)
        return subscription.to_dict()

    if args.command == "playlist":
        subscription = await source.resolve_incognito_playlist_subscription(args.playlist_id)
        return subscription.to_dict()

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    get_config(args.config, reload=args.config is not None)
    setup_logging()

    try:
        api = build_client(args)
        result = asyncio.run(run_command(args, build_data_source(api)))
    except (SubsyncError, ValueError, OSError) as e:
        log.error(f"{args.command} failed: {type(e).__name__}: {e}")
        return 1

    json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0
