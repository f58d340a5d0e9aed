"""Test configuration loading, logging setup and identity resolvers"""

import logging

import pytest

from subsync.accounts import resolve_current_account
from subsync.config import Config, get_config, load_config, set_config
from subsync.errors import NoActiveAccountError, RemoteLookupError
from subsync.identity import ConfigIdentityResolver, StaticIdentityResolver, YouTubeIdentityResolver
from subsync.logger import (
    LogContext,
    clear_playlist_context,
    get_logger,
    get_playlist_context,
    set_playlist_context,
    setup_logging,
)


class TestConfig:

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for key in ("API_MAX_RESULTS_PER_PAGE", "DEFAULT_MAX_VIDEOS", "SUBSYNC_ACTIVE_ACCOUNT_ID", "YOUTUBE_API_KEY"):
            monkeypatch.delenv(key, raising=False)

        config = load_config()

        assert config.api_max_results_per_page == 50
        assert config.default_max_videos == 200
        assert config.active_account_id == ""
        assert config._config_file is None

    def test_yaml_overrides_env(self, monkeypatch, tmp_path):
        config_file = tmp_path / "subsync.yaml"
        config_file.write_text("settings:\n  default_max_videos: 25\n", encoding="utf-8")
        monkeypatch.setenv("DEFAULT_MAX_VIDEOS", "75")
        monkeypatch.setenv("API_MAX_RESULTS_PER_PAGE", "20")

        config = load_config(str(config_file))

        assert config.default_max_videos == 25
        assert config.api_max_results_per_page == 20
        assert config._config_file == str(config_file)

    def test_bad_env_value_falls_back_to_default(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DEFAULT_MAX_VIDEOS", "lots")
        assert load_config().default_max_videos == 200

    def test_api_key_only_from_env(self, monkeypatch, tmp_path):
        config_file = tmp_path / "subsync.yaml"
        config_file.write_text("settings:\n  youtube_api_key: from-file\n", encoding="utf-8")
        monkeypatch.setenv("YOUTUBE_API_KEY", "from-env")

        assert load_config(str(config_file)).youtube_api_key == "from-env"

    def test_get_config_singleton(self):
        config = Config(default_max_videos=3)
        set_config(config)
        assert get_config() is config


class TestLogging:

    def test_setup_creates_log_file(self, tmp_path):
        logger = setup_logging(log_dir=str(tmp_path), log_level="DEBUG", console_level="WARNING")
        try:
            assert logger.name == "subsync"
            assert list(tmp_path.glob("subsync_*.log"))
            assert get_logger("videos").name == "subsync.videos"
        finally:
            for handler in list(logger.handlers):
                handler.close()
            logger.handlers = []

    def test_playlist_context(self):
        set_playlist_context("PLabcdefghij")
        assert get_playlist_context() == "PLabcdefghij"
        clear_playlist_context()
        assert get_playlist_context() is None

    def test_log_context_does_not_suppress(self, caplog):
        logger = get_logger("test")
        with caplog.at_level(logging.DEBUG, logger="subsync"):
            with pytest.raises(RuntimeError):
                with LogContext(logger, "doomed operation"):
                    raise RuntimeError("boom")
        assert any("FAILED: doomed operation" in message for message in caplog.messages)


class TestIdentityResolvers:

    @pytest.mark.asyncio
    async def test_static(self):
        assert await StaticIdentityResolver("UCme").get_active_account_id() == "UCme"
        assert await StaticIdentityResolver(None).get_active_account_id() is None

    @pytest.mark.asyncio
    async def test_config(self):
        assert await ConfigIdentityResolver(Config(active_account_id="UCme")).get_active_account_id() == "UCme"
        assert await ConfigIdentityResolver(Config()).get_active_account_id() is None

    @pytest.mark.asyncio
    async def test_youtube(self, api):
        assert await YouTubeIdentityResolver(api).get_active_account_id() == "UCme"
        assert api.calls["get_account_info"] == 1

    @pytest.mark.asyncio
    async def test_youtube_account_without_channel(self, api):
        class ChannellessApi(type(api)):
            async def get_account_info(self):
                raise RemoteLookupError("No channel found for the authorized account", status=404)

        resolver = YouTubeIdentityResolver(ChannellessApi())

        assert await resolver.get_active_account_id() is None
        with pytest.raises(NoActiveAccountError):
            await resolve_current_account(ChannellessApi(), resolver)

    @pytest.mark.asyncio
    async def test_youtube_auth_failure_propagates(self, api):
        class UnauthorizedApi(type(api)):
            async def get_account_info(self):
                raise RemoteLookupError("channels.list(mine) failed", status=401)

        with pytest.raises(RemoteLookupError) as excinfo:
            await YouTubeIdentityResolver(UnauthorizedApi()).get_active_account_id()
        assert excinfo.value.status == 401
