"""Test account resolution"""

import pytest

from subsync.accounts import resolve_account, resolve_current_account
from subsync.errors import AccountMismatchError, NoActiveAccountError, RemoteLookupError
from subsync.identity import StaticIdentityResolver
from subsync.models import AccountState


class FailingIdentityResolver:
    async def get_active_account_id(self):
        raise RemoteLookupError("identity subsystem unavailable")


class TestResolveAccount:
    """Test resolving a specific account"""

    @pytest.mark.asyncio
    async def test_builds_full_account(self, api, identity):
        account = await resolve_account(api, identity, "UCme")

        assert account.id == "UCme"
        assert account.title == "Me"
        assert account.state is AccountState.ACTIVE
        assert account.last_error is None
        assert account.channel.id == "UCme"
        assert account.channel.title == "My Channel"
        assert account.channel.thumbnails == {"default": "https://img.example/UCme.jpg"}
        assert account.channel.uploads_playlist.id == "UUme"
        assert account.watch_history_playlist.title == "History"
        assert account.watch_later_playlist.title == "Watch later"

    @pytest.mark.asyncio
    async def test_playlists_fetched_in_one_batch(self, api, identity):
        await resolve_account(api, identity, "UCme")

        assert api.calls["get_playlists"] == 1
        assert api.requested["get_playlists"][0] == ["UUme", "HLme", "WLme"]
        assert api.requested["get_channel_info"] == ["UCme"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("active_id", ["UCother", None])
    async def test_mismatch_makes_no_remote_calls(self, api, active_id):
        with pytest.raises(AccountMismatchError) as excinfo:
            await resolve_account(api, StaticIdentityResolver(active_id), "UCme")

        assert excinfo.value.requested_id == "UCme"
        assert excinfo.value.active_id == active_id
        assert api.total_calls == 0

    @pytest.mark.asyncio
    async def test_missing_special_playlists_are_absent(self, api, identity):
        api.account_info["playlist_ids"] = {}

        account = await resolve_account(api, identity, "UCme")

        assert account.watch_history_playlist is None
        assert account.watch_later_playlist is None
        assert api.requested["get_playlists"][0] == ["UUme"]

    @pytest.mark.asyncio
    async def test_remote_failure_propagates(self, api, identity):
        del api.channels["UCme"]

        with pytest.raises(RemoteLookupError):
            await resolve_account(api, identity, "UCme")

    @pytest.mark.asyncio
    async def test_identity_failure_propagates(self, api):
        with pytest.raises(RemoteLookupError, match="identity subsystem"):
            await resolve_account(api, FailingIdentityResolver(), "UCme")
        assert api.total_calls == 0


class TestResolveCurrentAccount:
    """Test resolving whichever account is signed in"""

    @pytest.mark.asyncio
    async def test_resolves_active_account(self, api, identity):
        account = await resolve_current_account(api, identity)
        assert account.id == "UCme"

    @pytest.mark.asyncio
    async def test_no_active_account(self, api):
        with pytest.raises(NoActiveAccountError):
            await resolve_current_account(api, StaticIdentityResolver(None))
        assert api.total_calls == 0
