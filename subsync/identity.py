"""Identity resolvers: report which account is signed in to the host environment."""

from typing import Optional

from .collaborators import RemoteApiClient
from .config import Config
from .errors import RemoteLookupError
from .logger import get_logger

log = get_logger("identity")


class StaticIdentityResolver:
    """Always reports the same account id (None means nobody is signed in)."""

    def __init__(self, account_id: Optional[str]):
        self._account_id = account_id

    async def get_active_account_id(self) -> Optional[str]:
        return self._account_id


class ConfigIdentityResolver:
    """Reports the account configured as active_account_id."""

    def __init__(self, config: Config):
        self._config = config

    async def get_active_account_id(self) -> Optional[str]:
        return self._config.active_account_id or None


class YouTubeIdentityResolver:
    """
    Reports the channel id of the account the API client is authorized as.

    An authorized account without a YouTube channel (a 404 from the API
    client) counts as nobody signed in. Other API errors propagate unchanged.
    """

    def __init__(self, api: RemoteApiClient):
        self._api = api

    async def get_active_account_id(self) -> Optional[str]:
        try:
            account_info = await self._api.get_account_info()
        except RemoteLookupError as e:
            if e.status != 404:
                raise
            log.warning(f"Authorized account has no channel: {e}")
            return None
        account_id = account_info.get("id")
        log.debug(f"Signed-in account: {account_id}")
        return account_id
