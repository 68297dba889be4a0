"""
LicenseChain client for Python.

Wraps a SessionController around one shared HTTP connection pool:

    async with LicenseChainClient("MyApp", "owner-id", "app-secret") as client:
        await client.session.init()
        user = await client.session.license_login("XXXX-XXXX")

There is no process-wide default client. Build one per session and pass it
to whatever needs it.
"""
import httpx
from typing import Optional

from config import Settings
from retry_policy import BackoffPolicy
from session_client import Credential, SessionController
from transport import HttpxTransport

__version__ = "1.0.0"


class LicenseChainClient:
    def __init__(
        self,
        app_name: str,
        owner_id: str,
        app_secret: str,
        base_url: str = "https://api.licensechain.app",
        timeout: int = 30,
        retries: int = 3,
        api_path: str = "/client",
        initial_delay: float = 1.0,
        encryption_key_length: int = 32,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self.transport = HttpxTransport(
            base_url, path=api_path, timeout=timeout, client=self.http_client
        )
        self.session = SessionController(
            Credential(app_name=app_name, owner_id=owner_id, app_secret=app_secret),
            self.transport,
            backoff=BackoffPolicy(),
            max_attempts=retries,
            initial_delay=initial_delay,
            encryption_key_length=encryption_key_length,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: Optional[httpx.AsyncClient] = None
    ) -> "LicenseChainClient":
        return cls(
            app_name=settings.APP_NAME,
            owner_id=settings.OWNER_ID,
            app_secret=settings.APP_SECRET,
            base_url=settings.LICENSE_API_URL,
            timeout=settings.LICENSE_API_TIMEOUT,
            retries=settings.RETRY_MAX_ATTEMPTS,
            api_path=settings.LICENSE_API_PATH,
            initial_delay=settings.RETRY_INITIAL_DELAY,
            encryption_key_length=settings.ENCRYPTION_KEY_LENGTH,
            http_client=http_client,
        )

    async def aclose(self) -> None:
        """Log out if needed and close the HTTP client this instance created."""
        await self.session.logout()
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "LicenseChainClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
