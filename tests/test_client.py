"""
Tests for LicenseChainClient wiring over a mocked HTTP layer.
"""
import json

import httpx
import pytest

from client import LicenseChainClient
from config import Settings
from exceptions import InitFailedError, ProtocolFailure
from session_state import SessionPhase


class FakeLicenseServer:
    """Answers session requests the way the license server does."""

    def __init__(self):
        self.requests = []

    def __call__(self, request):
        body = json.loads(request.content)
        self.requests.append(body)
        if body["type"] == "init":
            return httpx.Response(200, json={"success": True, "sessionId": "S1"})
        if body["type"] == "license":
            if body["key"] != "ABC123":
                return httpx.Response(200, json={"success": False, "message": "Invalid license key"})
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "user": {"id": "U1", "subscriptions": ["basic"], "variables": {}, "data": {}},
                },
            )
        if body["type"] == "logout":
            return httpx.Response(200, json={"success": True})
        return httpx.Response(400, json={"message": "unknown type"})


@pytest.fixture
def server():
    return FakeLicenseServer()


@pytest.fixture
def http_client(server):
    return httpx.AsyncClient(transport=httpx.MockTransport(server))


@pytest.mark.asyncio
class TestLicenseChainClient:
    """End-to-end session cycle through the real transport."""

    async def test_session_cycle(self, server, http_client):
        async with LicenseChainClient(
            "TestApp", "owner-1", "s3cret", base_url="https://api.example.test", http_client=http_client
        ) as client:
            await client.session.init()
            user = await client.session.license_login("ABC123")

            assert user.subscriptions == ["basic"]
            assert client.session.phase == SessionPhase.LOGGED_IN

        assert client.session.phase == SessionPhase.LOGGED_OUT
        assert [r["type"] for r in server.requests] == ["init", "license", "logout"]
        assert server.requests[1]["sessionid"] == "S1"

    async def test_from_settings(self, server, http_client):
        config = Settings(
            APP_NAME="FromEnv",
            OWNER_ID="owner-2",
            APP_SECRET="x",
            LICENSE_API_URL="https://api.example.test",
            RETRY_MAX_ATTEMPTS=5,
            RETRY_INITIAL_DELAY=0.5,
        )

        client = LicenseChainClient.from_settings(config, http_client=http_client)

        assert client.session.credential.app_name == "FromEnv"
        assert client.session.max_attempts == 5
        assert client.session.initial_delay == 0.5
        assert client.transport.url == "https://api.example.test/client"
        await client.session.init()
        assert server.requests[0]["name"] == "FromEnv"
        await client.aclose()

    async def test_secret_not_in_repr(self, http_client):
        client = LicenseChainClient("TestApp", "owner-1", "s3cret", http_client=http_client)

        assert "s3cret" not in repr(client.session.credential)
        await client.aclose()


@pytest.mark.asyncio
class TestHttpErrorsAtLifecycleBoundary:
    """Non-network httpx errors still follow the session error contract."""

    async def test_decoding_error_during_init(self):
        def handler(request):
            raise httpx.DecodingError("bad gzip stream", request=request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = LicenseChainClient("TestApp", "owner-1", "s3cret", http_client=http_client)

        with pytest.raises(InitFailedError) as excinfo:
            await client.session.init()

        assert isinstance(excinfo.value.__cause__, ProtocolFailure)
        assert client.session.phase == SessionPhase.UNINITIALIZED
        await http_client.aclose()

    async def test_redirect_loop_during_logout(self, server):
        def handler(request):
            if json.loads(request.content)["type"] == "logout":
                raise httpx.TooManyRedirects("redirect loop", request=request)
            return server(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = LicenseChainClient("TestApp", "owner-1", "s3cret", http_client=http_client)
        await client.session.init()
        await client.session.license_login("ABC123")

        assert await client.session.logout() is True

        assert client.session.phase == SessionPhase.LOGGED_OUT
        assert client.session.session_id is None
        await http_client.aclose()
