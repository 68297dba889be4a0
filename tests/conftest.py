"""
Pytest configuration and shared fixtures.
"""
from typing import Any, Dict, List, Tuple

import pytest
import pytest_asyncio

from models import GatewayResponse
from retry_policy import BackoffPolicy
from session_client import Credential, SessionController


class FakeGateway:
    """In-memory TransportGateway that replays queued answers."""

    def __init__(self):
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self._answers: List[Any] = []

    def queue(self, *answers: Any) -> None:
        """Queue dicts (returned as responses) or exceptions (raised)."""
        self._answers.extend(answers)

    async def send(self, operation: str, payload: Dict[str, Any]) -> GatewayResponse:
        self.calls.append((operation, payload))
        if not self._answers:
            raise AssertionError(f"Unexpected request: {operation}")
        answer = self._answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return GatewayResponse.model_validate(answer)

    @property
    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]


class RecordingSleep:
    """Stands in for asyncio.sleep and remembers each delay."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def credential():
    """Fixture for an application credential."""
    return Credential(app_name="TestApp", owner_id="owner-1", app_secret="s3cret")


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def controller(credential, gateway, recording_sleep):
    """Fixture for a SessionController wired to the fake gateway."""
    return SessionController(
        credential,
        gateway,
        backoff=BackoffPolicy(sleep=recording_sleep),
        max_attempts=3,
        initial_delay=0.1,
    )


@pytest.fixture
def user_payload():
    return {"id": "U1", "subscriptions": [], "variables": {}, "data": {}}


@pytest_asyncio.fixture
async def logged_in_controller(controller, gateway, user_payload):
    """Fixture for a controller that has completed init and license login."""
    gateway.queue(
        {"success": True, "sessionId": "S1"},
        {"success": True, "user": user_payload},
    )
    await controller.init()
    await controller.license_login("ABC123")
    gateway.calls.clear()
    return controller
