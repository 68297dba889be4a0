import httpx
import logging
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError

from exceptions import ProtocolFailure, TransportFailure
from models import GatewayResponse

logger = logging.getLogger(__name__)

USER_AGENT = "LicenseChain-Python-Client/1.0.0"


class TransportGateway(Protocol):
    """Anything that can deliver a session request and return the structured answer."""

    async def send(self, operation: str, payload: Dict[str, Any]) -> GatewayResponse:
        ...


class HttpxTransport:
    """
    Sends session requests to the license server over HTTP.

    Network errors, timeouts and 5xx answers become TransportFailure so the
    caller may retry them. Any other non-2xx status or an undecodable body
    becomes ProtocolFailure, as do other httpx request errors such as
    decoding failures and redirect loops.
    """

    def __init__(
        self,
        base_url: str,
        path: str = "/client",
        timeout: int = 30,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        self.timeout = timeout
        self._client = client

    async def send(self, operation: str, payload: Dict[str, Any]) -> GatewayResponse:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
            "X-Operation": operation,
        }

        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload, headers=headers)
        except httpx.TransportError as e:
            raise TransportFailure(
                f"HTTP error during {operation}: {str(e) or type(e).__name__}",
                operation=operation,
            ) from e
        except httpx.HTTPError as e:
            raise ProtocolFailure(
                f"{operation} failed: {str(e) or type(e).__name__}"
            ) from e

        return self._decode(operation, response)

    def _decode(self, operation: str, response: httpx.Response) -> GatewayResponse:
        if response.status_code >= 500:
            raise TransportFailure(
                f"Server error {response.status_code} during {operation}",
                operation=operation,
            )

        if response.is_error:
            raise ProtocolFailure(
                f"{operation} rejected with status {response.status_code}: "
                f"{self._error_message(response)}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolFailure(
                f"{operation} returned a non-JSON body",
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise ProtocolFailure(
                f"{operation} returned {type(body).__name__}, expected an object",
                status_code=response.status_code,
            )

        try:
            return GatewayResponse.model_validate(body)
        except ValidationError as e:
            raise ProtocolFailure(
                f"{operation} returned an unexpected response shape: {e.error_count()} errors",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                return error.get("message", "request failed")
            return str(body.get("message") or error or "request failed")
        return "request failed"
