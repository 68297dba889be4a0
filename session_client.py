import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from exceptions import (
    InitFailedError,
    LicenseChainError,
    LoginRejectedError,
    NotInitializedError,
    NotLoggedInError,
    TransportFailure,
)
from hardware_fingerprint import get_hardware_id, get_pc_user
from models import ChatMessage, GatewayResponse, UserData
from retry_policy import BackoffPolicy
from session_state import SessionPhase, SessionState
from signatures import credential_hash, encryption_key_material
from transport import TransportGateway
import webhook_verification

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "1.0"


@dataclass(frozen=True)
class Credential:
    app_name: str
    owner_id: str
    app_secret: str = field(repr=False)


class SessionController:
    """
    Drives the session lifecycle against the license server.

    Uninitialized -> init() -> Initialized -> license_login() -> LoggedIn
    -> logout() -> LoggedOut -> init() ...

    One controller is one logical session. Its methods are meant to be
    awaited one at a time; concurrent callers must serialize access
    themselves since the controller takes no locks.
    """

    def __init__(
        self,
        credential: Credential,
        transport: TransportGateway,
        backoff: Optional[BackoffPolicy] = None,
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        encryption_key_length: int = 32,
    ):
        self.credential = credential
        self.transport = transport
        self.backoff = backoff or BackoffPolicy()
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.encryption_key_length = encryption_key_length
        self._state = SessionState()

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def session_id(self) -> Optional[str]:
        return self._state.session_id

    @property
    def user(self) -> Optional[UserData]:
        return self._state.user

    # Lifecycle

    async def init(self) -> bool:
        """
        Perform the handshake and open a session.

        Returns True straight away when a session is already open.

        Raises:
            InitFailedError: If the server refuses the handshake or cannot
                be reached; the phase is left unchanged
        """
        if self._state.is_initialized:
            return True

        request_data = {
            "type": "init",
            "ver": PROTOCOL_VERSION,
            "hash": credential_hash(
                self.credential.app_name,
                self.credential.owner_id,
                self.credential.app_secret,
            ),
            "enckey": encryption_key_material(self.encryption_key_length),
            "name": self.credential.app_name,
            "ownerid": self.credential.owner_id,
        }

        try:
            response = await self._send("init", request_data)
        except LicenseChainError as e:
            logger.error(f"Initialization failed: {e.message}")
            raise InitFailedError(f"Initialization failed: {e.message}") from e

        if not response.success:
            raise InitFailedError(response.message or "Initialization failed")
        if not response.sessionId:
            raise InitFailedError("Server accepted init but returned no session id")

        self._state.initialize(response.sessionId)
        logger.info(f"Session initialized for {self.credential.app_name}")
        return True

    async def license_login(self, license_key: str) -> UserData:
        """
        Authenticate an end user by license key.

        Allowed again while logged in; the new snapshot replaces the old one.

        Raises:
            NotInitializedError: If init() has not succeeded
            LoginRejectedError: If the server refuses the key
        """
        self.ensure_initialized()

        request_data = {
            "type": "license",
            "key": license_key,
            "hwid": get_hardware_id(),
            "sessionid": self._state.session_id,
        }

        response = await self._send("license", request_data)

        if not response.success:
            raise LoginRejectedError(response.message or "License login failed")
        if response.user is None:
            raise LoginRejectedError("Server accepted the license but returned no user")

        self._state.log_in(response.user)
        logger.info(f"License login succeeded for user {response.user.id}")
        return response.user

    async def logout(self) -> bool:
        """
        End the session.

        The server is told once, best-effort. Local state is cleared whatever
        the answer, so this always returns True.
        """
        if not self._state.is_logged_in:
            return True

        request_data = {"type": "logout", "sessionid": self._state.session_id}

        try:
            response = await self.transport.send("logout", request_data)
            if not response.success:
                logger.warning(f"Server refused logout: {response.message}")
        except LicenseChainError as e:
            logger.warning(f"Logout request failed, clearing session locally: {e.message}")
        finally:
            self._state.log_out()

        return True

    def ensure_initialized(self) -> None:
        if not self._state.is_initialized:
            raise NotInitializedError()

    def ensure_logged_in(self) -> None:
        self.ensure_initialized()
        if not self._state.is_logged_in:
            raise NotLoggedInError()

    # User snapshot

    def is_logged_in(self) -> bool:
        return self._state.is_logged_in

    def get_user_data(self) -> Optional[UserData]:
        return self._state.user

    def get_subscription(self) -> Optional[List[str]]:
        if not self.is_logged_in():
            return None
        return self._state.user.subscriptions

    def get_variables(self) -> Optional[Dict[str, str]]:
        if not self.is_logged_in():
            return None
        return self._state.user.variables

    def get_data(self) -> Optional[Dict[str, Any]]:
        if not self.is_logged_in():
            return None
        return self._state.user.data

    # Session-scoped operations

    async def set_var(self, var_name: str, data: str) -> bool:
        self.ensure_logged_in()
        response = await self._session_request("setvar", var=var_name, data=data)
        return response.success

    async def get_var(self, var_name: str) -> Optional[str]:
        self.ensure_logged_in()
        response = await self._session_request("getvar", var=var_name)
        if not response.success or response.data is None:
            return None
        return str(response.data)

    async def log_message(self, message: str) -> bool:
        self.ensure_logged_in()
        response = await self._session_request("log", pcuser=get_pc_user(), message=message)
        return response.success

    async def download_file(self, file_id: str) -> Optional[str]:
        """Fetch a file's contents from the server, or None if it refused."""
        self.ensure_logged_in()
        response = await self._session_request("file", fileid=file_id)
        return response.contents if response.success else None

    async def get_app_stats(self) -> Optional[Dict[str, Any]]:
        """Application-wide statistics. Needs a session, not a logged-in user."""
        self.ensure_initialized()
        response = await self._session_request("app")
        return self._dict_data(response)

    async def get_online_users(self) -> Optional[List[UserData]]:
        self.ensure_logged_in()
        response = await self._session_request("online")
        return response.users if response.success else None

    async def chat_get(self, channel: str = "general") -> Optional[List[ChatMessage]]:
        self.ensure_logged_in()
        response = await self._session_request("chatget", channel=channel)
        return response.messages if response.success else None

    async def chat_send(self, message: str, channel: str = "general") -> bool:
        self.ensure_logged_in()
        response = await self._session_request("chatsend", message=message, channel=channel)
        return response.success

    async def ban_user(self, username: str) -> bool:
        self.ensure_logged_in()
        response = await self._session_request("ban", user=username)
        return response.success

    async def unban_user(self, username: str) -> bool:
        self.ensure_logged_in()
        response = await self._session_request("unban", user=username)
        return response.success

    async def get_all_users(self) -> Optional[List[UserData]]:
        self.ensure_logged_in()
        response = await self._session_request("allusers")
        return response.users if response.success else None

    async def get_user(self, username: str) -> Optional[UserData]:
        self.ensure_logged_in()
        response = await self._session_request("getuser", user=username)
        return response.user if response.success else None

    async def update_user(self, username: str, data: Dict[str, Any]) -> bool:
        self.ensure_logged_in()
        response = await self._session_request("edituser", user=username, data=data)
        return response.success

    async def delete_user(self, username: str) -> bool:
        self.ensure_logged_in()
        response = await self._session_request("deleteuser", user=username)
        return response.success

    async def get_webhook(self) -> Optional[Dict[str, Any]]:
        self.ensure_logged_in()
        response = await self._session_request("webhook")
        return self._dict_data(response)

    # Webhooks, keyed with the application secret

    def verify_webhook(self, payload: Union[str, bytes], signature: str) -> bool:
        return webhook_verification.verify(payload, signature, self.credential.app_secret)

    def parse_webhook(self, payload: Union[str, bytes], signature: str) -> Optional[Dict[str, Any]]:
        return webhook_verification.parse(payload, signature, self.credential.app_secret)

    # Internals

    async def _send(self, operation: str, request_data: Dict[str, Any]) -> GatewayResponse:
        return await self.backoff.execute(
            lambda: self.transport.send(operation, request_data),
            max_attempts=self.max_attempts,
            initial_delay=self.initial_delay,
            retry_on=(TransportFailure,),
        )

    async def _session_request(self, operation: str, **fields: Any) -> GatewayResponse:
        request_data = {"type": operation, **fields, "sessionid": self._state.session_id}
        return await self._send(operation, request_data)

    @staticmethod
    def _dict_data(response: GatewayResponse) -> Optional[Dict[str, Any]]:
        if not response.success or not isinstance(response.data, dict):
            return None
        return response.data
