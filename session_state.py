from enum import Enum
from typing import Optional

from exceptions import InvalidTransitionError
from models import UserData


class SessionPhase(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"


class SessionState:
    """
    Phase, session id and user snapshot of one session.

    The session id is set exactly while the phase is INITIALIZED or
    LOGGED_IN, and the user snapshot exactly while it is LOGGED_IN. The
    transition methods are the only way to change either.
    """

    def __init__(self):
        self._phase = SessionPhase.UNINITIALIZED
        self._session_id: Optional[str] = None
        self._user: Optional[UserData] = None

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def user(self) -> Optional[UserData]:
        return self._user

    @property
    def is_initialized(self) -> bool:
        return self._phase in (SessionPhase.INITIALIZED, SessionPhase.LOGGED_IN)

    @property
    def is_logged_in(self) -> bool:
        return self._phase == SessionPhase.LOGGED_IN

    def initialize(self, session_id: str) -> None:
        if self._phase not in (SessionPhase.UNINITIALIZED, SessionPhase.LOGGED_OUT):
            raise InvalidTransitionError(
                f"Cannot initialize a session in phase {self._phase.value}"
            )
        if not session_id:
            raise InvalidTransitionError("A session id is required to initialize")

        self._session_id = session_id
        self._user = None
        self._phase = SessionPhase.INITIALIZED

    def log_in(self, user: UserData) -> None:
        # Re-login replaces the snapshot
        if not self.is_initialized:
            raise InvalidTransitionError(
                f"Cannot log in from phase {self._phase.value}"
            )
        if user is None:
            raise InvalidTransitionError("A user snapshot is required to log in")

        self._user = user
        self._phase = SessionPhase.LOGGED_IN

    def log_out(self) -> None:
        self._session_id = None
        self._user = None
        self._phase = SessionPhase.LOGGED_OUT
