"""
Client exceptions.

Guard violations and handshake/login failures are SessionErrors carrying a
kind, so callers can tell "call init first" apart from "credentials
rejected" apart from "network problem, try later".
"""
from enum import Enum
from typing import Optional


class LicenseChainError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class SessionErrorKind(str, Enum):
    NOT_INITIALIZED = "NotInitialized"
    NOT_LOGGED_IN = "NotLoggedIn"
    INIT_FAILED = "InitFailed"
    LOGIN_REJECTED = "LoginRejected"


class SessionError(LicenseChainError):
    """Raised at the session-lifecycle boundary."""

    def __init__(self, kind: SessionErrorKind, message: str):
        super().__init__(message, code=kind.value)
        self.kind = kind


class NotInitializedError(SessionError):
    """Raised when an operation needs a session but init() has not succeeded."""

    def __init__(self, message: str = "Client not initialized. Call init() first."):
        super().__init__(SessionErrorKind.NOT_INITIALIZED, message)


class NotLoggedInError(SessionError):
    """Raised when a user-scoped operation is called without a license login."""

    def __init__(self, message: str = "User not logged in"):
        super().__init__(SessionErrorKind.NOT_LOGGED_IN, message)


class InitFailedError(SessionError):
    def __init__(self, message: str = "Initialization failed"):
        super().__init__(SessionErrorKind.INIT_FAILED, message)


class LoginRejectedError(SessionError):
    """Raised when the server refuses a license key. Carries the server's reason."""

    def __init__(self, message: str = "License login failed"):
        super().__init__(SessionErrorKind.LOGIN_REJECTED, message)


class TransportFailure(LicenseChainError):
    """Network error, timeout or server-side outage. Eligible for retry."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, code="TRANSPORT_FAILURE")
        self.operation = operation


class ProtocolFailure(LicenseChainError):
    """Well-formed error response or undecodable body. Never retried."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, code="PROTOCOL_FAILURE")
        self.status_code = status_code


class SignatureMismatchError(LicenseChainError):
    """Raised when a webhook payload fails HMAC verification."""

    def __init__(self, message: str = "Webhook signature mismatch"):
        super().__init__(message, code="SIGNATURE_MISMATCH")


class InvalidTransitionError(LicenseChainError):
    """Raised when the session state machine is driven along an illegal edge."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_TRANSITION")
